"""OrderApplicationService — order lifecycle use cases.

Write operations load the order, mutate the domain object, write it back
through the version-checked repository update, and commit. Any exception rolls
the session back. Reads never write: the overdue projection and the contract
status shown to the caller are recomputed for the current business day.
"""

import logging
import uuid
from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.blu_common.clock import Clock, default_clock
from src.blu_common.enums import FulfillmentStatus
from src.blu_common.errors import (
    InvalidInputError,
    OrderNotFoundError,
    StatusTransitionNotAllowedError,
)
from src.blu_financing.domain.amortization import (
    compute_amortization,
    resolve_annual_rate_bps,
)
from src.blu_financing.domain.contract_status import project_overdue, resolve_contract_status
from src.blu_financing.domain.schedule import generate_schedule
from src.blu_order.application.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    MilestoneOut,
    OrderListResponse,
    OrderResponse,
    RegisterArrivalRequest,
    TimelineResponse,
    UpdateOrderRequest,
    cursor_decode,
    cursor_encode,
)
from src.blu_order.domain.arrival import ArrivalRecord, register_arrival, toggle_imei_lock
from src.blu_order.domain.models import Order
from src.blu_order.domain.repository import OrderRepositoryProtocol
from src.blu_order.domain.timeline import render_timeline, transition_status
from src.blu_order.domain.transitions import is_transition_allowed
from src.blu_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)

CREATED_NOTE = "Pedido Criado"
MANUAL_STATUS_NOTE = "Status atualizado manualmente"

_REQUIRED_TEXT_FIELDS = ("customer_name", "product_name")
_BLANKABLE_TEXT_FIELDS = ("model", "capacity", "color", "condition")


def _refresh_contract_status(order: Order, clock: Clock) -> None:
    if order.is_financed:
        order.contract_status = resolve_contract_status(
            order.installments, clock.today(), order.is_cancelled
        )


class OrderApplicationService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        clock: Clock | None = None,
        enforce_transitions: bool | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._clock: Clock = clock or default_clock()
        self._enforce_transitions = (
            settings.ENFORCE_STATUS_TRANSITIONS
            if enforce_transitions is None
            else enforce_transitions
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, db: AsyncSession, order_id: str) -> Order:
        order = await self._repo.get_by_id(order_id, db)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _to_response(self, order: Order) -> OrderResponse:
        if order.is_financed:
            today = self._clock.today()
            order = replace(
                order,
                installments=project_overdue(order.installments, today),
                contract_status=resolve_contract_status(
                    order.installments, today, order.is_cancelled
                ),
            )
        return OrderResponse.from_domain(order)

    def _check_transition(self, order: Order, new_status: FulfillmentStatus) -> None:
        if self._enforce_transitions and not is_transition_allowed(
            order.fulfillment_status, new_status
        ):
            raise StatusTransitionNotAllowedError(
                order.fulfillment_status.value, new_status.value
            )

    def _apply_financing(self, order: Order, req: CreateOrderRequest) -> None:
        """Fix the BluFacilita terms and generate the installment schedule."""
        rate_bps = resolve_annual_rate_bps(
            req.uses_special_rate,
            req.special_annual_rate_bps,
            settings.DEFAULT_ANNUAL_RATE_BPS,
        )
        terms = compute_amortization(
            order.product_value_cents,
            req.down_payment_cents,
            req.installment_count,
            rate_bps,
        )
        if terms.financed_amount_cents == 0:
            raise InvalidInputError("down payment covers the product value, nothing to finance")
        if terms.installment_value_cents == 0:
            raise InvalidInputError(
                f"financed amount of {terms.financed_amount_cents} cents is too small "
                f"for {req.installment_count} installments"
            )

        order.down_payment_cents = req.down_payment_cents
        order.installment_count = req.installment_count
        order.annual_rate_bps = rate_bps
        order.uses_special_rate = req.uses_special_rate
        order.financed_amount_cents = terms.financed_amount_cents
        order.total_with_interest_cents = terms.total_with_interest_cents
        order.installment_value_cents = terms.installment_value_cents
        order.installments = generate_schedule(
            order.id,
            req.installment_count,
            terms.installment_value_cents,
            order.order_date,
        )

    async def _write(self, db: AsyncSession, order: Order) -> None:
        try:
            await self._repo.update(order, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    # ------------------------------------------------------------------
    # Use cases
    # ------------------------------------------------------------------

    async def create_order(self, db: AsyncSession, req: CreateOrderRequest) -> OrderResponse:
        order = Order(
            id=str(uuid.uuid4()),
            customer_name=req.customer_name,
            product_name=req.product_name,
            order_date=req.order_date or self._clock.today(),
            purchase_price_cents=req.purchase_price_cents,
            payment_method=req.payment_method,
            client_id=req.client_id,
            supplier_id=req.supplier_id,
            model=req.model,
            capacity=req.capacity,
            color=req.color,
            condition=req.condition,
            selling_price_cents=req.selling_price_cents,
            notes=req.notes,
        )
        if order.is_financed:
            self._apply_financing(order, req)

        transition_status(order, FulfillmentStatus.CREATED, self._clock, note=CREATED_NOTE)
        if req.initial_status != FulfillmentStatus.CREATED:
            self._check_transition(order, req.initial_status)
            transition_status(order, req.initial_status, self._clock)
        _refresh_contract_status(order, self._clock)

        try:
            await self._repo.save(order, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Order created: id=%s, method=%s, financed=%d",
            order.id, order.payment_method.value, order.financed_amount_cents,
        )
        return self._to_response(order)

    async def get_order(self, db: AsyncSession, order_id: str) -> OrderResponse:
        return self._to_response(await self._load(db, order_id))

    async def list_orders(
        self,
        db: AsyncSession,
        fulfillment_status: str | None,
        payment_method: str | None,
        contract_status: str | None,
        cursor: str | None,
        limit: int,
    ) -> OrderListResponse:
        cursor_ts, cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        orders = await self._repo.list_orders(
            fulfillment_status,
            payment_method,
            contract_status,
            limit + 1,
            cursor_ts,
            cursor_id,
            self._clock.today(),
            db,
        )
        has_more = len(orders) > limit
        page = orders[:limit]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        items = [self._to_response(o) for o in page]
        if contract_status is not None:
            # Filter on the status shown to the caller, derived for today
            items = [
                i for i in items
                if i.financing is not None and i.financing.contract_status == contract_status
            ]
        return OrderListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def update_order(
        self, db: AsyncSession, order_id: str, req: UpdateOrderRequest
    ) -> OrderResponse:
        changes = req.model_dump(exclude_unset=True)
        for name in _REQUIRED_TEXT_FIELDS:
            if name in changes and not (changes[name] or "").strip():
                raise InvalidInputError(f"{name} must not be blank")

        order = await self._load(db, order_id)
        for name, value in changes.items():
            if value is None and name in _BLANKABLE_TEXT_FIELDS:
                value = ""
            setattr(order, name, value)
        await self._write(db, order)
        return self._to_response(order)

    async def change_status(
        self, db: AsyncSession, order_id: str, req: ChangeStatusRequest
    ) -> OrderResponse:
        order = await self._load(db, order_id)
        self._check_transition(order, req.status)
        transition_status(
            order,
            req.status,
            self._clock,
            note=req.note or MANUAL_STATUS_NOTE,
            explicit_date=req.delivered_at,
        )
        _refresh_contract_status(order, self._clock)
        await self._write(db, order)
        logger.info(
            "Order status changed: id=%s, status=%s", order.id, order.fulfillment_status.value
        )
        return self._to_response(order)

    async def register_arrival(
        self, db: AsyncSession, order_id: str, req: RegisterArrivalRequest
    ) -> OrderResponse:
        order = await self._load(db, order_id)
        arrival = ArrivalRecord(
            arrival_date=req.arrival_date or self._clock.today(),
            imei=req.imei,
            battery_health=req.battery_health,
            notes=req.notes,
            ready_for_delivery=req.ready_for_delivery,
        )
        register_arrival(order, arrival, self._clock)
        await self._write(db, order)
        return self._to_response(order)

    async def toggle_imei_lock(self, db: AsyncSession, order_id: str) -> OrderResponse:
        order = await self._load(db, order_id)
        toggle_imei_lock(order, self._clock.today())
        await self._write(db, order)
        return self._to_response(order)

    async def get_timeline(self, db: AsyncSession, order_id: str) -> TimelineResponse:
        order = await self._load(db, order_id)
        return TimelineResponse(
            order_id=order.id,
            current_status=order.fulfillment_status.value,
            milestones=[MilestoneOut.from_domain(m) for m in render_timeline(order)],
        )

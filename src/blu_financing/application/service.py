"""FinancingApplicationService — BluFacilita quotes and client payments.

register_payment is one transaction: the payment row is inserted and, for a
financed order, the reconciled installments and re-derived contract status are
written back with the order's version check. A stale version rolls back both.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.blu_common.clock import Clock, default_clock
from src.blu_common.errors import OrderNotFoundError
from src.blu_common.money import cents_to_display
from src.blu_financing.application.schemas import (
    CardFeeQuoteOut,
    InstallmentOut,
    PaymentListResponse,
    PaymentOut,
    QuoteRequest,
    QuoteResponse,
    RegisterPaymentRequest,
    RegisterPaymentResponse,
)
from src.blu_financing.domain.amortization import (
    compute_amortization,
    resolve_annual_rate_bps,
)
from src.blu_financing.domain.card_fees import quote_card_fees
from src.blu_financing.domain.contract_status import project_overdue, resolve_contract_status
from src.blu_financing.domain.models import Payment
from src.blu_financing.domain.reconciler import apply_payment
from src.blu_financing.domain.repository import PaymentRepositoryProtocol
from src.blu_financing.infrastructure.persistence import PaymentRepository
from src.blu_order.domain.models import Order
from src.blu_order.domain.repository import OrderRepositoryProtocol
from src.blu_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


class FinancingApplicationService:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        payment_repo: PaymentRepositoryProtocol | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._payments: PaymentRepositoryProtocol = payment_repo or PaymentRepository()
        self._clock: Clock = clock or default_clock()

    async def _load(self, db: AsyncSession, order_id: str) -> Order:
        order = await self._orders.get_by_id(order_id, db)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def quote(self, req: QuoteRequest) -> QuoteResponse:
        rate_bps = resolve_annual_rate_bps(
            req.uses_special_rate,
            req.special_annual_rate_bps,
            settings.DEFAULT_ANNUAL_RATE_BPS,
        )
        terms = compute_amortization(
            req.product_value_cents,
            req.down_payment_cents,
            req.installment_count,
            rate_bps,
        )
        return QuoteResponse.from_terms(
            terms, rate_bps, req.installment_count, req.down_payment_cents
        )

    def card_fee_quote(self, net_value_cents: int) -> list[CardFeeQuoteOut]:
        return [CardFeeQuoteOut.from_domain(q) for q in quote_card_fees(net_value_cents)]

    async def register_payment(
        self, db: AsyncSession, order_id: str, req: RegisterPaymentRequest
    ) -> RegisterPaymentResponse:
        paid_on = req.paid_on or self._clock.today()
        try:
            order = await self._load(db, order_id)
            applied = req.amount_cents
            remainder = 0
            touched: list[int] = []
            if order.is_financed:
                result = apply_payment(
                    order.installments, req.amount_cents, paid_on, req.method.value, req.notes
                )
                applied, remainder, touched = (
                    result.applied_cents, result.remainder_cents, result.touched_numbers,
                )
                order.contract_status = resolve_contract_status(
                    order.installments, self._clock.today(), order.is_cancelled
                )
                await self._orders.update(order, db)

            payment = await self._payments.save(
                Payment(
                    id=str(uuid.uuid4()),
                    order_id=order.id,
                    amount_cents=req.amount_cents,
                    paid_on=paid_on,
                    method=req.method,
                    card_installments=req.card_installments,
                    notes=req.notes,
                ),
                db,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payment registered: order=%s, amount=%d, installments=%s",
            order.id, req.amount_cents, touched,
        )
        return RegisterPaymentResponse(
            payment=PaymentOut.from_domain(payment),
            applied_cents=applied,
            overpayment_cents=remainder,
            touched_installments=touched,
            contract_status=order.contract_status.value if order.contract_status else None,
            installments=[
                InstallmentOut.from_domain(i)
                for i in project_overdue(order.installments, self._clock.today())
            ],
            order_version=order.version,
        )

    async def list_payments(self, db: AsyncSession, order_id: str) -> PaymentListResponse:
        await self._load(db, order_id)
        payments = await self._payments.list_by_order(order_id, db)
        total = sum(p.amount_cents for p in payments)
        return PaymentListResponse(
            items=[PaymentOut.from_domain(p) for p in payments],
            total_paid_cents=total,
            total_paid_display=cents_to_display(total),
        )

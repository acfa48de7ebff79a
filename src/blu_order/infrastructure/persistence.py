# src/blu_order/infrastructure/persistence.py
"""OrderRepository — raw SQL persistence implementation.

Installments and tracking history are stored as JSONB documents on the order
row; the order is always written back whole. Every UPDATE is guarded by the
`version` column so two reconciliations of the same order cannot both land.
"""
import json
import logging
from datetime import date, datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.blu_common.enums import ContractStatus, FulfillmentStatus, PaymentMethod
from src.blu_common.errors import ConcurrentOrderUpdateError
from src.blu_financing.domain.models import Installment
from src.blu_order.domain.models import HistoryEntry, Order

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, customer_name, client_id, supplier_id, product_name, model, capacity,
    color, condition, order_date, purchase_price_cents, selling_price_cents,
    notes, payment_method, down_payment_cents, installment_count,
    annual_rate_bps, uses_special_rate, financed_amount_cents,
    total_with_interest_cents, installment_value_cents, installments,
    contract_status, fulfillment_status, history, arrival_date, imei,
    battery_health, arrival_notes, ready_for_delivery, imei_blocked, version
"""

_INSERT_ORDER_SQL = text(f"""
    INSERT INTO orders ({_COLUMNS})
    VALUES (:id, :customer_name, :client_id, :supplier_id, :product_name, :model,
        :capacity, :color, :condition, :order_date, :purchase_price_cents,
        :selling_price_cents, :notes, :payment_method, :down_payment_cents,
        :installment_count, :annual_rate_bps, :uses_special_rate,
        :financed_amount_cents, :total_with_interest_cents, :installment_value_cents,
        CAST(:installments AS JSONB), :contract_status, :fulfillment_status,
        CAST(:history AS JSONB), :arrival_date, :imei, :battery_health,
        :arrival_notes, :ready_for_delivery, :imei_blocked, :version)
    RETURNING created_at, updated_at
""")

# Financing terms are fixed at creation and never updated
_UPDATE_ORDER_SQL = text("""
    UPDATE orders
    SET customer_name = :customer_name, client_id = :client_id,
        supplier_id = :supplier_id, product_name = :product_name, model = :model,
        capacity = :capacity, color = :color, condition = :condition,
        notes = :notes, installments = CAST(:installments AS JSONB),
        contract_status = :contract_status,
        fulfillment_status = :fulfillment_status,
        history = CAST(:history AS JSONB), arrival_date = :arrival_date,
        imei = :imei, battery_health = :battery_health,
        arrival_notes = :arrival_notes, ready_for_delivery = :ready_for_delivery,
        imei_blocked = :imei_blocked, version = version + 1
    WHERE id = :id AND version = :version
    RETURNING version, updated_at
""")

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_COLUMNS}, created_at, updated_at
    FROM orders WHERE id = :id
""")

# Contract status as of :today, with the precedence of resolve_contract_status
_CONTRACT_STATUS_AS_OF_SQL = """
    CASE
        WHEN fulfillment_status = 'CANCELLED' THEN 'CANCELADO'
        WHEN jsonb_array_length(installments) > 0 AND NOT EXISTS (
            SELECT 1 FROM jsonb_array_elements(installments) AS inst
            WHERE inst->>'status' <> 'PAID'
        ) THEN 'PAGO_INTEGRALMENTE'
        WHEN EXISTS (
            SELECT 1 FROM jsonb_array_elements(installments) AS inst
            WHERE inst->>'status' IN ('PENDING', 'PARTIALLY_PAID', 'OVERDUE')
              AND CAST(inst->>'due_date' AS DATE) < CAST(:today AS DATE)
        ) THEN 'ATRASADO'
        ELSE 'EM_DIA'
    END
"""

_LIST_ORDERS_SQL = text(f"""
    SELECT {_COLUMNS}, created_at, updated_at
    FROM orders
    WHERE (CAST(:fulfillment_status AS TEXT) IS NULL OR fulfillment_status = :fulfillment_status)
      AND (CAST(:payment_method AS TEXT) IS NULL OR payment_method = :payment_method)
      AND (CAST(:contract_status AS TEXT) IS NULL
           OR (payment_method = 'BLU_FACILITA'
               AND {_CONTRACT_STATUS_AS_OF_SQL} = :contract_status))
      AND (CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
           OR (created_at, id) < (CAST(:cursor_ts AS TIMESTAMPTZ), :cursor_id))
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _load_json(value: Any) -> list[dict[str, Any]]:
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return list(value)


def _as_date(value: Any) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=row.id,
        customer_name=row.customer_name,
        client_id=row.client_id,
        supplier_id=row.supplier_id,
        product_name=row.product_name,
        model=row.model,
        capacity=row.capacity,
        color=row.color,
        condition=row.condition,
        order_date=_as_date(row.order_date),
        purchase_price_cents=row.purchase_price_cents,
        selling_price_cents=row.selling_price_cents,
        notes=row.notes,
        payment_method=PaymentMethod(row.payment_method),
        down_payment_cents=row.down_payment_cents,
        installment_count=row.installment_count,
        annual_rate_bps=row.annual_rate_bps,
        uses_special_rate=row.uses_special_rate,
        financed_amount_cents=row.financed_amount_cents,
        total_with_interest_cents=row.total_with_interest_cents,
        installment_value_cents=row.installment_value_cents,
        installments=[Installment.from_dict(d) for d in _load_json(row.installments)],
        contract_status=ContractStatus(row.contract_status) if row.contract_status else None,
        fulfillment_status=FulfillmentStatus(row.fulfillment_status),
        history=[HistoryEntry.from_dict(d) for d in _load_json(row.history)],
        arrival_date=_as_date(row.arrival_date),
        imei=row.imei,
        battery_health=row.battery_health,
        arrival_notes=row.arrival_notes,
        ready_for_delivery=row.ready_for_delivery,
        imei_blocked=row.imei_blocked,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _order_params(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "customer_name": order.customer_name,
        "client_id": order.client_id,
        "supplier_id": order.supplier_id,
        "product_name": order.product_name,
        "model": order.model,
        "capacity": order.capacity,
        "color": order.color,
        "condition": order.condition,
        "order_date": order.order_date,
        "purchase_price_cents": order.purchase_price_cents,
        "selling_price_cents": order.selling_price_cents,
        "notes": order.notes,
        "payment_method": order.payment_method.value,
        "down_payment_cents": order.down_payment_cents,
        "installment_count": order.installment_count,
        "annual_rate_bps": order.annual_rate_bps,
        "uses_special_rate": order.uses_special_rate,
        "financed_amount_cents": order.financed_amount_cents,
        "total_with_interest_cents": order.total_with_interest_cents,
        "installment_value_cents": order.installment_value_cents,
        "installments": json.dumps([i.to_dict() for i in order.installments]),
        "contract_status": order.contract_status.value if order.contract_status else None,
        "fulfillment_status": order.fulfillment_status.value,
        "history": json.dumps([h.to_dict() for h in order.history]),
        "arrival_date": order.arrival_date,
        "imei": order.imei,
        "battery_health": order.battery_health,
        "arrival_notes": order.arrival_notes,
        "ready_for_delivery": order.ready_for_delivery,
        "imei_blocked": order.imei_blocked,
        "version": order.version,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, order: Order, db: AsyncSession) -> None:
        result = await db.execute(_INSERT_ORDER_SQL, _order_params(order))
        row = result.fetchone()
        order.created_at = row.created_at
        order.updated_at = row.updated_at

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def update(self, order: Order, db: AsyncSession) -> None:
        result = await db.execute(_UPDATE_ORDER_SQL, _order_params(order))
        row = result.fetchone()
        if row is None:
            logger.warning("Stale write rejected: order=%s, version=%d", order.id, order.version)
            raise ConcurrentOrderUpdateError(order.id, order.version)
        order.version = row.version
        order.updated_at = row.updated_at

    async def list_orders(
        self,
        fulfillment_status: str | None,
        payment_method: str | None,
        contract_status: str | None,
        limit: int,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        today: date,
        db: AsyncSession,
    ) -> list[Order]:
        result = await db.execute(
            _LIST_ORDERS_SQL,
            {
                "fulfillment_status": fulfillment_status,
                "payment_method": payment_method,
                "contract_status": contract_status,
                "cursor_ts": cursor_ts,
                "cursor_id": cursor_id,
                "today": today,
                "limit": limit,
            },
        )
        rows = result.fetchall()
        return [_row_to_order(row) for row in rows]

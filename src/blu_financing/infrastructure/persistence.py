# src/blu_financing/infrastructure/persistence.py
"""PaymentRepository — raw SQL, insert and read only (payments are never edited)."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.blu_common.enums import PaymentChannel
from src.blu_financing.domain.models import Payment

_INSERT_PAYMENT_SQL = text("""
    INSERT INTO client_payments
        (id, order_id, amount_cents, paid_on, method, card_installments, notes)
    VALUES
        (:id, :order_id, :amount_cents, :paid_on, :method, :card_installments, :notes)
    RETURNING id, order_id, amount_cents, paid_on, method, card_installments,
              notes, created_at
""")

_LIST_BY_ORDER_SQL = text("""
    SELECT id, order_id, amount_cents, paid_on, method, card_installments,
           notes, created_at
    FROM client_payments
    WHERE order_id = :order_id
    ORDER BY paid_on ASC, created_at ASC
""")


def _row_to_payment(row: Any) -> Payment:
    return Payment(
        id=row.id,
        order_id=row.order_id,
        amount_cents=row.amount_cents,
        paid_on=row.paid_on,
        method=PaymentChannel(row.method),
        card_installments=row.card_installments,
        notes=row.notes,
        created_at=row.created_at,
    )


class PaymentRepository:
    """Concrete implementation of PaymentRepositoryProtocol using raw SQL."""

    async def save(self, payment: Payment, db: AsyncSession) -> Payment:
        result = await db.execute(
            _INSERT_PAYMENT_SQL,
            {
                "id": payment.id,
                "order_id": payment.order_id,
                "amount_cents": payment.amount_cents,
                "paid_on": payment.paid_on,
                "method": payment.method.value,
                "card_installments": payment.card_installments,
                "notes": payment.notes,
            },
        )
        return _row_to_payment(result.fetchone())

    async def list_by_order(self, order_id: str, db: AsyncSession) -> list[Payment]:
        result = await db.execute(_LIST_BY_ORDER_SQL, {"order_id": order_id})
        return [_row_to_payment(row) for row in result.fetchall()]

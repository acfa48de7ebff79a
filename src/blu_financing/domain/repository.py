# src/blu_financing/domain/repository.py
"""PaymentRepository Protocol — append-only store of client payments keyed by order."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.blu_financing.domain.models import Payment


class PaymentRepositoryProtocol(Protocol):
    async def save(self, payment: Payment, db: AsyncSession) -> Payment: ...

    async def list_by_order(self, order_id: str, db: AsyncSession) -> list[Payment]: ...

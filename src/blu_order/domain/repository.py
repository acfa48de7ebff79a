# src/blu_order/domain/repository.py
"""OrderRepository Protocol — interface contract for persistence layer."""
from datetime import date, datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.blu_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def save(self, order: Order, db: AsyncSession) -> None: ...

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None: ...

    async def update(self, order: Order, db: AsyncSession) -> None:
        """Write the whole record back if `order.version` is still current.

        Bumps `order.version` on success; raises ConcurrentOrderUpdateError otherwise.
        """
        ...

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
    ) -> list[Order]: ...

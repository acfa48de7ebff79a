# src/blu_order/infrastructure/db_models.py
"""SQLAlchemy ORM models for orders and client_payments (DDL reference only — queries use raw SQL)."""
from datetime import date, datetime
from typing import Any

from sqlalchemy import BigInteger, Boolean, Date, DateTime, ForeignKey, Integer, SmallInteger, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.blu_common.database import Base


class OrderORM(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    client_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    supplier_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    capacity: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    color: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    condition: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    purchase_price_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    selling_price_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    down_payment_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    installment_count: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    annual_rate_bps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    uses_special_rate: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    financed_amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_with_interest_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    installment_value_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    installments: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    contract_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    fulfillment_status: Mapped[str] = mapped_column(String(30), nullable=False, default="CREATED")
    history: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    arrival_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    imei: Mapped[str | None] = mapped_column(String(20), nullable=True)
    battery_health: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    arrival_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    ready_for_delivery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    imei_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class ClientPaymentORM(Base):
    __tablename__ = "client_payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False)
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    paid_on: Mapped[date] = mapped_column(Date, nullable=False)
    method: Mapped[str] = mapped_column(String(20), nullable=False)
    card_installments: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

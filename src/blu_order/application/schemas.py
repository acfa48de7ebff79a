# src/blu_order/application/schemas.py
"""Pydantic schemas for the order API.

Cursor format for order listing (text PK, not sequential):
  {"ts": "<created_at ISO>", "id": "<order_id>"}
  Encoded as Base64 JSON string.
"""
import base64
import json
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from config.settings import settings
from src.blu_common.enums import FulfillmentStatus, PaymentMethod
from src.blu_common.money import cents_to_display
from src.blu_financing.application.schemas import InstallmentOut
from src.blu_financing.domain.reconciler import suggested_payment_cents
from src.blu_order.domain.models import HistoryEntry, Order
from src.blu_order.domain.timeline import DisplayMilestone

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_order: Order) -> str:
    """Encode composite cursor from last order in page."""
    payload = {
        "ts": last_order.created_at.isoformat() if last_order.created_at else None,
        "id": last_order.id,
    }
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[datetime | None, str | None]:
    """Decode composite cursor -> (created_at, order_id), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(data["ts"]), data["id"]
    except (ValueError, KeyError, TypeError):
        return None, None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateOrderRequest(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=200)
    client_id: str | None = None
    supplier_id: str | None = None
    product_name: str = Field(..., min_length=1, max_length=200)
    model: str = ""
    capacity: str = ""
    color: str = ""
    condition: str = ""
    order_date: date | None = Field(None, description="Defaults to today")
    purchase_price_cents: int = Field(..., gt=0)
    selling_price_cents: int | None = Field(None, gt=0)
    notes: str | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    initial_status: FulfillmentStatus = FulfillmentStatus.CREATED
    # BluFacilita
    down_payment_cents: int = Field(0, ge=0)
    installment_count: int | None = Field(None, ge=1)
    uses_special_rate: bool = False
    special_annual_rate_bps: int | None = Field(None, ge=0)

    @field_validator("customer_name", "product_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def financing_terms(self) -> "CreateOrderRequest":
        if self.payment_method != PaymentMethod.BLU_FACILITA:
            return self
        if self.installment_count is None:
            raise ValueError("installment_count is required for BLU_FACILITA orders")
        if self.installment_count > settings.MAX_INSTALLMENTS:
            raise ValueError(
                f"installment_count must be at most {settings.MAX_INSTALLMENTS}"
            )
        return self


class UpdateOrderRequest(BaseModel):
    """Descriptive fields only. Financing terms are fixed at creation."""

    customer_name: str | None = Field(None, min_length=1, max_length=200)
    client_id: str | None = None
    supplier_id: str | None = None
    product_name: str | None = Field(None, min_length=1, max_length=200)
    model: str | None = None
    capacity: str | None = None
    color: str | None = None
    condition: str | None = None
    notes: str | None = None


class ChangeStatusRequest(BaseModel):
    status: FulfillmentStatus
    note: str | None = Field(None, max_length=500)
    delivered_at: datetime | None = Field(
        None, description="Explicit delivery timestamp, only used when status is DELIVERED"
    )

    @field_validator("delivered_at")
    @classmethod
    def must_be_aware(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            raise ValueError("delivered_at must include a timezone offset")
        return v


class RegisterArrivalRequest(BaseModel):
    arrival_date: date | None = Field(None, description="Defaults to today")
    imei: str | None = Field(None, max_length=20)
    battery_health: int | None = Field(None, ge=0, le=100)
    notes: str | None = None
    ready_for_delivery: bool = False


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HistoryEntryOut(BaseModel):
    status: str
    status_label: str
    at: datetime
    note: str | None = None

    @classmethod
    def from_domain(cls, h: HistoryEntry) -> "HistoryEntryOut":
        return cls(status=h.status.value, status_label=h.status.label, at=h.at, note=h.note)


class FinancingOut(BaseModel):
    down_payment_cents: int
    installment_count: int | None
    annual_rate_bps: int | None
    uses_special_rate: bool
    financed_amount_cents: int
    total_with_interest_cents: int
    total_with_interest_display: str
    installment_value_cents: int
    installment_value_display: str
    amount_paid_cents: int
    outstanding_cents: int
    suggested_payment_cents: int
    contract_status: str | None
    contract_status_label: str | None
    installments: list[InstallmentOut]

    @classmethod
    def from_domain(cls, order: Order) -> "FinancingOut":
        status = order.contract_status
        return cls(
            down_payment_cents=order.down_payment_cents,
            installment_count=order.installment_count,
            annual_rate_bps=order.annual_rate_bps,
            uses_special_rate=order.uses_special_rate,
            financed_amount_cents=order.financed_amount_cents,
            total_with_interest_cents=order.total_with_interest_cents,
            total_with_interest_display=cents_to_display(order.total_with_interest_cents),
            installment_value_cents=order.installment_value_cents,
            installment_value_display=cents_to_display(order.installment_value_cents),
            amount_paid_cents=order.amount_paid_cents,
            outstanding_cents=order.outstanding_cents,
            suggested_payment_cents=suggested_payment_cents(
                order.installments, order.installment_value_cents
            ),
            contract_status=status.value if status else None,
            contract_status_label=status.label if status else None,
            installments=[InstallmentOut.from_domain(i) for i in order.installments],
        )


class OrderResponse(BaseModel):
    id: str
    customer_name: str
    client_id: str | None
    supplier_id: str | None
    product_name: str
    model: str
    capacity: str
    color: str
    condition: str
    order_date: date
    purchase_price_cents: int
    selling_price_cents: int | None
    notes: str | None
    payment_method: str
    payment_method_label: str
    fulfillment_status: str
    fulfillment_status_label: str
    history: list[HistoryEntryOut]
    financing: FinancingOut | None
    arrival_date: date | None
    imei: str | None
    battery_health: int | None
    arrival_notes: str | None
    ready_for_delivery: bool
    imei_blocked: bool
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            client_id=order.client_id,
            supplier_id=order.supplier_id,
            product_name=order.product_name,
            model=order.model,
            capacity=order.capacity,
            color=order.color,
            condition=order.condition,
            order_date=order.order_date,
            purchase_price_cents=order.purchase_price_cents,
            selling_price_cents=order.selling_price_cents,
            notes=order.notes,
            payment_method=order.payment_method.value,
            payment_method_label=order.payment_method.label,
            fulfillment_status=order.fulfillment_status.value,
            fulfillment_status_label=order.fulfillment_status.label,
            history=[HistoryEntryOut.from_domain(h) for h in order.history],
            financing=FinancingOut.from_domain(order) if order.is_financed else None,
            arrival_date=order.arrival_date,
            imei=order.imei,
            battery_health=order.battery_health,
            arrival_notes=order.arrival_notes,
            ready_for_delivery=order.ready_for_delivery,
            imei_blocked=order.imei_blocked,
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    next_cursor: str | None
    has_more: bool


class MilestoneOut(BaseModel):
    status: str
    label: str
    reached: bool
    is_current: bool
    at: datetime | None = None
    note: str | None = None

    @classmethod
    def from_domain(cls, m: DisplayMilestone) -> "MilestoneOut":
        return cls(
            status=m.status.value,
            label=m.label,
            reached=m.reached,
            is_current=m.is_current,
            at=m.at,
            note=m.note,
        )


class TimelineResponse(BaseModel):
    order_id: str
    current_status: str
    milestones: list[MilestoneOut]

"""Order domain model — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from src.blu_common.enums import ContractStatus, FulfillmentStatus, PaymentMethod
from src.blu_financing.domain.models import Installment


@dataclass(frozen=True)
class HistoryEntry:
    status: FulfillmentStatus
    at: datetime
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "at": self.at.isoformat(), "note": self.note}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(
            status=FulfillmentStatus(data["status"]),
            at=datetime.fromisoformat(data["at"]),
            note=data.get("note"),
        )


@dataclass
class Order:
    id: str
    customer_name: str
    product_name: str
    order_date: date
    purchase_price_cents: int
    payment_method: PaymentMethod
    client_id: str | None = None
    supplier_id: str | None = None
    model: str = ""
    capacity: str = ""
    color: str = ""
    condition: str = ""
    selling_price_cents: int | None = None
    notes: str | None = None
    # BluFacilita terms (set only when payment_method == BLU_FACILITA)
    down_payment_cents: int = 0
    installment_count: int | None = None
    annual_rate_bps: int | None = None
    uses_special_rate: bool = False
    financed_amount_cents: int = 0
    total_with_interest_cents: int = 0
    installment_value_cents: int = 0
    installments: list[Installment] = field(default_factory=list)
    contract_status: ContractStatus | None = None
    # Fulfillment
    fulfillment_status: FulfillmentStatus = FulfillmentStatus.CREATED
    history: list[HistoryEntry] = field(default_factory=list)  # append-only
    # Arrival at the office
    arrival_date: date | None = None
    imei: str | None = None
    battery_health: int | None = None
    arrival_notes: str | None = None
    ready_for_delivery: bool = False
    imei_blocked: bool = False
    # Optimistic concurrency token, bumped on every write
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_financed(self) -> bool:
        return self.payment_method == PaymentMethod.BLU_FACILITA

    @property
    def is_cancelled(self) -> bool:
        return self.fulfillment_status == FulfillmentStatus.CANCELLED

    @property
    def product_value_cents(self) -> int:
        """Selling price when set, else purchase price (value financed by BluFacilita)."""
        if self.selling_price_cents:
            return self.selling_price_cents
        return self.purchase_price_cents

    @property
    def amount_paid_cents(self) -> int:
        return sum(i.amount_paid_cents for i in self.installments)

    @property
    def outstanding_cents(self) -> int:
        return sum(i.remaining_cents for i in self.installments)

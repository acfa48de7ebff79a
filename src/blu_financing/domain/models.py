"""Domain models for blu_financing — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from src.blu_common.enums import OPEN_INSTALLMENT_STATUSES, InstallmentStatus, PaymentChannel


@dataclass(frozen=True)
class AmortizationTerms:
    financed_amount_cents: int
    total_interest_cents: int
    total_with_interest_cents: int
    installment_value_cents: int

    @classmethod
    def zero(cls) -> "AmortizationTerms":
        return cls(0, 0, 0, 0)


@dataclass
class Installment:
    number: int  # 1-based, payment order
    due_date: date
    amount_cents: int  # fixed at generation
    amount_paid_cents: int = 0  # never decreases
    status: InstallmentStatus = InstallmentStatus.PENDING
    payment_date: date | None = None
    payment_method_used: str | None = None
    notes: str | None = None

    @property
    def remaining_cents(self) -> int:
        return self.amount_cents - self.amount_paid_cents

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_INSTALLMENT_STATUSES

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "due_date": self.due_date.isoformat(),
            "amount_cents": self.amount_cents,
            "amount_paid_cents": self.amount_paid_cents,
            "status": self.status.value,
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
            "payment_method_used": self.payment_method_used,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Installment":
        payment_date = data.get("payment_date")
        return cls(
            number=int(data["number"]),
            due_date=date.fromisoformat(data["due_date"]),
            amount_cents=int(data["amount_cents"]),
            amount_paid_cents=int(data.get("amount_paid_cents") or 0),
            status=InstallmentStatus(data.get("status", InstallmentStatus.PENDING.value)),
            payment_date=date.fromisoformat(payment_date) if payment_date else None,
            payment_method_used=data.get("payment_method_used"),
            notes=data.get("notes"),
        )


@dataclass
class PaymentApplication:
    """Outcome of reconciling one payment against an installment set."""

    installments: list[Installment]
    applied_cents: int
    remainder_cents: int  # overpayment not absorbed by any installment
    touched_numbers: list[int] = field(default_factory=list)

    @property
    def is_overpayment(self) -> bool:
        return self.remainder_cents > 0


@dataclass(frozen=True)
class Payment:
    """Client payment record. Immutable once stored."""

    id: str
    order_id: str
    amount_cents: int
    paid_on: date
    method: PaymentChannel
    card_installments: int | None = None  # only for CREDIT_CARD
    notes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CardFeeQuote:
    installments: int
    rate_bps: int
    charge_cents: int  # amount to charge the customer
    installment_value_cents: int
    additional_cost_cents: int
    net_value_cents: int

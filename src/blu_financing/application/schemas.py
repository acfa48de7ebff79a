# src/blu_financing/application/schemas.py
"""Pydantic schemas for the BluFacilita financing API."""
from datetime import date

from pydantic import BaseModel, Field, model_validator

from config.settings import settings
from src.blu_common.enums import PaymentChannel
from src.blu_common.money import bps_to_percent_display, cents_to_display
from src.blu_financing.domain.models import (
    AmortizationTerms,
    CardFeeQuote,
    Installment,
    Payment,
)

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class QuoteRequest(BaseModel):
    product_value_cents: int = Field(..., gt=0)
    down_payment_cents: int = Field(0, ge=0)
    installment_count: int = Field(..., ge=1)
    uses_special_rate: bool = False
    special_annual_rate_bps: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_installment_limit(self) -> "QuoteRequest":
        if self.installment_count > settings.MAX_INSTALLMENTS:
            raise ValueError(
                f"installment_count must be at most {settings.MAX_INSTALLMENTS}"
            )
        return self


class RegisterPaymentRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount received in cents")
    paid_on: date | None = Field(None, description="Defaults to today")
    method: PaymentChannel = PaymentChannel.PIX
    card_installments: int | None = Field(None, ge=2, le=12)
    notes: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def card_installments_only_for_cards(self) -> "RegisterPaymentRequest":
        if self.card_installments is not None and self.method != PaymentChannel.CREDIT_CARD:
            raise ValueError("card_installments is only valid for CREDIT_CARD payments")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class QuoteResponse(BaseModel):
    annual_rate_bps: int
    annual_rate_display: str
    installment_count: int
    down_payment_cents: int
    financed_amount_cents: int
    financed_amount_display: str
    total_interest_cents: int
    total_with_interest_cents: int
    total_with_interest_display: str
    installment_value_cents: int
    installment_value_display: str
    # financed total plus down payment, what the client pays overall
    grand_total_cents: int

    @classmethod
    def from_terms(
        cls,
        terms: AmortizationTerms,
        annual_rate_bps: int,
        installment_count: int,
        down_payment_cents: int,
    ) -> "QuoteResponse":
        return cls(
            annual_rate_bps=annual_rate_bps,
            annual_rate_display=bps_to_percent_display(annual_rate_bps),
            installment_count=installment_count,
            down_payment_cents=down_payment_cents,
            financed_amount_cents=terms.financed_amount_cents,
            financed_amount_display=cents_to_display(terms.financed_amount_cents),
            total_interest_cents=terms.total_interest_cents,
            total_with_interest_cents=terms.total_with_interest_cents,
            total_with_interest_display=cents_to_display(terms.total_with_interest_cents),
            installment_value_cents=terms.installment_value_cents,
            installment_value_display=cents_to_display(terms.installment_value_cents),
            grand_total_cents=terms.total_with_interest_cents + down_payment_cents,
        )


class InstallmentOut(BaseModel):
    number: int
    due_date: date
    amount_cents: int
    amount_paid_cents: int
    remaining_cents: int
    status: str
    status_label: str
    payment_date: date | None = None
    payment_method_used: str | None = None
    notes: str | None = None

    @classmethod
    def from_domain(cls, inst: Installment) -> "InstallmentOut":
        return cls(
            number=inst.number,
            due_date=inst.due_date,
            amount_cents=inst.amount_cents,
            amount_paid_cents=inst.amount_paid_cents,
            remaining_cents=inst.remaining_cents,
            status=inst.status.value,
            status_label=inst.status.label,
            payment_date=inst.payment_date,
            payment_method_used=inst.payment_method_used,
            notes=inst.notes,
        )


class PaymentOut(BaseModel):
    id: str
    order_id: str
    amount_cents: int
    amount_display: str
    paid_on: date
    method: str
    card_installments: int | None = None
    notes: str | None = None
    created_at: str | None = None

    @classmethod
    def from_domain(cls, p: Payment) -> "PaymentOut":
        return cls(
            id=p.id,
            order_id=p.order_id,
            amount_cents=p.amount_cents,
            amount_display=cents_to_display(p.amount_cents),
            paid_on=p.paid_on,
            method=p.method.value,
            card_installments=p.card_installments,
            notes=p.notes,
            created_at=p.created_at.isoformat() if p.created_at else None,
        )


class RegisterPaymentResponse(BaseModel):
    payment: PaymentOut
    applied_cents: int
    overpayment_cents: int
    touched_installments: list[int]
    contract_status: str | None
    installments: list[InstallmentOut]
    order_version: int


class PaymentListResponse(BaseModel):
    items: list[PaymentOut]
    total_paid_cents: int
    total_paid_display: str


class CardFeeQuoteOut(BaseModel):
    installments: int
    rate_bps: int
    rate_display: str
    charge_cents: int
    charge_display: str
    installment_value_cents: int
    additional_cost_cents: int
    net_value_cents: int

    @classmethod
    def from_domain(cls, q: CardFeeQuote) -> "CardFeeQuoteOut":
        return cls(
            installments=q.installments,
            rate_bps=q.rate_bps,
            rate_display=bps_to_percent_display(q.rate_bps),
            charge_cents=q.charge_cents,
            charge_display=cents_to_display(q.charge_cents),
            installment_value_cents=q.installment_value_cents,
            additional_cost_cents=q.additional_cost_cents,
            net_value_cents=q.net_value_cents,
        )

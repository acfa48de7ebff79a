"""Tests for blu_order / blu_financing application schemas."""

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from src.blu_common.enums import ContractStatus, InstallmentStatus, PaymentChannel, PaymentMethod
from src.blu_financing.application.schemas import QuoteRequest, RegisterPaymentRequest
from src.blu_financing.domain.schedule import generate_schedule
from src.blu_order.application.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    OrderResponse,
    cursor_decode,
    cursor_encode,
)
from src.blu_order.domain.models import Order

_BASE = {
    "customer_name": "Maria Souza",
    "product_name": "iPhone 15",
    "purchase_price_cents": 300000,
}


def _make_order(**kwargs) -> Order:
    defaults = dict(
        id="ord-1",
        customer_name="Maria Souza",
        product_name="iPhone 15",
        order_date=date(2026, 1, 10),
        purchase_price_cents=300000,
        payment_method=PaymentMethod.CASH,
        created_at=datetime(2026, 1, 10, 12, 0, tzinfo=UTC),
    )
    defaults.update(kwargs)
    return Order(**defaults)


class TestCreateOrderRequest:
    def test_cash_order_needs_no_terms(self) -> None:
        req = CreateOrderRequest(**_BASE)
        assert req.payment_method == PaymentMethod.CASH
        assert req.installment_count is None

    def test_financed_order_requires_installment_count(self) -> None:
        with pytest.raises(ValidationError, match="installment_count is required"):
            CreateOrderRequest(**_BASE, payment_method="BLU_FACILITA")

    def test_installment_limit(self) -> None:
        with pytest.raises(ValidationError, match="at most 12"):
            CreateOrderRequest(**_BASE, payment_method="BLU_FACILITA", installment_count=13)

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(**{**_BASE, "customer_name": "   "})

    def test_names_are_stripped(self) -> None:
        req = CreateOrderRequest(**{**_BASE, "product_name": "  iPhone 15 "})
        assert req.product_name == "iPhone 15"

    def test_non_positive_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(**{**_BASE, "purchase_price_cents": 0})


class TestChangeStatusRequest:
    def test_naive_delivery_date_rejected(self) -> None:
        with pytest.raises(ValidationError, match="timezone"):
            ChangeStatusRequest(status="DELIVERED", delivered_at="2026-03-05T18:30:00")

    def test_aware_delivery_date(self) -> None:
        req = ChangeStatusRequest(status="DELIVERED", delivered_at="2026-03-05T18:30:00-03:00")
        assert req.delivered_at.tzinfo is not None


class TestFinancingRequests:
    def test_quote_limit(self) -> None:
        with pytest.raises(ValidationError):
            QuoteRequest(product_value_cents=300000, installment_count=13)

    def test_card_installments_only_for_card(self) -> None:
        with pytest.raises(ValidationError, match="CREDIT_CARD"):
            RegisterPaymentRequest(amount_cents=1000, method="PIX", card_installments=3)
        req = RegisterPaymentRequest(amount_cents=1000, method="CREDIT_CARD", card_installments=3)
        assert req.method == PaymentChannel.CREDIT_CARD

    def test_payment_amount_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            RegisterPaymentRequest(amount_cents=0)


class TestOrderResponse:
    def test_cash_order_has_no_financing_block(self) -> None:
        resp = OrderResponse.from_domain(_make_order())
        assert resp.financing is None
        assert resp.payment_method_label == "À vista (PIX/Dinheiro)"

    def test_financed_order(self) -> None:
        installments = generate_schedule("ord-1", 3, 109000, date(2026, 1, 10))
        installments[0].amount_paid_cents = 109000
        installments[0].status = InstallmentStatus.PAID
        order = _make_order(
            payment_method=PaymentMethod.BLU_FACILITA,
            installment_count=3,
            annual_rate_bps=3600,
            financed_amount_cents=300000,
            total_with_interest_cents=327000,
            installment_value_cents=109000,
            installments=installments,
            contract_status=ContractStatus.EM_DIA,
        )

        financing = OrderResponse.from_domain(order).financing

        assert financing is not None
        assert financing.installment_value_display == "R$ 1.090,00"
        assert financing.amount_paid_cents == 109000
        assert financing.outstanding_cents == 218000
        assert financing.suggested_payment_cents == 109000
        assert financing.contract_status_label == "Em dia"
        assert financing.installments[0].status_label == "Pago"


class TestCursor:
    def test_encode_decode(self) -> None:
        order = _make_order()
        ts, order_id = cursor_decode(cursor_encode(order))
        assert ts == order.created_at
        assert order_id == "ord-1"

    def test_none(self) -> None:
        assert cursor_decode(None) == (None, None)

    def test_garbage_is_ignored(self) -> None:
        assert cursor_decode("not-a-cursor") == (None, None)

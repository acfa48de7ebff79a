"""Tests for blu_financing.domain.amortization — flat-interest BluFacilita terms."""

import pytest

from src.blu_common.errors import InvalidInputError
from src.blu_financing.domain.amortization import compute_amortization, resolve_annual_rate_bps
from src.blu_financing.domain.models import AmortizationTerms


class TestComputeAmortization:
    def test_three_installments_at_36_percent(self) -> None:
        # R$ 3.000,00 over 3 months at 36% a.a. = 3% a.m.
        terms = compute_amortization(300000, 0, 3, 3600)
        assert terms == AmortizationTerms(
            financed_amount_cents=300000,
            total_interest_cents=27000,
            total_with_interest_cents=327000,
            installment_value_cents=109000,
        )

    def test_down_payment_reduces_financed_amount(self) -> None:
        terms = compute_amortization(300000, 60000, 3, 3600)
        assert terms.financed_amount_cents == 240000
        assert terms.total_interest_cents == 21600
        assert terms.total_with_interest_cents == 261600
        assert terms.installment_value_cents == 87200

    def test_zero_rate(self) -> None:
        terms = compute_amortization(90000, 0, 3, 0)
        assert terms.total_interest_cents == 0
        assert terms.total_with_interest_cents == 90000
        assert terms.installment_value_cents == 30000

    def test_rounds_each_output_half_up(self) -> None:
        # interest 20416.67 -> 20417, total 120416.67 -> 120417, 17202.38 -> 17202
        terms = compute_amortization(100000, 0, 7, 3500)
        assert terms.total_interest_cents == 20417
        assert terms.total_with_interest_cents == 120417
        assert terms.installment_value_cents == 17202

    def test_last_installment_does_not_absorb_remainder(self) -> None:
        terms = compute_amortization(100000, 0, 7, 3500)
        assert terms.installment_value_cents * 7 != terms.total_with_interest_cents

    @pytest.mark.parametrize("down", [300000, 300001, 999999])
    def test_down_payment_covering_value_finances_nothing(self, down: int) -> None:
        assert compute_amortization(300000, down, 3, 3600) == AmortizationTerms.zero()

    def test_zero_product_value_finances_nothing(self) -> None:
        assert compute_amortization(0, 0, 3, 3600) == AmortizationTerms.zero()

    @pytest.mark.parametrize(
        ("value", "down", "count", "rate"),
        [
            (123457, 0, 1, 3500),
            (123457, 1000, 5, 3500),
            (999999, 333, 11, 4999),
            (500000, 0, 12, 1),
            (150, 0, 12, 3500),
        ],
    )
    def test_totals_stay_within_rounding_bound(
        self, value: int, down: int, count: int, rate: int
    ) -> None:
        terms = compute_amortization(value, down, count, rate)
        financed = value - down
        # total == financed * (1 + rate/12 * n), exact value rounded once
        exact_total = financed + financed * rate * count / 120000
        assert abs(terms.total_with_interest_cents - exact_total) <= 0.5
        assert abs(terms.installment_value_cents * count - terms.total_with_interest_cents) <= count
        assert terms.total_with_interest_cents == pytest.approx(
            terms.financed_amount_cents + terms.total_interest_cents, abs=1
        )

    def test_invalid_installment_count(self) -> None:
        with pytest.raises(InvalidInputError, match="installment count"):
            compute_amortization(300000, 0, 0, 3600)

    def test_negative_product_value(self) -> None:
        with pytest.raises(InvalidInputError, match="product value"):
            compute_amortization(-1, 0, 3, 3600)

    def test_negative_down_payment(self) -> None:
        with pytest.raises(InvalidInputError, match="down payment"):
            compute_amortization(300000, -1, 3, 3600)

    def test_negative_rate(self) -> None:
        with pytest.raises(InvalidInputError, match="annual rate"):
            compute_amortization(300000, 0, 3, -1)


class TestResolveAnnualRate:
    def test_special_rate_when_enabled(self) -> None:
        assert resolve_annual_rate_bps(True, 2000, 3500) == 2000

    def test_special_rate_ignored_when_disabled(self) -> None:
        assert resolve_annual_rate_bps(False, 2000, 3500) == 3500

    def test_missing_special_rate_falls_back(self) -> None:
        assert resolve_annual_rate_bps(True, None, 3500) == 3500
        assert resolve_annual_rate_bps(True, 0, 3500) == 3500

    def test_negative_special_rate_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            resolve_annual_rate_bps(True, -100, 3500)

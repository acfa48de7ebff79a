"""BluFacilita amortization — flat (simple) monthly interest on the financed amount.

    financed          = max(product - down_payment, 0)
    monthly_rate      = annual_rate / 12
    total_interest    = financed * monthly_rate * n
    total_with_int    = financed + total_interest
    installment_value = total_with_int / n

Rates are in basis points, so with annual_rate = bps / 10_000 every quantity is
an exact fraction over 12 * 10_000. Rounding to cents happens once per output.
"""

from src.blu_common.errors import InvalidInputError
from src.blu_common.money import BPS_DENOMINATOR, div_round_half_up
from src.blu_financing.domain.models import AmortizationTerms

_MONTHS_PER_YEAR = 12
_RATE_DENOMINATOR = _MONTHS_PER_YEAR * BPS_DENOMINATOR


def compute_amortization(
    product_value_cents: int,
    down_payment_cents: int,
    installment_count: int,
    annual_rate_bps: int,
) -> AmortizationTerms:
    if product_value_cents < 0:
        raise InvalidInputError(f"product value must be >= 0 cents, got {product_value_cents}")
    if down_payment_cents < 0:
        raise InvalidInputError(f"down payment must be >= 0 cents, got {down_payment_cents}")
    if installment_count <= 0:
        raise InvalidInputError(f"installment count must be >= 1, got {installment_count}")
    if annual_rate_bps < 0:
        raise InvalidInputError(f"annual rate must be >= 0 bps, got {annual_rate_bps}")

    financed = max(product_value_cents - down_payment_cents, 0)
    if financed == 0:
        return AmortizationTerms.zero()

    # Numerators over _RATE_DENOMINATOR
    interest_num = financed * annual_rate_bps * installment_count
    total_num = financed * _RATE_DENOMINATOR + interest_num

    return AmortizationTerms(
        financed_amount_cents=financed,
        total_interest_cents=div_round_half_up(interest_num, _RATE_DENOMINATOR),
        total_with_interest_cents=div_round_half_up(total_num, _RATE_DENOMINATOR),
        installment_value_cents=div_round_half_up(
            total_num, _RATE_DENOMINATOR * installment_count
        ),
    )


def resolve_annual_rate_bps(
    uses_special_rate: bool,
    special_rate_bps: int | None,
    default_rate_bps: int,
) -> int:
    """Pick the contract rate: the special override when enabled and set, else the default."""
    if uses_special_rate and special_rate_bps:
        if special_rate_bps < 0:
            raise InvalidInputError(f"special rate must be >= 0 bps, got {special_rate_bps}")
        return special_rate_bps
    return default_rate_bps

"""Integer arithmetic utilities for cents-based money.

All amounts are int (cents) and all rates are int (basis points).
No float, no Decimal: fractional results are kept as an exact integer
numerator/denominator pair and rounded once, half-up, when they leave
the calculation.
"""

BPS_DENOMINATOR = 10_000


def div_round_half_up(numerator: int, denominator: int) -> int:
    """Exact integer division rounded half-up (away from zero on ties).

    div_round_half_up(5, 2) == 3, div_round_half_up(-5, 2) == -3
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    if numerator < 0:
        return -div_round_half_up(-numerator, denominator)
    return (2 * numerator + denominator) // (2 * denominator)


def cents_to_display(cents: int) -> str:
    """Convert cents to BRL display string: 109000 -> 'R$ 1.090,00', -1200 -> '-R$ 12,00'."""
    sign = "-" if cents < 0 else ""
    abs_cents = abs(cents)
    reais = f"{abs_cents // 100:,}".replace(",", ".")
    return f"{sign}R$ {reais},{abs_cents % 100:02d}"


def bps_to_percent_display(bps: int) -> str:
    """3500 -> '35,00%'."""
    return f"{bps // 100},{bps % 100:02d}%"

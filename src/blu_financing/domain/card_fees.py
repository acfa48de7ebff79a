"""Credit-card fee quote: what to charge so the store nets a target amount.

charge = net / (1 - rate), installment = charge / n, additional = charge - net.
Each output is rounded half-up to cents independently.
"""

from src.blu_common.money import BPS_DENOMINATOR, div_round_half_up
from src.blu_financing.domain.models import CardFeeQuote

# Acquirer MDR by number of card installments (bps)
CREDIT_CARD_RATE_TABLE: dict[int, int] = {
    3: 569,
    4: 659,
    5: 749,
    6: 839,
    7: 859,
    8: 949,
    9: 1039,
    10: 1129,
    11: 1219,
    12: 1309,
}


def quote_card_fees(
    net_value_cents: int,
    rate_table: dict[int, int] | None = None,
) -> list[CardFeeQuote]:
    if net_value_cents <= 0:
        return []
    table = rate_table if rate_table is not None else CREDIT_CARD_RATE_TABLE

    quotes = []
    for n, rate_bps in sorted(table.items()):
        # charge = net * 10000 / (10000 - rate)
        num = net_value_cents * BPS_DENOMINATOR
        den = BPS_DENOMINATOR - rate_bps
        charge = div_round_half_up(num, den)
        quotes.append(
            CardFeeQuote(
                installments=n,
                rate_bps=rate_bps,
                charge_cents=charge,
                installment_value_cents=div_round_half_up(num, den * n),
                additional_cost_cents=div_round_half_up(num - net_value_cents * den, den),
                net_value_cents=net_value_cents,
            )
        )
    return quotes

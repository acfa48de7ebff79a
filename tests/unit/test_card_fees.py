"""Tests for blu_financing.domain.card_fees — credit-card fee quotes."""

from src.blu_financing.domain.card_fees import CREDIT_CARD_RATE_TABLE, quote_card_fees


class TestQuoteCardFees:
    def test_one_quote_per_table_entry_in_order(self) -> None:
        quotes = quote_card_fees(100000)
        assert [q.installments for q in quotes] == list(range(3, 13))
        assert [q.rate_bps for q in quotes] == [CREDIT_CARD_RATE_TABLE[n] for n in range(3, 13)]

    def test_three_installments(self) -> None:
        q = quote_card_fees(100000)[0]
        # 1000.00 / (1 - 0.0569) = 1060.3329...
        assert q.charge_cents == 106033
        assert q.installment_value_cents == 35344
        assert q.additional_cost_cents == 6033
        assert q.net_value_cents == 100000

    def test_twelve_installments(self) -> None:
        q = quote_card_fees(100000)[-1]
        assert q.rate_bps == 1309
        assert q.charge_cents == 115062
        assert q.installment_value_cents == 9588
        assert q.additional_cost_cents == 15062

    def test_charge_always_covers_net(self) -> None:
        for q in quote_card_fees(12345):
            assert q.charge_cents > q.net_value_cents
            assert q.charge_cents - q.net_value_cents == q.additional_cost_cents

    def test_non_positive_net_returns_nothing(self) -> None:
        assert quote_card_fees(0) == []
        assert quote_card_fees(-500) == []

    def test_custom_table(self) -> None:
        quotes = quote_card_fees(10000, rate_table={2: 500})
        assert len(quotes) == 1
        assert quotes[0].charge_cents == 10526
        assert quotes[0].installment_value_cents == 5263

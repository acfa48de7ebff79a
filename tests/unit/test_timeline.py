"""Tests for blu_order.domain.timeline — history appends and milestone rendering."""

from datetime import UTC, date, datetime, timedelta

from src.blu_common.clock import FixedClock
from src.blu_common.enums import FulfillmentStatus as FS
from src.blu_common.enums import PaymentMethod
from src.blu_order.domain.models import HistoryEntry, Order
from src.blu_order.domain.timeline import delivered_at, render_timeline, transition_status

T0 = datetime(2026, 3, 1, 13, 0, tzinfo=UTC)


def _make_order(**kwargs) -> Order:
    defaults = dict(
        id="ord-1",
        customer_name="Maria Souza",
        product_name="iPhone 15",
        order_date=date(2026, 3, 1),
        purchase_price_cents=450000,
        payment_method=PaymentMethod.CASH,
        history=[HistoryEntry(FS.CREATED, T0, "Pedido Criado")],
    )
    defaults.update(kwargs)
    return Order(**defaults)


def _statuses(order: Order) -> list[FS]:
    return [m.status for m in render_timeline(order)]


class TestTransitionStatus:
    def test_appends_entry_with_clock_time(self) -> None:
        order = _make_order()
        at = T0 + timedelta(days=2)
        transition_status(order, FS.PAYMENT_CONFIRMED, FixedClock(at), note="PIX recebido")

        assert order.fulfillment_status == FS.PAYMENT_CONFIRMED
        assert order.history[-1] == HistoryEntry(FS.PAYMENT_CONFIRMED, at, "PIX recebido")
        assert len(order.history) == 2

    def test_earlier_entries_are_kept(self) -> None:
        order = _make_order()
        first = order.history[0]
        clock = FixedClock(T0 + timedelta(hours=1))
        transition_status(order, FS.PAYMENT_CONFIRMED, clock)
        transition_status(order, FS.PURCHASE_COMPLETED, clock)
        assert order.history[0] is first
        assert [h.status for h in order.history] == [
            FS.CREATED,
            FS.PAYMENT_CONFIRMED,
            FS.PURCHASE_COMPLETED,
        ]

    def test_delivered_without_date_uses_now(self) -> None:
        order = _make_order(fulfillment_status=FS.SHIPPED)
        now = T0 + timedelta(days=10)
        transition_status(order, FS.DELIVERED, FixedClock(now))

        assert order.history[-1].at == now
        delivered = next(m for m in render_timeline(order) if m.status == FS.DELIVERED)
        assert delivered.reached
        assert delivered.is_current
        assert delivered.at == now

    def test_delivered_with_explicit_date(self) -> None:
        order = _make_order(fulfillment_status=FS.SHIPPED)
        explicit = datetime(2026, 3, 5, 18, 30, tzinfo=UTC)
        transition_status(order, FS.DELIVERED, FixedClock(T0), explicit_date=explicit)
        assert delivered_at(order) == explicit

    def test_explicit_date_ignored_for_other_statuses(self) -> None:
        order = _make_order()
        explicit = datetime(2020, 1, 1, tzinfo=UTC)
        transition_status(order, FS.SHIPPED, FixedClock(T0), explicit_date=explicit)
        assert order.history[-1].at == T0

    def test_any_transition_is_recorded(self) -> None:
        order = _make_order(fulfillment_status=FS.DELIVERED)
        transition_status(order, FS.CREATED, FixedClock(T0))
        assert order.fulfillment_status == FS.CREATED


class TestRenderTimeline:
    def test_new_order(self) -> None:
        milestones = render_timeline(_make_order())
        assert [m.status for m in milestones] == [
            FS.CREATED,
            FS.PAYMENT_CONFIRMED,
            FS.SHIPPED,
            FS.DELIVERED,
        ]
        assert milestones[0].reached and milestones[0].is_current
        assert milestones[0].note == "Pedido Criado"
        assert not any(m.reached for m in milestones[1:])
        assert milestones[1].at is None

    def test_mid_path_shows_next_step(self) -> None:
        order = _make_order()
        clock = FixedClock(T0)
        for status in (FS.PAYMENT_CONFIRMED, FS.PURCHASE_COMPLETED, FS.IN_TRANSIT_TO_OFFICE):
            transition_status(order, status, clock)
        assert _statuses(order) == [
            FS.CREATED,
            FS.PAYMENT_CONFIRMED,
            FS.PURCHASE_COMPLETED,
            FS.IN_TRANSIT_TO_OFFICE,
            FS.ARRIVED_AT_OFFICE,
            FS.SHIPPED,
            FS.DELIVERED,
        ]

    def test_off_path_status_shows_whole_path(self) -> None:
        order = _make_order()
        transition_status(order, FS.AWAITING_PACKING, FixedClock(T0))
        assert _statuses(order) == [
            FS.CREATED,
            FS.PAYMENT_CONFIRMED,
            FS.PURCHASE_COMPLETED,
            FS.IN_TRANSIT_TO_OFFICE,
            FS.ARRIVED_AT_OFFICE,
            FS.AWAITING_PACKING,
            FS.AWAITING_PICKUP,
            FS.SHIPPED,
            FS.DELIVERED,
        ]

    def test_cancelled_shows_only_created_and_cancelled(self) -> None:
        order = _make_order()
        clock = FixedClock(T0 + timedelta(days=1))
        transition_status(order, FS.PAYMENT_CONFIRMED, clock)
        transition_status(order, FS.CANCELLED, clock, note="Cliente desistiu")

        milestones = render_timeline(order)
        assert [m.status for m in milestones] == [FS.CREATED, FS.CANCELLED]
        assert milestones[1].is_current
        assert milestones[1].note == "Cliente desistiu"

    def test_uses_most_recent_entry_for_repeated_status(self) -> None:
        order = _make_order()
        transition_status(order, FS.ARRIVED_AT_OFFICE, FixedClock(T0), note="primeira")
        transition_status(order, FS.AWAITING_PACKING, FixedClock(T0))
        later = T0 + timedelta(days=1)
        transition_status(order, FS.ARRIVED_AT_OFFICE, FixedClock(later), note="segunda")

        arrived = next(m for m in render_timeline(order) if m.status == FS.ARRIVED_AT_OFFICE)
        assert arrived.note == "segunda"
        assert arrived.at == later

    def test_sorted_by_canonical_order_after_moving_back(self) -> None:
        order = _make_order()
        transition_status(order, FS.SHIPPED, FixedClock(T0))
        transition_status(order, FS.AWAITING_INVOICE, FixedClock(T0))
        ranks = [s.rank for s in _statuses(order)]
        assert ranks == sorted(ranks)
        assert FS.SHIPPED in _statuses(order)

    def test_does_not_mutate_history(self) -> None:
        order = _make_order()
        transition_status(order, FS.PAYMENT_CONFIRMED, FixedClock(T0))
        before = list(order.history)
        render_timeline(order)
        assert order.history == before
        assert order.fulfillment_status == FS.PAYMENT_CONFIRMED

    def test_labels(self) -> None:
        milestones = render_timeline(_make_order())
        assert milestones[0].label == "Pedido Criado"

    def test_delivered_at_none_before_delivery(self) -> None:
        assert delivered_at(_make_order()) is None

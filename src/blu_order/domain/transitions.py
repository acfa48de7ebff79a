"""Fulfillment transition policy table.

The timeline itself accepts any transition. This table describes the flow the
dashboard offers (forward along the canonical order, cancel only before the
purchase is made, nothing after a terminal status) and is enforced by the
application service when ENFORCE_STATUS_TRANSITIONS is on.
"""

from src.blu_common.enums import TERMINAL_FULFILLMENT_STATUSES, FulfillmentStatus

_CANCELLABLE_FROM = frozenset(
    {
        FulfillmentStatus.CREATED,
        FulfillmentStatus.PAYMENT_CONFIRMED,
        FulfillmentStatus.AWAITING_SUPPLIER_PAYMENT,
    }
)

_PIPELINE = [s for s in FulfillmentStatus if s != FulfillmentStatus.CANCELLED]


def _build_table() -> dict[FulfillmentStatus, frozenset[FulfillmentStatus]]:
    table: dict[FulfillmentStatus, frozenset[FulfillmentStatus]] = {}
    for idx, status in enumerate(_PIPELINE):
        if status in TERMINAL_FULFILLMENT_STATUSES:
            table[status] = frozenset()
            continue
        targets = set(_PIPELINE[idx + 1:])
        if status in _CANCELLABLE_FROM:
            targets.add(FulfillmentStatus.CANCELLED)
        table[status] = frozenset(targets)
    table[FulfillmentStatus.CANCELLED] = frozenset()
    return table


ALLOWED_TRANSITIONS: dict[FulfillmentStatus, frozenset[FulfillmentStatus]] = _build_table()


def is_transition_allowed(current: FulfillmentStatus, new: FulfillmentStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]

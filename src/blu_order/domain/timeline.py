"""Order fulfillment timeline.

`transition_status` is the only writer of `Order.history` and only ever appends.
It records whatever transition it is asked for; reachability is a policy the
application layer may enforce (see transitions.py).

`render_timeline` is a read-only projection of the history into the milestone
list shown on the order page:

  - cancelled orders: CREATED and CANCELLED only
  - otherwise: statuses seen in history + the current status + the typical
    path up to one step past the current status (the whole path if the current
    status is off the path) + SHIPPED and DELIVERED, in canonical order
  - each milestone is paired with its most recent history entry, if any
"""

from dataclasses import dataclass
from datetime import datetime

from src.blu_common.clock import Clock
from src.blu_common.enums import FulfillmentStatus
from src.blu_order.domain.models import HistoryEntry, Order

TYPICAL_PATH: tuple[FulfillmentStatus, ...] = (
    FulfillmentStatus.CREATED,
    FulfillmentStatus.PAYMENT_CONFIRMED,
    FulfillmentStatus.PURCHASE_COMPLETED,
    FulfillmentStatus.IN_TRANSIT_TO_OFFICE,
    FulfillmentStatus.ARRIVED_AT_OFFICE,
    FulfillmentStatus.AWAITING_PICKUP,
    FulfillmentStatus.SHIPPED,
    FulfillmentStatus.DELIVERED,
)

_ALWAYS_SHOWN = (FulfillmentStatus.SHIPPED, FulfillmentStatus.DELIVERED)


@dataclass(frozen=True)
class DisplayMilestone:
    status: FulfillmentStatus
    reached: bool  # has a history entry
    is_current: bool
    at: datetime | None = None
    note: str | None = None

    @property
    def label(self) -> str:
        return self.status.label


def transition_status(
    order: Order,
    new_status: FulfillmentStatus,
    clock: Clock,
    note: str | None = None,
    explicit_date: datetime | None = None,
) -> Order:
    if new_status == FulfillmentStatus.DELIVERED and explicit_date is not None:
        at = explicit_date
    else:
        at = clock.now()
    order.history.append(HistoryEntry(status=new_status, at=at, note=note))
    order.fulfillment_status = new_status
    return order


def latest_entry(order: Order, status: FulfillmentStatus) -> HistoryEntry | None:
    # history is append-only, so the last match is the most recent
    for entry in reversed(order.history):
        if entry.status == status:
            return entry
    return None


def delivered_at(order: Order) -> datetime | None:
    entry = latest_entry(order, FulfillmentStatus.DELIVERED)
    return entry.at if entry else None


def _display_statuses(order: Order) -> list[FulfillmentStatus]:
    current = order.fulfillment_status
    if current == FulfillmentStatus.CANCELLED:
        return [FulfillmentStatus.CREATED, FulfillmentStatus.CANCELLED]

    shown = {entry.status for entry in order.history}
    shown.add(current)
    if current in TYPICAL_PATH:
        shown.update(TYPICAL_PATH[: TYPICAL_PATH.index(current) + 2])
    else:
        shown.update(TYPICAL_PATH)
    shown.update(_ALWAYS_SHOWN)
    return sorted(shown, key=lambda s: s.rank)


def render_timeline(order: Order) -> list[DisplayMilestone]:
    current = order.fulfillment_status
    milestones = []
    for status in _display_statuses(order):
        entry = latest_entry(order, status)
        milestones.append(
            DisplayMilestone(
                status=status,
                reached=entry is not None,
                is_current=status == current,
                at=entry.at if entry else None,
                note=entry.note if entry else None,
            )
        )
    return milestones

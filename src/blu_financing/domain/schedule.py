"""Installment schedule generation for a new financed order.

Runs once at order creation. Due dates step by calendar month from the order
date (not 30-day blocks); each due date is computed from the start date so a
clamped short month does not drag later dates: Jan 31 -> Feb 28 -> Mar 31.
Every installment carries the same rounded value; the last one does not absorb
the rounding remainder.
"""

import logging
from datetime import date

from dateutil.relativedelta import relativedelta

from src.blu_common.enums import InstallmentStatus
from src.blu_common.errors import InvalidInputError
from src.blu_financing.domain.models import Installment

logger = logging.getLogger(__name__)


def due_date_for(start_date: date, number: int) -> date:
    return start_date + relativedelta(months=number)


def generate_schedule(
    order_id: str,
    installment_count: int,
    installment_value_cents: int,
    start_date: date,
) -> list[Installment]:
    if installment_count <= 0:
        raise InvalidInputError(f"installment count must be >= 1, got {installment_count}")
    if installment_value_cents <= 0:
        raise InvalidInputError(
            f"installment value must be > 0 cents, got {installment_value_cents}"
        )

    schedule = [
        Installment(
            number=n,
            due_date=due_date_for(start_date, n),
            amount_cents=installment_value_cents,
            amount_paid_cents=0,
            status=InstallmentStatus.PENDING,
        )
        for n in range(1, installment_count + 1)
    ]
    logger.debug(
        "Schedule generated: order=%s, n=%d, value=%d, first_due=%s",
        order_id, installment_count, installment_value_cents, schedule[0].due_date,
    )
    return schedule

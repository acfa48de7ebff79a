"""Payment reconciliation — apply one received payment to an installment set.

Oldest obligation first: open installments (PENDING / PARTIALLY_PAID / OVERDUE)
are filled in ascending `number` order until the payment is exhausted. There is
no targeting of a specific future installment.

The installment list is validated completely before the first mutation, so a
rejected payment leaves it untouched. Whatever is left after every open
installment is full is returned as `remainder_cents` (no credit balance is
created) and logged as a warning.
"""

import logging
from datetime import date

from src.blu_common.enums import InstallmentStatus
from src.blu_common.errors import InconsistentStateError, InvalidInputError
from src.blu_financing.domain.models import Installment, PaymentApplication

logger = logging.getLogger(__name__)


def check_installment_invariants(installments: list[Installment]) -> None:
    """Raise InconsistentStateError if any installment breaks the stored-state rules.

    0 <= amount_paid <= amount, status agrees with amount_paid, numbers unique.
    """
    if not installments:
        raise InconsistentStateError("order has no installments to reconcile")

    seen: set[int] = set()
    for inst in installments:
        if inst.number in seen:
            raise InconsistentStateError(f"duplicate installment number {inst.number}")
        seen.add(inst.number)

        if inst.amount_paid_cents < 0:
            raise InconsistentStateError(
                f"installment #{inst.number} has negative paid amount {inst.amount_paid_cents}"
            )
        if inst.amount_paid_cents > inst.amount_cents:
            raise InconsistentStateError(
                f"installment #{inst.number} paid {inst.amount_paid_cents} "
                f"exceeds amount {inst.amount_cents}"
            )
        if inst.status == InstallmentStatus.PAID and inst.amount_paid_cents < inst.amount_cents:
            raise InconsistentStateError(
                f"installment #{inst.number} is PAID with only "
                f"{inst.amount_paid_cents}/{inst.amount_cents}"
            )
        if inst.status == InstallmentStatus.PENDING and inst.amount_paid_cents > 0:
            raise InconsistentStateError(
                f"installment #{inst.number} is PENDING with {inst.amount_paid_cents} paid"
            )
        if inst.is_open and inst.remaining_cents == 0:
            raise InconsistentStateError(
                f"installment #{inst.number} is {inst.status.value} with nothing left to pay"
            )


def _settle_status(inst: Installment) -> None:
    if inst.amount_paid_cents == 0:
        return
    if inst.amount_paid_cents < inst.amount_cents:
        inst.status = InstallmentStatus.PARTIALLY_PAID
    else:
        inst.status = InstallmentStatus.PAID


def _append_note(existing: str | None, note: str | None) -> str | None:
    if not note:
        return existing
    return f"{existing}; {note}" if existing else note


def apply_payment(
    installments: list[Installment],
    amount_cents: int,
    paid_on: date,
    method: str,
    notes: str | None = None,
) -> PaymentApplication:
    """Mutate `installments` in place and report how the payment was absorbed."""
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
        raise InvalidInputError(f"payment amount must be > 0 cents, got {amount_cents!r}")
    check_installment_invariants(installments)

    remaining = amount_cents
    touched: list[int] = []
    open_installments = sorted((i for i in installments if i.is_open), key=lambda i: i.number)

    for inst in open_installments:
        if remaining == 0:
            break
        applied = min(inst.remaining_cents, remaining)
        inst.amount_paid_cents += applied
        remaining -= applied
        _settle_status(inst)
        inst.payment_date = paid_on
        inst.payment_method_used = method
        inst.notes = _append_note(inst.notes, notes)
        touched.append(inst.number)

    applied_total = amount_cents - remaining
    if remaining > 0:
        logger.warning(
            "Overpayment: %d of %d cents not absorbed by any open installment",
            remaining, amount_cents,
        )
    logger.debug("Payment applied: %d cents to installments %s", applied_total, touched)

    return PaymentApplication(
        installments=installments,
        applied_cents=applied_total,
        remainder_cents=remaining,
        touched_numbers=touched,
    )


def suggested_payment_cents(installments: list[Installment], fallback_cents: int) -> int:
    """Amount still owed on the oldest open installment (pre-fills the payment form)."""
    nxt = next_open_installment(installments)
    return nxt.remaining_cents if nxt is not None else fallback_cents


def next_open_installment(installments: list[Installment]) -> Installment | None:
    open_ = [i for i in installments if i.is_open]
    return min(open_, key=lambda i: i.number) if open_ else None

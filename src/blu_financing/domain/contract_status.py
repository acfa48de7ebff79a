"""Contract health of a BluFacilita order, derived from its installments.

Precedence:
  1. order cancelled                         -> CANCELADO
  2. every installment PAID                  -> PAGO_INTEGRALMENTE
  3. any open installment with due < today   -> ATRASADO
  4. otherwise                               -> EM_DIA

Pure functions: same inputs, same answer. Nothing here writes an installment;
the per-installment OVERDUE flag is a read-time projection (project_overdue).
"""

from dataclasses import replace
from datetime import date

from src.blu_common.enums import ContractStatus, InstallmentStatus
from src.blu_financing.domain.models import Installment


def is_past_due(inst: Installment, today: date) -> bool:
    return inst.is_open and inst.due_date < today


def resolve_contract_status(
    installments: list[Installment],
    today: date,
    is_cancelled: bool,
) -> ContractStatus:
    if is_cancelled:
        return ContractStatus.CANCELADO
    if not installments:
        return ContractStatus.EM_DIA
    if all(i.status == InstallmentStatus.PAID for i in installments):
        return ContractStatus.PAGO_INTEGRALMENTE
    if any(is_past_due(i, today) for i in installments):
        return ContractStatus.ATRASADO
    return ContractStatus.EM_DIA


def project_overdue(installments: list[Installment], today: date) -> list[Installment]:
    """Copies of `installments` with past-due PENDING ones shown as OVERDUE.

    A partially paid installment keeps PARTIALLY_PAID so the paid portion stays
    visible; it still counts as late for the contract status.
    """
    projected: list[Installment] = []
    for inst in installments:
        if inst.status == InstallmentStatus.PENDING and is_past_due(inst, today):
            projected.append(replace(inst, status=InstallmentStatus.OVERDUE))
        else:
            projected.append(replace(inst))
    return projected

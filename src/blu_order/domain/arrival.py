"""Arrival registration and IMEI lock for orders at the office."""

import logging
from dataclasses import dataclass
from datetime import date

from src.blu_common.clock import Clock
from src.blu_common.enums import ContractStatus, FulfillmentStatus
from src.blu_common.errors import ImeiLockNotAllowedError, InvalidInputError
from src.blu_financing.domain.contract_status import resolve_contract_status
from src.blu_order.domain.models import Order
from src.blu_order.domain.timeline import transition_status

logger = logging.getLogger(__name__)

READY_NOTE = "Produto recebido e pronto"


@dataclass(frozen=True)
class ArrivalRecord:
    arrival_date: date
    imei: str | None = None
    battery_health: int | None = None  # percent, used/refurbished devices only
    notes: str | None = None
    ready_for_delivery: bool = False


def register_arrival(order: Order, arrival: ArrivalRecord, clock: Clock) -> Order:
    """Store arrival details; mark ready orders as awaiting pickup."""
    if arrival.battery_health is not None and not 0 <= arrival.battery_health <= 100:
        raise InvalidInputError(
            f"battery health must be between 0 and 100, got {arrival.battery_health}"
        )

    order.arrival_date = arrival.arrival_date
    order.imei = arrival.imei or order.imei
    order.battery_health = arrival.battery_health
    order.arrival_notes = arrival.notes
    order.ready_for_delivery = arrival.ready_for_delivery

    if (
        arrival.ready_for_delivery
        and order.fulfillment_status != FulfillmentStatus.AWAITING_PICKUP
    ):
        transition_status(order, FulfillmentStatus.AWAITING_PICKUP, clock, note=READY_NOTE)
    return order


def toggle_imei_lock(order: Order, today: date) -> Order:
    """Block the device of a late BluFacilita client, or release a blocked one."""
    if order.imei_blocked:
        order.imei_blocked = False
        logger.info("IMEI unblocked: order=%s", order.id)
        return order

    if not order.is_financed:
        raise ImeiLockNotAllowedError(order.id, "order is not financed")
    if not order.imei:
        raise ImeiLockNotAllowedError(order.id, "no IMEI registered")
    status = resolve_contract_status(order.installments, today, order.is_cancelled)
    if status != ContractStatus.ATRASADO:
        raise ImeiLockNotAllowedError(order.id, f"contract status is {status.value}")

    order.imei_blocked = True
    logger.info("IMEI blocked: order=%s, imei=%s", order.id, order.imei)
    return order

"""Personal dining status transitions"""

import logging
from datetime import datetime
from typing import Optional

from ... import config
from ...models import DiningStatus
from ...shared.errors import InvalidStateError

logger = logging.getLogger(__name__)

TRANSITIONS: dict[DiningStatus, frozenset] = {
    DiningStatus.PENDING: frozenset({DiningStatus.ACCEPTED, DiningStatus.DECLINED, DiningStatus.CANCELLED}),
    DiningStatus.ACCEPTED: frozenset({DiningStatus.CONFIRMED, DiningStatus.COMPLETED, DiningStatus.CANCELLED}),
    DiningStatus.CONFIRMED: frozenset({DiningStatus.COMPLETED, DiningStatus.CANCELLED}),
    DiningStatus.COMPLETED: frozenset(),
    DiningStatus.DECLINED: frozenset(),
    DiningStatus.CANCELLED: frozenset(),
}

# Timestamp column stamped when a record enters the state
_STAMPS = {
    DiningStatus.ACCEPTED: "accepted_at",
    DiningStatus.CONFIRMED: "confirmed_at",
    DiningStatus.COMPLETED: "completed_at",
    DiningStatus.CANCELLED: "cancelled_at",
}


def can_transition(current, target) -> bool:
    return DiningStatus(target) in TRANSITIONS[DiningStatus(current)]


def is_terminal(status) -> bool:
    return not TRANSITIONS[DiningStatus(status)]


def ensure_transition(current, target, message: Optional[str] = None) -> None:
    if not can_transition(current, target):
        raise InvalidStateError(
            message or f"Cannot move from {DiningStatus(current).value} to {DiningStatus(target).value}"
        )


def transition(dining, target: DiningStatus, now: datetime, reason: Optional[str] = None) -> None:
    """Move ``dining`` to ``target`` and stamp the matching timestamp"""
    ensure_transition(dining.status, target)
    previous = dining.status
    dining.status = DiningStatus(target).value
    stamp = _STAMPS.get(DiningStatus(target))
    if stamp:
        setattr(dining, stamp, now)
    if reason is not None:
        dining.cancellation_reason = reason
    logger.info(f"🔁 Personal dining {dining.id}: {previous} -> {dining.status}")


def is_expired(dining, now: datetime) -> bool:
    return (
        dining.status == DiningStatus.PENDING.value
        and dining.expires_at is not None
        and now > dining.expires_at
    )


def expire_if_due(dining, now: datetime) -> bool:
    """
    Lazy expiry: a pending invitation past ``expires_at`` is cancelled the
    moment it is touched. Returns True when the record was cancelled.
    """
    if not is_expired(dining, now):
        return False
    transition(dining, DiningStatus.CANCELLED, now, reason="Invitation expired")
    return True


def completion_split(total_bill_amount: float) -> tuple[float, float]:
    """Platform commission and diner discount for a final bill"""
    if total_bill_amount < 0:
        raise ValueError("Bill amount cannot be negative")
    commission = total_bill_amount * config.PERSONAL_DINING_COMMISSION_RATE
    discount = total_bill_amount * config.PERSONAL_DINING_DISCOUNT_RATE
    return commission, discount


def complete(dining, total_bill_amount: float, now: datetime) -> None:
    commission, discount = completion_split(total_bill_amount)
    transition(dining, DiningStatus.COMPLETED, now)
    dining.total_bill_amount = total_bill_amount
    dining.platform_commission = commission
    dining.diner_discount = discount

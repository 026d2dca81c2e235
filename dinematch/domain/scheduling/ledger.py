"""Slot accounting for events and join-request arbitration for personal dining"""

import logging
from datetime import datetime
from typing import Optional

from ...models import DiningStatus, EventStatus, JoinRequestStatus
from ...shared.errors import (
    CapacityExceededError,
    DuplicateParticipationError,
    InvalidStateError,
    NotFoundError,
)
from .lifecycle import transition

logger = logging.getLogger(__name__)

# Drafts and cancelled events take no participants
CLOSED_EVENT_STATUSES = frozenset({EventStatus.PENDING.value, EventStatus.CANCELLED.value})


def remaining_slots(capacity: int, attendee_count: int) -> int:
    return max(0, capacity - attendee_count)


def participation_for(event, profile_id: int):
    return next((p for p in event.attendees if p.profile_id == profile_id), None)


def ensure_can_join(event, profile_id: int, now: datetime) -> None:
    """Raise unless ``profile_id`` may take one of the event's slots"""
    if event.status in CLOSED_EVENT_STATUSES:
        raise InvalidStateError("Event is not open for joining")
    if event.end_date < now:
        raise InvalidStateError("Event has already ended")
    if participation_for(event, profile_id) is not None:
        raise DuplicateParticipationError("User is already participating in this event")
    if event.slots is not None and event.slots <= 0:
        raise CapacityExceededError("Event is fully booked")


def pending_request_for(dining, requester_id: int):
    return next(
        (
            r
            for r in dining.join_requests
            if r.requester_id == requester_id and r.status == JoinRequestStatus.PENDING.value
        ),
        None,
    )


def _get_pending_request(dining, requester_id: int):
    request = pending_request_for(dining, requester_id)
    if request is None:
        raise NotFoundError("Join request not found or already responded to")
    return request


def accept_join_request(dining, requester_id: int, now: datetime):
    """
    Accept one pending request: its requester becomes the guest, the
    engagement moves to accepted and every other pending request is declined.
    """
    request = _get_pending_request(dining, requester_id)
    transition(dining, DiningStatus.ACCEPTED, now)

    request.status = JoinRequestStatus.ACCEPTED.value
    request.responded_at = now
    dining.guest_id = requester_id

    declined = 0
    for other in dining.join_requests:
        if other is not request and other.status == JoinRequestStatus.PENDING.value:
            other.status = JoinRequestStatus.DECLINED.value
            other.responded_at = now
            declined += 1

    logger.info(
        f"✅ Personal dining {dining.id}: accepted request from {requester_id}, auto-declined {declined}"
    )
    return request


def decline_join_request(dining, requester_id: int, now: datetime):
    request = _get_pending_request(dining, requester_id)
    request.status = JoinRequestStatus.DECLINED.value
    request.responded_at = now
    return request


def accepted_request(dining) -> Optional[object]:
    return next((r for r in dining.join_requests if r.status == JoinRequestStatus.ACCEPTED.value), None)

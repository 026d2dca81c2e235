"""Buffered time-overlap detection between dining engagements"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ... import config
from ...models import DiningStatus

logger = logging.getLogger(__name__)


def engagement_window(dining) -> tuple[datetime, datetime]:
    """Absolute [start, end) of an engagement from its date, HH:MM time and duration"""
    start_time = datetime.strptime(dining.dining_time, "%H:%M").time()
    start = datetime.combine(dining.dining_date, start_time)
    return start, start + timedelta(minutes=dining.estimated_duration)


def windows_conflict(
    candidate: tuple[datetime, datetime],
    existing: tuple[datetime, datetime],
    buffer: timedelta,
) -> bool:
    candidate_start, candidate_end = candidate
    existing_start, existing_end = existing
    return candidate_start < existing_end + buffer and existing_start - buffer < candidate_end


def find_conflict(
    profile_id: int,
    candidate,
    existing: Iterable,
    buffer: Optional[timedelta] = None,
):
    """
    Return the first accepted engagement of ``profile_id`` that sits too close
    to ``candidate``, or None.

    Only accepted engagements where the profile is host or guest count, and
    the candidate itself is skipped so an existing record can be re-checked.
    """
    if buffer is None:
        buffer = timedelta(minutes=config.CONFLICT_BUFFER_MINUTES)

    candidate_window = engagement_window(candidate)
    for other in existing:
        if other.status != DiningStatus.ACCEPTED.value:
            continue
        if candidate.id is not None and other.id == candidate.id:
            continue
        if profile_id not in (other.host_id, other.guest_id):
            continue
        if windows_conflict(candidate_window, engagement_window(other), buffer):
            logger.info(
                f"⏰ Profile {profile_id}: engagement {candidate.id} conflicts with accepted engagement {other.id}"
            )
            return other
    return None


def has_conflict(profile_id: int, candidate, existing: Iterable, buffer: Optional[timedelta] = None) -> bool:
    return find_conflict(profile_id, candidate, existing, buffer) is not None

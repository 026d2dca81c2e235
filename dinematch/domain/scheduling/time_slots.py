"""Time-of-day slots used to filter dining listings"""

import logging
from enum import Enum

from sqlalchemy import Integer, and_, cast, func, or_

logger = logging.getLogger(__name__)


class TimeSlot(str, Enum):
    MORNING = "morning"  # 05:00 - 11:59
    AFTERNOON = "afternoon"  # 12:00 - 17:59
    NIGHT = "night"  # 18:00 - 04:59, wraps midnight


# Whole-hour ranges, low bound inclusive, high bound exclusive.
# Night is split in two because it wraps around midnight.
TIME_SLOT_HOURS = {
    TimeSlot.MORNING: [(5, 12)],
    TimeSlot.AFTERNOON: [(12, 18)],
    TimeSlot.NIGHT: [(18, 24), (0, 5)],
}


def classify(time_string: str) -> TimeSlot:
    """
    Map an HH:MM wall-clock time to its slot.

    Anything that cannot be parsed falls through to NIGHT, the same as an
    out-of-range hour. Input validation belongs to the request schemas.
    """
    try:
        hours, minutes = (int(part) for part in time_string.split(":"))
    except (AttributeError, ValueError):
        logger.warning(f"⚠️ Unparseable time {time_string!r}, defaulting to night slot")
        return TimeSlot.NIGHT

    time_decimal = hours + minutes / 60
    if 5 <= time_decimal < 12:
        return TimeSlot.MORNING
    if 12 <= time_decimal < 18:
        return TimeSlot.AFTERNOON
    return TimeSlot.NIGHT


def hour_in_slot(slot: TimeSlot, hour: int) -> bool:
    return any(low <= hour < high for low, high in TIME_SLOT_HOURS[TimeSlot(slot)])


def matches_time_slot(slot: TimeSlot, time_string: str) -> bool:
    """In-memory twin of time_slot_clause: only the hour digits are compared"""
    try:
        hour = int(time_string[:2])
    except (TypeError, ValueError):
        return False
    return hour_in_slot(slot, hour)


def time_slot_clause(slot: TimeSlot, column):
    """Build a filter for an HH:MM string column falling inside ``slot``"""
    hour = cast(func.substr(column, 1, 2), Integer)
    ranges = [and_(hour >= low, hour < high) for low, high in TIME_SLOT_HOURS[TimeSlot(slot)]]
    if len(ranges) == 1:
        return ranges[0]
    return or_(*ranges)

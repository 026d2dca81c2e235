"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """
    Validate a wall-clock time in 24h HH:MM format.

    Args:
        value: Time string such as "19:30"

    Returns:
        The same string, stripped

    Raises:
        ValueError: If the value is not a valid HH:MM time
    """
    if value is None:
        return value

    value = value.strip()
    if not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


def validate_latitude(value: Optional[float]) -> Optional[float]:
    if value is not None and not -90 <= value <= 90:
        raise ValueError("Latitude must be between -90 and 90")
    return value


def validate_longitude(value: Optional[float]) -> Optional[float]:
    if value is not None and not -180 <= value <= 180:
        raise ValueError("Longitude must be between -180 and 180")
    return value


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC, convert aware inputs"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(:[0-5]\d)?$")


def validate_time_label(value: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a wall-clock time to HH:MM.

    Accepts "HH:MM" or "HH:MM:SS" (seconds are dropped).

    Raises:
        ValueError: If the value is not a valid 24h time
    """
    if value is None:
        return value

    value = value.strip()
    if not _TIME_PATTERN.match(value):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")

    return value[:5]


def hour_label(time_label: str) -> str:
    """Bucket a HH:MM time into its hour slot ("09:30" -> "09:00")"""
    return f"{time_label[:2]}:00"


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how timestamps are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

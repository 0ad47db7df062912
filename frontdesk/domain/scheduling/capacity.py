"""
Capacity Ledger

Answers "how full is each commercial hour of a given day". Counts are computed
on demand from live appointment records and are advisory only: nothing here
reserves a slot, so two concurrent bookings can both see room and both commit.
"""

import logging
from collections import Counter
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...config import COMMERCIAL_HOURS, DEFAULT_MAX_PER_HOUR, WARNING_RATIO
from ...shared.validators import hour_label
from .repository import SchedulingRepository
from .schemas import HourCount

logger = logging.getLogger(__name__)


def is_full(count: int, max_per_hour: int) -> bool:
    return count >= max_per_hour


def is_warning(count: int, max_per_hour: int) -> bool:
    return count >= max_per_hour * WARNING_RATIO and count < max_per_hour


def build_hour_counts(
    scheduled_times: Iterable[str],
    max_per_hour: int = DEFAULT_MAX_PER_HOUR,
    hours: Iterable[str] = COMMERCIAL_HOURS,
) -> list[HourCount]:
    """
    Classify occupancy per slot from a list of HH:MM booking times.

    One entry per slot in slot order. Minutes are discarded, so a 09:30 booking
    occupies the 09:00 slot. Times outside the slots are not counted.
    """
    grouped = Counter(hour_label(t) for t in scheduled_times if t)

    return [
        HourCount(
            hour=hour,
            count=grouped.get(hour, 0),
            is_full=is_full(grouped.get(hour, 0), max_per_hour),
            is_warning=is_warning(grouped.get(hour, 0), max_per_hour),
        )
        for hour in hours
    ]


def compute_hour_counts(
    db: Session,
    service_date: Optional[date],
    max_per_hour: int = DEFAULT_MAX_PER_HOUR,
) -> list[HourCount]:
    """Per-slot occupancy for ``service_date``; empty when no date is given"""
    if service_date is None:
        return []

    scheduled_times = SchedulingRepository.get_scheduled_times(db, service_date)
    hour_counts = build_hour_counts(scheduled_times, max_per_hour)

    full_hours = [h.hour for h in hour_counts if h.is_full]
    if full_hours:
        logger.info(f"📊 {service_date}: slots at capacity ({max_per_hour}/h): {full_hours}")

    return hour_counts


def hour_status(hour_counts: list[HourCount], hour: str) -> HourCount:
    """Entry for ``hour``, or an empty one when the slot is not in the list"""
    for entry in hour_counts:
        if entry.hour == hour:
            return entry
    return HourCount(hour=hour, count=0, is_full=False, is_warning=False)

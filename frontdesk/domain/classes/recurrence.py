"""
Recurrence Generator

Computes the lesson dates and time windows of a weekly course offering:
COURSE_WEEKS lessons, one per week, starting on the first matching weekday on
or after the start date. Pure functions; room and instructor conflicts are not
checked here.
"""

from datetime import date, timedelta

from ...config import COMMERCIAL_HOURS, COURSE_WEEKS
from ...exceptions import ValidationError
from ...shared.calendar import WEEKDAYS
from ...shared.validators import validate_time_label
from .schemas import ClassOccurrence


def _weekday_index(weekday: str) -> int:
    try:
        return WEEKDAYS.index(weekday.strip().lower())
    except (ValueError, AttributeError) as e:
        raise ValidationError(f"Unknown weekday '{weekday}'") from e


def calculate_class_dates(start_date: date, weekday: str, weeks: int = COURSE_WEEKS) -> list[date]:
    """Lesson dates, 7 days apart, the first on or after ``start_date``"""
    days_ahead = (_weekday_index(weekday) - start_date.weekday()) % 7
    first = start_date + timedelta(days=days_ahead)
    return [first + timedelta(weeks=i) for i in range(weeks)]


def available_start_times(duration_hours: int) -> list[str]:
    """
    Slots a lesson of ``duration_hours`` may start at.

    One-hour lessons may use every slot. Longer lessons must end before the
    last slot so the facility closes on time: a 2-hour lesson starts no later
    than the third-to-last slot.
    """
    if duration_hours < 1:
        raise ValidationError(f"Invalid course duration: {duration_hours}h")
    if duration_hours == 1:
        return list(COMMERCIAL_HOURS)

    last_start = len(COMMERCIAL_HOURS) - 1 - duration_hours
    return list(COMMERCIAL_HOURS[: max(last_start + 1, 0)])


def end_time(start_time: str, duration_hours: int) -> str:
    """Start plus duration, minutes preserved ("09:30", 2 -> "11:30")"""
    hours, minutes = start_time.split(":")[:2]
    return f"{int(hours) + duration_hours:02d}:{minutes}"


def format_time_range(start_time: str, duration_hours: int) -> str:
    return f"{start_time} - {end_time(start_time, duration_hours)}"


def generate_occurrences(
    course_id: int,
    start_date: date,
    weekday: str,
    start_time: str,
    duration_hours: int,
) -> list[ClassOccurrence]:
    """All lessons of an offering, validated against the eligible start slots"""
    try:
        start_time = validate_time_label(start_time)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    eligible = available_start_times(duration_hours)
    if start_time not in eligible:
        raise ValidationError(
            f"A {duration_hours}h lesson cannot start at {start_time} "
            f"(allowed: {', '.join(eligible) or 'none'})"
        )

    finish = end_time(start_time, duration_hours)
    weekday = weekday.strip().lower()

    return [
        ClassOccurrence(
            course_id=course_id,
            lesson_number=number,
            lesson_date=lesson_date,
            weekday=weekday,
            start_time=start_time,
            end_time=finish,
            duration_hours=duration_hours,
        )
        for number, lesson_date in enumerate(calculate_class_dates(start_date, weekday), start=1)
    ]


def current_lesson(start_date: date, today: date, weeks: int = COURSE_WEEKS) -> int:
    """Lesson number in progress on ``today``; 0 before the course starts"""
    days_since_start = (today - start_date).days
    if days_since_start < 0:
        return 0
    return min(days_since_start // 7 + 1, weeks)

"""Weekday naming shared by service days and class offerings"""

from datetime import date

# Index matches date.weekday()
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def weekday_id(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def weekday_name(day: date) -> str:
    """Display name, e.g. "Monday" """
    return weekday_id(day).capitalize()


def format_service_day(day: date) -> str:
    """Service day label, e.g. "10/06 - Monday" """
    return f"{day.day:02d}/{day.month:02d} - {weekday_name(day)}"

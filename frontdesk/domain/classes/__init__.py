"""Class domain - Recurring course offerings"""

from .recurrence import (
    available_start_times,
    calculate_class_dates,
    current_lesson,
    end_time,
    generate_occurrences,
)
from .router import router
from .service import ClassService

__all__ = [
    "ClassService",
    "available_start_times",
    "calculate_class_dates",
    "current_lesson",
    "end_time",
    "generate_occurrences",
    "router",
]

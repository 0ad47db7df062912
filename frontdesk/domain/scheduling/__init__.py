"""Scheduling domain - Service days, hourly capacity and booking"""

from .capacity import build_hour_counts, compute_hour_counts, hour_status
from .router import router
from .service import SchedulingService

__all__ = [
    "SchedulingService",
    "build_hour_counts",
    "compute_hour_counts",
    "hour_status",
    "router",
]

"""Notification domain - Live badge counters"""

from .aggregator import WATCHED_COLLECTIONS, NotificationAggregator, compute_counts
from .router import router

__all__ = ["NotificationAggregator", "WATCHED_COLLECTIONS", "compute_counts", "router"]

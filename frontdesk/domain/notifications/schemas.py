"""Notification domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificationCounts(BaseModel):
    """Badge counters shown in the navigation"""

    crm: int = 0  # new leads from the last 24h
    appointments: int = 0  # today's no-shows
    overdue: int = 0  # overdue payments
    reception: int = 0  # confirmed today, not checked in yet


class NotificationSnapshot(BaseModel):
    counts: NotificationCounts
    is_loading: bool = False
    refreshed_at: Optional[datetime] = None

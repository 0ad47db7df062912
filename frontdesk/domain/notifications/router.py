"""Notification router - FastAPI endpoint for the navigation badge counters"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ...cache import cache
from ...config import NOTIFICATION_COUNTS_KEY
from ...database import get_db
from ...shared.validators import utcnow
from .aggregator import compute_counts
from .schemas import NotificationSnapshot

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/counts", response_model=NotificationSnapshot)
async def get_notification_counts(request: Request, db: Session = Depends(get_db)):
    """
    Live counters from the running aggregator. Without one, the snapshot the
    reconciliation job cached in Redis, and on a cache miss a one-off computation.
    """
    aggregator = getattr(request.app.state, "notification_aggregator", None)
    if aggregator is not None:
        return aggregator.snapshot()

    cached = cache.get(NOTIFICATION_COUNTS_KEY)
    if cached:
        return NotificationSnapshot.model_validate(cached)

    now = utcnow()
    return NotificationSnapshot(counts=compute_counts(db, now), refreshed_at=now)

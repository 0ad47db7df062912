"""
Notification aggregator

Keeps the four navigation counters current. Every change on a watched
collection, and a periodic reconciliation tick, recomputes all four from
scratch; nothing is applied incrementally, so late, duplicated or coalesced
notifications cannot skew the numbers.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ...config import NEW_LEAD_WINDOW_HOURS, NOTIFICATION_RECONCILE_SECONDS
from ...exceptions import DataAccessError
from ...shared.validators import utcnow
from .repository import NotificationRepository
from .schemas import NotificationCounts, NotificationSnapshot

logger = logging.getLogger(__name__)

WATCHED_COLLECTIONS = ("leads", "appointments", "payments")


def compute_counts(db: Session, now: datetime) -> NotificationCounts:
    """
    All four counters as of ``now``.

    Note: ``appointments`` counts today's no-shows, not today's appointments.
    """
    today = now.date()
    return NotificationCounts(
        crm=NotificationRepository.count_new_leads(
            db, now - timedelta(hours=NEW_LEAD_WINDOW_HOURS)
        ),
        appointments=NotificationRepository.count_no_shows(db, today),
        overdue=NotificationRepository.count_overdue_payments(db),
        reception=NotificationRepository.count_awaiting_check_in(db, today),
    )


class NotificationAggregator:
    """
    Owns its change-feed subscriptions and reconciliation thread.

    Usage:
        with NotificationAggregator(SessionLocal, feed) as aggregator:
            aggregator.counts
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        change_feed,
        reconcile_interval: float = NOTIFICATION_RECONCILE_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.change_feed = change_feed
        self.reconcile_interval = reconcile_interval
        self.clock = clock

        self._counts = NotificationCounts()
        self._refreshed_at: Optional[datetime] = None
        self._is_loading = False
        self._loaded_once = False
        self._refresh_lock = threading.Lock()
        self._unsubscribers = []
        self._stop_event = threading.Event()
        self._timer: Optional[threading.Thread] = None

    @property
    def counts(self) -> NotificationCounts:
        return self._counts.model_copy()

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def running(self) -> bool:
        return bool(self._unsubscribers) or self._timer is not None

    def snapshot(self) -> NotificationSnapshot:
        return NotificationSnapshot(
            counts=self.counts,
            is_loading=self._is_loading,
            refreshed_at=self._refreshed_at,
        )

    def refresh(self) -> NotificationCounts:
        """
        Recompute every counter.

        Raises:
            DataAccessError: the record store failed; the previous counts are kept
        """
        with self._refresh_lock:
            db = self.session_factory()
            try:
                counts = compute_counts(db, self.clock())
            finally:
                db.close()

            self._counts = counts
            self._refreshed_at = self.clock()

        logger.debug(f"🔔 Notification counts: {counts.model_dump()}")
        return counts

    def _safe_refresh(self, reason: str) -> None:
        try:
            self.refresh()
        except DataAccessError as e:
            logger.error(
                f"❌ Notification refresh ({reason}) failed, keeping previous counts: {e.message}"
            )

    def _on_change(self, change) -> None:
        self._safe_refresh(f"{change.collection} {change.operation}")

    def _reconcile_loop(self) -> None:
        while not self._stop_event.wait(self.reconcile_interval):
            self._safe_refresh("reconciliation")

    def start(self) -> "NotificationAggregator":
        if self.running:
            return self

        # Only the first load of the aggregator's lifetime reports loading
        self._is_loading = not self._loaded_once
        try:
            self.refresh()
        except DataAccessError as e:
            logger.error(f"❌ Initial notification load failed: {e.message}")
        finally:
            self._is_loading = False
            self._loaded_once = True

        for collection in WATCHED_COLLECTIONS:
            self._unsubscribers.append(self.change_feed.subscribe(collection, self._on_change))

        self._stop_event.clear()
        self._timer = threading.Thread(
            target=self._reconcile_loop, daemon=True, name="notification-reconciler"
        )
        self._timer.start()
        logger.info(
            f"🔔 Notification aggregator started (reconcile every {self.reconcile_interval}s)"
        )
        return self

    def stop(self) -> None:
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()

        self._stop_event.set()
        if self._timer is not None:
            self._timer.join(timeout=5)
            self._timer = None
        logger.info("🔔 Notification aggregator stopped")

    def __enter__(self) -> "NotificationAggregator":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

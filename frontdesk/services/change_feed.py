"""
Change feed - record change notifications by collection

Consumers subscribe to a collection (table name) and receive a ChangeEvent
after every committed insert, update or delete. Delivery is at-least-once and
may be coalesced or reordered, so consumers should recompute rather than
apply deltas.

Two implementations:
- SQLAlchemyChangeFeed: in-process, driven by session events, dispatched after commit
- RedisChangeFeed: pub/sub channels "<prefix>:<collection>", for several API processes
"""

import logging
import threading
from collections import defaultdict
from typing import Callable, Iterable, Optional, Protocol

import redis
from pydantic import BaseModel, ValidationError
from sqlalchemy import event

from ..config import REDIS_CHANGE_CHANNEL_PREFIX

logger = logging.getLogger(__name__)

PENDING_KEY = "frontdesk_pending_changes"

Handler = Callable[["ChangeEvent"], None]
Unsubscribe = Callable[[], None]


class ChangeEvent(BaseModel):
    collection: str
    operation: str  # insert | update | delete | mixed
    record_id: Optional[str] = None


class ChangeFeed(Protocol):
    def subscribe(self, collection: str, handler: Handler) -> Unsubscribe:
        """Register a handler; the returned callable removes it"""
        ...


class _HandlerRegistry:
    """Thread-safe collection -> handlers map shared by the feeds"""

    def __init__(self):
        self._handlers = defaultdict(list)
        self._lock = threading.Lock()

    def add(self, collection: str, handler: Handler) -> Unsubscribe:
        with self._lock:
            self._handlers[collection].append(handler)

        def unsubscribe():
            with self._lock:
                if handler in self._handlers[collection]:
                    self._handlers[collection].remove(handler)

        return unsubscribe

    def dispatch(self, change: ChangeEvent) -> None:
        with self._lock:
            handlers = list(self._handlers[change.collection])

        for handler in handlers:
            try:
                handler(change)
            except Exception as e:
                # One failing consumer must not starve the others
                logger.error(f"❌ Change handler failed for {change.collection}: {e}")


def _record_id(obj) -> Optional[str]:
    value = getattr(obj, "public_id", None) or getattr(obj, "id", None)
    return str(value) if value is not None else None


def coalesce_changes(changes: Iterable[ChangeEvent]) -> list:
    """
    One event per collection, in first-seen order.

    Several changes to one collection keep their operation when they all share
    it (otherwise "mixed") and their record id only when they all name one row.
    """
    grouped = {}
    for change in changes:
        grouped.setdefault(change.collection, []).append(change)

    coalesced = []
    for collection, group in grouped.items():
        operations = {change.operation for change in group}
        record_ids = {change.record_id for change in group}
        coalesced.append(
            ChangeEvent(
                collection=collection,
                operation=operations.pop() if len(operations) == 1 else "mixed",
                record_id=record_ids.pop() if len(record_ids) == 1 else None,
            )
        )
    return coalesced


class SQLAlchemyChangeFeed:
    """
    Watches every session produced by ``session_factory``.

    Changes are collected on flush and delivered only once the transaction
    commits, coalesced to one event per collection; a rollback discards them.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._registry = _HandlerRegistry()
        self._listening = False

    def start(self) -> None:
        if self._listening:
            return
        event.listen(self.session_factory, "after_flush", self._collect)
        event.listen(self.session_factory, "after_commit", self._dispatch)
        event.listen(self.session_factory, "after_rollback", self._discard)
        self._listening = True
        logger.debug("🔄 SQLAlchemy change feed listening")

    def close(self) -> None:
        if not self._listening:
            return
        event.remove(self.session_factory, "after_flush", self._collect)
        event.remove(self.session_factory, "after_commit", self._dispatch)
        event.remove(self.session_factory, "after_rollback", self._discard)
        self._listening = False

    def subscribe(self, collection: str, handler: Handler) -> Unsubscribe:
        self.start()
        return self._registry.add(collection, handler)

    def _collect(self, session, flush_context) -> None:
        pending = session.info.setdefault(PENDING_KEY, [])
        for operation, objects in (
            ("insert", session.new),
            ("update", [o for o in session.dirty if session.is_modified(o)]),
            ("delete", session.deleted),
        ):
            for obj in objects:
                collection = getattr(obj, "__tablename__", None)
                if collection:
                    pending.append(
                        ChangeEvent(
                            collection=collection,
                            operation=operation,
                            record_id=_record_id(obj),
                        )
                    )

    def _dispatch(self, session) -> None:
        pending = session.info.pop(PENDING_KEY, [])
        for change in coalesce_changes(pending):
            self._registry.dispatch(change)

    def _discard(self, session) -> None:
        session.info.pop(PENDING_KEY, None)


class RedisChangeFeed:
    """Redis pub/sub transport; each subscription runs its own listener thread"""

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        prefix: str = REDIS_CHANGE_CHANNEL_PREFIX,
    ):
        self._client = client
        self.prefix = prefix
        self._subscriptions = []
        self._lock = threading.Lock()

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            from ..cache import get_redis_client

            self._client = get_redis_client()
        return self._client

    def channel(self, collection: str) -> str:
        return f"{self.prefix}:{collection}"

    def publish(self, change: ChangeEvent) -> None:
        try:
            self.client.publish(self.channel(change.collection), change.model_dump_json())
        except redis.RedisError as e:
            logger.error(f"❌ Failed to publish change on {change.collection}: {e}")

    def subscribe(self, collection: str, handler: Handler) -> Unsubscribe:
        def on_message(message):
            try:
                change = ChangeEvent.model_validate_json(message["data"])
            except ValidationError as e:
                logger.warning(f"⚠️ Ignoring malformed change message on {collection}: {e}")
                return
            try:
                handler(change)
            except Exception as e:
                logger.error(f"❌ Change handler failed for {collection}: {e}")

        pubsub = self.client.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(**{self.channel(collection): on_message})
        thread = pubsub.run_in_thread(sleep_time=1.0, daemon=True)
        subscription = (thread, pubsub)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.info(f"📡 Subscribed to {self.channel(collection)}")

        def unsubscribe():
            with self._lock:
                if subscription not in self._subscriptions:
                    return
                self._subscriptions.remove(subscription)
            thread.stop()
            pubsub.close()

        return unsubscribe

    def close(self) -> None:
        with self._lock:
            subscriptions, self._subscriptions = self._subscriptions, []
        for thread, pubsub in subscriptions:
            thread.stop()
            pubsub.close()


def forward_changes(
    source: ChangeFeed, target: RedisChangeFeed, collections: Iterable[str]
) -> Unsubscribe:
    """Republish local changes on Redis so other processes see them"""
    handles = [source.subscribe(collection, target.publish) for collection in collections]

    def unsubscribe():
        for handle in handles:
            handle()

    return unsubscribe

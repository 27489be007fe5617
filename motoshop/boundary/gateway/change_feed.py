"""
In-process change feed.

Delivers committed-write notifications to subscribers of a collection.
A failing subscriber is logged and does not stop delivery to the others.

Dependencies: logging
System role: Realtime change notification for gateway writes
"""

import logging
import uuid
from dataclasses import dataclass, field

from motoshop.boundary.gateway.protocol import (
    ChangeCallback,
    ChangeEvent,
    Record,
    Subscription,
)

logger = logging.getLogger(__name__)


@dataclass
class _Listener:
    collection: str
    filters: Record
    callback: ChangeCallback
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def matches(self, event: ChangeEvent) -> bool:
        if event.collection != self.collection:
            return False
        if not self.filters:
            return True
        # Deletes carry no record; deliver them so caches can evict
        if event.record is None:
            return True
        return all(event.record.get(key) == value for key, value in self.filters.items())


class FeedSubscription(Subscription):
    """Subscription handle bound to a ChangeFeed listener."""

    def __init__(self, feed: "ChangeFeed", listener_id: str) -> None:
        self._feed = feed
        self._listener_id = listener_id

    def unsubscribe(self) -> None:
        self._feed.remove(self._listener_id)


class ChangeFeed:
    """Fan-out of ChangeEvents to matching listeners."""

    def __init__(self) -> None:
        self._listeners: dict[str, _Listener] = {}

    def subscribe(
        self,
        collection: str,
        filters: Record | None,
        callback: ChangeCallback,
    ) -> Subscription:
        listener = _Listener(collection=collection, filters=dict(filters or {}), callback=callback)
        self._listeners[listener.id] = listener
        logger.debug(
            "Change feed subscriber added",
            extra={"collection": collection, "listener_id": listener.id},
        )
        return FeedSubscription(self, listener.id)

    def remove(self, listener_id: str) -> None:
        self._listeners.pop(listener_id, None)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners.values()):
            if not listener.matches(event):
                continue
            try:
                listener.callback(event)
            except Exception as e:
                logger.exception(
                    "Change feed subscriber failed",
                    extra={
                        "collection": event.collection,
                        "record_id": event.record_id,
                        "listener_id": listener.id,
                        "error": str(e),
                    },
                )

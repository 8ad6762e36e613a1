# registry/realtime.py
"""
In-process change feed for registration rows.

Model signals publish a ChangeEvent after each committed write; every open
event stream owns one Subscription and re-runs its list query in the browser
when an event arrives. Events carry identifiers only, never row data.
"""
import json
import logging
import queue
import threading
from dataclasses import dataclass, field, asdict

from django.utils import timezone

logger = logging.getLogger(__name__)

INSERT = 'INSERT'
UPDATE = 'UPDATE'
DELETE = 'DELETE'


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event_type: str
    record_id: int
    # Column values a subscription may filter on, e.g. {'applicant_id': 3}
    columns: dict = field(default_factory=dict)
    occurred_at: str = field(default_factory=lambda: timezone.now().isoformat())

    def to_json(self):
        return json.dumps(asdict(self))


class Subscription:
    """A single listener scoped to one table and an optional column filter."""

    def __init__(self, feed, table, filters=None):
        self.feed = feed
        self.table = table
        self.filters = dict(filters or {})
        self._queue = queue.Queue()
        self.closed = False

    def matches(self, event):
        if event.table != self.table:
            return False
        return all(event.columns.get(column) == value for column, value in self.filters.items())

    def deliver(self, event):
        if not self.closed and self.matches(event):
            self._queue.put(event)

    def get(self, timeout=None):
        """Next event, or None if nothing arrived within timeout."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self):
        if not self.closed:
            self.closed = True
            self.feed.unsubscribe(self)

    def __repr__(self):
        return f"<Subscription {self.table} {self.filters}>"


class ChangeFeed:
    """Thread-safe fan-out of change events to open subscriptions."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions = set()

    def subscribe(self, table, **filters):
        subscription = Subscription(self, table, filters)
        with self._lock:
            self._subscriptions.add(subscription)
        logger.debug(f"Subscribed {subscription}")
        return subscription

    def unsubscribe(self, subscription):
        with self._lock:
            self._subscriptions.discard(subscription)
        logger.debug(f"Unsubscribed {subscription}")

    def publish(self, event):
        with self._lock:
            subscribers = list(self._subscriptions)
        for subscription in subscribers:
            subscription.deliver(event)
        logger.debug(f"Published {event.event_type} on {event.table} #{event.record_id} to {len(subscribers)} listener(s)")

    @property
    def subscriber_count(self):
        with self._lock:
            return len(self._subscriptions)


change_feed = ChangeFeed()


def format_sse(event=None, comment=None, retry_ms=None):
    """Encode one Server-Sent Events frame."""
    lines = []
    if retry_ms is not None:
        lines.append(f"retry: {retry_ms}")
    if comment is not None:
        lines.append(f": {comment}")
    if event is not None:
        lines.append("event: change")
        lines.append(f"id: {event.record_id}")
        lines.append(f"data: {event.to_json()}")
    return "\n".join(lines) + "\n\n"


class EventStream:
    """
    Iterable of SSE frames for one subscription, suitable as streaming
    response content. Closing the stream closes the subscription, whether
    or not iteration ever started.
    """

    def __init__(self, subscription, keepalive_seconds, retry_ms):
        self.subscription = subscription
        self.keepalive_seconds = keepalive_seconds
        self.retry_ms = retry_ms

    def __iter__(self):
        try:
            yield format_sse(retry_ms=self.retry_ms)
            while not self.subscription.closed:
                event = self.subscription.get(timeout=self.keepalive_seconds)
                if event is None:
                    yield format_sse(comment="keepalive")
                else:
                    yield format_sse(event=event)
        finally:
            self.close()

    def close(self):
        self.subscription.close()

"""Event log — bounded, lock-protected store of build records.

Thread Safety:
    Route writes finish on worker threads, so every method takes the
    ``threading.Lock`` before touching the buffer.

"""

import threading
from collections import Counter, deque
from typing import Any

from prowl.observability.events import BuildRecord


class EventLog:
    """Ring buffer of build records with simple filtering.

    Args:
        max_events: Oldest records are dropped once this many are stored.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[BuildRecord] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: BuildRecord) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        route: str | None = None,
        limit: int = 100,
    ) -> list[BuildRecord]:
        """Matching records, newest first.

        ``route`` is a substring match against the record's route (records
        without one never match a route filter).
        """
        with self._lock:
            snapshot = list(self._events)

        matches: list[BuildRecord] = []
        for event in reversed(snapshot):
            if len(matches) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if route is not None and route not in getattr(event, "route", ""):
                continue
            matches.append(event)
        return matches

    def recent(self, n: int = 20) -> list[BuildRecord]:
        """The ``n`` most recent records, oldest first."""
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def clear(self) -> int:
        """Drop every record; returns how many were dropped."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            counts = Counter(type(event).__name__ for event in self._events)
            total = len(self._events)
        return {"total": total, "max_events": self._max_events, "by_type": dict(counts)}

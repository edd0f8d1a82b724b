"""Collaborator ports: where records come from and where events go.

The engine never talks to storage or analytics directly; callers inject
implementations of these protocols.
"""

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional, Protocol, runtime_checkable

from behavior_coach.models.activity import ActivityRecord


@runtime_checkable
class ActivityRecordSource(Protocol):
    """Supplies a user's activity records already scoped to a time window."""

    def fetch(self, user_id: str, timeframe_days: int) -> list[ActivityRecord]: ...


@runtime_checkable
class EventSink(Protocol):
    """Receives fire-and-forget analytics events."""

    def emit(self, event_name: str, payload: dict[str, Any]) -> None: ...


class InMemoryActivitySource:
    """ActivityRecordSource backed by a dict, for tests and local runs.

    ``fetch`` returns the user's records whose timestamp falls within
    ``timeframe_days`` of the clock, oldest first.
    """

    def __init__(
        self,
        records: Optional[dict[str, Iterable[ActivityRecord]]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._records: dict[str, list[ActivityRecord]] = defaultdict(list)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        for user_id, user_records in (records or {}).items():
            self.add(user_id, *user_records)

    def add(self, user_id: str, *records: ActivityRecord) -> None:
        self._records[user_id].extend(records)

    def fetch(self, user_id: str, timeframe_days: int) -> list[ActivityRecord]:
        cutoff = self._clock() - timedelta(days=timeframe_days)
        window = [r for r in self._records.get(user_id, []) if r.timestamp >= cutoff]
        return sorted(window, key=lambda r: r.timestamp)


class RecordingEventSink:
    """EventSink that keeps emitted events in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self.events.append((event_name, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

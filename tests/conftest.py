"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone
from typing import Callable, Generator

import pytest
import structlog

# Keep tests on the compiled-in catalog regardless of the developer's environment
os.environ.pop("COACH_CATALOG_PATH", None)

from behavior_coach.config import get_settings  # noqa: E402
from behavior_coach.models.activity import ActivityRecord  # noqa: E402
from behavior_coach.services.catalog_service import PatternCatalog, load_catalog  # noqa: E402
from behavior_coach.services.engine import CoachingEngine  # noqa: E402
from behavior_coach.services.ports import RecordingEventSink  # noqa: E402

FIXED_NOW = datetime(2024, 6, 26, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_logging_and_settings() -> Generator[None, None, None]:
    """Undo structlog configuration and settings caching between tests."""
    get_settings.cache_clear()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_record() -> Callable[..., ActivityRecord]:
    """Factory for activity records with sensible defaults.

    Each record gets a unique id and fingerprint unless overridden, and is
    placed ``days_ago`` days before FIXED_NOW.
    """
    counter = {"n": 0}

    def _make(
        actions: int = 1,
        decisions: int = 1,
        participants: int = 2,
        duration: int = 30,
        fingerprint: str | None = None,
        content_length: int = 200,
        days_ago: float = 1,
        record_id: str | None = None,
    ) -> ActivityRecord:
        counter["n"] += 1
        n = counter["n"]
        return ActivityRecord(
            id=record_id or f"summary_{n}",
            timestamp=FIXED_NOW - timedelta(days=days_ago),
            participant_ids=frozenset(["user"] + [f"member_{i}" for i in range(1, participants)]),
            action_item_count=actions,
            decision_count=decisions,
            duration_minutes=duration,
            content_fingerprint=fingerprint if fingerprint is not None else f"fp-{n:04d}",
            content_length=content_length,
        )

    return _make


@pytest.fixture
def catalog() -> PatternCatalog:
    return load_catalog()


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def engine(catalog, event_sink) -> CoachingEngine:
    return CoachingEngine(catalog=catalog, event_sink=event_sink, clock=lambda: FIXED_NOW)


@pytest.fixture
def sparse_week(make_record) -> list[ActivityRecord]:
    """10 records over 14 days: 8 without action items, no decisions, 9 solo."""
    records = []
    for i in range(10):
        records.append(
            make_record(
                actions=1 if i < 2 else 0,
                decisions=0,
                participants=3 if i == 0 else 1,
                days_ago=i * 1.4,
            )
        )
    return records


@pytest.fixture
def overloaded_week(make_record) -> list[ActivityRecord]:
    """30 records in 7 days, 3 action items and 1 decision each, half collaborative."""
    return [
        make_record(
            actions=3,
            decisions=1,
            participants=2 if i % 2 == 0 else 1,
            days_ago=i * 0.2,
        )
        for i in range(30)
    ]

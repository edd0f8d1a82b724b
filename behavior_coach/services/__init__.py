"""Services package exports."""

from behavior_coach.services.catalog_service import PatternCatalog, get_pattern, load_catalog
from behavior_coach.services.detector_service import detect
from behavior_coach.services.digest_service import compile_digest, week_bounds
from behavior_coach.services.engine import CoachingEngine
from behavior_coach.services.logging_service import configure_logging, get_logger, log_analysis_summary
from behavior_coach.services.metrics_service import compute_metrics
from behavior_coach.services.ports import (
    ActivityRecordSource,
    EventSink,
    InMemoryActivitySource,
    RecordingEventSink,
)
from behavior_coach.services.recommendation_service import immediate_suggestions, synthesize
from behavior_coach.services.scoring_service import aggregate

__all__ = [
    "ActivityRecordSource",
    "CoachingEngine",
    "EventSink",
    "InMemoryActivitySource",
    "PatternCatalog",
    "RecordingEventSink",
    "aggregate",
    "compile_digest",
    "compute_metrics",
    "configure_logging",
    "detect",
    "get_logger",
    "get_pattern",
    "immediate_suggestions",
    "load_catalog",
    "log_analysis_summary",
    "synthesize",
    "week_bounds",
]

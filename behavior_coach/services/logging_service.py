"""Structured logging configuration with redaction support."""

import logging
import sys
from typing import Any, Dict

import structlog

from behavior_coach.models.analysis import BehaviorAnalysis


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Redact fields that could identify people or meeting content.

    Redacts:
    - participant lists
    - content fingerprints
    - email addresses
    - Any field containing 'secret' or 'password'
    """
    sensitive_keys = {
        "participant",
        "fingerprint",
        "email",
        "secret",
        "password",
    }

    for key in list(event_dict.keys()):
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in sensitive_keys):
            event_dict[key] = "REDACTED"

    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog for JSON output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog logger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger


def log_analysis_summary(analysis: BehaviorAnalysis) -> None:
    """Emit one summary event for a completed analysis run."""
    logger = get_logger("behavior_coach.analysis")
    logger.info(
        "behavior_analysis_completed",
        user_id=analysis.user_id,
        timeframe_days=analysis.timeframe_days,
        catalog_version=analysis.catalog_version,
        total_records=analysis.metrics.total_records,
        detected_patterns=[d.pattern_id for d in analysis.detections],
        recommendation_count=len(analysis.recommendations),
        overall_score=analysis.overall_score,
    )

"""Pattern detector: evaluates catalog rules against metrics and records."""

from datetime import datetime, timezone
from typing import Optional, Sequence
from uuid import NAMESPACE_URL, uuid5

import structlog

from behavior_coach.config import get_settings
from behavior_coach.errors import RuleEvaluationWarning
from behavior_coach.models.activity import ActivityRecord
from behavior_coach.models.analysis import Detection, Impact
from behavior_coach.models.metrics import BehaviorMetrics
from behavior_coach.models.pattern import PatternDefinition, Severity
from behavior_coach.services.catalog_service import PatternCatalog
from behavior_coach.services.signals import resolve_signal

logger = structlog.get_logger(__name__)

NEGATIVE_SEVERITIES = frozenset({Severity.HIGH, Severity.CRITICAL})


def impact_for(severity: Severity) -> Impact:
    """Map pattern severity to impact. Low severities are neutral, never positive."""
    return Impact.NEGATIVE if severity in NEGATIVE_SEVERITIES else Impact.NEUTRAL


def detection_id(user_id: str, pattern_id: str, detected_at: datetime) -> str:
    """Deterministic detection id for (user, pattern, run time)."""
    return str(uuid5(NAMESPACE_URL, f"behavior-coach:detection:{user_id}:{pattern_id}:{detected_at.isoformat()}"))


def evaluate_rule(
    pattern: PatternDefinition,
    records: Sequence[ActivityRecord],
    metrics: BehaviorMetrics,
) -> bool:
    """Evaluate the conjunction of a pattern's conditions.

    Raises:
        RuleEvaluationWarning: If any referenced signal cannot be resolved.
    """
    for condition in pattern.conditions:
        value = resolve_signal(condition.signal, records, metrics)
        if not condition.operator.func(value, condition.threshold):
            return False
    return True


def build_evidence(
    pattern: PatternDefinition,
    records: Sequence[ActivityRecord],
    metrics: BehaviorMetrics,
) -> list[str]:
    """Render the pattern's evidence templates from signal values."""
    evidence = []
    for item in pattern.evidence:
        value = resolve_signal(item.signal, records, metrics)
        try:
            evidence.append(item.render(value))
        except (ValueError, KeyError, IndexError) as e:
            raise RuleEvaluationWarning(
                f"Evidence template for {item.signal} failed: {e}", signal=item.signal
            ) from e
    return evidence


def detect(
    records: Sequence[ActivityRecord],
    metrics: BehaviorMetrics,
    catalog: PatternCatalog,
    user_id: str = "",
    detected_at: Optional[datetime] = None,
    confidence: Optional[float] = None,
) -> list[Detection]:
    """Evaluate every active catalog pattern and return detections in catalog order.

    Patterns are independent: several may fire in one run and none suppresses
    another. A pattern whose rule or evidence cannot be evaluated is logged
    and treated as not detected; the remaining patterns still run.

    Args:
        records: Activity records for the window.
        metrics: Metrics computed from the same records.
        catalog: Pattern catalog to evaluate.
        user_id: Owner of the records, used for detection ids.
        detected_at: Run timestamp (defaults to now, UTC).
        confidence: Confidence assigned to rule matches (defaults to settings).

    Returns:
        Detections for every matching pattern.
    """
    detected_at = detected_at or datetime.now(timezone.utc)
    if confidence is None:
        # Boolean rules carry a fixed baseline until graded scoring exists.
        confidence = get_settings().detection_confidence

    detections: list[Detection] = []
    for pattern in catalog.active_patterns():
        try:
            if not evaluate_rule(pattern, records, metrics):
                continue
            evidence = build_evidence(pattern, records, metrics)
        except RuleEvaluationWarning as e:
            logger.warning(
                "rule_evaluation_warning",
                pattern_id=pattern.id,
                signal=e.signal,
                reason=str(e),
            )
            continue

        detection = Detection(
            id=detection_id(user_id, pattern.id, detected_at),
            pattern_id=pattern.id,
            severity=pattern.severity,
            confidence=confidence,
            evidence=tuple(evidence),
            impact=impact_for(pattern.severity),
            detected_at=detected_at,
        )
        detections.append(detection)

        logger.info(
            "pattern_detected",
            user_id=user_id,
            pattern_id=pattern.id,
            severity=pattern.severity.value,
            impact=detection.impact.value,
        )

    return detections

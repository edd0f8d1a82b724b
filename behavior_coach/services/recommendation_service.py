"""Recommendation synthesizer: turns detections into actionable coaching."""

from typing import Optional, Sequence
from uuid import NAMESPACE_URL, uuid5

import structlog

from behavior_coach.config import get_settings
from behavior_coach.models.analysis import (
    Detection,
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
)
from behavior_coach.models.metrics import BehaviorMetrics
from behavior_coach.models.pattern import PatternCategory, PatternDefinition, Severity
from behavior_coach.services.catalog_service import PatternCatalog

logger = structlog.get_logger(__name__)

PRIORITY_BY_SEVERITY: dict[Severity, Priority] = {
    Severity.CRITICAL: Priority.URGENT,
    Severity.HIGH: Priority.HIGH,
    Severity.MEDIUM: Priority.MEDIUM,
    Severity.LOW: Priority.MEDIUM,
}

EXPECTED_IMPACT_BY_CATEGORY: dict[PatternCategory, str] = {
    PatternCategory.PRODUCTIVITY: "Improve meeting efficiency and output quality",
    PatternCategory.COLLABORATION: "Enhance team alignment and communication",
    PatternCategory.DECISION_MAKING: "Accelerate decision-making and reduce ambiguity",
    PatternCategory.FOLLOW_THROUGH: "Increase accountability and task completion",
    PatternCategory.ENGAGEMENT: "Improve overall meeting effectiveness",
}

URGENT_PRIORITIES = frozenset({Priority.HIGH, Priority.URGENT})


def recommendation_id(detection: Detection) -> str:
    return str(uuid5(NAMESPACE_URL, f"behavior-coach:recommendation:{detection.id}"))


def expected_impact_for(pattern: PatternDefinition) -> str:
    return pattern.expected_impact or EXPECTED_IMPACT_BY_CATEGORY[pattern.category]


def build_recommendation(detection: Detection, pattern: PatternDefinition) -> Recommendation:
    """Build the single recommendation for one detection."""
    suggestion = pattern.suggestion
    return Recommendation(
        id=recommendation_id(detection),
        source_detection_id=detection.id,
        pattern_id=pattern.id,
        type=(
            RecommendationType.IMMEDIATE
            if detection.impact == Impact.NEGATIVE
            else RecommendationType.WEEKLY
        ),
        priority=PRIORITY_BY_SEVERITY[pattern.severity],
        title=suggestion.title,
        description=suggestion.message,
        expected_impact=expected_impact_for(pattern),
        action_steps=pattern.action_steps,
        resources=(suggestion.action_url,) if suggestion.action_url else (),
        tracking_metric=pattern.tracking_metric,
    )


def synthesize(
    detections: Sequence[Detection],
    metrics: BehaviorMetrics,
    catalog: PatternCatalog,
) -> list[Recommendation]:
    """Map each detection to exactly one recommendation, preserving order.

    No cross-detection deduplication happens here; a post-pass keyed by
    ``pattern_id`` is the place to add it.
    """
    recommendations: list[Recommendation] = []
    for detection in detections:
        pattern = catalog.get(detection.pattern_id)
        if pattern is None:
            logger.warning(
                "recommendation_pattern_missing",
                pattern_id=detection.pattern_id,
                detection_id=detection.id,
            )
            continue
        recommendations.append(build_recommendation(detection, pattern))

    logger.debug(
        "recommendations_synthesized",
        count=len(recommendations),
        total_records=metrics.total_records,
    )
    return recommendations


def immediate_suggestions(
    recommendations: Sequence[Recommendation],
    limit: Optional[int] = None,
) -> list[Recommendation]:
    """Immediate, high-or-urgent recommendations for in-app display."""
    if limit is None:
        limit = get_settings().max_immediate_suggestions
    selected = [
        r
        for r in recommendations
        if r.type == RecommendationType.IMMEDIATE and r.priority in URGENT_PRIORITIES
    ]
    return selected[:limit]

"""Digest compiler: weekly rollup of an analysis for delivery collaborators."""

from datetime import date, timedelta
from typing import Optional

import structlog

from behavior_coach.config import get_settings
from behavior_coach.errors import InvalidInputError
from behavior_coach.models.analysis import (
    BehaviorAnalysis,
    Impact,
    Recommendation,
    RecommendationType,
)
from behavior_coach.models.digest import CoachingDigest
from behavior_coach.services.catalog_service import PatternCatalog
from behavior_coach.services.recommendation_service import URGENT_PRIORITIES

logger = structlog.get_logger(__name__)

MAX_FOCUS_AREAS = 3
FOCUS_SCORE_THRESHOLD = 70
GENERIC_FOCUS = "Focus on meeting effectiveness"

# (metric field or "overall_score", strictly-greater-than threshold, achievement)
ACHIEVEMENT_RULES: list[tuple[str, float, str]] = [
    ("action_items_per_record", 2.0, "Strong action item generation"),
    ("collaboration_score", 0.7, "Excellent team collaboration"),
    ("overall_score", 80, "High overall productivity score"),
]


def week_bounds(today: date) -> tuple[date, date]:
    """Return the Sunday-to-Saturday week containing ``today``."""
    offset = (today.weekday() + 1) % 7
    week_start = today - timedelta(days=offset)
    return week_start, week_start + timedelta(days=6)


def _achievements(analysis: BehaviorAnalysis) -> list[str]:
    achievements = []
    for field, threshold, label in ACHIEVEMENT_RULES:
        if field == "overall_score":
            value = analysis.overall_score
        else:
            value = getattr(analysis.metrics, field)
        if value > threshold:
            achievements.append(label)
    return achievements


def _improvement_areas(analysis: BehaviorAnalysis, catalog: PatternCatalog) -> list[str]:
    areas = []
    for detection in analysis.detections:
        if detection.impact != Impact.NEGATIVE:
            continue
        pattern = catalog.get(detection.pattern_id)
        if pattern is not None:
            areas.append(pattern.name)
    return areas


def _key_metrics(analysis: BehaviorAnalysis) -> dict[str, float]:
    metrics = analysis.metrics
    return {
        "Meetings This Week": metrics.total_records,
        "Action Items per Meeting": round(metrics.action_items_per_record, 1),
        "Collaboration Score": round(metrics.collaboration_score * 100),
        "Overall Score": analysis.overall_score,
    }


def _digest_recommendations(analysis: BehaviorAnalysis) -> list[Recommendation]:
    return [
        r
        for r in analysis.recommendations
        if r.type == RecommendationType.WEEKLY or r.priority in URGENT_PRIORITIES
    ]


def _next_week_focus(
    analysis: BehaviorAnalysis, catalog: PatternCatalog, max_focus_areas: int
) -> list[str]:
    limit = min(max_focus_areas, MAX_FOCUS_AREAS)

    focus: list[str] = []
    for detection in analysis.detections:
        pattern = catalog.get(detection.pattern_id)
        if pattern is not None and pattern.focus_phrase not in focus:
            focus.append(pattern.focus_phrase)
    focus = focus[:limit]

    if analysis.overall_score < FOCUS_SCORE_THRESHOLD and len(focus) < limit:
        if GENERIC_FOCUS not in focus:
            focus.append(GENERIC_FOCUS)

    return focus


def compile_digest(
    analysis: BehaviorAnalysis,
    week_start: date,
    week_end: date,
    catalog: PatternCatalog,
    max_focus_areas: Optional[int] = None,
) -> CoachingDigest:
    """Assemble the weekly coaching digest for one analysis.

    ``max_focus_areas`` defaults to the process settings and never exceeds 3.

    Raises:
        InvalidInputError: If ``week_end`` precedes ``week_start``.
    """
    if week_end < week_start:
        raise InvalidInputError(f"week_end {week_end} is before week_start {week_start}")
    if max_focus_areas is None:
        max_focus_areas = get_settings().max_focus_areas

    digest = CoachingDigest(
        user_id=analysis.user_id,
        week_start=week_start,
        week_end=week_end,
        achievements=tuple(_achievements(analysis)),
        improvement_areas=tuple(_improvement_areas(analysis, catalog)),
        key_metrics=_key_metrics(analysis),
        recommendations=tuple(_digest_recommendations(analysis)),
        next_week_focus=tuple(_next_week_focus(analysis, catalog, max_focus_areas)),
    )

    logger.info(
        "coaching_digest_compiled",
        user_id=analysis.user_id,
        week_start=week_start.isoformat(),
        improvement_areas=len(digest.improvement_areas),
        recommendations=len(digest.recommendations),
    )
    return digest

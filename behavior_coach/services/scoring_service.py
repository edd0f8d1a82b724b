"""Score aggregator: folds metrics and detections into one 0-100 score."""

from typing import Sequence

from behavior_coach.models.analysis import Detection, Impact
from behavior_coach.models.metrics import BehaviorMetrics
from behavior_coach.models.pattern import Severity

BASE_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100

SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 15,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}

# (metric field, strictly-greater-than threshold, bonus)
METRIC_BONUSES: list[tuple[str, float, int]] = [
    ("action_items_per_record", 2.0, 5),
    ("decisions_per_record", 1.0, 5),
    ("collaboration_score", 0.7, 5),
]


def severity_penalty(detection: Detection) -> int:
    if detection.impact != Impact.NEGATIVE:
        return 0
    return SEVERITY_PENALTIES[detection.severity]


def aggregate(metrics: BehaviorMetrics, detections: Sequence[Detection]) -> int:
    """Compute the overall behavior score.

    Starts at 100, subtracts a severity-indexed penalty per negative
    detection, adds bonuses for strong metrics and clamps to [0, 100].
    """
    score = BASE_SCORE
    score -= sum(severity_penalty(d) for d in detections)

    for field, threshold, bonus in METRIC_BONUSES:
        if getattr(metrics, field) > threshold:
            score += bonus

    return max(MIN_SCORE, min(MAX_SCORE, score))

"""Metrics calculator: derives behavior metrics from a window of activity records.

The caller owns time-window selection; records arrive already scoped, so
everything here is a pure function of its input.
"""

from collections import Counter
from typing import Optional, Sequence

from behavior_coach.config import get_settings
from behavior_coach.models.activity import ActivityRecord
from behavior_coach.models.metrics import BehaviorMetrics


def fingerprint_prefix(record: ActivityRecord, prefix_length: int) -> str:
    return record.content_fingerprint[:prefix_length]


def _fingerprinted(records: Sequence[ActivityRecord]) -> list[ActivityRecord]:
    return [r for r in records if r.content_fingerprint]


def distinct_fingerprint_ratio(
    records: Sequence[ActivityRecord], prefix_length: Optional[int] = None
) -> float:
    """Fraction of records carrying a distinct fingerprint prefix.

    A record without a fingerprint counts as distinct, since there is
    nothing to compare it against.
    """
    if not records:
        return 0.0
    if prefix_length is None:
        prefix_length = get_settings().fingerprint_prefix_length
    fingerprinted = _fingerprinted(records)
    distinct = {fingerprint_prefix(r, prefix_length) for r in fingerprinted}
    unfingerprinted = len(records) - len(fingerprinted)
    return (len(distinct) + unfingerprinted) / len(records)


def fingerprint_similarity(
    records: Sequence[ActivityRecord], prefix_length: Optional[int] = None
) -> float:
    """Fraction of records whose fingerprint prefix is shared with another record.

    Records without a fingerprint are never counted as shared.
    """
    if not records:
        return 0.0
    if prefix_length is None:
        prefix_length = get_settings().fingerprint_prefix_length
    counts = Counter(fingerprint_prefix(r, prefix_length) for r in _fingerprinted(records))
    shared = sum(n for n in counts.values() if n > 1)
    return shared / len(records)


def compute_metrics(
    records: Sequence[ActivityRecord],
    prefix_length: Optional[int] = None,
    length_norm: Optional[float] = None,
) -> BehaviorMetrics:
    """Compute behavior metrics for an already-windowed list of records.

    Empty input yields zero-valued metrics rather than an error.

    Args:
        records: Activity records for the analysis window.
        prefix_length: Fingerprint prefix length for the variety and similarity ratios.
        length_norm: Content length at which the engagement length proxy saturates.

    Returns:
        BehaviorMetrics for the window.
    """
    total = len(records)
    if total == 0:
        return BehaviorMetrics()

    settings = get_settings()
    if prefix_length is None:
        prefix_length = settings.fingerprint_prefix_length
    if length_norm is None:
        length_norm = settings.engagement_length_norm

    total_actions = sum(r.action_item_count for r in records)
    total_decisions = sum(r.decision_count for r in records)
    with_follow_up = sum(1 for r in records if r.action_item_count > 0)
    collaborative = sum(1 for r in records if r.is_collaborative)
    avg_length = sum(r.content_length for r in records) / total
    avg_duration = sum(r.duration_minutes for r in records) / total

    # Rough proxy: summary length plus variety of content, not semantic engagement.
    variety = distinct_fingerprint_ratio(records, prefix_length)
    engagement = 0.5 * min(1.0, avg_length / length_norm) + 0.5 * variety

    return BehaviorMetrics(
        total_records=total,
        decisions_per_record=total_decisions / total,
        action_items_per_record=total_actions / total,
        follow_up_rate=with_follow_up / total,
        collaboration_score=collaborative / total,
        engagement_score=min(1.0, engagement),
        distinct_fingerprint_ratio=variety,
        fingerprint_similarity=fingerprint_similarity(records, prefix_length),
        average_duration_minutes=avg_duration,
    )

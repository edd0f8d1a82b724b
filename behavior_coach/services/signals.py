"""Named numeric signals that catalog rules and evidence templates may reference.

Every BehaviorMetrics field is a signal; the remaining signals are counted
directly from the window's records.
"""

import math
from typing import Callable, Sequence

from behavior_coach.errors import RuleEvaluationWarning
from behavior_coach.models.activity import ActivityRecord
from behavior_coach.models.metrics import METRIC_FIELDS, BehaviorMetrics

SignalFn = Callable[[Sequence[ActivityRecord], BehaviorMetrics], float]


def _metric(field: str) -> SignalFn:
    def read(records: Sequence[ActivityRecord], metrics: BehaviorMetrics) -> float:
        return getattr(metrics, field)

    return read


SIGNALS: dict[str, SignalFn] = {field: _metric(field) for field in sorted(METRIC_FIELDS)}
SIGNALS.update(
    {
        "records_without_action_items": lambda records, metrics: sum(
            1 for r in records if r.action_item_count == 0
        ),
        "records_without_decisions": lambda records, metrics: sum(
            1 for r in records if r.decision_count == 0
        ),
        "solo_records": lambda records, metrics: sum(
            1 for r in records if not r.is_collaborative
        ),
    }
)


def is_known_signal(name: str) -> bool:
    return name in SIGNALS


def resolve_signal(
    name: str,
    records: Sequence[ActivityRecord],
    metrics: BehaviorMetrics,
) -> float:
    """Resolve a signal to a finite number.

    Raises:
        RuleEvaluationWarning: If the signal is unknown, raises, or yields a
            missing or non-finite value.
    """
    fn = SIGNALS.get(name)
    if fn is None:
        raise RuleEvaluationWarning(f"Unknown signal: {name}", signal=name)

    try:
        value = fn(records, metrics)
    except Exception as e:
        raise RuleEvaluationWarning(f"Signal {name} failed: {e}", signal=name) from e

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RuleEvaluationWarning(
            f"Signal {name} produced a non-numeric value: {value!r}", signal=name
        )
    if not math.isfinite(value):
        raise RuleEvaluationWarning(f"Signal {name} is not finite: {value}", signal=name)
    return value

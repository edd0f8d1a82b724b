"""Models package exports."""

from behavior_coach.models.activity import ActivityRecord
from behavior_coach.models.analysis import (
    BehaviorAnalysis,
    Detection,
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
)
from behavior_coach.models.digest import CoachingDigest
from behavior_coach.models.interaction import CoachingInteraction, InteractionAction
from behavior_coach.models.metrics import METRIC_FIELDS, BehaviorMetrics
from behavior_coach.models.pattern import (
    ComparisonOperator,
    EvidenceTemplate,
    PatternCategory,
    PatternDefinition,
    RuleCondition,
    Severity,
    SuggestionTemplate,
)

__all__ = [
    "ActivityRecord",
    "BehaviorAnalysis",
    "BehaviorMetrics",
    "CoachingDigest",
    "CoachingInteraction",
    "ComparisonOperator",
    "Detection",
    "EvidenceTemplate",
    "Impact",
    "InteractionAction",
    "METRIC_FIELDS",
    "PatternCategory",
    "PatternDefinition",
    "Priority",
    "Recommendation",
    "RecommendationType",
    "RuleCondition",
    "Severity",
    "SuggestionTemplate",
]

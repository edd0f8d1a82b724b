"""Behavioral pattern detection and coaching recommendation engine."""

from behavior_coach.errors import (
    CatalogConfigurationError,
    CoachingEngineError,
    InvalidInputError,
    RuleEvaluationWarning,
)
from behavior_coach.services.engine import CoachingEngine

__version__ = "1.0.0"

__all__ = [
    "CatalogConfigurationError",
    "CoachingEngine",
    "CoachingEngineError",
    "InvalidInputError",
    "RuleEvaluationWarning",
]

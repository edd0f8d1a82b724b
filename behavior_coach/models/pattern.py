"""Pattern catalog models: declarative definitions of detectable behaviors."""

import operator
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from behavior_coach.models.metrics import METRIC_FIELDS


class PatternCategory(str, Enum):
    """Behavioral area a pattern belongs to."""

    PRODUCTIVITY = "productivity"
    ENGAGEMENT = "engagement"
    COLLABORATION = "collaboration"
    DECISION_MAKING = "decision_making"
    FOLLOW_THROUGH = "follow_through"


class Severity(str, Enum):
    """How strongly a detected pattern weighs on the user's score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComparisonOperator(str, Enum):
    """Comparison applied between a signal value and a rule threshold."""

    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "=="
    NE = "!="

    @property
    def func(self) -> Callable[[float, float], bool]:
        return _OPERATOR_FUNCS[self]


_OPERATOR_FUNCS = {
    ComparisonOperator.LT: operator.lt,
    ComparisonOperator.LE: operator.le,
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.GE: operator.ge,
    ComparisonOperator.EQ: operator.eq,
    ComparisonOperator.NE: operator.ne,
}


class RuleCondition(BaseModel):
    """One clause of a detection rule: ``signal <operator> threshold``."""

    model_config = ConfigDict(frozen=True)

    signal: str = Field(..., min_length=1)
    operator: ComparisonOperator
    threshold: float

    def describe(self) -> str:
        return f"{self.signal} {self.operator.value} {self.threshold:g}"


class EvidenceTemplate(BaseModel):
    """Formats one signal value into a human-readable justification.

    ``template`` is a ``str.format`` pattern with a single ``value`` field,
    e.g. ``"{value:.1f} action items per meeting"``.
    """

    model_config = ConfigDict(frozen=True)

    signal: str = Field(..., min_length=1)
    template: str

    @field_validator("template")
    @classmethod
    def template_has_value(cls, v: str) -> str:
        if "{value" not in v:
            raise ValueError("evidence template must reference {value}")
        return v

    def render(self, value: float) -> str:
        return self.template.format(value=value)


class SuggestionTemplate(BaseModel):
    """User-facing coaching copy attached to a pattern."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    action_text: Optional[str] = None
    action_url: Optional[str] = None


class PatternDefinition(BaseModel):
    """A catalog entry. One record carries every per-pattern behavior.

    The rule is the conjunction of ``conditions``; evidence, action steps,
    the focus phrase and the tracking metric live here too, so adding a
    pattern never touches detector, synthesizer or digest code.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: PatternCategory
    severity: Severity
    timeframe_days: int = Field(..., gt=0)
    conditions: tuple[RuleCondition, ...] = Field(..., min_length=1)
    evidence: tuple[EvidenceTemplate, ...] = Field(..., min_length=1, max_length=3)
    suggestion: SuggestionTemplate
    action_steps: tuple[str, ...] = Field(..., min_length=2, max_length=4)
    tracking_metric: str
    focus_phrase: str = Field(..., min_length=1)
    expected_impact: Optional[str] = None
    is_active: bool = True

    @field_validator("tracking_metric")
    @classmethod
    def tracking_metric_is_metric(cls, v: str) -> str:
        if v not in METRIC_FIELDS:
            raise ValueError(f"tracking_metric must be one of {sorted(METRIC_FIELDS)}")
        return v

    @field_validator("action_steps")
    @classmethod
    def action_steps_not_blank(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if any(not step.strip() for step in v):
            raise ValueError("action steps cannot be blank")
        return v

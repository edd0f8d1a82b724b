"""Analysis models: detections, recommendations and the per-run aggregate."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from behavior_coach.models.metrics import BehaviorMetrics
from behavior_coach.models.pattern import Severity


class Impact(str, Enum):
    """Direction a detected pattern pushes the user's behavior."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class RecommendationType(str, Enum):
    """Delivery cadence of a recommendation."""

    IMMEDIATE = "immediate"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Priority(str, Enum):
    """Recommendation priority, derived from pattern severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Detection(BaseModel):
    """Evidence that a catalog pattern matched a user's data for one run."""

    model_config = ConfigDict(frozen=True)

    id: str
    pattern_id: str
    severity: Severity
    confidence: float = Field(..., ge=0.0, le=1.0)
    evidence: tuple[str, ...] = ()
    impact: Impact
    detected_at: datetime


class Recommendation(BaseModel):
    """An actionable coaching suggestion."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_detection_id: Optional[str] = None
    pattern_id: Optional[str] = None
    type: RecommendationType
    priority: Priority
    title: str
    description: str
    expected_impact: str
    action_steps: tuple[str, ...] = Field(..., min_length=1)
    resources: tuple[str, ...] = ()
    tracking_metric: str


class BehaviorAnalysis(BaseModel):
    """Result of one synchronous analysis run for one user."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    analyzed_at: datetime
    timeframe_days: int = Field(..., gt=0)
    catalog_version: str
    metrics: BehaviorMetrics
    detections: tuple[Detection, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    overall_score: int = Field(..., ge=0, le=100)

    @property
    def negative_detections(self) -> list[Detection]:
        return [d for d in self.detections if d.impact == Impact.NEGATIVE]

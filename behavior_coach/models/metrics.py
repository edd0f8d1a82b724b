"""Behavior metrics derived from one analysis window."""

from pydantic import BaseModel, ConfigDict, Field


class BehaviorMetrics(BaseModel):
    """Per-window metrics. Recomputable from records, never the source of truth."""

    model_config = ConfigDict(frozen=True)

    total_records: int = Field(default=0, ge=0)
    decisions_per_record: float = Field(default=0.0, ge=0.0)
    action_items_per_record: float = Field(default=0.0, ge=0.0)
    follow_up_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    collaboration_score: float = Field(default=0.0, ge=0.0, le=1.0)
    engagement_score: float = Field(default=0.0, ge=0.0, le=1.0)
    distinct_fingerprint_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    fingerprint_similarity: float = Field(default=0.0, ge=0.0, le=1.0)
    average_duration_minutes: float = Field(default=0.0, ge=0.0)


METRIC_FIELDS: frozenset[str] = frozenset(BehaviorMetrics.model_fields)

"""Coaching interaction event models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class InteractionAction(str, Enum):
    """User response to a delivered recommendation."""

    VIEWED = "viewed"
    DISMISSED = "dismissed"
    ACTED_ON = "acted_on"


class CoachingInteraction(BaseModel):
    """A user's response to a recommendation, emitted to the event sink."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str = Field(..., min_length=1)
    recommendation_id: str = Field(..., min_length=1)
    action: InteractionAction
    context: dict = Field(default_factory=dict)
    occurred_at: datetime

"""Weekly coaching digest model."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from behavior_coach.models.analysis import Recommendation


class CoachingDigest(BaseModel):
    """Weekly rollup handed to the delivery collaborator (email/Slack)."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    week_start: date
    week_end: date
    achievements: tuple[str, ...] = ()
    improvement_areas: tuple[str, ...] = ()
    key_metrics: dict[str, float] = Field(default_factory=dict)
    recommendations: tuple[Recommendation, ...] = ()
    next_week_focus: tuple[str, ...] = Field(default=(), max_length=3)

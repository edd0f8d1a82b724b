"""Activity record model: one analyzed interaction supplied by the summarization pipeline."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ActivityRecord(BaseModel):
    """Structured, non-content metadata for one meeting.

    Attributes:
        id: Unique record identifier
        timestamp: When the meeting took place
        participant_ids: Participants (the engine rejects empty sets)
        action_item_count: Action items captured in the summary
        decision_count: Decisions captured in the summary
        duration_minutes: Meeting length
        content_fingerprint: Opaque hash, only ever compared for similarity
        content_length: Character length of the summary, used as a length proxy
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    timestamp: datetime
    participant_ids: frozenset[str]
    action_item_count: int = Field(default=0, ge=0)
    decision_count: int = Field(default=0, ge=0)
    duration_minutes: int = Field(default=0, ge=0)
    content_fingerprint: str = ""
    content_length: int = Field(default=0, ge=0)

    @property
    def is_collaborative(self) -> bool:
        return len(self.participant_ids) > 1

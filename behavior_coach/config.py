"""Engine configuration using Pydantic settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (prefix ``COACH_``)."""

    # Logging
    log_level: str = "INFO"

    # Pattern catalog
    catalog_path: Optional[str] = None  # JSON catalog; compiled-in default when unset

    # Analysis windows
    default_timeframe_days: int = Field(default=14, gt=0)
    digest_timeframe_days: int = Field(default=7, gt=0)

    # Detection
    detection_confidence: float = Field(default=0.8, ge=0.0, le=1.0)

    # Engagement proxy
    fingerprint_prefix_length: int = Field(default=50, gt=0)
    engagement_length_norm: float = Field(default=200.0, gt=0)  # chars at which the length proxy saturates

    # Digest / suggestions
    max_focus_areas: int = Field(default=3, ge=0)
    max_immediate_suggestions: int = Field(default=3, ge=0)

    class Config:
        env_prefix = "COACH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

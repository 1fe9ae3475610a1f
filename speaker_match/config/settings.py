"""Matcher settings using Pydantic."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from speaker_match.models import OwnerIdentity


class MatcherSettings(BaseSettings):
    """Speaker matching configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPEAKER_MATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Speech timeline correlation
    timeline_tolerance_ms: int = Field(default=2000, ge=0)
    timeline_min_votes: int = Field(default=2, ge=1)
    timeline_high_confidence_votes: int = Field(default=5, ge=1)

    # Company context: domains of these providers say nothing about an employer
    free_email_providers: list[str] = Field(
        default_factory=lambda: [
            "gmail", "googlemail", "yahoo", "hotmail", "outlook", "live", "aol", "icloud",
        ]
    )

    # Heuristic fallback
    # Earliest speaker -> host; when off, the most talkative speaker gets the host instead
    first_speaker_is_host: bool = True
    # Two labels left for two participants: place the host on the earliest speaker
    # instead of the alphabetical pairing (still flagged for verification)
    prefer_host_for_two_speakers: bool = False
    # A transcript with a single label is the recording owner talking
    single_speaker_is_owner: bool = True

    # Contact cache
    contact_cache_ttl_seconds: int = Field(default=24 * 60 * 60, ge=0)

    # Recording owner
    owner_email: str = ""
    owner_name: str = ""

    # Logging
    log_level: str = "INFO"

    def owner_identity(self) -> OwnerIdentity:
        """Owner identity built from the configured email / name."""
        return OwnerIdentity(
            emails=[self.owner_email] if self.owner_email else [],
            names=[self.owner_name] if self.owner_name else [],
        )


@lru_cache
def get_settings() -> MatcherSettings:
    """Get cached settings instance."""
    return MatcherSettings()

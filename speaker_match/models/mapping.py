"""Models for speaker mapping results."""

from typing import Iterable, Optional

from pydantic import BaseModel, Field

from .enums import ConfidenceLevel, CurrentUserMethod, MatchMethod


class MatchResult(BaseModel):
    """Identity assigned to one diarization label."""

    speaker: str = Field(..., description="Diarization label")
    resolved_name: str = Field(..., description="Identified name (or 'Unknown Speaker (...)')")
    resolved_email: Optional[str] = Field(None, description="Identified email, if any")
    confidence: ConfidenceLevel = Field(..., description="Evidentiary strength")
    method: MatchMethod = Field(..., description="Signal that produced the mapping")
    match_count: Optional[int] = Field(
        None, ge=0, description="Supporting evidence count (timeline votes)"
    )
    needs_verification: bool = Field(
        default=False, description="Guessable assignment that should be human-confirmed"
    )

    @property
    def is_identified(self) -> bool:
        return self.confidence > ConfidenceLevel.NONE


class SpeakerMapping(BaseModel):
    """Label to MatchResult mapping built incrementally by the matching passes.

    Keys are write-once: a pass can fill a missing label but never replace
    the result of an earlier pass.
    """

    results: dict[str, MatchResult] = Field(
        default_factory=dict, description="Diarization label to match result"
    )

    def add(self, result: MatchResult) -> bool:
        """Add a result if its label is still unresolved. Returns True if added."""
        if result.speaker in self.results:
            return False
        self.results[result.speaker] = result
        return True

    def merge(self, partial: Iterable[MatchResult]) -> list[str]:
        """Add every result whose label is still absent. Returns the labels added."""
        return [r.speaker for r in partial if self.add(r)]

    def get(self, speaker: str) -> Optional[MatchResult]:
        return self.results.get(speaker)

    def __contains__(self, speaker: object) -> bool:
        return speaker in self.results

    def __len__(self) -> int:
        return len(self.results)

    @property
    def labels(self) -> set[str]:
        return set(self.results)

    def claimed_emails(
        self, min_confidence: ConfidenceLevel = ConfidenceLevel.LOW
    ) -> set[str]:
        """Lowercased emails already assigned with at least `min_confidence`."""
        return {
            r.resolved_email.lower()
            for r in self.results.values()
            if r.resolved_email and r.confidence >= min_confidence
        }

    def claimed_names(
        self, min_confidence: ConfidenceLevel = ConfidenceLevel.LOW
    ) -> set[str]:
        """Lowercased names already assigned with at least `min_confidence`."""
        return {
            " ".join(r.resolved_name.split()).lower()
            for r in self.results.values()
            if r.confidence >= min_confidence
        }

    def to_dict(self) -> dict[str, dict]:
        return {label: r.model_dump(mode="json") for label, r in self.results.items()}


class CurrentUserMatch(BaseModel):
    """Which diarization label is the recording owner."""

    speaker: str = Field(..., description="Diarization label of the owner")
    confidence: ConfidenceLevel = Field(..., description="Confidence of the identification")
    method: CurrentUserMethod = Field(..., description="How the owner was located")


class SpeakerStats(BaseModel):
    """Per-label talk statistics derived from the transcript."""

    speaker: str = Field(..., description="Diarization label")
    word_count: int = Field(default=0, ge=0)
    utterance_count: int = Field(default=0, ge=0)
    first_appearance_ms: int = Field(default=0, ge=0)
    last_appearance_ms: int = Field(default=0, ge=0)

    @property
    def talk_duration_ms(self) -> int:
        return self.last_appearance_ms - self.first_appearance_ms


class MatchOutcome(BaseModel):
    """Everything the orchestrator produced for one transcript."""

    mapping: SpeakerMapping = Field(default_factory=SpeakerMapping)
    current_user: Optional[CurrentUserMatch] = Field(
        None, description="Recording owner's label, if it could be determined"
    )
    speaker_stats: list[SpeakerStats] = Field(default_factory=list)
    contact_error: Optional[str] = Field(
        None, description="Contact directory failure, surfaced for logging"
    )
    pass_counts: dict[str, int] = Field(
        default_factory=dict, description="Labels resolved by each pass"
    )

"""Models for the diarized transcript and the meeting roster."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import ConfidenceLevel


class Word(BaseModel):
    """A single word with provider timing."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Word text")
    start_ms: int = Field(default=0, ge=0, description="Word start (ms)")
    end_ms: Optional[int] = Field(None, ge=0, description="Word end (ms)")


class Utterance(BaseModel):
    """One diarized utterance from the transcription provider.

    The `resolved_*` and `confidence` fields stay empty on input and are only
    populated by `apply_mapping`. The diarization label is never modified.
    """

    model_config = ConfigDict(frozen=True)

    speaker: str = Field(..., description="Diarization label (e.g., 'A', 'Speaker B')")
    text: str = Field(default="", description="Utterance text")
    start_ms: int = Field(default=0, ge=0, description="Utterance start (ms)")
    words: list[Word] = Field(default_factory=list, description="Word timings, in order")
    speaker_name: Optional[str] = Field(
        None, description="Speaker name already attached by the transcriber, if any"
    )

    resolved_name: Optional[str] = Field(None, description="Identified speaker name")
    resolved_email: Optional[str] = Field(None, description="Identified speaker email")
    confidence: Optional[ConfidenceLevel] = Field(
        None, description="Confidence of the identification"
    )

    @property
    def end_ms(self) -> int:
        """End of the utterance: last word's end, else the start."""
        if self.words and self.words[-1].end_ms is not None:
            return self.words[-1].end_ms
        return self.start_ms

    @property
    def word_count(self) -> int:
        return len(self.text.split())


class Participant(BaseModel):
    """A meeting participant from the calendar / meeting metadata."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Display name")
    original_name: str = Field(default="", description="Name as reported by the platform")
    email: Optional[str] = Field(None, description="Email address, if known")
    is_host: bool = Field(default=False, description="Whether this participant hosts the meeting")
    given_name: str = Field(default="", description="Given (first) name")
    family_name: str = Field(default="", description="Family (last) name")
    speaker_label: Optional[str] = Field(
        None, description="Diarization label directly associated by meeting metadata"
    )

    @property
    def names(self) -> list[str]:
        """Non-empty names this participant is known by."""
        return [n for n in (self.name, self.original_name) if n and n.strip()]


class SpeechSegment(BaseModel):
    """An interval during which the platform reported a participant speaking."""

    start_ms: int = Field(..., ge=0, description="Segment start (ms)")
    end_ms: int = Field(..., ge=0, description="Segment end (ms)")


class TimelineParticipant(BaseModel):
    """Speech activity of one platform participant."""

    name: str = Field(..., description="Participant name as reported by the recording SDK")
    email: Optional[str] = Field(None, description="Email, when the SDK exposes it")
    segments: list[SpeechSegment] = Field(default_factory=list, description="Speech intervals")


class SpeechTimeline(BaseModel):
    """Platform-supplied record of who was speaking when.

    Concurrent speech across participants is allowed.
    """

    participants: list[TimelineParticipant] = Field(
        default_factory=list, description="Per-participant speech activity"
    )

    @property
    def is_empty(self) -> bool:
        return not any(p.segments for p in self.participants)


class OwnerIdentity(BaseModel):
    """Known identity of the recording device owner."""

    emails: list[str] = Field(default_factory=list, description="Owner email addresses")
    names: list[str] = Field(default_factory=list, description="Owner names")

    @property
    def is_empty(self) -> bool:
        return not any(e.strip() for e in self.emails) and not any(n.strip() for n in self.names)

"""Pydantic data models for speaker matching."""

from .enums import ConfidenceLevel, CurrentUserMethod, MatchMethod
from .contacts import ContactRecord
from .transcript import (
    OwnerIdentity,
    Participant,
    SpeechSegment,
    SpeechTimeline,
    TimelineParticipant,
    Utterance,
    Word,
)
from .mapping import (
    CurrentUserMatch,
    MatchOutcome,
    MatchResult,
    SpeakerMapping,
    SpeakerStats,
)

__all__ = [
    # Enums
    "ConfidenceLevel",
    "CurrentUserMethod",
    "MatchMethod",
    # Contacts
    "ContactRecord",
    # Transcript
    "Word",
    "Utterance",
    "Participant",
    "SpeechSegment",
    "TimelineParticipant",
    "SpeechTimeline",
    "OwnerIdentity",
    # Mapping
    "MatchResult",
    "SpeakerMapping",
    "CurrentUserMatch",
    "SpeakerStats",
    "MatchOutcome",
]

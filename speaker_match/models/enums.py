"""Enumeration types for the speaker matching models."""

from enum import Enum


class ConfidenceLevel(str, Enum):
    """Evidentiary strength of a resolved speaker mapping.

    Ordered: NONE < LOW < MEDIUM < HIGH.
    """

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_ORDER.index(self)

    def __ge__(self, other):
        if isinstance(other, ConfidenceLevel):
            return self.rank >= other.rank
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, ConfidenceLevel):
            return self.rank > other.rank
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, ConfidenceLevel):
            return self.rank <= other.rank
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, ConfidenceLevel):
            return self.rank < other.rank
        return NotImplemented


_CONFIDENCE_ORDER = [
    ConfidenceLevel.NONE,
    ConfidenceLevel.LOW,
    ConfidenceLevel.MEDIUM,
    ConfidenceLevel.HIGH,
]


class MatchMethod(str, Enum):
    """Which signal produced a speaker mapping."""

    SPEECH_TIMELINE = "speech-timeline"                  # SDK speech-activity overlap
    TRANSCRIPT_SPEAKER_NAME = "transcript-speaker-name"  # Name attached by the transcriber
    SINGLE_SPEAKER_OWNER = "single-speaker-owner"        # Lone speaker is the recording owner
    COUNT_MATCH = "count-match"                          # One label, one participant left
    SYMMETRIC_PAIR = "symmetric-pair"                    # Two labels, alphabetical pairing
    WORD_COUNT_RANK = "word-count-rank"                  # 3+ labels ranked by word count
    FIRST_SPEAKER_HOST = "first-speaker-host"            # Earliest speaker is the host
    MOST_TALKATIVE_HOST = "most-talkative-host"          # Most words is the host
    SEQUENTIAL = "sequential"                            # Leftovers paired in order
    UNMATCHED = "unmatched"                              # No participant available


class CurrentUserMethod(str, Enum):
    """How the recording owner was located among the speakers."""

    EMAIL_MATCH = "email-match"
    NAME_MATCH = "name-match"
    HOST_MATCH = "host-match"

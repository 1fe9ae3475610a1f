"""Heuristic fallback for labels no stronger signal could resolve.

Every result produced here is LOW confidence (or NONE for the terminal
"Unknown Speaker" entries) and identity-bearing results are flagged for
human verification: talk order and talk volume are weak evidence.
"""

from typing import Optional, Sequence

import structlog

from speaker_match.config import MatcherSettings, get_settings
from speaker_match.matching.roster import display_name, unclaimed_participants
from speaker_match.models import (
    ConfidenceLevel,
    MatchMethod,
    MatchResult,
    Participant,
    SpeakerMapping,
    SpeakerStats,
)

logger = structlog.get_logger(__name__)


def unknown_speaker(speaker: str) -> MatchResult:
    """Terminal result for a label without any participant."""
    return MatchResult(
        speaker=speaker,
        resolved_name=f"Unknown Speaker ({speaker})",
        resolved_email=None,
        confidence=ConfidenceLevel.NONE,
        method=MatchMethod.UNMATCHED,
    )


def _guess(speaker: str, participant: Participant, method: MatchMethod) -> MatchResult:
    return MatchResult(
        speaker=speaker,
        resolved_name=display_name(participant),
        resolved_email=participant.email,
        confidence=ConfidenceLevel.LOW,
        method=method,
        needs_verification=True,
    )


def match_heuristically(
    stats: dict[str, SpeakerStats],
    participants: Sequence[Participant],
    mapping: SpeakerMapping,
    settings: Optional[MatcherSettings] = None,
) -> list[MatchResult]:
    """Assign the labels still missing from `mapping`.

    Args:
        stats: Talk statistics for every label in the transcript.
        participants: Meeting roster in original order.
        mapping: Results of the stronger passes (not modified).
        settings: Matcher settings (host heuristics).

    Returns:
        One result per unresolved label.
    """
    settings = settings or get_settings()

    remaining = [s for label, s in stats.items() if label not in mapping]
    if not remaining:
        return []

    available = unclaimed_participants(participants, mapping)
    logger.info(
        "heuristic_pass_start",
        unresolved_labels=len(remaining),
        unclaimed_participants=len(available),
    )

    if available and len(remaining) == len(available):
        return _match_equal_counts(remaining, available, settings)

    results: dict[str, MatchResult] = {}
    by_words = sorted(remaining, key=lambda s: (-s.word_count, s.first_appearance_ms, s.speaker))
    host = next((p for p in available if p.is_host), None)

    if host is not None and settings.first_speaker_is_host:
        earliest = min(remaining, key=lambda s: (s.first_appearance_ms, s.speaker))
        results[earliest.speaker] = _guess(earliest.speaker, host, MatchMethod.FIRST_SPEAKER_HOST)
    elif host is not None:
        most_talkative = by_words[0]
        results[most_talkative.speaker] = _guess(
            most_talkative.speaker, host, MatchMethod.MOST_TALKATIVE_HOST
        )

    leftover_participants = [p for p in available if p is not host]
    leftover_labels = [s for s in by_words if s.speaker not in results]

    for stat, participant in zip(leftover_labels, leftover_participants):
        results[stat.speaker] = _guess(stat.speaker, participant, MatchMethod.SEQUENTIAL)

    for stat in leftover_labels:
        if stat.speaker not in results:
            results[stat.speaker] = unknown_speaker(stat.speaker)

    return [results[s.speaker] for s in remaining]


def _match_equal_counts(
    remaining: list[SpeakerStats],
    available: list[Participant],
    settings: MatcherSettings,
) -> list[MatchResult]:
    if len(remaining) == 1:
        return [_guess(remaining[0].speaker, available[0], MatchMethod.COUNT_MATCH)]

    if len(remaining) == 2:
        host = next((p for p in available if p.is_host), None)
        if settings.prefer_host_for_two_speakers and host is not None:
            earliest, other = sorted(remaining, key=lambda s: (s.first_appearance_ms, s.speaker))
            guest = next(p for p in available if p is not host)
            return [
                _guess(earliest.speaker, host, MatchMethod.FIRST_SPEAKER_HOST),
                _guess(other.speaker, guest, MatchMethod.SYMMETRIC_PAIR),
            ]

        # Talk order says nothing about identity for two speakers
        ordered = sorted(remaining, key=lambda s: s.speaker)
        return [
            _guess(stat.speaker, participant, MatchMethod.SYMMETRIC_PAIR)
            for stat, participant in zip(ordered, available)
        ]

    ordered = sorted(remaining, key=lambda s: (-s.word_count, s.first_appearance_ms, s.speaker))
    return [
        _guess(stat.speaker, participant, MatchMethod.WORD_COUNT_RANK)
        for stat, participant in zip(ordered, available)
    ]

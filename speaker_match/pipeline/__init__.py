"""Speaker matching pipeline.

Usage:
    from speaker_match.pipeline import match_speakers, apply_mapping

    outcome = await match_speakers(transcript, participants, directory, timeline)
    transcript = apply_mapping(transcript, outcome.mapping)
"""

from speaker_match.pipeline.orchestrator import PASSES, MatchContext, match_speakers
from speaker_match.pipeline.transcript import apply_mapping, format_timestamp, format_transcript

__all__ = [
    "match_speakers",
    "MatchContext",
    "PASSES",
    "apply_mapping",
    "format_transcript",
    "format_timestamp",
]

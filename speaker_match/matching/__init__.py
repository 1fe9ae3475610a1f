"""Speaker identification signals."""

from .names import detect_duplicate_speakers, name_from_email, name_match, normalize_name
from .resolver import resolve_participant_email
from .timeline import correlate_timeline, count_timeline_votes
from .current_user import identify_current_user
from .identified import collaborator_names, match_identified_speakers
from .heuristics import match_heuristically, unknown_speaker
from .stats import analyze_speakers, speaker_labels, summarize_speakers

__all__ = [
    "name_match",
    "normalize_name",
    "name_from_email",
    "detect_duplicate_speakers",
    "resolve_participant_email",
    "correlate_timeline",
    "count_timeline_votes",
    "identify_current_user",
    "collaborator_names",
    "match_identified_speakers",
    "match_heuristically",
    "unknown_speaker",
    "analyze_speakers",
    "speaker_labels",
    "summarize_speakers",
]

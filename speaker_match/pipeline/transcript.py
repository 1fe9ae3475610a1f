"""Apply a speaker mapping to a transcript and render it."""

from typing import Mapping, Sequence, Union

from speaker_match.models import MatchResult, SpeakerMapping, Utterance


def apply_mapping(
    transcript: Sequence[Utterance],
    mapping: Union[SpeakerMapping, Mapping[str, MatchResult]],
) -> list[Utterance]:
    """Attach resolved name / email / confidence to every utterance.

    The diarization label is left untouched. Fields are replaced rather than
    accumulated, so applying the same mapping twice gives identical output.
    """
    results = mapping.results if isinstance(mapping, SpeakerMapping) else mapping
    updated = []
    for utterance in transcript:
        result = results.get(utterance.speaker)
        if result is None:
            updated.append(utterance)
            continue
        updated.append(
            utterance.model_copy(
                update={
                    "resolved_name": result.resolved_name,
                    "resolved_email": result.resolved_email,
                    "confidence": result.confidence,
                }
            )
        )
    return updated


def format_timestamp(ms: int | None) -> str:
    """Milliseconds to MM:SS."""
    if ms is None or ms < 0:
        return "00:00"
    total_seconds = ms // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_transcript(transcript: Sequence[Utterance], use_names: bool = True) -> str:
    """Render `[MM:SS] Speaker: text` blocks separated by blank lines."""
    lines = []
    for utterance in transcript:
        speaker = utterance.resolved_name if use_names and utterance.resolved_name else None
        speaker = speaker or utterance.speaker or "Unknown"
        lines.append(f"[{format_timestamp(utterance.start_ms)}] {speaker}: {utterance.text}")
    return "\n\n".join(lines)

"""Per-speaker talk statistics."""

from typing import Sequence

from speaker_match.models import SpeakerStats, Utterance


def speaker_labels(transcript: Sequence[Utterance]) -> list[str]:
    """Distinct diarization labels in order of first appearance."""
    seen: dict[str, None] = {}
    for utterance in transcript:
        if utterance.speaker:
            seen.setdefault(utterance.speaker, None)
    return list(seen)


def analyze_speakers(transcript: Sequence[Utterance]) -> dict[str, SpeakerStats]:
    """Word count, utterance count and first/last appearance per label."""
    stats: dict[str, SpeakerStats] = {}

    for utterance in transcript:
        speaker = utterance.speaker
        if not speaker:
            continue

        current = stats.get(speaker)
        if current is None:
            current = SpeakerStats(
                speaker=speaker,
                first_appearance_ms=utterance.start_ms,
                last_appearance_ms=utterance.end_ms,
            )
            stats[speaker] = current

        current.utterance_count += 1
        current.word_count += utterance.word_count
        current.first_appearance_ms = min(current.first_appearance_ms, utterance.start_ms)
        current.last_appearance_ms = max(current.last_appearance_ms, utterance.end_ms)

    return stats


def summarize_speakers(stats: dict[str, SpeakerStats]) -> list[dict]:
    """Speaker summary rows, most talkative first.

    participation_rate is each label's share of all words (0-100).
    """
    total_words = sum(s.word_count for s in stats.values())
    rows = [
        {
            "speaker": s.speaker,
            "word_count": s.word_count,
            "utterance_count": s.utterance_count,
            "duration_ms": s.talk_duration_ms,
            "participation_rate": round(100 * s.word_count / total_words, 1) if total_words else 0.0,
        }
        for s in stats.values()
    ]
    return sorted(rows, key=lambda r: r["word_count"], reverse=True)

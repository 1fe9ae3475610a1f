"""Speech timeline correlation.

Correlates utterance timestamps from the transcriber with the speech-activity
segments reported by the recording SDK. Every utterance whose start or end
falls inside a participant's (tolerance-widened) segment casts one vote for
that (label, participant) pair. Labels are then resolved greedily, strongest
evidence first, so that no participant is claimed by two labels.

No name matching happens here: the only signal is time overlap.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

import structlog

from speaker_match.config import MatcherSettings, get_settings
from speaker_match.matching.names import name_match
from speaker_match.matching.resolver import resolve_participant_email
from speaker_match.models import (
    ConfidenceLevel,
    ContactRecord,
    MatchMethod,
    MatchResult,
    Participant,
    SpeechTimeline,
    TimelineParticipant,
    Utterance,
)

logger = structlog.get_logger(__name__)


@dataclass
class TimelineVotes:
    """Vote tally of the correlation, kept for inspection."""
    # label -> participant name -> votes
    counts: dict[str, dict[str, int]] = field(default_factory=lambda: defaultdict(dict))
    utterances_scanned: int = 0

    def add(self, speaker: str, participant: str) -> None:
        per_label = self.counts[speaker]
        per_label[participant] = per_label.get(participant, 0) + 1

    def best_count(self, speaker: str) -> int:
        return max(self.counts.get(speaker, {}).values(), default=0)


def _overlaps(
    utterance_start: int,
    utterance_end: int,
    participant: TimelineParticipant,
    tolerance_ms: int,
) -> bool:
    for segment in participant.segments:
        seg_start = segment.start_ms - tolerance_ms
        seg_end = segment.end_ms + tolerance_ms
        if seg_start <= utterance_start <= seg_end or seg_start <= utterance_end <= seg_end:
            return True
    return False


def count_timeline_votes(
    transcript: Sequence[Utterance],
    timeline: SpeechTimeline,
    tolerance_ms: int,
) -> TimelineVotes:
    """Tally (label, participant) votes from time overlap.

    At most one vote per participant per utterance; concurrent speakers may
    each receive a vote for the same utterance.
    """
    votes = TimelineVotes()
    for utterance in transcript:
        if not utterance.speaker:
            continue
        votes.utterances_scanned += 1
        start, end = utterance.start_ms, utterance.end_ms
        for participant in timeline.participants:
            if not participant.name:
                continue
            if _overlaps(start, end, participant, tolerance_ms):
                votes.add(utterance.speaker, participant.name)
    return votes


def correlate_timeline(
    transcript: Sequence[Utterance],
    timeline: Optional[SpeechTimeline],
    participants: Sequence[Participant],
    contacts: Mapping[str, ContactRecord],
    settings: Optional[MatcherSettings] = None,
    company_hint: Optional[str] = None,
) -> list[MatchResult]:
    """Map diarization labels to timeline participants from time overlap alone.

    Args:
        transcript: Diarized utterances.
        timeline: SDK speech timeline, if the subscription was active.
        participants: Meeting roster (email resolution).
        contacts: Email to ContactRecord directory (email resolution).
        settings: Matcher settings (tolerance and vote thresholds).
        company_hint: Company to prefer among same-named contacts.

    Returns:
        Match results for the labels that gathered enough evidence.
    """
    if timeline is None or timeline.is_empty or not transcript:
        return []

    settings = settings or get_settings()
    votes = count_timeline_votes(transcript, timeline, settings.timeline_tolerance_ms)

    logger.info(
        "timeline_votes_counted",
        timeline_participants=len(timeline.participants),
        utterances=votes.utterances_scanned,
        labels_with_votes=len(votes.counts),
    )

    sdk_participants = {p.name: p for p in timeline.participants if p.name}
    participant_order = {name: i for i, name in enumerate(sdk_participants)}

    # Strongest evidence first; ties broken by label for determinism
    ordered_labels = sorted(votes.counts, key=lambda s: (-votes.best_count(s), s))

    claimed_participants: set[str] = set()
    claimed_emails: set[str] = set()
    results: list[MatchResult] = []

    for speaker in ordered_labels:
        ranked = sorted(
            (
                (name, count)
                for name, count in votes.counts[speaker].items()
                if name not in claimed_participants
            ),
            key=lambda item: (-item[1], participant_order.get(item[0], 0)),
        )
        if not ranked:
            continue

        best_name, best_count = ranked[0]
        if best_count < settings.timeline_min_votes:
            logger.debug(
                "timeline_insufficient_votes",
                speaker=speaker,
                participant=best_name,
                votes=best_count,
            )
            continue

        email = _resolve_email(
            sdk_participants[best_name], participants, contacts, settings, company_hint
        )
        if email and email.lower() in claimed_emails:
            logger.warning(
                "timeline_email_already_claimed",
                speaker=speaker,
                participant=best_name,
                email=email,
            )
            email = None

        confidence = (
            ConfidenceLevel.HIGH
            if best_count >= settings.timeline_high_confidence_votes
            else ConfidenceLevel.MEDIUM
        )
        results.append(
            MatchResult(
                speaker=speaker,
                resolved_name=best_name,
                resolved_email=email,
                confidence=confidence,
                method=MatchMethod.SPEECH_TIMELINE,
                match_count=best_count,
            )
        )
        claimed_participants.add(best_name)
        if email:
            claimed_emails.add(email.lower())

        logger.info(
            "timeline_match",
            speaker=speaker,
            participant=best_name,
            votes=best_count,
            confidence=confidence.value,
        )

    return results


def _resolve_email(
    sdk_participant: TimelineParticipant,
    participants: Sequence[Participant],
    contacts: Mapping[str, ContactRecord],
    settings: MatcherSettings,
    company_hint: Optional[str] = None,
) -> Optional[str]:
    if sdk_participant.email:
        return sdk_participant.email

    # Everyone who is not plausibly this person provides company context
    context_emails = [
        p.email
        for p in participants
        if p.email and not any(name_match(sdk_participant.name, n) for n in p.names)
    ]
    return resolve_participant_email(
        sdk_participant.name,
        participants,
        contacts,
        company_hint=company_hint,
        context_emails=context_emails,
        settings=settings,
    )

"""Use speaker names the transcriber already attached to utterances."""

from collections import Counter
from typing import Mapping, Optional, Sequence

import structlog

from speaker_match.config import MatcherSettings
from speaker_match.matching.names import name_match, normalize_name
from speaker_match.matching.resolver import resolve_participant_email
from speaker_match.matching.roster import display_name, is_claimed, unclaimed_participants
from speaker_match.models import (
    ConfidenceLevel,
    ContactRecord,
    MatchMethod,
    MatchResult,
    Participant,
    SpeakerMapping,
    Utterance,
)

logger = structlog.get_logger(__name__)


def collaborator_names(transcript: Sequence[Utterance]) -> dict[str, str]:
    """Most common transcriber-supplied name per label (ties: first seen).

    Names that merely repeat the diarization label are ignored.
    """
    counts: dict[str, Counter] = {}
    for utterance in transcript:
        name = (utterance.speaker_name or "").strip()
        if not utterance.speaker or not name:
            continue
        if normalize_name(name) == normalize_name(utterance.speaker):
            continue
        counts.setdefault(utterance.speaker, Counter())[name] += 1

    # Counter.most_common keeps insertion order among equal counts
    return {speaker: c.most_common(1)[0][0] for speaker, c in counts.items()}


def _find_participant(name: str, participants: Sequence[Participant]) -> Optional[Participant]:
    """Participant with exactly this name, else the first that name_match()es it."""
    query = normalize_name(name)
    exact = next(
        (p for p in participants if any(normalize_name(n) == query for n in p.names)),
        None,
    )
    if exact is not None:
        return exact
    return next((p for p in participants if any(name_match(name, n) for n in p.names)), None)


def match_identified_speakers(
    transcript: Sequence[Utterance],
    participants: Sequence[Participant],
    contacts: Mapping[str, ContactRecord],
    mapping: SpeakerMapping,
    settings: Optional[MatcherSettings] = None,
    company_hint: Optional[str] = None,
) -> list[MatchResult]:
    """Resolve labels the stronger passes left open using transcriber names.

    A name matching an unclaimed participant is MEDIUM confidence; a name
    with no roster counterpart is kept at LOW with a best-effort email.
    Names whose identity is already claimed are skipped.
    """
    names = collaborator_names(transcript)
    if not names:
        return []

    claimed_emails = mapping.claimed_emails()
    claimed_names = mapping.claimed_names()
    available = unclaimed_participants(participants, mapping)
    results: list[MatchResult] = []

    for speaker, name in names.items():
        if speaker in mapping:
            continue

        if normalize_name(name) in claimed_names:
            logger.debug("identified_speaker_already_claimed", speaker=speaker, name=name)
            continue

        participant = _find_participant(name, available)
        if participant is not None:
            email = participant.email or resolve_participant_email(
                name, participants, contacts, company_hint=company_hint, settings=settings
            )
            if email and email.lower() in claimed_emails:
                email = None
            result = MatchResult(
                speaker=speaker,
                resolved_name=display_name(participant),
                resolved_email=email,
                confidence=ConfidenceLevel.MEDIUM,
                method=MatchMethod.TRANSCRIPT_SPEAKER_NAME,
            )
            available = [p for p in available if p is not participant]
        else:
            email = resolve_participant_email(
                name, participants, contacts, company_hint=company_hint, settings=settings
            )
            owner = next((p for p in participants if email and p.email == email), None)
            if owner is not None and is_claimed(owner, claimed_emails, claimed_names):
                logger.debug("identified_speaker_email_claimed", speaker=speaker, email=email)
                continue
            result = MatchResult(
                speaker=speaker,
                resolved_name=name,
                resolved_email=email,
                confidence=ConfidenceLevel.LOW,
                method=MatchMethod.TRANSCRIPT_SPEAKER_NAME,
            )

        if result.resolved_email:
            claimed_emails.add(result.resolved_email.lower())
        claimed_names.add(normalize_name(result.resolved_name))
        results.append(result)

    logger.info("identified_speaker_pass_complete", resolved=len(results))
    return results

"""Locate the recording owner among the diarized speakers."""

from typing import Optional, Sequence

import structlog

from speaker_match.matching.names import name_match, normalize_name
from speaker_match.models import (
    ConfidenceLevel,
    CurrentUserMatch,
    CurrentUserMethod,
    OwnerIdentity,
    Participant,
    SpeakerMapping,
)

logger = structlog.get_logger(__name__)


def _owner_emails(owner: OwnerIdentity) -> set[str]:
    return {e.strip().lower() for e in owner.emails if e and e.strip()}


def _email_matches(participant: Participant, owner: OwnerIdentity) -> bool:
    return bool(participant.email) and participant.email.strip().lower() in _owner_emails(owner)


def _name_matches(participant: Participant, owner: OwnerIdentity) -> bool:
    return any(name_match(pn, on) for pn in participant.names for on in owner.names)


def _associated_label(participant: Participant, mapping: SpeakerMapping) -> Optional[str]:
    """Label tied to a participant by metadata (if mapped), or by an exact mapping hit."""
    if participant.speaker_label and participant.speaker_label in mapping:
        return participant.speaker_label

    email = participant.email.strip().lower() if participant.email else ""
    names = {normalize_name(n) for n in participant.names}
    for speaker, result in mapping.results.items():
        if not result.is_identified:
            continue
        if email and result.resolved_email and result.resolved_email.lower() == email:
            return speaker
        if normalize_name(result.resolved_name) in names:
            return speaker
    return None


def _fuzzy_label(participant: Participant, mapping: SpeakerMapping) -> Optional[str]:
    for speaker, result in mapping.results.items():
        if not result.is_identified:
            continue
        if any(name_match(n, result.resolved_name) for n in participant.names):
            return speaker
    return None


def identify_current_user(
    owner: Optional[OwnerIdentity],
    participants: Sequence[Participant],
    mapping: SpeakerMapping,
) -> Optional[CurrentUserMatch]:
    """Return the owner's diarization label, or None. Never guesses.

    Args:
        owner: Known emails / names of the device owner.
        participants: Meeting roster.
        mapping: Speaker mapping built so far.
    """
    if owner is None or owner.is_empty or not participants:
        return None

    for participant in participants:
        by_email = _email_matches(participant, owner)
        if not by_email and not _name_matches(participant, owner):
            continue
        speaker = _associated_label(participant, mapping)
        if speaker is None:
            continue
        match = CurrentUserMatch(
            speaker=speaker,
            confidence=ConfidenceLevel.HIGH if by_email else ConfidenceLevel.MEDIUM,
            method=CurrentUserMethod.EMAIL_MATCH if by_email else CurrentUserMethod.NAME_MATCH,
        )
        logger.info("current_user_identified", speaker=speaker, method=match.method.value)
        return match

    host = next((p for p in participants if p.is_host), None)
    if host is not None and (_email_matches(host, owner) or _name_matches(host, owner)):
        speaker = _fuzzy_label(host, mapping)
        if speaker is not None:
            logger.info("current_user_identified", speaker=speaker, method="host-match")
            return CurrentUserMatch(
                speaker=speaker,
                confidence=ConfidenceLevel.MEDIUM,
                method=CurrentUserMethod.HOST_MATCH,
            )

    logger.debug("current_user_not_identified")
    return None

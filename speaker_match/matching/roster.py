"""Helpers over the meeting roster."""

from typing import Sequence

from speaker_match.matching.names import name_from_email, normalize_name
from speaker_match.models import Participant, SpeakerMapping


def display_name(participant: Participant) -> str:
    """Best human-readable name for a participant."""
    if participant.names:
        return participant.names[0].strip()
    if participant.email:
        return name_from_email(participant.email)
    return "Unknown"


def is_claimed(participant: Participant, claimed_emails: set[str], claimed_names: set[str]) -> bool:
    """Exact identity check: same email, or same normalized name.

    Fuzzy name_match is not used here; "John Doe" stays free after "John
    Smith" is claimed.
    """
    if participant.email and participant.email.strip().lower() in claimed_emails:
        return True
    return any(normalize_name(n) in claimed_names for n in participant.names)


def unclaimed_participants(
    participants: Sequence[Participant],
    mapping: SpeakerMapping,
) -> list[Participant]:
    """Roster entries not yet assigned to any label, in roster order.

    Participants with neither a name nor an email are skipped.
    """
    claimed_emails = mapping.claimed_emails()
    claimed_names = mapping.claimed_names()
    return [
        p
        for p in participants
        if (p.names or p.email) and not is_claimed(p, claimed_emails, claimed_names)
    ]

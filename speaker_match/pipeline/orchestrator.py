"""Speaker matching orchestrator - runs every identification pass in order.

Pass order (strongest evidence first):
1. Speech timeline     -> SDK speech activity vs utterance timing
2. Identified speakers -> names the transcriber attached to utterances
3. Single speaker      -> a lone speaker is the recording owner
4. Heuristics          -> talk order / talk volume, always low confidence

Each pass receives the mapping built so far and returns results only for
labels it can resolve; the fold adds a result only when its label is still
absent, so no pass can overwrite an earlier, stronger one. The timeline pass
always runs, even when the transcriber already named the speakers.

The contact directory is queried once, before any pass. A directory failure
degrades to "no contact data" and is surfaced on the outcome.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Sequence

import structlog

from speaker_match.config import MatcherSettings, get_settings
from speaker_match.contacts import ContactDirectory
from speaker_match.matching import (
    analyze_speakers,
    correlate_timeline,
    identify_current_user,
    match_heuristically,
    match_identified_speakers,
    name_from_email,
    name_match,
    speaker_labels,
    unknown_speaker,
)
from speaker_match.matching.roster import display_name
from speaker_match.models import (
    ConfidenceLevel,
    ContactRecord,
    MatchMethod,
    MatchOutcome,
    MatchResult,
    OwnerIdentity,
    Participant,
    SpeakerMapping,
    SpeakerStats,
    SpeechTimeline,
    Utterance,
)

logger = structlog.get_logger(__name__)


@dataclass
class MatchContext:
    """Materialized inputs shared by every pass of one invocation."""
    transcript: Sequence[Utterance]
    participants: Sequence[Participant]
    contacts: dict[str, ContactRecord]
    stats: dict[str, SpeakerStats]
    settings: MatcherSettings
    timeline: Optional[SpeechTimeline] = None
    owner: Optional[OwnerIdentity] = None
    company_hint: Optional[str] = None
    stage_durations: dict[str, float] = field(default_factory=dict)


MatchPass = Callable[[MatchContext, SpeakerMapping], list[MatchResult]]


def _timeline_pass(ctx: MatchContext, mapping: SpeakerMapping) -> list[MatchResult]:
    return correlate_timeline(
        ctx.transcript,
        ctx.timeline,
        ctx.participants,
        ctx.contacts,
        settings=ctx.settings,
        company_hint=ctx.company_hint,
    )


def _identified_speaker_pass(ctx: MatchContext, mapping: SpeakerMapping) -> list[MatchResult]:
    return match_identified_speakers(
        ctx.transcript,
        ctx.participants,
        ctx.contacts,
        mapping,
        settings=ctx.settings,
        company_hint=ctx.company_hint,
    )


def _single_speaker_owner_pass(ctx: MatchContext, mapping: SpeakerMapping) -> list[MatchResult]:
    if not ctx.settings.single_speaker_is_owner:
        return []
    if len(ctx.stats) != 1 or ctx.owner is None or ctx.owner.is_empty:
        return []

    speaker = next(iter(ctx.stats))
    if speaker in mapping:
        return []

    owner_emails = {e.strip().lower() for e in ctx.owner.emails if e.strip()}
    participant = next(
        (
            p
            for p in ctx.participants
            if (p.email and p.email.strip().lower() in owner_emails)
            or any(name_match(n, o) for n in p.names for o in ctx.owner.names)
        ),
        None,
    )
    if participant is not None:
        name, email = display_name(participant), participant.email
    else:
        email = next((e for e in ctx.owner.emails if e.strip()), None)
        name = next((n for n in ctx.owner.names if n.strip()), None) or name_from_email(email)

    logger.info("single_speaker_is_owner", speaker=speaker, name=name)
    return [
        MatchResult(
            speaker=speaker,
            resolved_name=name,
            resolved_email=email,
            confidence=ConfidenceLevel.MEDIUM,
            method=MatchMethod.SINGLE_SPEAKER_OWNER,
        )
    ]


def _heuristic_pass(ctx: MatchContext, mapping: SpeakerMapping) -> list[MatchResult]:
    return match_heuristically(ctx.stats, ctx.participants, mapping, settings=ctx.settings)


PASSES: list[tuple[str, MatchPass]] = [
    ("timeline", _timeline_pass),
    ("identified_speaker", _identified_speaker_pass),
    ("single_speaker_owner", _single_speaker_owner_pass),
    ("heuristic", _heuristic_pass),
]


async def _load_contacts(
    directory: Optional[ContactDirectory],
    participants: Sequence[Participant],
) -> tuple[dict[str, ContactRecord], Optional[str]]:
    if directory is None:
        return {}, None

    emails = list(dict.fromkeys(p.email for p in participants if p.email))
    try:
        contacts = await directory.find_contacts_by_emails(emails)
    except Exception as e:
        logger.warning("contact_lookup_failed", error=str(e), type=type(e).__name__)
        return {}, f"{type(e).__name__}: {e}"

    logger.info("contacts_resolved", found=len(contacts), participants=len(emails))
    return dict(contacts), None


async def match_speakers(
    transcript: Optional[Sequence[Utterance]],
    participants: Optional[Sequence[Participant]],
    directory: Optional[ContactDirectory] = None,
    timeline: Optional[SpeechTimeline] = None,
    owner: Optional[OwnerIdentity] = None,
    company_hint: Optional[str] = None,
    settings: Optional[MatcherSettings] = None,
) -> MatchOutcome:
    """Map every diarization label of a transcript to a participant.

    Args:
        transcript: Diarized utterances of one completed meeting.
        participants: Meeting roster, in calendar order.
        directory: Contact directory adapter (one batch lookup).
        timeline: SDK speech timeline, when available.
        owner: Identity of the recording owner. Defaults to the configured one.
        company_hint: Company to prefer when disambiguating same-named contacts.
        settings: Matcher settings. Defaults to `get_settings()`.

    Returns:
        MatchOutcome whose mapping holds exactly one result per label, or an
        empty mapping when the transcript or the roster is empty.
    """
    settings = settings or get_settings()
    outcome = MatchOutcome()

    if not transcript:
        logger.info("match_skipped", reason="empty_transcript")
        return outcome
    if not participants:
        logger.info("match_skipped", reason="no_participants")
        return outcome

    if owner is None:
        owner = settings.owner_identity()

    start = datetime.now()
    stats = analyze_speakers(transcript)
    logger.info("match_start", speakers=len(stats), participants=len(participants))

    contacts, outcome.contact_error = await _load_contacts(directory, participants)

    ctx = MatchContext(
        transcript=transcript,
        participants=participants,
        contacts=contacts,
        stats=stats,
        settings=settings,
        timeline=timeline,
        owner=owner,
        company_hint=company_hint,
    )

    mapping = outcome.mapping
    for name, run_pass in PASSES:
        stage_start = datetime.now()
        added = mapping.merge(run_pass(ctx, mapping))
        ctx.stage_durations[name] = (datetime.now() - stage_start).total_seconds()
        outcome.pass_counts[name] = len(added)
        logger.debug(f"{name}_pass_complete", resolved=len(added))

    for speaker in speaker_labels(transcript):
        if mapping.add(unknown_speaker(speaker)):
            logger.warning("label_left_unresolved", speaker=speaker)

    outcome.current_user = identify_current_user(owner, participants, mapping)
    outcome.speaker_stats = list(stats.values())

    logger.info(
        "match_complete",
        duration_seconds=round((datetime.now() - start).total_seconds(), 3),
        pass_counts=outcome.pass_counts,
        stage_durations=ctx.stage_durations,
        contact_error=outcome.contact_error is not None,
        current_user=outcome.current_user.speaker if outcome.current_user else None,
    )
    return outcome

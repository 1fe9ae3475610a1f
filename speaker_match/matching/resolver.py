"""Resolve a bare participant name to a single email address.

The recording SDK and the transcriber only know names ("Stephanie"), while
downstream consumers need an email. A name is resolved against the contact
directory of the meeting's participants:

- Full-name matches (contact name == query) are strong evidence.
- First-name matches (given name == query) are only collected when the query
  has no surname, and are accepted only when the candidate's organization or
  email domain agrees with the company context of the OTHER participants.
  Without that agreement the resolver refuses to guess.
- If no contact matches, names derived from the roster are compared instead.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

import structlog

from speaker_match.config import MatcherSettings, get_settings
from speaker_match.matching.names import email_domain, name_from_email, normalize_name
from speaker_match.models import ContactRecord, Participant

logger = structlog.get_logger(__name__)


@dataclass
class _Candidate:
    email: str
    contact: ContactRecord
    full_name: bool


def company_keys(
    email: Optional[str],
    organization: Optional[str],
    free_providers: Iterable[str],
) -> set[str]:
    """Lowercased organization / domain tokens identifying someone's company.

    Only the full domain counts ("acme.io" does not agree with "acme.com").
    Domains of free email providers are dropped: a gmail address says nothing
    about an employer.
    """
    keys: set[str] = set()
    if organization and organization.strip():
        keys.add(normalize_name(organization))

    domain = email_domain(email)
    if domain:
        labels = set(domain.split(".")[:-1])
        if not labels & set(free_providers):
            keys.add(domain)
    return keys


def build_company_context(
    context_emails: Iterable[str],
    contacts: Mapping[str, ContactRecord],
    free_providers: Iterable[str],
    exclude: Iterable[str] = (),
) -> set[str]:
    """Organizations and domains of the given participants.

    Args:
        context_emails: Emails of the other participants.
        contacts: Email to contact record directory.
        free_providers: Provider names excluded from domain inference.
        exclude: Emails to leave out (e.g., the candidates themselves).
    """
    providers = list(free_providers)
    excluded = {e.lower() for e in exclude}
    context: set[str] = set()
    for email in context_emails:
        if not email or email.lower() in excluded:
            continue
        contact = _lookup(contacts, email)
        organization = contact.organization if contact else None
        context |= company_keys(email, organization, providers)
    return context


def _lookup(contacts: Mapping[str, ContactRecord], email: str) -> Optional[ContactRecord]:
    contact = contacts.get(email)
    if contact is None:
        contact = contacts.get(email.lower())
    return contact


def _collect_candidates(
    query: str,
    emails: Sequence[str],
    contacts: Mapping[str, ContactRecord],
) -> list[_Candidate]:
    has_surname = len(query.split()) >= 2
    candidates: list[_Candidate] = []
    seen: set[str] = set()

    for email in emails:
        if not email or email.lower() in seen:
            continue
        contact = _lookup(contacts, email)
        if contact is None:
            continue

        if contact.name and normalize_name(contact.name) == query:
            candidates.append(_Candidate(email=email, contact=contact, full_name=True))
            seen.add(email.lower())
        elif not has_surname and contact.given_name and normalize_name(contact.given_name) == query:
            candidates.append(_Candidate(email=email, contact=contact, full_name=False))
            seen.add(email.lower())

    return candidates


def _agrees(candidate: _Candidate, context: set[str], providers: list[str]) -> bool:
    return bool(company_keys(candidate.email, candidate.contact.organization, providers) & context)


def _matches_hint(candidate: _Candidate, company_hint: Optional[str]) -> bool:
    hint = normalize_name(company_hint)
    if not hint:
        return False
    return normalize_name(candidate.contact.organization) == hint


def resolve_participant_email(
    name: Optional[str],
    participants: Sequence[Participant],
    contacts: Mapping[str, ContactRecord],
    company_hint: Optional[str] = None,
    context_emails: Optional[Iterable[str]] = None,
    settings: Optional[MatcherSettings] = None,
) -> Optional[str]:
    """Resolve a bare name to one participant email.

    Args:
        name: Name to resolve (e.g., "Stephanie" or "Jon D. Jones").
        participants: Meeting roster; candidate emails come from here.
        contacts: Email to ContactRecord directory for the roster.
        company_hint: Explicit company supplied by the caller.
        context_emails: Emails of the other participants, used to infer
            company context. Defaults to every roster email.
        settings: Matcher settings (free email providers).

    Returns:
        Best email, or None when the name cannot be resolved safely.
    """
    query = normalize_name(name)
    if not query:
        return None

    settings = settings or get_settings()
    providers = list(settings.free_email_providers)
    emails = [p.email for p in participants if p.email]

    candidates = _collect_candidates(query, emails, contacts)
    if candidates:
        if context_emails is None:
            context_emails = emails
        context = build_company_context(
            context_emails,
            contacts,
            providers,
            exclude=[c.email for c in candidates],
        )
        return _choose_candidate(query, candidates, context, company_hint, providers)

    return _resolve_from_roster(query, participants)


def _choose_candidate(
    query: str,
    candidates: list[_Candidate],
    context: set[str],
    company_hint: Optional[str],
    providers: list[str],
) -> Optional[str]:
    full_matches = [c for c in candidates if c.full_name]

    if not full_matches:
        # First-name-only evidence: require company agreement, never guess
        agreeing = [c for c in candidates if _matches_hint(c, company_hint)]
        if not agreeing:
            agreeing = [c for c in candidates if _agrees(c, context, providers)]
        if not agreeing:
            logger.debug(
                "first_name_resolution_refused",
                name=query,
                candidates=len(candidates),
            )
            return None
        if len(agreeing) > 1:
            logger.debug("first_name_resolution_ambiguous", name=query, agreeing=len(agreeing))
        return agreeing[0].email

    if len(candidates) == 1:
        return candidates[0].email

    for candidate in candidates:
        if _matches_hint(candidate, company_hint):
            return candidate.email

    for candidate in candidates:
        if _agrees(candidate, context, providers):
            return candidate.email

    return full_matches[0].email


def _resolve_from_roster(query: str, participants: Sequence[Participant]) -> Optional[str]:
    """Match against roster names and names derived from email local parts."""
    for participant in participants:
        if not participant.email:
            continue
        if any(normalize_name(n) == query for n in participant.names):
            return participant.email

    for participant in participants:
        if participant.email and normalize_name(name_from_email(participant.email)) == query:
            return participant.email

    return None

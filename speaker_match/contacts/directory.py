"""Contact directory adapter interface and an in-memory implementation."""

from typing import Iterable, Optional, Protocol

import structlog

from speaker_match.matching.names import normalize_name
from speaker_match.models import ContactRecord

logger = structlog.get_logger(__name__)


class ContactDirectoryError(Exception):
    """Contact lookup failed (network, auth, malformed data)."""
    pass


class ContactDirectory(Protocol):
    """Lookup interface of the contacts integration."""

    async def find_contacts_by_emails(self, emails: list[str]) -> dict[str, ContactRecord]:
        """Map each known email (as given) to its contact record."""
        ...

    async def find_contact_by_name(self, name: str) -> Optional[ContactRecord]:
        """First contact whose display name equals `name` (case-insensitive)."""
        ...


class ContactIndex:
    """Email and name index over a list of contact records."""

    def __init__(self, contacts: Iterable[ContactRecord] = ()):
        self.by_email: dict[str, ContactRecord] = {}
        self.contacts: list[ContactRecord] = []
        for contact in contacts:
            self.add(contact)

    def add(self, contact: ContactRecord) -> None:
        emails = [e for e in contact.emails if e and e.strip()]
        if not emails:
            # Unreachable through email lookup; nothing to index
            return
        self.contacts.append(contact)
        for email in emails:
            self.by_email[email.strip().lower()] = contact

    def lookup_emails(self, emails: Iterable[str]) -> dict[str, ContactRecord]:
        results: dict[str, ContactRecord] = {}
        for email in emails:
            if not email:
                continue
            contact = self.by_email.get(email.strip().lower())
            if contact is not None:
                results[email] = contact
        return results

    def lookup_name(self, name: str) -> Optional[ContactRecord]:
        query = normalize_name(name)
        if not query:
            return None
        return next((c for c in self.contacts if normalize_name(c.name) == query), None)

    def __len__(self) -> int:
        return len(self.contacts)


class StaticContactDirectory:
    """Directory over a fixed set of contact records.

    Used for deterministic matching (tests, CLI input files).
    """

    def __init__(self, contacts: Iterable[ContactRecord] = ()):
        self._index = ContactIndex(contacts)

    async def find_contacts_by_emails(self, emails: list[str]) -> dict[str, ContactRecord]:
        if not emails:
            return {}
        return self._index.lookup_emails(emails)

    async def find_contact_by_name(self, name: str) -> Optional[ContactRecord]:
        return self._index.lookup_name(name)

"""Application-scoped contact cache.

The cache is an explicit object created once by the application and passed
to `CachedContactDirectory`; nothing is memoized at module level, so tests
can run against fixed contact sets.
"""

import time
from typing import Callable, Optional, Protocol

import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from speaker_match.config import MatcherSettings, get_settings
from speaker_match.contacts.directory import ContactDirectoryError, ContactIndex
from speaker_match.models import ContactRecord

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class ContactSource(Protocol):
    """Remote source of the full contact list (e.g., an address book API)."""

    async def fetch_all_contacts(self) -> list[ContactRecord]:
        ...


class ContactCache:
    """Time-bounded contact index."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._index: Optional[ContactIndex] = None
        self._loaded_at: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Optional[MatcherSettings] = None) -> "ContactCache":
        settings = settings or get_settings()
        return cls(ttl_seconds=settings.contact_cache_ttl_seconds)

    @property
    def is_fresh(self) -> bool:
        if self._index is None or self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at < self.ttl_seconds

    @property
    def index(self) -> Optional[ContactIndex]:
        return self._index

    @property
    def contact_count(self) -> int:
        return len(self._index) if self._index is not None else 0

    def store(self, contacts: list[ContactRecord]) -> ContactIndex:
        self._index = ContactIndex(contacts)
        self._loaded_at = self._clock()
        return self._index

    def clear(self) -> None:
        self._index = None
        self._loaded_at = None
        logger.info("contact_cache_cleared")


class CachedContactDirectory:
    """ContactDirectory backed by a ContactSource and a ContactCache.

    Transient source failures are retried with exponential backoff;
    ContactDirectoryError (e.g., revoked credentials) is not retried.
    """

    def __init__(
        self,
        source: ContactSource,
        cache: Optional[ContactCache] = None,
        fetch_attempts: int = 3,
        retry_wait=None,
    ):
        self.source = source
        self.cache = cache if cache is not None else ContactCache.from_settings()
        self.fetch_attempts = fetch_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=30)

    async def _fetch(self) -> list[ContactRecord]:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.fetch_attempts),
            wait=self.retry_wait,
            retry=retry_if_not_exception_type(ContactDirectoryError),
            reraise=True,
        ):
            with attempt:
                contacts = await self.source.fetch_all_contacts()
        return contacts

    async def _index(self, force_refresh: bool = False) -> ContactIndex:
        if not force_refresh and self.cache.is_fresh:
            return self.cache.index

        try:
            contacts = await self._fetch()
        except ContactDirectoryError:
            raise
        except Exception as e:
            logger.error("contact_fetch_failed", error=str(e))
            raise ContactDirectoryError(f"Failed to fetch contacts: {e}") from e

        index = self.cache.store(contacts)
        logger.info("contacts_fetched", total=len(contacts), with_email=len(index))
        return index

    async def refresh(self) -> int:
        """Bypass the cache and reload every contact. Returns the contact count."""
        index = await self._index(force_refresh=True)
        return len(index)

    async def find_contacts_by_emails(self, emails: list[str]) -> dict[str, ContactRecord]:
        if not emails:
            return {}
        index = await self._index()
        return index.lookup_emails(emails)

    async def find_contact_by_name(self, name: str) -> Optional[ContactRecord]:
        index = await self._index()
        return index.lookup_name(name)

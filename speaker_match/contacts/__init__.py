"""Contact directory adapters."""

from .directory import (
    ContactDirectory,
    ContactDirectoryError,
    ContactIndex,
    StaticContactDirectory,
)
from .cache import CachedContactDirectory, ContactCache, ContactSource

__all__ = [
    "ContactDirectory",
    "ContactDirectoryError",
    "ContactIndex",
    "StaticContactDirectory",
    "ContactSource",
    "ContactCache",
    "CachedContactDirectory",
]

"""Configuration for speaker matching."""

from .settings import MatcherSettings, get_settings

__all__ = ["MatcherSettings", "get_settings"]

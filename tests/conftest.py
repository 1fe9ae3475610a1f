"""Pytest configuration and fixtures."""

from typing import Optional

import pytest

from speaker_match.config import MatcherSettings
from speaker_match.models import (
    ContactRecord,
    Participant,
    SpeechSegment,
    SpeechTimeline,
    TimelineParticipant,
    Utterance,
    Word,
)


def _make_utterance(
    speaker: str,
    start_ms: int,
    end_ms: Optional[int] = None,
    text: str = "thanks for joining everyone",
    speaker_name: Optional[str] = None,
) -> Utterance:
    """Utterance whose single word ends at `end_ms` (no words if None)."""
    words = []
    if end_ms is not None:
        words = [Word(text=text.split()[-1], start_ms=start_ms, end_ms=end_ms)]
    return Utterance(
        speaker=speaker,
        text=text,
        start_ms=start_ms,
        words=words,
        speaker_name=speaker_name,
    )


def _make_timeline(segments: dict[str, list[tuple[int, int]]]) -> SpeechTimeline:
    """Timeline from {participant name: [(start, end), ...]}."""
    return SpeechTimeline(
        participants=[
            TimelineParticipant(
                name=name,
                segments=[SpeechSegment(start_ms=s, end_ms=e) for s, e in spans],
            )
            for name, spans in segments.items()
        ]
    )


@pytest.fixture
def make_utterance():
    """Factory for utterances."""
    return _make_utterance


@pytest.fixture
def make_timeline():
    """Factory for speech timelines."""
    return _make_timeline


@pytest.fixture
def settings() -> MatcherSettings:
    """Default settings, isolated from the environment and .env files."""
    return MatcherSettings(_env_file=None, owner_email="", owner_name="")


@pytest.fixture
def two_speaker_transcript() -> list[Utterance]:
    """Speaker A inside [0, 14000] ms, speaker B inside [15000, 30000] ms."""
    return [
        _make_utterance("A", 1000, 3000, "good morning and welcome"),
        _make_utterance("B", 18000, 20000, "thanks jenn happy to be here"),
        _make_utterance("A", 5000, 7000, "let's start with the roadmap"),
        _make_utterance("B", 22000, 25000, "sure the roadmap looks good to me"),
        _make_utterance("A", 9000, 12000, "any questions so far"),
        _make_utterance("B", 26000, 29000, "none from my side"),
    ]


@pytest.fixture
def two_speaker_timeline() -> SpeechTimeline:
    return _make_timeline({
        "Jenn Kenning": [(0, 14000)],
        "Jon D. Jones": [(15000, 30000)],
    })


@pytest.fixture
def acme_participants() -> list[Participant]:
    return [
        Participant(name="Jenn Kenning", email="jenn@acme.com", is_host=True,
                    given_name="Jenn", family_name="Kenning"),
        Participant(name="Jon D. Jones", email="jon.jones@acme.com",
                    given_name="Jon", family_name="Jones"),
    ]


@pytest.fixture
def acme_contacts() -> list[ContactRecord]:
    return [
        ContactRecord(name="Jenn Kenning", given_name="Jenn", family_name="Kenning",
                      organization="Acme", emails=["jenn@acme.com"]),
        ContactRecord(name="Jon D. Jones", given_name="Jon", family_name="Jones",
                      organization="Acme", emails=["jon.jones@acme.com"]),
    ]

"""Unit tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from speaker_match.models import (
    ConfidenceLevel,
    MatchMethod,
    MatchResult,
    OwnerIdentity,
    Participant,
    SpeakerMapping,
    SpeakerStats,
    SpeechTimeline,
    TimelineParticipant,
    Utterance,
    Word,
)


def _result(speaker, name, email=None, confidence=ConfidenceLevel.MEDIUM):
    return MatchResult(
        speaker=speaker,
        resolved_name=name,
        resolved_email=email,
        confidence=confidence,
        method=MatchMethod.SPEECH_TIMELINE,
    )


class TestConfidenceLevel:
    """Tests for ConfidenceLevel ordering."""

    def test_ordering(self):
        assert ConfidenceLevel.NONE < ConfidenceLevel.LOW < ConfidenceLevel.MEDIUM < ConfidenceLevel.HIGH
        assert ConfidenceLevel.HIGH >= ConfidenceLevel.MEDIUM
        assert max([ConfidenceLevel.LOW, ConfidenceLevel.HIGH, ConfidenceLevel.MEDIUM]) == ConfidenceLevel.HIGH

    def test_values(self):
        assert ConfidenceLevel("medium") == ConfidenceLevel.MEDIUM
        assert ConfidenceLevel.HIGH.value == "high"


class TestUtterance:
    """Tests for Utterance model."""

    def test_end_from_last_word(self):
        utterance = Utterance(
            speaker="A",
            text="hello there",
            start_ms=1000,
            words=[Word(text="hello", start_ms=1000, end_ms=1400), Word(text="there", start_ms=1500, end_ms=1900)],
        )
        assert utterance.end_ms == 1900
        assert utterance.word_count == 2

    def test_end_falls_back_to_start(self):
        assert Utterance(speaker="A", start_ms=1000).end_ms == 1000
        assert Utterance(speaker="A", start_ms=1000, words=[Word(text="hi")]).end_ms == 1000

    def test_negative_start_rejected(self):
        with pytest.raises(ValidationError):
            Utterance(speaker="A", start_ms=-1)

    def test_frozen(self):
        utterance = Utterance(speaker="A")
        with pytest.raises(ValidationError):
            utterance.speaker = "B"


class TestRosterModels:
    """Tests for participant, timeline and owner models."""

    def test_participant_names(self):
        participant = Participant(name="Jenn Kenning", original_name="jenn k")
        assert participant.names == ["Jenn Kenning", "jenn k"]
        assert Participant(email="x@acme.com").names == []

    def test_timeline_is_empty(self):
        assert SpeechTimeline().is_empty
        assert SpeechTimeline(participants=[TimelineParticipant(name="Jenn")]).is_empty

    def test_owner_is_empty(self):
        assert OwnerIdentity(emails=[" "], names=[""]).is_empty
        assert not OwnerIdentity(names=["Jenn"]).is_empty


class TestSpeakerMapping:
    """Tests for SpeakerMapping."""

    def test_add_is_write_once(self):
        mapping = SpeakerMapping()

        assert mapping.add(_result("A", "Jenn Kenning")) is True
        assert mapping.add(_result("A", "Jon Jones")) is False
        assert mapping.get("A").resolved_name == "Jenn Kenning"

    def test_merge_returns_added_labels(self):
        mapping = SpeakerMapping()
        mapping.add(_result("A", "Jenn Kenning"))

        added = mapping.merge([_result("A", "Jon Jones"), _result("B", "Jon Jones")])

        assert added == ["B"]
        assert mapping.labels == {"A", "B"}
        assert "B" in mapping
        assert len(mapping) == 2

    def test_claimed_identities(self):
        mapping = SpeakerMapping()
        mapping.merge([
            _result("A", "Jenn Kenning", "Jenn@Acme.com"),
            _result("B", "Unknown Speaker (B)", confidence=ConfidenceLevel.NONE),
        ])

        assert mapping.claimed_emails() == {"jenn@acme.com"}
        assert mapping.claimed_names() == {"jenn kenning"}
        assert mapping.claimed_emails(ConfidenceLevel.HIGH) == set()

    def test_to_dict(self):
        mapping = SpeakerMapping()
        mapping.add(_result("A", "Jenn Kenning"))

        data = mapping.to_dict()

        assert data["A"]["confidence"] == "medium"
        assert data["A"]["method"] == "speech-timeline"


class TestSpeakerStats:
    """Tests for SpeakerStats."""

    def test_talk_duration(self):
        stats = SpeakerStats(speaker="A", first_appearance_ms=1000, last_appearance_ms=4500)
        assert stats.talk_duration_ms == 3500

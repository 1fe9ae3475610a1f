"""Unit tests for the speaker matching orchestrator."""

import asyncio

from speaker_match.contacts import ContactDirectoryError, StaticContactDirectory
from speaker_match.models import (
    ConfidenceLevel,
    CurrentUserMethod,
    MatchMethod,
    OwnerIdentity,
    Participant,
)
from speaker_match.pipeline import PASSES, match_speakers


class CountingDirectory(StaticContactDirectory):
    """Static directory that records every batch lookup."""

    def __init__(self, contacts=()):
        super().__init__(contacts)
        self.calls: list[list[str]] = []

    async def find_contacts_by_emails(self, emails):
        self.calls.append(list(emails))
        return await super().find_contacts_by_emails(emails)


class FailingDirectory:
    async def find_contacts_by_emails(self, emails):
        raise ContactDirectoryError("address book unavailable")

    async def find_contact_by_name(self, name):
        raise ContactDirectoryError("address book unavailable")


def _run(*args, **kwargs):
    return asyncio.run(match_speakers(*args, **kwargs))


class TestMatchSpeakers:
    """Tests for match_speakers."""

    def test_pass_order(self):
        assert [name for name, _ in PASSES] == [
            "timeline",
            "identified_speaker",
            "single_speaker_owner",
            "heuristic",
        ]

    def test_timeline_meeting(
        self, two_speaker_transcript, two_speaker_timeline, acme_participants, acme_contacts, settings
    ):
        directory = CountingDirectory(acme_contacts)

        outcome = _run(
            two_speaker_transcript,
            acme_participants,
            directory=directory,
            timeline=two_speaker_timeline,
            settings=settings,
        )
        mapping = outcome.mapping

        assert mapping.labels == {"A", "B"}
        assert mapping.get("A").resolved_email == "jenn@acme.com"
        assert mapping.get("B").resolved_email == "jon.jones@acme.com"
        assert mapping.get("A").method == MatchMethod.SPEECH_TIMELINE
        assert outcome.pass_counts["timeline"] == 2
        assert outcome.pass_counts["heuristic"] == 0
        assert len(directory.calls) == 1

    def test_transcriber_names_do_not_override_timeline(
        self, make_utterance, two_speaker_timeline, acme_participants, settings
    ):
        # The transcriber swapped the names; the timeline is authoritative
        transcript = [
            make_utterance("A", 1000, 3000, speaker_name="Jon D. Jones"),
            make_utterance("A", 5000, 7000, speaker_name="Jon D. Jones"),
            make_utterance("B", 18000, 20000, speaker_name="Jenn Kenning"),
            make_utterance("B", 22000, 25000, speaker_name="Jenn Kenning"),
        ]

        outcome = _run(transcript, acme_participants, timeline=two_speaker_timeline, settings=settings)

        assert outcome.mapping.get("A").resolved_name == "Jenn Kenning"
        assert outcome.mapping.get("B").resolved_name == "Jon D. Jones"
        assert outcome.pass_counts["identified_speaker"] == 0

    def test_timeline_match_excludes_participant_from_fallback(
        self, two_speaker_transcript, make_timeline, acme_participants, settings
    ):
        timeline = make_timeline({"Jenn Kenning": [(0, 14000)]})

        outcome = _run(two_speaker_transcript, acme_participants, timeline=timeline, settings=settings)
        b = outcome.mapping.get("B")

        assert outcome.mapping.get("A").resolved_name == "Jenn Kenning"
        assert b.resolved_name == "Jon D. Jones"
        assert b.method == MatchMethod.COUNT_MATCH
        assert b.needs_verification is True

    def test_two_speaker_fallback(self, two_speaker_transcript, acme_participants, settings):
        outcome = _run(two_speaker_transcript, acme_participants, settings=settings)

        assert outcome.mapping.get("A").resolved_name == "Jenn Kenning"
        assert outcome.mapping.get("B").resolved_name == "Jon D. Jones"
        for label in ("A", "B"):
            result = outcome.mapping.get(label)
            assert result.method == MatchMethod.SYMMETRIC_PAIR
            assert result.confidence == ConfidenceLevel.LOW
            assert result.needs_verification is True

    def test_every_label_is_mapped(self, make_utterance, settings):
        transcript = [make_utterance(label, i * 1000, i * 1000 + 500) for i, label in enumerate("ABCD")]
        participants = [Participant(name="Jenn Kenning", email="jenn@acme.com")]

        outcome = _run(transcript, participants, settings=settings)

        assert outcome.mapping.labels == {"A", "B", "C", "D"}
        unknown = [r for r in outcome.mapping.results.values() if r.method == MatchMethod.UNMATCHED]
        assert len(unknown) == 3
        assert all(r.confidence == ConfidenceLevel.NONE for r in unknown)

    def test_directory_failure_is_surfaced(
        self, two_speaker_transcript, two_speaker_timeline, acme_participants, settings
    ):
        outcome = _run(
            two_speaker_transcript,
            acme_participants,
            directory=FailingDirectory(),
            timeline=two_speaker_timeline,
            settings=settings,
        )

        assert outcome.contact_error == "ContactDirectoryError: address book unavailable"
        assert outcome.mapping.labels == {"A", "B"}

    def test_single_speaker_is_owner(self, make_utterance, acme_participants, settings):
        transcript = [make_utterance("A", 0, 1000), make_utterance("A", 2000, 3000)]
        owner = OwnerIdentity(emails=["jon.jones@acme.com"])

        outcome = _run(transcript, acme_participants, owner=owner, settings=settings)
        result = outcome.mapping.get("A")

        assert result.resolved_name == "Jon D. Jones"
        assert result.method == MatchMethod.SINGLE_SPEAKER_OWNER
        assert result.confidence == ConfidenceLevel.MEDIUM
        assert outcome.current_user.speaker == "A"
        assert outcome.current_user.method == CurrentUserMethod.EMAIL_MATCH

    def test_owner_from_settings(self, make_utterance, acme_participants, settings):
        settings.owner_name = "Jon D. Jones"
        transcript = [make_utterance("A", 0, 1000)]

        outcome = _run(transcript, acme_participants, settings=settings)

        assert outcome.mapping.get("A").method == MatchMethod.SINGLE_SPEAKER_OWNER
        assert outcome.current_user.method == CurrentUserMethod.NAME_MATCH

    def test_empty_inputs(self, two_speaker_transcript, acme_participants, settings):
        directory = CountingDirectory()

        assert len(_run([], acme_participants, directory=directory, settings=settings).mapping) == 0
        assert len(_run(two_speaker_transcript, [], directory=directory, settings=settings).mapping) == 0
        assert directory.calls == []

    def test_speaker_stats(self, two_speaker_transcript, acme_participants, settings):
        outcome = _run(two_speaker_transcript, acme_participants, settings=settings)
        stats = {s.speaker: s for s in outcome.speaker_stats}

        assert stats["A"].utterance_count == 3
        assert stats["A"].first_appearance_ms == 1000
        assert stats["B"].last_appearance_ms == 29000

    def test_shared_first_name_stays_available(self, two_speaker_transcript, make_timeline, settings):
        participants = [
            Participant(name="John Smith", email="john.smith@acme.com"),
            Participant(name="John Doe", email="john.doe@acme.com"),
        ]
        timeline = make_timeline({"John Smith": [(0, 14000)]})

        outcome = _run(two_speaker_transcript, participants, timeline=timeline, settings=settings)

        assert outcome.mapping.get("A").resolved_name == "John Smith"
        assert outcome.mapping.get("B").resolved_name == "John Doe"
        assert outcome.mapping.get("B").method == MatchMethod.COUNT_MATCH

    def test_transcriber_name_with_shared_first_name(self, make_utterance, make_timeline, settings):
        participants = [
            Participant(name="John Smith", email="john.smith@acme.com"),
            Participant(name="John Doe", email="john.doe@acme.com"),
            Participant(name="Priya Patel", email="priya@acme.com"),
        ]
        transcript = [
            make_utterance("A", 1000, 3000),
            make_utterance("A", 5000, 7000),
            make_utterance("B", 18000, 20000, speaker_name="John Doe"),
            make_utterance("B", 22000, 25000, speaker_name="John Doe"),
        ]
        timeline = make_timeline({"John Smith": [(0, 14000)]})

        outcome = _run(transcript, participants, timeline=timeline, settings=settings)
        b = outcome.mapping.get("B")

        assert b.resolved_name == "John Doe"
        assert b.resolved_email == "john.doe@acme.com"
        assert b.method == MatchMethod.TRANSCRIPT_SPEAKER_NAME

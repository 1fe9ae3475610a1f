"""Command-line interface for speaker matching."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from speaker_match.config import get_settings
from speaker_match.contacts import StaticContactDirectory
from speaker_match.matching import detect_duplicate_speakers, summarize_speakers
from speaker_match.models import (
    ContactRecord,
    MatchOutcome,
    OwnerIdentity,
    Participant,
    SpeechTimeline,
    Utterance,
)
from speaker_match.pipeline import apply_mapping, format_transcript, match_speakers

# Configure structlog for CLI
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="speaker-match",
    help="Identify the speakers of a diarized meeting transcript",
    add_completion=False,
)
console = Console()


class MeetingInput(BaseModel):
    """Input file layout for the CLI."""

    transcript: list[Utterance] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)
    speech_timeline: Optional[SpeechTimeline] = None
    contacts: list[ContactRecord] = Field(default_factory=list)
    owner: Optional[OwnerIdentity] = None
    company_hint: Optional[str] = None


def _load_meeting(path: Path) -> MeetingInput:
    with open(path, "r", encoding="utf-8") as f:
        return MeetingInput.model_validate(json.load(f))


@app.command()
def match(
    meeting_path: Path = typer.Argument(
        ...,
        help="Path to the meeting JSON (transcript, participants, contacts, speech_timeline)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for mapping + updated transcript (default: <name>_speakers.json)",
    ),
    show_transcript: bool = typer.Option(
        False,
        "--show-transcript",
        help="Print the transcript with identified names",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Map diarization labels to meeting participants."""
    settings = get_settings()
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level.upper())

    if output is None:
        output = meeting_path.with_name(f"{meeting_path.stem}_speakers.json")

    try:
        meeting = _load_meeting(meeting_path)
    except (ValidationError, json.JSONDecodeError) as e:
        console.print(f"[red]Invalid meeting file:[/red] {e}")
        sys.exit(1)

    outcome = asyncio.run(
        match_speakers(
            meeting.transcript,
            meeting.participants,
            directory=StaticContactDirectory(meeting.contacts),
            timeline=meeting.speech_timeline,
            owner=meeting.owner,
            company_hint=meeting.company_hint,
            settings=settings,
        )
    )
    updated = apply_mapping(meeting.transcript, outcome.mapping)

    report = {
        "speaker_mapping": outcome.mapping.to_dict(),
        "current_user": outcome.current_user.model_dump(mode="json") if outcome.current_user else None,
        "contact_error": outcome.contact_error,
        "speaker_summary": summarize_speakers({s.speaker: s for s in outcome.speaker_stats}),
        "transcript": [u.model_dump(mode="json", exclude_none=True) for u in updated],
    }
    with open(output, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)

    _display_mapping(outcome)

    if show_transcript:
        console.print()
        console.print(format_transcript(updated))

    console.print(f"\n[green]Mapping saved to:[/green] {output}")


@app.command()
def duplicates(
    meeting_path: Path = typer.Argument(
        ...,
        help="Path to the meeting JSON",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """List transcriber speaker names that probably belong to the same person."""
    try:
        meeting = _load_meeting(meeting_path)
    except (ValidationError, json.JSONDecodeError) as e:
        console.print(f"[red]Invalid meeting file:[/red] {e}")
        sys.exit(1)

    names = list(dict.fromkeys(
        u.speaker_name.strip() for u in meeting.transcript if u.speaker_name and u.speaker_name.strip()
    ))
    found = detect_duplicate_speakers(names)

    if not found.auto_merge and not found.suggestions:
        console.print("[green]No duplicate speakers found.[/green]")
        return

    for merge in found.auto_merge:
        console.print(f"[yellow]merge[/yellow] {merge['from']} -> {merge['to']} [dim]({merge['reason']})[/dim]")
    for suggestion in found.suggestions:
        console.print(
            f"[blue]check[/blue] {' / '.join(suggestion['speakers'])} [dim]({suggestion['reason']})[/dim]"
        )


@app.command()
def info() -> None:
    """Display matcher configuration."""
    from speaker_match import __version__

    settings = get_settings()

    console.print(
        Panel.fit(
            "[bold blue]Speaker Match[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("Timeline tolerance", f"{settings.timeline_tolerance_ms} ms")
    table.add_row("Timeline votes (medium / high)",
                  f"{settings.timeline_min_votes} / {settings.timeline_high_confidence_votes}")
    table.add_row("First speaker is host", str(settings.first_speaker_is_host))
    table.add_row("Prefer host for two speakers", str(settings.prefer_host_for_two_speakers))
    table.add_row("Single speaker is owner", str(settings.single_speaker_is_owner))
    table.add_row("Owner", settings.owner_name or settings.owner_email or "-")

    console.print(table)


def _display_mapping(outcome: MatchOutcome) -> None:
    """Display the speaker mapping as a table.

    Args:
        outcome: Result of match_speakers.
    """
    console.print("\n[bold]Speaker Mapping[/bold]")

    table = Table()
    table.add_column("Label")
    table.add_column("Name")
    table.add_column("Email", style="dim")
    table.add_column("Confidence")
    table.add_column("Method", style="dim")

    colors = {"high": "green", "medium": "cyan", "low": "yellow", "none": "red"}
    for speaker, result in outcome.mapping.results.items():
        confidence = result.confidence.value
        flag = " [yellow](verify)[/yellow]" if result.needs_verification else ""
        table.add_row(
            speaker,
            result.resolved_name,
            result.resolved_email or "",
            f"[{colors[confidence]}]{confidence}[/{colors[confidence]}]{flag}",
            result.method.value,
        )

    console.print(table)

    if outcome.current_user:
        console.print(
            f"[dim]Recording owner:[/dim] {outcome.current_user.speaker} "
            f"({outcome.current_user.confidence.value}, {outcome.current_user.method.value})"
        )
    if outcome.contact_error:
        console.print(f"[yellow]Contact lookup failed:[/yellow] {outcome.contact_error}")


if __name__ == "__main__":
    app()

"""
cadence.cli - Typer CLI entry point.

Runs delivery analysis on a transcript (and optional audio) and renders
saved reports.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from cadence import __version__
from cadence.config import CONFIG_FILENAME, CadenceConfig, SegmentSettings
from cadence.exceptions import CadenceError
from cadence.models import DeliveryAnalytics
from cadence.utils import format_duration

app = typer.Typer(
    name="cadence",
    help="Delivery analytics for recorded presentations.\n\n"
    "Measures pace, filler words, pauses, pacing by section, vocal energy "
    "and pitch from a timestamped transcript and the talk's audio.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"cadence {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Cadence - delivery analytics for recorded presentations."""
    pass


def _load_config(config_path: Path | None, profile: str | None) -> CadenceConfig:
    from cadence.config import load_config, resolve_config

    if config_path is not None:
        config = load_config(config_path)
        if profile and profile != config.profile:
            console.print(
                f"[yellow]Ignoring --profile {profile}: config file sets '{config.profile}'[/yellow]"
            )
        return config

    if profile is None and Path(CONFIG_FILENAME).exists():
        return load_config(Path(CONFIG_FILENAME))

    return resolve_config({"profile": profile or "presentation"})


def _build_labeler(kind: str, config: CadenceConfig):
    from cadence.analyze.segments import heuristic_topic_label

    if kind == "heuristic":
        return heuristic_topic_label

    from cadence.llm.client import create_client_from_config
    from cadence.llm.topics import LLMTopicLabeler

    if config.llm.backend == "ollama":
        from cadence.validation import check_ollama_running

        status = check_ollama_running(config.llm.model)
        if not status["running"]:
            console.print(f"[yellow]Warning: {status['error']}[/yellow]")
        elif not status["model_available"]:
            console.print(
                f"[yellow]Warning: model '{config.llm.model}' may not be pulled. "
                f"Run: ollama pull {config.llm.model}[/yellow]"
            )

    return LLMTopicLabeler(create_client_from_config(config))


def print_overview(analytics: DeliveryAnalytics) -> None:
    """Print a compact rich table of the headline numbers."""
    table = Table(title="Delivery Analytics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Duration", format_duration(analytics.total_duration_seconds))
    table.add_row("Words", str(len(analytics.words)))
    table.add_row("Average pace", f"{analytics.average_wpm:.0f} WPM")
    table.add_row("Pace variation", f"{analytics.pace_variation:.1f} WPM")
    table.add_row(
        "Fillers",
        f"{analytics.total_filler_count} ({analytics.fillers_per_minute:.1f}/min)",
    )
    table.add_row("Pauses", str(analytics.total_pause_count))
    if analytics.longest_pause is not None:
        table.add_row("Longest pause", f"{analytics.longest_pause.duration:.1f}s")
    table.add_row("Content segments", str(len(analytics.content_segments)))

    if analytics.audio_analyzed:
        table.add_row("Average energy", f"{analytics.average_energy_db:.1f} dB")
        table.add_row("Peak energy", f"{analytics.peak_energy_db:.1f} dB")
        table.add_row("Average pitch", f"{analytics.average_pitch_hz:.0f} Hz")
        table.add_row("Pitch range", f"{analytics.pitch_range_semitones:.1f} st")
        table.add_row("Voiced ratio", f"{analytics.overall_voiced_ratio:.0%}")
    else:
        table.add_row("Audio", "[dim]not analyzed[/dim]")

    console.print(table)


@app.command("analyze")
def analyze(
    transcript: Path = typer.Argument(..., help="Transcript JSON with timestamped words"),
    audio: Path | None = typer.Option(None, "--audio", "-a", help="Audio or video file"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help=f"Config file (default: ./{CONFIG_FILENAME} if present)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Profile: presentation, pitch, or lecture"
    ),
    labeler: str | None = typer.Option(
        None, "--labeler", "-l", help="Topic labeler: heuristic or llm"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write report JSON here"),
    summary: bool = typer.Option(False, "--summary", "-s", help="Print the text summary"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Analyze delivery of one talk."""
    from cadence.analyze.engine import analyze_delivery
    from cadence.extract.audio import audio_decoder
    from cadence.io import load_transcript_words, write_json
    from cadence.logging import configure_logging
    from cadence.reports.summary import format_analytics_summary
    from cadence.timeline import build_timeline, timeline_duration
    from cadence.validation import (
        validate_audio_file,
        validate_talk_duration,
        validate_transcript_file,
    )

    configure_logging(verbose)

    try:
        config = _load_config(config_path, profile)
        if labeler is not None:
            segments = SegmentSettings(**{**config.segments.model_dump(), "labeler": labeler})
            config = config.model_copy(update={"segments": segments})

        validate_transcript_file(transcript)
        words = build_timeline(load_transcript_words(transcript))

        audio_source = None
        if audio is not None:
            validate_audio_file(audio)
            audio_source = audio_decoder(audio, config.audio.sample_rate)

        for warning in validate_talk_duration(timeline_duration(words))["warnings"]:
            console.print(f"[yellow]Warning: {warning}[/yellow]")

        topic_labeler = _build_labeler(config.segments.labeler, config)

        console.print(
            f"[cyan]Analyzing {transcript.name}[/cyan] "
            f"[dim]({len(words)} words, profile '{config.profile}')[/dim]"
        )
        result = analyze_delivery(
            words,
            audio=audio_source,
            labeler=topic_labeler,
            config=config,
            analyzed_at=datetime.now().isoformat(timespec="seconds"),
        )
    except (CadenceError, FileNotFoundError, PydanticValidationError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if audio is not None and not result.audio_analyzed:
        console.print("[yellow]Audio could not be analyzed; report has text metrics only[/yellow]")

    if output is not None:
        write_json(output, result.to_dict())
        console.print(f"[green]✓[/green] Report written to {output}")

    print_overview(result)

    if summary:
        console.print()
        console.print(
            format_analytics_summary(result, pause_threshold=config.pauses.min_duration_seconds),
            markup=False,
            highlight=False,
        )


@app.command("summary")
def show_summary(
    report: Path = typer.Argument(..., help="Report JSON written by 'cadence analyze -o'"),
) -> None:
    """Print the text summary of a saved report."""
    from cadence.io import read_json
    from cadence.reports.summary import format_analytics_summary

    try:
        analytics = DeliveryAnalytics.from_dict(read_json(report))
    except FileNotFoundError:
        console.print(f"[red]Error: Report not found: {report}[/red]")
        raise typer.Exit(1)
    except (PydanticValidationError, ValueError) as e:
        console.print(f"[red]Error: Invalid report {report.name}: {e}[/red]")
        raise typer.Exit(1)

    console.print(format_analytics_summary(analytics), markup=False, highlight=False)


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path(CONFIG_FILENAME), help="Where to write the config"),
    profile: str = typer.Option(
        "presentation", "--profile", "-p", help="Profile: presentation, pitch, or lecture"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a fully spelled-out config file for a profile."""
    from cadence.config import create_default_config, write_config

    if path.exists() and not force:
        console.print(f"[red]Error: '{path}' already exists (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    try:
        config = create_default_config(profile)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    write_config(config, path)
    console.print(f"[green]✓[/green] Wrote '{profile}' config to {path}")


if __name__ == "__main__":
    app()

"""
videoflow CLI - terminal front end for the video production tracker.

Usage:
    videoflow phases                         - Show video counts per phase
    videoflow list --phase 4                 - List videos in a phase
    videoflow show NAME CATEGORY             - Show phase and aspect progress
    videoflow menu                           - Interactive phase/video/aspect browser
    videoflow create NAME CATEGORY           - Create an empty video
    videoflow set NAME CATEGORY ASPECT FIELD VALUE
    videoflow delete NAME CATEGORY           - Delete a video and its files
    videoflow move NAME CATEGORY TARGET      - Move a video to another category
    videoflow aspects [KEY]                  - Show the aspect catalog
    videoflow serve                          - Run the REST API
"""

from __future__ import annotations

import functools
import sys
from pathlib import Path
from typing import Any, Callable

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from videoflow.app import create_app
from videoflow.config import get_paths, load_settings
from videoflow.errors import VideoflowError
from videoflow.logging_setup import setup_logging
from videoflow.models import Tasks, Video
from videoflow.services.aspects import (
    FIELD_TYPE_BOOLEAN,
    aspect_values,
    get_aspect,
    get_aspects,
    video_progress,
)
from videoflow.services.completion import is_complete, is_sponsored
from videoflow.services.phases import (
    PHASE_MENU_ORDER,
    Phase,
    infer_phase,
    parse_phase,
)
from videoflow.services.videos import VideoService

console = Console(highlight=False)

TRUE_WORDS = ("true", "yes", "y", "1")
FALSE_WORDS = ("false", "no", "n", "0")


# =============================================================================
# FORMATTING
# =============================================================================

def progress_suffix(tasks: Tasks) -> str:
    return f"({tasks.completed}/{tasks.total})"


def display_title(video: Video) -> str:
    """Decorate a video name with its date, sponsorship and block markers."""

    title = video.name
    if video.sponsorship.blocked:
        reason = video.sponsorship.blocked
        if reason in ("-", "N/A"):
            reason = "B"
        title = f"{title} ({reason})"
    else:
        if video.date:
            title = f"{title} ({video.date})"
        if is_sponsored(video.sponsorship.amount):
            title = f"{title} (S)"
    if video.category == "ama":
        title = f"{title} (AMA)"
    return title


def aspect_lines(video: Video) -> list[str]:
    """Return one "Title (completed/total)" line per aspect."""

    progress = video_progress(video)
    return [
        f"{aspect.title} {progress_suffix(progress[aspect.key])}"
        for aspect in get_aspects()
    ]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value) if value else "-"


def _parse_value(field_type: str, raw: str) -> Any:
    if field_type != FIELD_TYPE_BOOLEAN:
        return raw
    lowered = raw.strip().lower()
    if lowered in TRUE_WORDS:
        return True
    if lowered in FALSE_WORDS:
        return False
    raise click.BadParameter(f"expected a boolean, got {raw!r}", param_hint="VALUE")


def create_aspect_table(video: Video, aspect_key: str) -> Table:
    """Build a table of one aspect's field values and completion marks."""

    aspect = get_aspect(aspect_key)
    values = aspect_values(video, aspect_key)
    table = Table(title=aspect.title, box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_column("Done", justify="center")
    for spec in aspect.fields:
        done = is_complete(values[spec.key], spec.criterion, video.sponsorship.amount)
        table.add_row(
            escape(spec.title),
            escape(_format_value(values[spec.key])),
            "[green]x[/green]" if done else "",
        )
    return table


def handle_errors(func: Callable) -> Callable:
    """Turn domain errors into click errors with a non-zero exit status."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except VideoflowError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _phase_option(_ctx, _param, value):
    if value is None:
        return None
    try:
        return parse_phase(value)
    except ValueError as exc:
        raise click.BadParameter(f"unknown phase id {value}") from exc


# =============================================================================
# CLI COMMANDS
# =============================================================================

@click.group()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root holding index.yaml and manuscript/ (defaults to VIDEOFLOW_ROOT or cwd)",
)
@click.pass_context
def cli(ctx: click.Context, root: Path | None) -> None:
    """videoflow - track videos from idea to publication."""

    paths = get_paths(root)
    settings = load_settings(paths)
    setup_logging(paths.logs_dir, settings.log_level, stream=sys.stderr)
    ctx.ensure_object(dict)
    ctx.obj["paths"] = paths
    ctx.obj["settings"] = settings
    ctx.obj["service"] = VideoService(paths)


@cli.command()
@click.pass_context
@handle_errors
def phases(ctx: click.Context) -> None:
    """Show how many videos are in each phase."""

    counts = ctx.obj["service"].get_phase_counts()
    shown = [phase for phase in PHASE_MENU_ORDER if counts[phase] > 0]
    if not shown:
        console.print("[dim]No videos yet.[/dim]")
        return
    for phase in shown:
        console.print(f"{phase.title} ({counts[phase]})")


@cli.command(name="list")
@click.option("--phase", "-p", type=int, callback=_phase_option, default=None,
              help="Phase id (0 Published ... 7 Ideas)")
@click.pass_context
@handle_errors
def list_videos(ctx: click.Context, phase: Phase | None) -> None:
    """List videos, optionally only those in one phase."""

    service: VideoService = ctx.obj["service"]
    entries = service.list_entries(phase)
    if not entries:
        console.print("[dim]No videos found.[/dim]")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("Video", style="white")
    table.add_column("Category", style="cyan")
    table.add_column("Phase", style="magenta")
    for entry, video in entries:
        shown = video if not video.is_empty() else Video(name=entry.name, category=entry.category)
        table.add_row(
            escape(display_title(shown)),
            escape(entry.category),
            infer_phase(video).title,
        )
    console.print(table)


@cli.command()
@click.argument("name")
@click.argument("category")
@click.pass_context
@handle_errors
def show(ctx: click.Context, name: str, category: str) -> None:
    """Show a video's phase and per-aspect progress."""

    video = ctx.obj["service"].get_video(name, category)
    console.print(f"[bold]{escape(display_title(video))}[/bold]")
    console.print(f"Phase: {infer_phase(video).title}")
    for line in aspect_lines(video):
        console.print(f"  {line}")


@cli.command()
@click.argument("name")
@click.argument("category")
@click.pass_context
@handle_errors
def create(ctx: click.Context, name: str, category: str) -> None:
    """Create an empty video and add it to the index."""

    video = ctx.obj["service"].create_video(name, category)
    console.print(f"[green]Created[/green] {escape(video.name)} in {escape(video.category)}")
    console.print(f"  Manuscript: {escape(video.gist)}")


@cli.command(name="set")
@click.argument("name")
@click.argument("category")
@click.argument("aspect_key", metavar="ASPECT")
@click.argument("field_key", metavar="FIELD")
@click.argument("value")
@click.pass_context
@handle_errors
def set_field(
    ctx: click.Context, name: str, category: str, aspect_key: str, field_key: str, value: str
) -> None:
    """Set one field of a video, e.g. `set my-video devops work-progress codeDone yes`."""

    spec = get_aspect(aspect_key).field(field_key)
    if spec is None:
        raise click.BadParameter(
            f"{field_key} is not a field of {aspect_key}", param_hint="FIELD"
        )
    service: VideoService = ctx.obj["service"]
    video = service.update_aspect(
        name, category, aspect_key, {field_key: _parse_value(spec.field_type, value)}
    )
    console.print(f"Phase: {infer_phase(video).title}")
    console.print(
        f"{get_aspect(aspect_key).title} {progress_suffix(video_progress(video)[aspect_key])}"
    )


@cli.command()
@click.argument("name")
@click.argument("category")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@handle_errors
def delete(ctx: click.Context, name: str, category: str, yes: bool) -> None:
    """Delete a video, its sibling files and its index entry."""

    if not yes:
        click.confirm(f"Delete {name} ({category})?", abort=True)
    removed = ctx.obj["service"].delete_video(name, category)
    console.print(f"[red]Deleted[/red] {escape(name)} ({len(removed)} file(s) removed)")


@cli.command()
@click.argument("name")
@click.argument("category")
@click.argument("target_category")
@click.pass_context
@handle_errors
def move(ctx: click.Context, name: str, category: str, target_category: str) -> None:
    """Move a video to another category."""

    video = ctx.obj["service"].move_video(name, category, target_category)
    console.print(f"Moved {escape(video.name)} to {escape(video.category)}")


@cli.command()
@click.argument("key", required=False)
@handle_errors
def aspects(key: str | None) -> None:
    """Show all aspects, or the fields of one aspect."""

    if key is None:
        table = Table(title="Aspects", box=box.SIMPLE)
        table.add_column("Key", style="cyan")
        table.add_column("Title")
        table.add_column("Fields", justify="right")
        for aspect in get_aspects():
            table.add_row(aspect.key, aspect.title, str(len(aspect.fields)))
        console.print(table)
        return

    aspect = get_aspect(key)
    table = Table(title=aspect.title, box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Completion")
    for spec in aspect.fields:
        table.add_row(spec.key, spec.field_type, spec.criterion.value)
    console.print(table)


@cli.command()
@click.pass_context
@handle_errors
def menu(ctx: click.Context) -> None:
    """Browse phases, videos and aspects interactively."""

    service: VideoService = ctx.obj["service"]
    while True:
        counts = service.get_phase_counts()
        shown = [phase for phase in PHASE_MENU_ORDER if counts[phase] > 0]
        if not shown:
            console.print("[dim]No videos yet.[/dim]")
            return
        console.print("\n[bold cyan]Phases:[/bold cyan]")
        for phase in shown:
            console.print(f"  {int(phase)}. {phase.title} ({counts[phase]})")
        choice = click.prompt(
            "Phase (q to quit)",
            type=click.Choice([str(int(phase)) for phase in shown] + ["q"]),
            show_choices=False,
        )
        if choice == "q":
            return
        _browse_phase(service, parse_phase(choice))


def _browse_phase(service: VideoService, phase: Phase) -> None:
    videos = service.list_videos(phase)
    console.print(f"\n[bold cyan]{phase.title}:[/bold cyan]")
    for number, video in enumerate(videos, start=1):
        console.print(f"  {number}. {escape(display_title(video))}")
    choice = click.prompt(
        "Video (b to go back)",
        type=click.Choice([str(number) for number in range(1, len(videos) + 1)] + ["b"]),
        show_choices=False,
    )
    if choice == "b":
        return
    video = videos[int(choice) - 1]
    if video.is_empty():
        console.print("[yellow]Record is missing; nothing to edit.[/yellow]")
        return
    _browse_video(video)


def _browse_video(video: Video) -> None:
    keys = [aspect.key for aspect in get_aspects()]
    console.print(f"\n[bold]{escape(display_title(video))}[/bold]")
    for number, line in enumerate(aspect_lines(video), start=1):
        console.print(f"  {number}. {line}")
    choice = click.prompt(
        "Aspect (b to go back)",
        type=click.Choice([str(number) for number in range(1, len(keys) + 1)] + ["b"]),
        show_choices=False,
    )
    if choice == "b":
        return
    console.print(create_aspect_table(video, keys[int(choice) - 1]))


@cli.command()
@click.option("--host", default=None, help="Override the configured host")
@click.option("--port", type=int, default=None, help="Override the configured port")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the REST API server."""

    settings = ctx.obj["settings"]
    application = create_app(ctx.obj["paths"], settings)
    application.run(host=host or settings.api_host, port=port or settings.api_port)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()

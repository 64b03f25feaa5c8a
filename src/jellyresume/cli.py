"""Command-line interface for Jellyresume."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from jellyresume import __version__
from jellyresume.config import AppConfig, get_config
from jellyresume.detail import Alert, DetailSnapshot, DetailState, FetchCoordinator, build_header
from jellyresume.jellyfin import JellyfinClient, JellyfinError
from jellyresume.playback import StreamUrlPlayback

# Load environment variables from .env file
load_dotenv()

console = Console()


@dataclass
class DetailResult:
    """Outcome of loading a detail screen from the command line."""

    snapshot: DetailSnapshot
    alert: Alert | None
    stream_url: str | None


@click.group()
@click.version_option(version=__version__, prog_name="jellyresume")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Jellyresume - pick up a Jellyfin series where you left off."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@main.command()
@click.argument("item_id")
@click.option(
    "--season-offset",
    type=int,
    default=0,
    help="Browse N seasons forward (negative: backward) from the resumed season",
)
@click.option("--episode", "episode_id", default=None, help="Focus this episode ID instead")
@click.option("--play", is_flag=True, help="Print the stream URL of the focused episode")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
def detail(
    item_id: str,
    season_offset: int,
    episode_id: str | None,
    play: bool,
    format: str,
) -> None:
    """Show the detail screen for a series, focused on the episode to continue."""
    cfg = get_config()

    try:
        result = asyncio.run(_load_detail(cfg, item_id, season_offset, episode_id, play))
    except JellyfinError as e:
        console.print(f"[red]Jellyfin error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(130)

    if format == "json":
        _output_detail_json(result)
    else:
        _output_detail_text(result)


async def _load_detail(
    cfg: AppConfig,
    item_id: str,
    season_offset: int,
    episode_id: str | None,
    play: bool,
) -> DetailResult:
    """Load the screen, apply the requested navigation and optionally play."""
    async with JellyfinClient(
        timeout=cfg.options.timeout,
        similar_limit=cfg.options.similar_limit,
    ) as client:
        item = await client.get_item(item_id)
        playback = StreamUrlPlayback(client.stream_url)
        state = DetailState(item, playback=playback)
        coordinator = FetchCoordinator(client, state, log_errors=cfg.options.log_errors)
        await coordinator.load_and_wait()

        for _ in range(abs(season_offset)):
            if season_offset > 0:
                state.select_next_season()
            else:
                state.select_previous_season()

        if episode_id is not None:
            match = next((ep for ep in state.snapshot().episodes if ep.id == episode_id), None)
            if match is None:
                raise click.BadParameter(f"episode {episode_id} not found", param_hint="--episode")
            state.select_episode(match)

        if play:
            state.play_focused_episode()

        return DetailResult(
            snapshot=state.snapshot(),
            alert=coordinator.alerts.current,
            stream_url=playback.last_url,
        )


def _output_detail_text(result: DetailResult) -> None:
    """Output the detail screen as formatted text."""
    snapshot = result.snapshot
    header = build_header(snapshot)
    focused = snapshot.focused_episode

    if result.alert is not None:
        console.print(f"[red]{result.alert.category}:[/red] {result.alert.message}")
        console.print()

    console.print(f"[bold blue]{header.title}[/bold blue]")
    if header.subtitle:
        console.print(f"[dim]{header.subtitle}[/dim]")
    console.print(f"[bold]{header.play_label}[/bold]")
    if header.overview:
        console.print()
        console.print(header.overview)
    console.print()

    prev_marker = "<" if snapshot.has_previous_season else " "
    next_marker = ">" if snapshot.has_next_season else " "
    console.print(f"[bold]{prev_marker} {header.season_heading} {next_marker}[/bold]")

    episodes = snapshot.season_episodes
    if episodes:
        table = Table(show_header=True, header_style="bold")
        table.add_column("", width=1)
        table.add_column("Episode")
        table.add_column("Title")
        table.add_column("Played", justify="center")
        for ep in episodes:
            table.add_row(
                "*" if focused is not None and ep.id == focused.id else "",
                f"Episode {ep.sort_index}",
                ep.name,
                "[green]yes[/green]" if ep.is_played else "",
            )
        console.print(table)
    console.print()

    if header.show_people and snapshot.series_detail is not None:
        people = snapshot.series_detail.people or []
        console.print("[bold]People:[/bold]")
        for person in people:
            role = f" [dim]as {person.role}[/dim]" if person.role else ""
            console.print(f"  {person.name}{role}")
        console.print()

    if header.show_recommended:
        console.print("[bold]Recommended:[/bold]")
        for similar in snapshot.similar_items:
            console.print(f"  {similar.display_title}")
        console.print()

    if result.stream_url:
        console.print(f"[green]Stream:[/green] {result.stream_url}")


def _output_detail_json(result: DetailResult) -> None:
    """Output the detail screen as JSON."""
    snapshot = result.snapshot
    header = build_header(snapshot)
    focused = snapshot.focused_episode
    season = snapshot.focused_season
    people = snapshot.series_detail.people if snapshot.series_detail else None

    output = {
        "item": snapshot.item.model_dump(mode="json"),
        "header": {
            "title": header.title,
            "subtitle": header.subtitle,
            "play_label": header.play_label,
            "overview": header.overview,
        },
        "selection": {
            "season_position": snapshot.selection.season_position,
            "season": season.model_dump(mode="json") if season else None,
            "episode": focused.model_dump(mode="json") if focused else None,
        },
        "seasons": [s.model_dump(mode="json") for s in snapshot.seasons],
        "season_episodes": [ep.model_dump(mode="json") for ep in snapshot.season_episodes],
        "people": [p.model_dump(mode="json") for p in people or []],
        "similar_items": [i.model_dump(mode="json") for i in snapshot.similar_items],
        "image_count": len(snapshot.images),
        "alert": (
            {"category": result.alert.category, "message": result.alert.message}
            if result.alert
            else None
        ),
        "stream_url": result.stream_url,
    }
    console.print_json(json.dumps(output))


@main.group()
def config() -> None:
    """Manage Jellyresume configuration."""
    pass


@config.command(name="show")
def config_show() -> None:
    """Show current configuration."""
    from jellyresume.config import find_config_file

    cfg = get_config()
    config_file = find_config_file()

    console.print("[bold]Current Configuration[/bold]")
    console.print()

    if config_file:
        console.print(f"[dim]Config file:[/dim] {config_file}")
    else:
        console.print("[dim]Config file:[/dim] (none - using defaults)")
    console.print()

    console.print("[bold]Jellyfin:[/bold]")
    console.print(f"  URL: {cfg.jellyfin.url or '(not set)'}")
    console.print(f"  API key: {'(set)' if cfg.jellyfin.api_key else '(not set)'}")
    console.print(f"  User ID: {cfg.jellyfin.user_id or '(not set)'}")
    console.print()

    console.print("[bold]Options:[/bold]")
    console.print(f"  Timeout: {cfg.options.timeout}s")
    console.print(f"  Similar items: {cfg.options.similar_limit}")
    console.print(f"  Log errors: {cfg.options.log_errors}")


@config.command(name="path")
def config_path() -> None:
    """Show configuration file paths."""
    from pathlib import Path

    from jellyresume.config import find_config_file, get_config_paths
    from jellyresume.errors import LOG_FILE_NAME

    console.print("[bold]Configuration paths (in priority order):[/bold]")
    config_file = find_config_file()

    for path in get_config_paths():
        if path.exists():
            if path == config_file:
                console.print(f"  [green]{path}[/green] (active)")
            else:
                console.print(f"  {path} (exists)")
        else:
            console.print(f"  [dim]{path}[/dim]")

    console.print()
    console.print("[bold]Other paths:[/bold]")
    console.print(f"  Error log: {Path.cwd() / LOG_FILE_NAME}")
    console.print(f"  .env file: {Path.cwd() / '.env'}")


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(force: bool) -> None:
    """Create a default configuration file."""
    from jellyresume.config import get_config_dir, save_default_config

    config_path = get_config_dir() / "jellyresume.ini"

    if config_path.exists() and not force:
        console.print(f"[yellow]Config file already exists:[/yellow] {config_path}")
        console.print("Use --force to overwrite.")
        sys.exit(1)

    save_default_config(config_path)
    console.print(f"[green]Created config file:[/green] {config_path}")
    console.print("Edit this file to add your server URL, API key and user ID.")


if __name__ == "__main__":
    main()

"""Display strings derived from a detail snapshot.

Renderers paint these; they hold no state of their own.
"""

from __future__ import annotations

from dataclasses import dataclass

from jellyresume.detail.state import DetailSnapshot

SEPARATOR = "•"
EMPTY_SEASON_HEADING = "EMPTY"
PLAY_LABEL = "PLAY"
CONTINUE_LABEL = "CONTINUE"


@dataclass(frozen=True)
class HeaderModel:
    """Everything the header area of the detail screen shows."""

    title: str
    subtitle: str
    play_label: str
    overview: str | None
    season_heading: str
    show_people: bool
    show_recommended: bool


def header_title(snapshot: DetailSnapshot) -> str:
    """Focused episode name, else "Series • Season", else the series name."""
    episode = snapshot.focused_episode
    if episode is not None:
        return episode.name
    season = snapshot.focused_season
    if season is not None:
        return f"{snapshot.item.name} {SEPARATOR} {season.name}"
    return snapshot.item.name


def header_subtitle(snapshot: DetailSnapshot) -> str:
    item = snapshot.item
    episode = snapshot.focused_episode
    if episode is None:
        return item.year_label
    return f"{item.display_title} {SEPARATOR} {episode.episode_code}"


def play_label(snapshot: DetailSnapshot) -> str:
    episode = snapshot.focused_episode
    if episode is None:
        return PLAY_LABEL
    return f"{CONTINUE_LABEL} {episode.episode_code}"


def overview(snapshot: DetailSnapshot) -> str | None:
    """Focused episode's overview, falling back to the series overview."""
    episode = snapshot.focused_episode
    if episode is not None and episode.overview is not None:
        return episode.overview
    return snapshot.item.overview


def season_heading(snapshot: DetailSnapshot) -> str:
    season = snapshot.focused_season
    return season.name if season is not None else EMPTY_SEASON_HEADING


def build_header(snapshot: DetailSnapshot) -> HeaderModel:
    detail = snapshot.series_detail
    return HeaderModel(
        title=header_title(snapshot),
        subtitle=header_subtitle(snapshot),
        play_label=play_label(snapshot),
        overview=overview(snapshot),
        season_heading=season_heading(snapshot),
        show_people=detail is not None and detail.has_people,
        show_recommended=bool(snapshot.similar_items),
    )

"""Season/episode focus resolution for the series detail screen.

Everything here is pure: functions take the current snapshots and the
previous selection and return a new selection. Resolution always runs on
the full current snapshots, so the final state does not depend on the
order in which seasons and episodes arrive.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum, auto

from jellyresume.jellyfin.models import Episode, Season


class Trigger(Enum):
    """Which snapshot changed and caused a re-resolution."""

    SEASONS = auto()
    EPISODES = auto()


@dataclass(frozen=True)
class SelectionState:
    """Currently focused season position and episode."""

    season_position: int | None = None
    episode: Episode | None = None


def season_sort_key(season: Season) -> tuple[int, int]:
    """Ordering key for seasons: specials (index 0) first, then ascending."""
    return (0 if season.index == 0 else 1, season.index)


def episode_sort_key(episode: Episode) -> tuple[int, int]:
    """Ordering key for episodes: season index, then episode index (missing = 0)."""
    return (episode.parent_index, episode.sort_index)


def sort_seasons(seasons: Iterable[Season]) -> list[Season]:
    return sorted(seasons, key=season_sort_key)


def sort_episodes(episodes: Iterable[Episode]) -> list[Episode]:
    return sorted(episodes, key=episode_sort_key)


def first_unplayed(episodes: Iterable[Episode]) -> Episode | None:
    """Resume heuristic: the first episode not marked as played."""
    return next((ep for ep in episodes if not ep.is_played), None)


def season_position_for(seasons: Sequence[Season], parent_index: int) -> int | None:
    """Position of the season with the given index, or None."""
    for position, season in enumerate(seasons):
        if season.index == parent_index:
            return position
    return None


def _valid_position(position: int | None, season_count: int) -> int | None:
    if season_count == 0:
        return None
    if position is None:
        return 0
    return min(position, season_count - 1)


def resolve(
    seasons: Sequence[Season],
    episodes: Sequence[Episode],
    previous: SelectionState,
    trigger: Trigger,
) -> SelectionState:
    """Derive the selection from sorted seasons and episodes.

    Args:
        seasons: Seasons in canonical order.
        episodes: Episodes in canonical order.
        previous: Selection before this change.
        trigger: Which snapshot changed.

    Returns:
        The new selection. A new episodes snapshot re-runs the resume
        heuristic; a new seasons snapshot keeps the focused episode. In both
        cases the season position snaps to the focused episode's season when
        that season exists, otherwise the previous position is kept (clamped
        into range, defaulting to the first season). An episode picked with
        ``with_episode`` therefore survives a seasons reload.
    """
    if trigger is Trigger.EPISODES or previous.episode not in episodes:
        episode = first_unplayed(episodes)
    else:
        episode = previous.episode

    position = previous.season_position
    if episode is not None:
        synced = season_position_for(seasons, episode.parent_index)
        if synced is not None:
            position = synced

    return SelectionState(
        season_position=_valid_position(position, len(seasons)),
        episode=episode,
    )


def previous_season(state: SelectionState) -> SelectionState:
    """Move season focus back by one. No-op at the first season or when unset."""
    if state.season_position is None or state.season_position <= 0:
        return state
    return replace(state, season_position=state.season_position - 1)


def next_season(state: SelectionState, season_count: int) -> SelectionState:
    """Move season focus forward by one. No-op at the last season or when unset."""
    if state.season_position is None or state.season_position >= season_count - 1:
        return state
    return replace(state, season_position=state.season_position + 1)


def with_episode(state: SelectionState, episode: Episode) -> SelectionState:
    """Focus an episode without touching season focus."""
    return replace(state, episode=episode)

"""Detail screen state container.

Holds the five fetched data slots and the derived selection. Each data slot
has exactly one mutation entry point; seasons and episodes mutations
re-resolve the selection in the same step, so observers never see a slot
updated without the matching selection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jellyresume.detail.selection import (
    SelectionState,
    Trigger,
    next_season,
    previous_season,
    resolve,
    sort_episodes,
    sort_seasons,
    with_episode,
)
from jellyresume.jellyfin.models import Episode, Image, Item, Season, SeriesDetail

if TYPE_CHECKING:
    from jellyresume.playback import PlaybackService

logger = logging.getLogger(__name__)

Listener = Callable[["DetailSnapshot"], None]


@dataclass(frozen=True)
class DetailSnapshot:
    """Read-only view of the detail screen handed to renderers."""

    item: Item
    series_detail: SeriesDetail | None = None
    seasons: tuple[Season, ...] = ()
    episodes: tuple[Episode, ...] = ()
    selection: SelectionState = field(default_factory=SelectionState)
    images: tuple[Image, ...] = ()
    similar_items: tuple[Item, ...] = ()

    @property
    def focused_season(self) -> Season | None:
        """The season at the selected position."""
        if self.selection.season_position is None:
            return None
        return self.seasons[self.selection.season_position]

    @property
    def focused_episode(self) -> Episode | None:
        return self.selection.episode

    @property
    def season_episodes(self) -> list[Episode]:
        """Episodes belonging to the focused season, in canonical order."""
        season = self.focused_season
        if season is None:
            return []
        return [ep for ep in self.episodes if ep.parent_index == season.index]

    @property
    def has_previous_season(self) -> bool:
        position = self.selection.season_position
        return position is not None and position > 0

    @property
    def has_next_season(self) -> bool:
        position = self.selection.season_position
        return position is not None and position < len(self.seasons) - 1


class DetailState:
    """Mutable state of one detail screen activation.

    Data slots are replaced wholesale on arrival. The selection is derived
    whenever seasons or episodes change and can then be adjusted through the
    navigation methods.
    """

    def __init__(self, item: Item, playback: PlaybackService | None = None) -> None:
        self._item = item
        self._playback = playback
        self._series_detail: SeriesDetail | None = None
        self._seasons: list[Season] = []
        self._episodes: list[Episode] = []
        self._images: list[Image] = []
        self._similar_items: list[Item] = []
        self._selection = SelectionState()
        self._listeners: list[Listener] = []

    @property
    def item(self) -> Item:
        return self._item

    @property
    def selection(self) -> SelectionState:
        return self._selection

    def snapshot(self) -> DetailSnapshot:
        """Get an immutable snapshot of the current state."""
        return DetailSnapshot(
            item=self._item,
            series_detail=self._series_detail,
            seasons=tuple(self._seasons),
            episodes=tuple(self._episodes),
            selection=self._selection,
            images=tuple(self._images),
            similar_items=tuple(self._similar_items),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked with a fresh snapshot after each change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _changed(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # Data slot mutations

    def set_series_detail(self, detail: SeriesDetail) -> None:
        self._series_detail = detail
        self._changed()

    def set_seasons(self, seasons: Sequence[Season]) -> None:
        self._seasons = sort_seasons(seasons)
        self._reresolve(Trigger.SEASONS)

    def set_episodes(self, episodes: Sequence[Episode]) -> None:
        self._episodes = sort_episodes(episodes)
        self._reresolve(Trigger.EPISODES)

    def set_images(self, images: Sequence[Image]) -> None:
        self._images = list(images)
        self._changed()

    def set_similar_items(self, items: Sequence[Item]) -> None:
        self._similar_items = list(items)
        self._changed()

    def _reresolve(self, trigger: Trigger) -> None:
        self._selection = resolve(self._seasons, self._episodes, self._selection, trigger)
        logger.debug(
            "Resolved selection after %s: season_position=%s episode=%s",
            trigger.name.lower(),
            self._selection.season_position,
            self._selection.episode.id if self._selection.episode else None,
        )
        self._changed()

    # Navigation

    def select_previous_season(self) -> None:
        self._set_selection(previous_season(self._selection))

    def select_next_season(self) -> None:
        self._set_selection(next_season(self._selection, len(self._seasons)))

    def select_episode(self, episode: Episode) -> None:
        """Focus an episode picked by the user. Season focus is unchanged."""
        self._set_selection(with_episode(self._selection, episode))

    def _set_selection(self, selection: SelectionState) -> None:
        if selection == self._selection:
            return
        self._selection = selection
        self._changed()

    def play_focused_episode(self) -> bool:
        """Hand the focused episode to the playback service.

        Returns:
            True if playback was requested, False if no episode is focused
            or no playback service is attached.
        """
        episode = self._selection.episode
        if episode is None or self._playback is None:
            return False
        self._playback.play(episode)
        return True

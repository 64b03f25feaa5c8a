"""Playback initiation for focused episodes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from jellyresume.jellyfin.models import Episode


class PlaybackService(Protocol):
    """Anything that can start playing an episode."""

    def play(self, episode: Episode) -> None: ...


class StreamUrlPlayback:
    """Playback service that resolves an episode to a stream URL.

    The URL is handed to ``sink`` (e.g. a console printer or a player
    launcher) and remembered as ``last_url``.
    """

    def __init__(
        self,
        url_for: Callable[[str], str],
        sink: Callable[[str], None] | None = None,
    ) -> None:
        self._url_for = url_for
        self._sink = sink
        self.last_url: str | None = None

    def play(self, episode: Episode) -> None:
        self.last_url = self._url_for(episode.id)
        if self._sink is not None:
            self._sink(self.last_url)

"""Fetch failures and the alert channel they are reported through."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

API_ERROR_CATEGORY = "api-error"


class RequestKind(Enum):
    """The five independent requests issued for a detail screen."""

    SERIES_DETAIL = "series detail"
    SEASONS = "seasons"
    EPISODES = "episodes"
    IMAGES = "images"
    SIMILAR_ITEMS = "similar items"


@dataclass(frozen=True)
class FetchFailure:
    """A request that completed with an error."""

    request_kind: RequestKind
    underlying_message: str

    def to_alert(self) -> Alert:
        return Alert(category=API_ERROR_CATEGORY, message=self.underlying_message)


@dataclass(frozen=True)
class Alert:
    """A user-visible alert."""

    category: str
    message: str


class AlertChannel:
    """Single-slot, last-write-wins alert cell.

    Only one alert is visible at a time; publishing while an earlier alert is
    still unacknowledged replaces it.
    """

    def __init__(self) -> None:
        self._current: Alert | None = None
        self._published = 0

    @property
    def current(self) -> Alert | None:
        """The alert currently visible, if any."""
        return self._current

    @property
    def published_count(self) -> int:
        """Number of alerts published since creation."""
        return self._published

    def publish(self, alert: Alert) -> None:
        self._current = alert
        self._published += 1

    def acknowledge(self) -> Alert | None:
        """Dismiss the visible alert and return it."""
        alert, self._current = self._current, None
        return alert

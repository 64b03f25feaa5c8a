"""Series detail screen: fetching, selection resolution and presentation."""

from jellyresume.detail.alerts import (
    API_ERROR_CATEGORY,
    Alert,
    AlertChannel,
    FetchFailure,
    RequestKind,
)
from jellyresume.detail.coordinator import FetchCoordinator, MediaClient
from jellyresume.detail.presenter import HeaderModel, build_header
from jellyresume.detail.selection import (
    SelectionState,
    Trigger,
    episode_sort_key,
    first_unplayed,
    resolve,
    season_sort_key,
    sort_episodes,
    sort_seasons,
)
from jellyresume.detail.state import DetailSnapshot, DetailState

__all__ = [
    "API_ERROR_CATEGORY",
    "Alert",
    "AlertChannel",
    "FetchFailure",
    "RequestKind",
    "FetchCoordinator",
    "MediaClient",
    "HeaderModel",
    "build_header",
    "SelectionState",
    "Trigger",
    "episode_sort_key",
    "first_unplayed",
    "resolve",
    "season_sort_key",
    "sort_episodes",
    "sort_seasons",
    "DetailSnapshot",
    "DetailState",
]

"""Jellyfin media server integration."""

from jellyresume.jellyfin.client import (
    JellyfinAuthError,
    JellyfinClient,
    JellyfinError,
    JellyfinNotFoundError,
    JellyfinRateLimitError,
)
from jellyresume.jellyfin.models import (
    Episode,
    Image,
    Item,
    Person,
    Season,
    SeriesDetail,
    UserData,
)

__all__ = [
    "JellyfinClient",
    "JellyfinError",
    "JellyfinAuthError",
    "JellyfinNotFoundError",
    "JellyfinRateLimitError",
    "Item",
    "Person",
    "SeriesDetail",
    "Season",
    "Episode",
    "UserData",
    "Image",
]

"""Jellyfin API client."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from jellyresume.api import (
    APIAuthError,
    APIError,
    APINotFoundError,
    APIRateLimitError,
    BaseAPIClient,
)
from jellyresume.jellyfin.models import Episode, Image, Item, Season, SeriesDetail

logger = logging.getLogger(__name__)


class JellyfinError(APIError):
    """Base exception for Jellyfin API errors."""

    pass


class JellyfinAuthError(JellyfinError, APIAuthError):
    """Authentication error (invalid API key)."""

    pass


class JellyfinNotFoundError(JellyfinError, APINotFoundError):
    """Resource not found."""

    pass


class JellyfinRateLimitError(JellyfinError, APIRateLimitError):
    """Rate limit exceeded (reverse proxies in front of Jellyfin)."""

    def __init__(self, retry_after: int | None = None) -> None:
        super().__init__(retry_after=retry_after)


class JellyfinClient(BaseAPIClient):
    """Async client for the parts of the Jellyfin API used by the detail screen.

    Every item-scoped request is made on behalf of ``user_id`` so that
    per-user data (the played flag) is included.
    """

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_SIMILAR_LIMIT = 12
    EPISODE_FIELDS = "Overview"

    _error_cls = JellyfinError
    _auth_error_cls = JellyfinAuthError
    _not_found_cls = JellyfinNotFoundError
    _rate_limit_cls = JellyfinRateLimitError
    _error_message_key = "Message"
    _api_name = "Jellyfin"

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        user_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        similar_limit: int = DEFAULT_SIMILAR_LIMIT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Jellyfin client.

        Args:
            url: Server URL. If not provided, reads from config.
            api_key: API key. If not provided, reads from config.
            user_id: User whose playback state is reported. If not provided,
                reads from config.
            timeout: Request timeout in seconds.
            similar_limit: Maximum number of similar items to request.
            transport: Optional httpx transport (used by tests).
        """
        super().__init__()

        if url is None or api_key is None or user_id is None:
            from jellyresume.config import get_config

            cfg = get_config()
            url = url if url is not None else cfg.jellyfin.url
            api_key = api_key if api_key is not None else cfg.jellyfin.api_key
            user_id = user_id if user_id is not None else cfg.jellyfin.user_id

        if not url:
            raise JellyfinError("Jellyfin server URL not provided. Configure url in jellyresume.ini.")
        if not api_key:
            raise JellyfinAuthError(
                "Jellyfin API key not provided. Configure api_key in jellyresume.ini."
            )
        if not user_id:
            raise JellyfinError("Jellyfin user ID not provided. Configure user_id in jellyresume.ini.")

        self.url = url.rstrip("/")
        self.api_key = api_key
        self.user_id = user_id
        self._timeout = timeout
        self._similar_limit = similar_limit
        self._transport = transport

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.url,
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Accept": "application/json",
                "X-Emby-Token": self.api_key,
            },
        )

    def _parse_items(self, data: Any, model: type[Any], what: str) -> list[Any]:
        """Parse the ``Items`` array of a query result."""
        if not isinstance(data, dict):
            raise JellyfinError(f"Failed to parse {what} response: expected an object")
        try:
            return [model.model_validate(raw) for raw in data.get("Items", [])]
        except ValidationError as e:
            raise JellyfinError(f"Failed to parse {what} response: {e}") from e

    async def get_item(self, item_id: str) -> Item:
        """Get the basic item used as the detail screen's subject.

        Args:
            item_id: The Jellyfin item ID.
        """
        data = await self._get(f"/Users/{self.user_id}/Items/{item_id}")
        try:
            return Item.model_validate(data)
        except ValidationError as e:
            raise JellyfinError(f"Failed to parse item response: {e}") from e

    async def get_series_detail(self, item_id: str) -> SeriesDetail:
        """Get extended series metadata, including people.

        Args:
            item_id: The Jellyfin series ID.

        Returns:
            Series metadata.
        """
        data = await self._get(f"/Users/{self.user_id}/Items/{item_id}")
        try:
            return SeriesDetail.model_validate(data)
        except ValidationError as e:
            raise JellyfinError(f"Failed to parse series response: {e}") from e

    async def get_seasons(self, item_id: str) -> list[Season]:
        """Get all seasons of a series, in server order.

        Args:
            item_id: The Jellyfin series ID.
        """
        data = await self._get(f"/Shows/{item_id}/Seasons", params={"userId": self.user_id})
        return self._parse_items(data, Season, "seasons")

    async def get_episodes(self, item_id: str) -> list[Episode]:
        """Get all episodes of a series with user data, in server order.

        Args:
            item_id: The Jellyfin series ID.
        """
        data = await self._get(
            f"/Shows/{item_id}/Episodes",
            params={
                "userId": self.user_id,
                "Fields": self.EPISODE_FIELDS,
                "EnableUserData": True,
            },
        )
        return self._parse_items(data, Episode, "episodes")

    async def get_images(self, item_id: str) -> list[Image]:
        """Get artwork metadata for an item.

        Args:
            item_id: The Jellyfin item ID.
        """
        data = await self._get(f"/Items/{item_id}/Images")
        if not isinstance(data, list):
            raise JellyfinError("Failed to parse images response: expected a list")
        try:
            return [Image.model_validate(raw) for raw in data]
        except ValidationError as e:
            raise JellyfinError(f"Failed to parse images response: {e}") from e

    async def get_similar_items(self, item_id: str) -> list[Item]:
        """Get items similar to the given item.

        Args:
            item_id: The Jellyfin item ID.
        """
        data = await self._get(
            f"/Items/{item_id}/Similar",
            params={"userId": self.user_id, "Limit": self._similar_limit},
        )
        return self._parse_items(data, Item, "similar items")

    def stream_url(self, item_id: str) -> str:
        """Build a direct-play stream URL for an item."""
        return f"{self.url}/Videos/{item_id}/stream?static=true&api_key={self.api_key}"

    async def test_connection(self) -> bool:
        """Test the API connection and key validity.

        Returns:
            True if the server accepted the key.

        Raises:
            JellyfinAuthError: If the API key is invalid.
            JellyfinError: If there's a connection error.
        """
        await self._get("/System/Info")
        logger.debug("Connected to Jellyfin at %s", self.url)
        return True

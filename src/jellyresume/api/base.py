"""Base classes for API clients.

Provides a unified exception hierarchy and an async base client class that
media-server clients inherit from.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Self

import httpx

from jellyresume.api.helpers import parse_date

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for all API errors.

    Every failure raised by a client (HTTP status, transport, payload
    parsing) is an APIError or a subclass of it.
    """

    pass


class APIAuthError(APIError):
    """Authentication error (invalid API key or token)."""

    pass


class APINotFoundError(APIError):
    """Resource not found (404)."""

    pass


class APIRateLimitError(APIError):
    """Rate limit exceeded (429).

    Attributes:
        retry_after: Suggested wait time in seconds before retrying.
    """

    def __init__(self, retry_after: int | None = None, message: str | None = None) -> None:
        self.retry_after = retry_after
        if message is None:
            message = f"Rate limit exceeded. Retry after {retry_after}s"
        super().__init__(message)


def _parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header given in seconds. HTTP-date values yield None."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class BaseAPIClient:
    """Base class for async API clients with shared HTTP patterns.

    Subclasses must set:
        - _error_cls: The base error class for this API (e.g., JellyfinError)
        - _auth_error_cls: Auth error class
        - _not_found_cls: Not-found error class
        - _rate_limit_cls: Rate-limit error class
        - _error_message_key: JSON key for error message
        - _api_name: Human name for error messages (e.g., "Jellyfin")

    and implement ``_build_client``.
    """

    _error_cls: type[APIError] = APIError
    _auth_error_cls: type[APIAuthError] = APIAuthError
    _not_found_cls: type[APINotFoundError] = APINotFoundError
    _rate_limit_cls: type[APIRateLimitError] = APIRateLimitError
    _error_message_key: str = "message"
    _api_name: str = "API"

    def __init__(self) -> None:
        self._client: httpx.AsyncClient | None = None

    def _parse_date(self, date_str: str | None) -> date | None:
        """Parse an ISO-format date string."""
        return parse_date(date_str)

    def _build_client(self) -> httpx.AsyncClient:
        raise NotImplementedError

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Transport failures are wrapped in the client's base error class so
        callers only ever see APIError subclasses.
        """
        client = self._get_client()
        logger.debug("%s GET %s params=%s", self._api_name, path, params)
        try:
            response = await client.get(path, params=params)
        except httpx.RequestError as e:
            raise self._error_cls(f"{self._api_name} connection error: {e}") from e
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        """Handle API response and raise appropriate errors."""
        if response.status_code == 200:
            try:
                return response.json()
            except ValueError as e:
                raise self._error_cls(f"{self._api_name} returned invalid JSON") from e

        if response.status_code == 401:
            self._on_auth_failure()
            raise self._auth_error_cls("Authentication failed")

        if response.status_code == 404:
            raise self._not_found_cls("Resource not found")

        if response.status_code == 429:
            raise self._rate_limit_cls(_parse_retry_after(response.headers.get("Retry-After")))

        # Generic error
        try:
            error_data = response.json()
            message = error_data.get(self._error_message_key, "Unknown error")
        except Exception:
            message = response.text or "Unknown error"

        raise self._error_cls(f"{self._api_name} API error ({response.status_code}): {message}")

    def _on_auth_failure(self) -> None:
        """Hook called on 401 response. Override to clear tokens etc."""

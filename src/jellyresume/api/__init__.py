"""Shared API client utilities."""

from jellyresume.api.base import (
    APIAuthError,
    APIError,
    APINotFoundError,
    APIRateLimitError,
    BaseAPIClient,
)
from jellyresume.api.helpers import parse_date

__all__ = [
    "APIError",
    "APIAuthError",
    "APINotFoundError",
    "APIRateLimitError",
    "BaseAPIClient",
    "parse_date",
]

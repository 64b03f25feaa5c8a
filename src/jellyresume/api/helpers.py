"""Helper functions for API clients."""

from __future__ import annotations

from datetime import date, datetime


def parse_date(date_str: str | None) -> date | None:
    """Parse an ISO-format date or timestamp string.

    Jellyfin reports dates as full timestamps
    (e.g. ``2008-01-20T00:00:00.0000000Z``); only the date part is kept.

    Args:
        date_str: Date string in ISO format or None.

    Returns:
        Parsed date object, or None if the string is empty/invalid.
    """
    if not date_str:
        return None
    try:
        return date.fromisoformat(date_str[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(date_str).date()
    except ValueError:
        return None

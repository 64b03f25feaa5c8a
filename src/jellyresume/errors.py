"""Shared error utilities.

Maps exceptions to user-friendly messages and appends errors to a log file
next to the executable (or in the working directory).
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import httpx

from jellyresume.api import APIAuthError, APIError, APINotFoundError, APIRateLimitError

LOG_FILE_NAME = "jellyresume_errors.log"


def get_friendly_message(error: Exception) -> str:
    """Get a user-facing message for an exception.

    Args:
        error: The exception raised by a client call.

    Returns:
        A short message suitable for an alert.
    """
    if isinstance(error, APIAuthError):
        return "The server rejected the API key. Check api_key in jellyresume.ini."
    if isinstance(error, APINotFoundError):
        return "The requested item was not found on the server."
    if isinstance(error, APIRateLimitError):
        if error.retry_after:
            return f"The server is busy. Try again in {error.retry_after} seconds."
        return "The server is busy. Try again shortly."
    if isinstance(error, httpx.TimeoutException):
        return "The server did not respond in time."
    if isinstance(error, (APIError, httpx.HTTPError)):
        return str(error) or "The server request failed."
    return str(error) or type(error).__name__


def _get_log_file_path() -> Path:
    """Get the path to the error log file (in exe folder or cwd)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent / LOG_FILE_NAME
    return Path.cwd() / LOG_FILE_NAME


def log_error(error: Exception | str, context: str = "") -> None:
    """Log an error to the log file.

    Args:
        error: The error (exception or string).
        context: Optional context about where the error occurred.
    """
    try:
        log_path = _get_log_file_path()
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        if isinstance(error, str):
            message = error
            error_type = "Message"
        else:
            message = str(error)
            error_type = type(error).__name__

        log_entry = f"[{timestamp}] {error_type}"
        if context:
            log_entry += f" ({context})"
        log_entry += f": {message}\n"

        with open(log_path, "a", encoding="utf-8") as f:
            f.write(log_entry)
    except OSError:
        # Don't let logging errors crash the app
        pass

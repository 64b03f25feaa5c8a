"""Jellyresume - series detail screen core for Jellyfin servers."""

from jellyresume._version import __version__

__all__ = ["__version__"]

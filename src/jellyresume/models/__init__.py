"""Shared model utilities and mixins."""

from jellyresume.models.mixins import DisplayTitleMixin, EpisodeCodeMixin

__all__ = [
    "EpisodeCodeMixin",
    "DisplayTitleMixin",
]

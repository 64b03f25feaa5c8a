"""Mixin classes for Pydantic models.

Provides reusable properties for common model patterns.
"""

from __future__ import annotations


class EpisodeCodeMixin:
    """Mixin providing the episode code shown on the detail screen.

    Requires the model to have ``parent_index`` and ``index`` fields. A
    missing episode index is displayed as 00.

    Example:
        ```python
        class Episode(EpisodeCodeMixin, BaseModel):
            parent_index: int
            index: int | None = None

        ep = Episode(parent_index=1, index=5)
        print(ep.episode_code)  # "S01 E05"
        ```
    """

    parent_index: int
    index: int | None

    @property
    def episode_code(self) -> str:
        """Get the episode code in "S01 E05" format."""
        return f"S{self.parent_index:02d} E{(self.index or 0):02d}"


class DisplayTitleMixin:
    """Mixin for models with a name and an optional production year."""

    name: str
    year: int | None

    @property
    def year_label(self) -> str:
        """Get the year in parentheses, or an empty string."""
        if self.year is None:
            return ""
        return f"({self.year})"

    @property
    def display_title(self) -> str:
        """Get display title with year when known."""
        if self.year is None:
            return self.name
        return f"{self.name} {self.year_label}"

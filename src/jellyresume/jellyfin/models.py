"""Data models for Jellyfin API responses.

Jellyfin returns PascalCase JSON; fields are mapped with aliases and can
also be populated by their Python names.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jellyresume.api.helpers import parse_date
from jellyresume.models import DisplayTitleMixin, EpisodeCodeMixin


class Item(DisplayTitleMixin, BaseModel):
    """The series being viewed, or an entry in a similar-items row."""

    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    year: int | None = Field(default=None, alias="ProductionYear")
    overview: str | None = Field(default=None, alias="Overview")
    type: str | None = Field(default=None, alias="Type")  # "Series", "Movie", ...

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Person(BaseModel):
    """A cast or crew member attached to a series."""

    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    role: str | None = Field(default=None, alias="Role")
    type: str | None = Field(default=None, alias="Type")  # "Actor", "Director", ...
    primary_image_tag: str | None = Field(default=None, alias="PrimaryImageTag")

    model_config = ConfigDict(populate_by_name=True)


class SeriesDetail(DisplayTitleMixin, BaseModel):
    """Extended series metadata."""

    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    year: int | None = Field(default=None, alias="ProductionYear")
    overview: str | None = Field(default=None, alias="Overview")
    premiere_date: date | None = Field(default=None, alias="PremiereDate")
    status: str | None = Field(default=None, alias="Status")  # "Continuing", "Ended"
    genres: list[str] = Field(default_factory=list, alias="Genres")
    people: list[Person] | None = Field(default=None, alias="People")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("premiere_date", mode="before")
    @classmethod
    def _parse_premiere_date(cls, value: object) -> object:
        # Jellyfin sends full timestamps with 7-digit fractions
        if isinstance(value, str):
            return parse_date(value)
        return value

    @property
    def has_people(self) -> bool:
        """Check if there is at least one person to show."""
        return bool(self.people)


class Season(BaseModel):
    """A season of a series. Index 0 denotes specials."""

    id: str = Field(alias="Id")
    index: int = Field(alias="IndexNumber")
    name: str = Field(alias="Name")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_specials(self) -> bool:
        """Check if this is the specials season."""
        return self.index == 0


class UserData(BaseModel):
    """Per-user playback state for an item."""

    played: bool | None = Field(default=None, alias="Played")
    play_count: int | None = Field(default=None, alias="PlayCount")
    playback_position_ticks: int | None = Field(default=None, alias="PlaybackPositionTicks")

    model_config = ConfigDict(populate_by_name=True)


class Episode(EpisodeCodeMixin, BaseModel):
    """An episode of a series.

    ``index`` is optional; it compares as 0 when ordering but is kept as
    None so "no index" stays distinguishable from "index 0".
    """

    id: str = Field(alias="Id")
    parent_index: int = Field(alias="ParentIndexNumber")
    index: int | None = Field(default=None, alias="IndexNumber")
    name: str = Field(alias="Name")
    overview: str | None = Field(default=None, alias="Overview")
    user_data: UserData | None = Field(default=None, alias="UserData")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def sort_index(self) -> int:
        """Episode index used for ordering (missing index sorts as 0)."""
        return self.index if self.index is not None else 0

    @property
    def is_played(self) -> bool:
        """Check if the user has played this episode.

        Missing user data or a missing flag both mean "not played".
        """
        return self.user_data is not None and self.user_data.played is True


class Image(BaseModel):
    """Artwork metadata for an item."""

    image_type: str = Field(alias="ImageType")  # "Primary", "Backdrop", "Logo", ...
    image_index: int | None = Field(default=None, alias="ImageIndex")
    image_tag: str | None = Field(default=None, alias="ImageTag")
    width: int | None = Field(default=None, alias="Width")
    height: int | None = Field(default=None, alias="Height")

    model_config = ConfigDict(populate_by_name=True)

"""Tests for the detail screen presenter."""

from jellyresume.detail import DetailSnapshot, SelectionState, build_header
from jellyresume.detail.presenter import (
    header_subtitle,
    header_title,
    overview,
    play_label,
    season_heading,
)
from jellyresume.jellyfin import Episode, Item, Person, Season, SeriesDetail

ITEM = Item(id="series-1", name="Test Show", year=2008, overview="Series overview.")
SEASON = Season(id="s1", index=1, name="Season 1")
EPISODE = Episode(
    id="e2", parent_index=1, index=2, name="The Second One", overview="Episode overview."
)


def _snapshot(**kwargs) -> DetailSnapshot:
    return DetailSnapshot(item=ITEM, **kwargs)


class TestHeader:
    """Tests for header strings."""

    def test_title_prefers_episode(self) -> None:
        """Test the focused episode name is the title."""
        snapshot = _snapshot(
            seasons=(SEASON,),
            episodes=(EPISODE,),
            selection=SelectionState(season_position=0, episode=EPISODE),
        )
        assert header_title(snapshot) == "The Second One"

    def test_title_with_season(self) -> None:
        """Test series and season name when no episode is focused."""
        snapshot = _snapshot(seasons=(SEASON,), selection=SelectionState(season_position=0))
        assert header_title(snapshot) == "Test Show • Season 1"

    def test_title_series_only(self) -> None:
        """Test the series name before anything is focused."""
        assert header_title(_snapshot()) == "Test Show"

    def test_subtitle_with_episode(self) -> None:
        """Test subtitle shows series, year and episode code."""
        snapshot = _snapshot(selection=SelectionState(episode=EPISODE))
        assert header_subtitle(snapshot) == "Test Show (2008) • S01 E02"

    def test_subtitle_without_episode(self) -> None:
        """Test subtitle is just the year."""
        assert header_subtitle(_snapshot()) == "(2008)"
        no_year = DetailSnapshot(item=Item(id="x", name="Untitled"))
        assert header_subtitle(no_year) == ""

    def test_play_label(self) -> None:
        """Test play vs continue labels."""
        assert play_label(_snapshot()) == "PLAY"
        assert play_label(_snapshot(selection=SelectionState(episode=EPISODE))) == "CONTINUE S01 E02"

    def test_overview_fallback(self) -> None:
        """Test episode overview wins, series overview is the fallback."""
        assert overview(_snapshot(selection=SelectionState(episode=EPISODE))) == "Episode overview."
        bare = Episode(id="e3", parent_index=1, index=3, name="No Overview")
        assert overview(_snapshot(selection=SelectionState(episode=bare))) == "Series overview."
        assert overview(DetailSnapshot(item=Item(id="x", name="Untitled"))) is None

    def test_season_heading(self) -> None:
        """Test the season heading placeholder."""
        assert season_heading(_snapshot()) == "EMPTY"
        snapshot = _snapshot(seasons=(SEASON,), selection=SelectionState(season_position=0))
        assert season_heading(snapshot) == "Season 1"


class TestBuildHeader:
    """Tests for the combined header model."""

    def test_rows_hidden_when_empty(self) -> None:
        """Test people and recommended rows are hidden without data."""
        header = build_header(_snapshot())
        assert header.show_people is False
        assert header.show_recommended is False

    def test_rows_shown_with_data(self) -> None:
        """Test people and recommended rows are shown with data."""
        detail = SeriesDetail(id="series-1", name="Test Show", people=[Person(id="p", name="P")])
        header = build_header(
            _snapshot(series_detail=detail, similar_items=(Item(id="o", name="Other"),))
        )
        assert header.show_people is True
        assert header.show_recommended is True

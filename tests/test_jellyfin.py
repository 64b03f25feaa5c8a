"""Tests for the Jellyfin client and models."""

import asyncio
from datetime import date
from unittest.mock import MagicMock, patch

import httpx
import pytest

from jellyresume.jellyfin import (
    Episode,
    Item,
    JellyfinAuthError,
    JellyfinClient,
    JellyfinError,
    JellyfinNotFoundError,
    JellyfinRateLimitError,
    Season,
    SeriesDetail,
)

SERIES_JSON = {
    "Id": "series-1",
    "Name": "Test Show",
    "ProductionYear": 2008,
    "Overview": "A show.",
    "PremiereDate": "2008-01-20T00:00:00.0000000Z",
    "Status": "Ended",
    "Genres": ["Drama"],
    "People": [{"Id": "p1", "Name": "Jane Doe", "Role": "Lead", "Type": "Actor"}],
    "Type": "Series",
}


def _client(handler) -> JellyfinClient:
    return JellyfinClient(
        url="http://jellyfin.local:8096/",
        api_key="secret",
        user_id="user-1",
        transport=httpx.MockTransport(handler),
    )


def _run(coro):
    return asyncio.run(coro)


class TestJellyfinModels:
    """Tests for Jellyfin data models."""

    def test_episode_from_wire(self) -> None:
        """Test parsing an episode from PascalCase JSON."""
        ep = Episode.model_validate(
            {
                "Id": "e1",
                "ParentIndexNumber": 1,
                "IndexNumber": 5,
                "Name": "Pilot",
                "UserData": {"Played": True, "PlayCount": 1},
            }
        )
        assert ep.parent_index == 1
        assert ep.index == 5
        assert ep.is_played is True
        assert ep.episode_code == "S01 E05"

    def test_episode_missing_index(self) -> None:
        """Test an episode without IndexNumber."""
        ep = Episode.model_validate({"Id": "e1", "ParentIndexNumber": 2, "Name": "Special"})
        assert ep.index is None
        assert ep.sort_index == 0
        assert ep.episode_code == "S02 E00"

    def test_episode_played_requires_true(self) -> None:
        """Test missing user data or flag means not played."""
        no_data = Episode(id="e1", parent_index=1, index=1, name="A")
        no_flag = Episode.model_validate(
            {"Id": "e2", "ParentIndexNumber": 1, "IndexNumber": 2, "Name": "B", "UserData": {}}
        )
        assert no_data.is_played is False
        assert no_flag.is_played is False

    def test_season_is_specials(self) -> None:
        """Test specials detection."""
        assert Season(id="s0", index=0, name="Specials").is_specials is True
        assert Season(id="s1", index=1, name="Season 1").is_specials is False

    def test_item_display_title(self) -> None:
        """Test display title includes the year when known."""
        assert Item(id="1", name="Show", year=2010).display_title == "Show (2010)"
        assert Item(id="1", name="Show").display_title == "Show"
        assert Item(id="1", name="Show").year_label == ""

    def test_item_is_immutable(self) -> None:
        """Test items cannot be modified."""
        item = Item(id="1", name="Show")
        with pytest.raises(Exception):
            item.name = "Other"  # type: ignore[misc]

    def test_series_detail_from_wire(self) -> None:
        """Test parsing series detail including premiere timestamp and people."""
        detail = SeriesDetail.model_validate(SERIES_JSON)
        assert detail.premiere_date == date(2008, 1, 20)
        assert detail.has_people is True
        assert detail.people is not None
        assert detail.people[0].role == "Lead"

    def test_series_detail_without_people(self) -> None:
        """Test has_people is False for missing or empty people."""
        assert SeriesDetail(id="1", name="Show").has_people is False
        assert SeriesDetail(id="1", name="Show", people=[]).has_people is False


class TestJellyfinClient:
    """Tests for the Jellyfin API client."""

    def test_init_no_api_key(self) -> None:
        """Test initialization without API key raises error."""
        with patch("jellyresume.config.get_config") as mock_get_config:
            mock_get_config.return_value.jellyfin.url = "http://x"
            mock_get_config.return_value.jellyfin.api_key = None
            mock_get_config.return_value.jellyfin.user_id = "u"
            with pytest.raises(JellyfinAuthError, match="API key not provided"):
                JellyfinClient()

    def test_init_no_url(self) -> None:
        """Test initialization without URL raises error."""
        with pytest.raises(JellyfinError, match="URL not provided"):
            JellyfinClient(url="", api_key="k", user_id="u")

    def test_init_strips_trailing_slash(self) -> None:
        """Test the server URL is normalized."""
        client = JellyfinClient(url="http://host:8096/", api_key="k", user_id="u")
        assert client.url == "http://host:8096"
        assert client.stream_url("e1") == "http://host:8096/Videos/e1/stream?static=true&api_key=k"

    def test_get_series_detail(self) -> None:
        """Test series detail request path and auth header."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=SERIES_JSON)

        detail = _run(_client(handler).get_series_detail("series-1"))

        assert detail.name == "Test Show"
        assert seen[0].url.path == "/Users/user-1/Items/series-1"
        assert seen[0].headers["X-Emby-Token"] == "secret"

    def test_get_seasons(self) -> None:
        """Test seasons are parsed from the Items array in server order."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/Shows/series-1/Seasons"
            assert request.url.params["userId"] == "user-1"
            return httpx.Response(
                200,
                json={
                    "Items": [
                        {"Id": "s2", "IndexNumber": 2, "Name": "Season 2"},
                        {"Id": "s0", "IndexNumber": 0, "Name": "Specials"},
                    ],
                    "TotalRecordCount": 2,
                },
            )

        seasons = _run(_client(handler).get_seasons("series-1"))
        assert [s.index for s in seasons] == [2, 0]

    def test_get_episodes(self) -> None:
        """Test episodes request includes user data."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/Shows/series-1/Episodes"
            assert request.url.params["EnableUserData"] == "true"
            assert request.url.params["Fields"] == "Overview"
            return httpx.Response(
                200,
                json={
                    "Items": [
                        {
                            "Id": "e1",
                            "ParentIndexNumber": 1,
                            "IndexNumber": 1,
                            "Name": "Pilot",
                            "UserData": {"Played": False},
                        }
                    ]
                },
            )

        episodes = _run(_client(handler).get_episodes("series-1"))
        assert len(episodes) == 1
        assert episodes[0].is_played is False

    def test_get_images(self) -> None:
        """Test images are parsed from a bare list."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/Items/series-1/Images"
            return httpx.Response(
                200,
                json=[{"ImageType": "Primary", "ImageTag": "t1", "Width": 680, "Height": 1000}],
            )

        images = _run(_client(handler).get_images("series-1"))
        assert images[0].image_type == "Primary"
        assert images[0].width == 680

    def test_get_similar_items(self) -> None:
        """Test similar items request honors the limit."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/Items/series-1/Similar"
            assert request.url.params["Limit"] == "12"
            return httpx.Response(200, json={"Items": [{"Id": "x", "Name": "Other"}]})

        items = _run(_client(handler).get_similar_items("series-1"))
        assert items == [Item(id="x", name="Other")]

    def test_malformed_payload(self) -> None:
        """Test a payload missing required fields raises JellyfinError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"Items": [{"Id": "s1"}]})

        with pytest.raises(JellyfinError, match="Failed to parse seasons"):
            _run(_client(handler).get_seasons("series-1"))

    def test_handle_401_error(self) -> None:
        """Test 401 error handling."""
        client = JellyfinClient(url="http://x", api_key="k", user_id="u")

        mock_response = MagicMock()
        mock_response.status_code = 401

        with pytest.raises(JellyfinAuthError):
            client._handle_response(mock_response)

    def test_handle_404_error(self) -> None:
        """Test 404 error handling."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        with pytest.raises(JellyfinNotFoundError):
            _run(_client(handler).get_series_detail("missing"))

    def test_handle_429_rate_limit(self) -> None:
        """Test 429 rate limit handling."""
        client = JellyfinClient(url="http://x", api_key="k", user_id="u")

        mock_response = MagicMock()
        mock_response.status_code = 429
        mock_response.headers = {"Retry-After": "30"}

        with pytest.raises(JellyfinRateLimitError) as exc_info:
            client._handle_response(mock_response)

        assert exc_info.value.retry_after == 30

    def test_handle_429_http_date_retry_after(self) -> None:
        """Test a Retry-After given as an HTTP date still raises a rate limit error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})

        with pytest.raises(JellyfinRateLimitError) as exc_info:
            _run(_client(handler).get_images("series-1"))

        assert exc_info.value.retry_after is None

    def test_handle_server_error_message(self) -> None:
        """Test generic errors include the server message."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"Message": "database locked"})

        with pytest.raises(JellyfinError, match="database locked"):
            _run(_client(handler).get_images("series-1"))

    def test_connection_error_wrapped(self) -> None:
        """Test transport errors surface as JellyfinError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(JellyfinError, match="connection error"):
            _run(_client(handler).get_episodes("series-1"))

    def test_async_context_manager_closes(self) -> None:
        """Test the HTTP client is closed on exit."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"Items": []})

        async def run() -> JellyfinClient:
            async with _client(handler) as client:
                await client.get_seasons("series-1")
                assert client._client is not None
            return client

        client = _run(run())
        assert client._client is None

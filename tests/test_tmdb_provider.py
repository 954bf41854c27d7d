from unittest.mock import MagicMock, patch

import pytest
import requests

from app.core.config import Settings
from app.core.exceptions import NotFoundError, UpstreamError
from app.providers.tmdb_provider import TMDBProvider


def _provider(**overrides) -> TMDBProvider:
    return TMDBProvider(Settings(tmdb_api_key="test-key", **overrides))


def _http_error(status_code: int) -> requests.exceptions.HTTPError:
    return requests.exceptions.HTTPError(response=MagicMock(status_code=status_code))


SEARCH_RESULTS = [
    {
        "id": 1,
        "name": "Popular",
        "poster_path": "/a.jpg",
        "first_air_date": "2010-01-01",
        "popularity": 90.0,
    },
    {
        "id": 815,
        "name": "Peep Show",
        "poster_path": "/b.jpg",
        "first_air_date": "2003-09-19",
        "popularity": 20.0,
    },
    {"id": 3, "name": "No Poster", "first_air_date": "2001-01-01", "popularity": 99.0},
    {"id": 4, "name": "No Date", "poster_path": "/d.jpg", "popularity": 99.0},
    {
        "id": 5,
        "name": "Middle",
        "poster_path": "/e.jpg",
        "first_air_date": "2015-05-05",
        "popularity": 50.0,
    },
]


@pytest.mark.asyncio
async def test_search_filters_and_sorts_by_popularity():
    provider = _provider()
    with patch("app.providers.tmdb_provider.tmdb.Search") as MockSearch:
        MockSearch.return_value.results = SEARCH_RESULTS
        shows = await provider.search_shows("peep")

    assert [s.id for s in shows] == ["1", "5", "815"]
    assert shows[0].poster_url == "https://image.tmdb.org/t/p/w500/a.jpg"
    assert shows[0].year_start == 2010
    MockSearch.return_value.tv.assert_called_once_with(query="peep")


@pytest.mark.asyncio
async def test_search_easter_egg_promotes_show():
    provider = _provider(search_easter_egg=True)
    with patch("app.providers.tmdb_provider.tmdb.Search") as MockSearch:
        MockSearch.return_value.results = SEARCH_RESULTS
        shows = await provider.search_shows(" Peep ")

    assert [s.id for s in shows] == ["815", "1", "5"]


@pytest.mark.asyncio
async def test_search_failure_raises_upstream_error():
    provider = _provider()
    with patch("app.providers.tmdb_provider.tmdb.Search") as MockSearch:
        MockSearch.return_value.tv.side_effect = requests.exceptions.ConnectionError()
        with pytest.raises(UpstreamError):
            await provider.search_shows("anything")


@pytest.mark.asyncio
async def test_show_details():
    provider = _provider()
    info = {
        "id": 1396,
        "name": "Breaking Bad",
        "poster_path": "/bb.jpg",
        "first_air_date": "2008-01-20",
        "last_air_date": "2013-09-29",
        "status": "Ended",
        "number_of_seasons": 5,
        "seasons": [
            {"season_number": 0, "episode_count": 9},
            {"season_number": 1, "episode_count": 7},
            {"season_number": 2, "episode_count": 13},
        ],
    }
    with patch("app.providers.tmdb_provider.tmdb.TV") as MockTV:
        MockTV.return_value.info.return_value = info
        show = await provider.get_show_details("1396")

    MockTV.assert_called_once_with(1396)
    assert show.id == "1396"
    assert show.total_seasons == 5
    assert (show.year_start, show.year_end) == (2008, 2013)
    assert show.episode_count(1) == 7
    assert show.episode_count(0) is None
    assert await provider.get_season_episode_count(show, 2) == 13


@pytest.mark.asyncio
async def test_running_show_has_no_end_year():
    provider = _provider()
    with patch("app.providers.tmdb_provider.tmdb.TV") as MockTV:
        MockTV.return_value.info.return_value = {
            "id": 1,
            "name": "Ongoing",
            "first_air_date": "2020-01-01",
            "last_air_date": "2024-01-01",
            "status": "Returning Series",
        }
        show = await provider.get_show_details("1")

    assert show.year_end is None
    assert show.total_seasons == 1


@pytest.mark.asyncio
async def test_show_not_found():
    provider = _provider()
    with patch("app.providers.tmdb_provider.tmdb.TV") as MockTV:
        original_exc = _http_error(404)
        MockTV.return_value.info.side_effect = original_exc
        with pytest.raises(NotFoundError) as excinfo:
            await provider.get_show_details("123")

    assert excinfo.value.__cause__ is original_exc
    assert excinfo.value.original_exception is original_exc


@pytest.mark.asyncio
async def test_non_numeric_id_is_not_found():
    with pytest.raises(NotFoundError):
        await _provider().get_show_details("tt0386676")


@pytest.mark.asyncio
async def test_server_error_is_upstream_error():
    provider = _provider()
    with patch("app.providers.tmdb_provider.tmdb.TV") as MockTV:
        MockTV.return_value.info.side_effect = _http_error(503)
        with pytest.raises(UpstreamError):
            await provider.get_show_details("123")


@pytest.mark.asyncio
async def test_episode_details():
    provider = _provider()
    with patch("app.providers.tmdb_provider.tmdb.TV_Episodes") as MockEpisodes:
        MockEpisodes.return_value.info.return_value = {
            "name": "Pilot",
            "overview": "Walter gets a diagnosis.",
            "still_path": "/still.jpg",
            "vote_average": 8.2,
            "air_date": "2008-01-20",
        }
        episode = await provider.get_episode_details("1396", 1, 1)

    MockEpisodes.assert_called_once_with(1396, 1, 1)
    assert episode.title == "Pilot"
    assert episode.plot == "Walter gets a diagnosis."
    assert episode.rating == "8.2"
    assert episode.year == 2008
    assert episode.poster_url == "https://image.tmdb.org/t/p/w780/still.jpg"


@pytest.mark.asyncio
async def test_episode_missing_fields():
    provider = _provider()
    with patch("app.providers.tmdb_provider.tmdb.TV_Episodes") as MockEpisodes:
        MockEpisodes.return_value.info.return_value = {
            "name": "",
            "overview": "",
            "vote_average": 0,
        }
        episode = await provider.get_episode_details("1396", 1, 1)

    assert episode.title is None
    assert episode.plot is None
    assert episode.rating is None
    assert not episode.has_details

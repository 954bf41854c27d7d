"""TMDB metadata provider backed by tmdbsimple."""

import asyncio
import logging
from typing import List, Optional

import requests
import tmdbsimple as tmdb

from app.core.config import Settings, get_settings
from app.core.exceptions import NotFoundError, UpstreamError
from app.models.media import Episode, SeasonSummary, Show, ShowDetails
from app.providers.base import MetadataProvider

logger = logging.getLogger(__name__)

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
STILL_BASE_URL = "https://image.tmdb.org/t/p/w780"

# Shows in these states have a final air date
FINISHED_STATUSES = {"Ended", "Canceled", "Cancelled"}

EASTER_EGG_QUERY = "peep"
EASTER_EGG_SHOW_ID = "815"


def _image_url(base: str, path: Optional[str]) -> Optional[str]:
    return f"{base}{path}" if path else None


def _year(date: Optional[str]) -> Optional[int]:
    """Extract the year of a ``YYYY-MM-DD`` date, if present."""
    if not date or len(date) < 4 or not date[:4].isdigit():
        return None
    return int(date[:4])


def _rating(vote_average) -> Optional[str]:
    try:
        value = float(vote_average or 0)
    except (TypeError, ValueError):
        return None
    return f"{value:.1f}" if value > 0 else None


def _parse_show_search(series: dict) -> Show:
    """Parse a TV series search result from TMDB."""
    return Show(
        id=str(series["id"]),
        title=series.get("name") or series.get("original_name") or "Unknown",
        poster_url=_image_url(POSTER_BASE_URL, series.get("poster_path")),
        year_start=_year(series.get("first_air_date")),
        popularity=series.get("popularity") or 0.0,
    )


def _order_search_results(
    shows: List[Show], query: str, easter_egg: bool
) -> List[Show]:
    """Drop incomplete entries and order the rest by popularity."""
    shows = [s for s in shows if s.poster_url and s.year_start]
    shows.sort(key=lambda s: s.popularity, reverse=True)
    if easter_egg and query.strip().lower() == EASTER_EGG_QUERY:
        shows.sort(key=lambda s: s.id != EASTER_EGG_SHOW_ID)
    return shows


def _translate_error(exc: Exception, what: str) -> Exception:
    """Map a tmdbsimple/requests failure to the provider error taxonomy."""
    if isinstance(exc, requests.exceptions.HTTPError):
        response = exc.response
        if response is not None and response.status_code == 404:
            return NotFoundError(f"{what} not found", exc)
    if isinstance(exc, requests.exceptions.Timeout):
        return UpstreamError(f"Timed out fetching {what}", exc)
    return UpstreamError(f"Failed to fetch {what}", exc)


def _parse_tmdb_id(show_id: str) -> int:
    try:
        return int(show_id)
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Invalid TMDB id {show_id!r}", exc) from exc


class TMDBProvider(MetadataProvider):
    """Show catalog adapter for The Movie Database.

    tmdbsimple is synchronous, so each call runs in a worker thread.
    """

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self._settings = settings
        self.session = None

        tmdb.API_KEY = settings.tmdb_api_key
        tmdb.REQUESTS_TIMEOUT = settings.provider_timeout
        if settings.proxy:
            session = requests.Session()
            session.proxies = {"http": settings.proxy, "https": settings.proxy}
            tmdb.REQUESTS_SESSION = session

    @property
    def name(self) -> str:
        return "tmdb"

    def _search_shows_sync(self, query: str) -> List[Show]:
        """Search TMDB for TV series (synchronous)."""
        search = tmdb.Search()
        try:
            search.tv(query=query)
            shows = [_parse_show_search(s) for s in search.results]
        except (requests.exceptions.RequestException, tmdb.APIKeyError) as exc:
            logger.error("Error searching series for '%s': %s", query, exc)
            raise _translate_error(exc, f"search results for '{query}'") from exc
        except (KeyError, TypeError, AttributeError) as exc:
            logger.exception("Malformed search payload for '%s'", query)
            raise UpstreamError(f"Malformed search payload for '{query}'", exc) from exc

        shows = _order_search_results(shows, query, self._settings.search_easter_egg)
        return shows[: self._settings.search_limit]

    async def search_shows(self, query: str) -> List[Show]:
        """Search TMDB for TV series (async)."""
        return await asyncio.to_thread(self._search_shows_sync, query)

    def _get_show_details_sync(self, show_id: str) -> ShowDetails:
        """Fetch a TV series and its season listing (synchronous)."""
        tv_api = tmdb.TV(_parse_tmdb_id(show_id))
        try:
            info = tv_api.info()
        except (requests.exceptions.RequestException, tmdb.APIKeyError) as exc:
            logger.error("Failed to fetch series details for ID %s: %s", show_id, exc)
            raise _translate_error(exc, f"series {show_id}") from exc

        try:
            # Season 0 holds specials
            seasons = [
                SeasonSummary(
                    season_number=s["season_number"],
                    episode_count=s.get("episode_count") or 0,
                )
                for s in info.get("seasons") or []
                if s.get("season_number", 0) > 0
            ]
            status = info.get("status") or ""
            return ShowDetails(
                id=str(info["id"]),
                title=info.get("name") or "Unknown",
                poster_url=_image_url(POSTER_BASE_URL, info.get("poster_path")),
                year_start=_year(info.get("first_air_date")),
                year_end=_year(info.get("last_air_date"))
                if status in FINISHED_STATUSES
                else None,
                popularity=info.get("popularity") or 0.0,
                total_seasons=info.get("number_of_seasons") or len(seasons) or 1,
                seasons=seasons,
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.exception("Malformed series payload for ID %s", show_id)
            raise UpstreamError(f"Malformed series payload for {show_id}", exc) from exc

    async def get_show_details(self, show_id: str) -> ShowDetails:
        return await asyncio.to_thread(self._get_show_details_sync, show_id)

    def _get_episode_details_sync(
        self, show_id: str, season: int, episode: int
    ) -> Episode:
        """Fetch a single episode (synchronous)."""
        episode_api = tmdb.TV_Episodes(_parse_tmdb_id(show_id), season, episode)
        try:
            info = episode_api.info()
        except (requests.exceptions.RequestException, tmdb.APIKeyError) as exc:
            logger.error(
                "Failed to fetch episode for ID %s S%sE%s: %s",
                show_id,
                season,
                episode,
                exc,
            )
            raise _translate_error(exc, f"episode {show_id} S{season}E{episode}") from exc

        return Episode(
            season=season,
            episode=episode,
            title=info.get("name") or None,
            plot=info.get("overview") or None,
            poster_url=_image_url(STILL_BASE_URL, info.get("still_path")),
            rating=_rating(info.get("vote_average")),
            year=_year(info.get("air_date")),
        )

    async def get_episode_details(
        self, show_id: str, season: int, episode: int
    ) -> Episode:
        return await asyncio.to_thread(
            self._get_episode_details_sync, show_id, season, episode
        )

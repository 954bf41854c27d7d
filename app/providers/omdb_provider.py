"""OMDb metadata provider.

OMDb reports failures in-band: every payload carries ``Response`` set to
``"True"`` or ``"False"``, and unknown values are the literal string ``N/A``.
"""

import logging
from typing import Any, List, Optional

import niquests

from app.core.config import Settings
from app.core.exceptions import NotFoundError, UpstreamError
from app.models.media import Episode, Show, ShowDetails
from app.providers.base import MetadataProvider

logger = logging.getLogger(__name__)

MISSING = "N/A"
YEAR_SEPARATOR = "–"  # OMDb separates run years with an en dash


def _value(payload: dict, key: str) -> Optional[str]:
    """Return ``payload[key]`` with OMDb's ``N/A`` placeholder mapped to None."""
    value = payload.get(key)
    if value is None or value == MISSING or value == "":
        return None
    return value


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def parse_year_range(year: Optional[str]) -> tuple[Optional[int], Optional[int]]:
    """Split an OMDb year like ``2005–2013`` or ``2019–`` into start and end."""
    if not year:
        return None, None
    start, _, end = year.replace("-", YEAR_SEPARATOR).partition(YEAR_SEPARATOR)
    return _parse_int(start), _parse_int(end) if end else None


def _parse_show(payload: dict) -> Show:
    year_start, year_end = parse_year_range(_value(payload, "Year"))
    return Show(
        id=payload["imdbID"],
        title=payload["Title"],
        poster_url=_value(payload, "Poster"),
        year_start=year_start,
        year_end=year_end,
    )


class OMDbProvider(MetadataProvider):
    """Show catalog adapter for the Open Movie Database."""

    def __init__(self, settings: Settings | None = None):
        super().__init__(settings)
        self.base_url = self._settings.omdb_base_url

    @property
    def name(self) -> str:
        return "omdb"

    async def _get(self, params: dict[str, Any]) -> dict:
        """Query OMDb for series data and return the decoded payload."""
        query = {"apikey": self._settings.omdb_api_key, "type": "series", **params}
        try:
            response = await self.session.get(
                self.base_url, params=query, timeout=self._settings.provider_timeout
            )
            response.raise_for_status()
            payload = response.json()
        except niquests.exceptions.Timeout as exc:
            raise UpstreamError("Timed out querying OMDb", exc) from exc
        except niquests.exceptions.RequestException as exc:
            raise UpstreamError(f"OMDb request failed: {exc}", exc) from exc
        except ValueError as exc:
            raise UpstreamError("OMDb returned invalid JSON", exc) from exc

        if not isinstance(payload, dict):
            raise UpstreamError("OMDb returned an unexpected payload")
        return payload

    async def search_shows(self, query: str) -> List[Show]:
        payload = await self._get({"s": query})
        if payload.get("Response") != "True":
            logger.info("No OMDb results for '%s': %s", query, payload.get("Error"))
            return []

        try:
            shows = [_parse_show(item) for item in payload["Search"]]
        except (KeyError, TypeError) as exc:
            raise UpstreamError(f"Malformed OMDb search payload for '{query}'", exc) from exc
        return shows[: self._settings.search_limit]

    async def get_show_details(self, show_id: str) -> ShowDetails:
        payload = await self._get({"i": show_id})
        if payload.get("Response") != "True":
            raise NotFoundError(f"Show {show_id} not found")

        try:
            show = _parse_show(payload)
        except KeyError as exc:
            raise UpstreamError(f"Malformed OMDb series payload for {show_id}", exc) from exc

        # Season listings are fetched lazily by get_season_episode_count
        return ShowDetails(
            **show.model_dump(exclude={"total_seasons"}),
            total_seasons=_parse_int(payload.get("totalSeasons")) or 1,
        )

    async def get_season_episode_count(
        self, show: ShowDetails, season: int
    ) -> int | None:
        known = show.episode_count(season)
        if known:
            return known

        payload = await self._get({"i": show.id, "season": season})
        episodes = payload.get("Episodes")
        if payload.get("Response") != "True" or not isinstance(episodes, list):
            return None
        return len(episodes) or None

    async def get_episode_details(
        self, show_id: str, season: int, episode: int
    ) -> Episode:
        payload = await self._get(
            {"i": show_id, "season": season, "episode": episode, "plot": "full"}
        )
        if payload.get("Response") != "True":
            raise NotFoundError(f"Episode {show_id} S{season}E{episode} not found")

        return Episode(
            season=season,
            episode=episode,
            title=_value(payload, "Title"),
            plot=_value(payload, "Plot"),
            poster_url=_value(payload, "Poster"),
            rating=_value(payload, "imdbRating"),
            year=_parse_int(_value(payload, "Year")),
        )

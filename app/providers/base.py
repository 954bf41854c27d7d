"""Metadata provider base classes and interfaces."""

from abc import ABC, abstractmethod
from typing import List

import niquests

from app.core.config import Settings, get_settings
from app.models.media import Episode, Show, ShowDetails


class MetadataProvider(ABC):
    """Abstract base class for show catalog adapters.

    Providers translate an upstream catalog's payloads into the normalized
    Show/ShowDetails/Episode models. They raise ``NotFoundError`` when the
    catalog does not know an id and ``UpstreamError`` for every other failure.
    """

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self._settings = settings
        self.session = niquests.AsyncSession(retries=settings.upstream_retries)
        if settings.proxy:
            self.session.proxies = {"http": settings.proxy, "https": settings.proxy}

    async def aclose(self) -> None:
        """Properly close the internal HTTP session."""
        if hasattr(self, "session") and self.session:
            await self.session.close()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this provider."""
        pass

    @abstractmethod
    async def search_shows(self, query: str) -> List[Show]:
        """Search the catalog for shows matching ``query``.

        Returns an empty list when the catalog reports no matches.
        """
        pass

    @abstractmethod
    async def get_show_details(self, show_id: str) -> ShowDetails:
        """Fetch a show and its season structure."""
        pass

    @abstractmethod
    async def get_episode_details(
        self,
        show_id: str,
        season: int,
        episode: int,
    ) -> Episode:
        """Fetch a single episode.

        Args:
            show_id: The catalog id of the show.
            season: The 1-based season number.
            episode: The 1-based episode number within the season.
        """
        pass

    async def get_season_episode_count(
        self, show: ShowDetails, season: int
    ) -> int | None:
        """Return how many episodes ``season`` has, or None when unknown.

        The default reads the season listing already present on ``show``.
        Providers whose show payload lacks per-season counts override this.
        """
        return show.episode_count(season)

"""Async HTTP client for the Rerun API."""

import json
import logging
from typing import Any, List, Optional, Sequence, Tuple

import niquests

from app.core.exceptions import InvalidRequestError, NotFoundError, UpstreamError
from app.models.media import EpisodeSelection, Show

logger = logging.getLogger(__name__)


class RerunClient:
    """Talks to a Rerun server the way the browser client does."""

    def __init__(self, base_url: str, timeout: float = 10, retries: int = 0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = niquests.AsyncSession(retries=retries)

    async def aclose(self) -> None:
        await self.session.close()

    async def __aenter__(self) -> "RerunClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            response = await self.session.get(
                f"{self.base_url}{path}", params=params, timeout=self.timeout
            )
        except niquests.exceptions.RequestException as exc:
            raise UpstreamError(f"Request to {path} failed: {exc}", exc) from exc

        if response.status_code == 400:
            raise InvalidRequestError(f"Bad request: {path}")
        if response.status_code == 404:
            raise NotFoundError(f"Not found: {path}")
        if not response.ok:
            raise UpstreamError(f"Server returned {response.status_code} for {path}")
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"Invalid JSON from {path}", exc) from exc

    async def search_shows(self, query: str) -> List[Show]:
        data = await self._get("/shows", {"q": query.strip().lower()})
        return [Show.model_validate(item) for item in data]

    async def get_show(self, show_id: str) -> Show:
        return Show.model_validate(await self._get(f"/shows/{show_id}"))

    async def random_episode(
        self,
        show_id: str,
        season_min: Optional[int] = None,
        season_max: Optional[int] = None,
        history: Sequence[Tuple[int, int]] = (),
    ) -> EpisodeSelection:
        params: dict[str, Any] = {"history": json.dumps([list(h) for h in history])}
        if season_min is not None:
            params["seasonMin"] = season_min
        if season_max is not None:
            params["seasonMax"] = season_max
        data = await self._get(f"/episodes/{show_id}", params)
        return EpisodeSelection.model_validate(data)

    async def get_episode(self, show_id: str, season: int, episode: int) -> EpisodeSelection:
        data = await self._get(f"/episodes/{show_id}/{season}/{episode}")
        return EpisodeSelection.model_validate(data)

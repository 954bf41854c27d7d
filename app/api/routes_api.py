"""API routes returning JSON for the browser client."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app.core.exceptions import InvalidRequestError, MetadataError, NotFoundError
from app.core.request_logging import client_ip, get_request_id
from app.models.media import EpisodeSelection, Show
from app.providers import get_metadata_provider
from app.providers.base import MetadataProvider
from app.services.picker import get_episode, get_show, pick_random_episode

router = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(exc: Exception, request: Request) -> HTTPException:
    """Map a domain exception to an HTTP error response."""
    request_id = get_request_id(request)
    if isinstance(exc, InvalidRequestError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundError):
        logger.warning("request_id=%s not found: %s", request_id, exc)
        return HTTPException(status_code=404, detail="Not found")
    logger.error("request_id=%s upstream failure: %s", request_id, exc, exc_info=exc)
    return HTTPException(status_code=500, detail="Upstream error")


@router.get("/shows", response_model=List[Show])
async def search_shows(
    request: Request,
    q: Optional[str] = Query(None, description="Search text"),
    provider: MetadataProvider = Depends(get_metadata_provider),
):
    """Search the catalog for shows.

    An empty list means the catalog had no matches.
    """
    try:
        query = (q or "").strip()
        if not query:
            raise InvalidRequestError("Query parameter 'q' is required")

        logger.info(
            "request_id=%s querying shows q=%r ip=%s",
            get_request_id(request),
            query,
            client_ip(request),
        )
        shows = await provider.search_shows(query)
    except (InvalidRequestError, MetadataError) as exc:
        raise _http_error(exc, request) from exc

    logger.info("request_id=%s show results amount=%s", get_request_id(request), len(shows))
    return shows


@router.get("/shows/{show_id}", response_model=Show)
async def show_details(
    request: Request,
    show_id: str,
    provider: MetadataProvider = Depends(get_metadata_provider),
):
    """Return a single show's summary."""
    try:
        return await get_show(provider, show_id)
    except MetadataError as exc:
        raise _http_error(exc, request) from exc


@router.get("/episodes/{show_id}", response_model=EpisodeSelection)
@router.get("/episode/{show_id}", response_model=EpisodeSelection, include_in_schema=False)
async def random_episode(
    request: Request,
    show_id: str,
    season_min: Optional[str] = Query(None, alias="seasonMin"),
    season_max: Optional[str] = Query(None, alias="seasonMax"),
    history: Optional[str] = Query(
        None, description="JSON list of [season, episode] pairs already seen"
    ),
    provider: MetadataProvider = Depends(get_metadata_provider),
):
    """Pick a random episode of a show.

    Malformed bounds or history never fail the request; they fall back to
    the full season range and an empty history.
    """
    logger.info(
        "request_id=%s querying show id=%s ip=%s",
        get_request_id(request),
        show_id,
        client_ip(request),
    )
    try:
        return await pick_random_episode(
            provider,
            show_id,
            season_min=season_min,
            season_max=season_max,
            history=history,
        )
    except MetadataError as exc:
        raise _http_error(exc, request) from exc


@router.get("/episodes/{show_id}/{season}/{episode}", response_model=EpisodeSelection)
async def specific_episode(
    request: Request,
    show_id: str,
    season: int,
    episode: int,
    provider: MetadataProvider = Depends(get_metadata_provider),
):
    """Fetch a known episode directly, bypassing random selection."""
    try:
        return await get_episode(provider, show_id, season, episode)
    except MetadataError as exc:
        raise _http_error(exc, request) from exc


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "rerun"}

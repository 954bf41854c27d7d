"""Random episode selection.

Picks a season uniformly inside the requested range, then an episode inside
that season while steering clear of what the client has already seen. The
server keeps no state: the seen-episode history arrives with every request.
"""

import json
import logging
import random
import re
from typing import List, Optional, Sequence, Tuple

from app.core.config import get_settings
from app.core.exceptions import NotFoundError
from app.models.media import Episode, EpisodeSelection, SeasonRange, Show, ShowDetails
from app.providers.base import MetadataProvider

logger = logging.getLogger(__name__)

HistoryEntry = Tuple[int, int]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_system_random = random.SystemRandom()


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of ``value`` the way browsers' parseInt does.

    ``"3"`` and ``"3abc"`` give 3, anything without a leading integer gives
    None.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def clamp_season_range(
    season_min: Optional[str], season_max: Optional[str], total_seasons: int
) -> SeasonRange:
    """Turn raw query bounds into a valid range inside ``[1, total_seasons]``.

    Zero, negative, non-numeric, inverted or oversized bounds are all
    tolerated. Missing bounds select the full range.
    """
    total_seasons = max(1, total_seasons)
    parsed_min = max(1, parse_int(season_min) or 1)
    parsed_max = parse_int(season_max) or total_seasons
    start = min(max(1, parsed_min), total_seasons)
    end = max(min(parsed_max, total_seasons), start)
    return SeasonRange(start=start, end=end)


def _as_episode_number(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_history(raw: Optional[str]) -> List[HistoryEntry]:
    """Decode a JSON list of ``[season, episode]`` pairs.

    Anything malformed, including a single bad element, yields an empty
    history rather than an error.
    """
    if not raw:
        return []
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(decoded, list):
        return []

    history = []
    for element in decoded:
        if not isinstance(element, list) or len(element) != 2:
            return []
        season, episode = (_as_episode_number(v) for v in element)
        if season is None or episode is None:
            return []
        history.append((season, episode))
    return history


def season_history(history: Sequence[HistoryEntry], season: int) -> List[int]:
    """Episode numbers seen in ``season``, oldest first."""
    return [e for s, e in history if s == season]


def choose_episode(
    num_episodes: int, seen: Sequence[int], rng: random.Random
) -> int:
    """Pick an episode number in ``[1, num_episodes]``.

    While some episodes of the season are unseen, only those are candidates.
    Once every episode has been seen, anything but the most recent one is.
    """
    episodes = range(1, num_episodes + 1)
    seen_set = set(seen)
    unseen = [e for e in episodes if e not in seen_set]
    if unseen:
        return rng.choice(unseen)

    candidates = [e for e in episodes if e != seen[-1]]
    return rng.choice(candidates or list(episodes))


def _with_show(episode: Episode, show: ShowDetails) -> Episode:
    """Fill in the show-level fields of an episode."""
    return episode.model_copy(
        update={
            "total_seasons": show.total_seasons,
            "show_year_end": show.year_end,
            "poster_url": episode.poster_url or show.poster_url,
        }
    )


async def _fetch_episode(
    provider: MetadataProvider, show_id: str, season: int, episode: int
) -> Episode:
    """Fetch an episode, treating an unknown episode as one without details."""
    try:
        return await provider.get_episode_details(show_id, season, episode)
    except NotFoundError:
        logger.info("Episode %s S%sE%s missing upstream", show_id, season, episode)
        return Episode(season=season, episode=episode)


async def pick_random_episode(
    provider: MetadataProvider,
    show_id: str,
    season_min: Optional[str] = None,
    season_max: Optional[str] = None,
    history: Optional[str] = None,
    rng: Optional[random.Random] = None,
    attempts: Optional[int] = None,
) -> EpisodeSelection:
    """Select a random episode of ``show_id`` for the client.

    Some catalog listings lack both title and plot; those selections are
    re-rolled (season included) until ``attempts`` lookups have been made, and
    the last one is returned regardless.

    Raises:
        NotFoundError: The show is unknown to the provider.
        UpstreamError: The provider failed.
    """
    rng = rng or _system_random
    attempts = attempts or get_settings().lookup_attempts

    show = await provider.get_show_details(show_id)
    seasons = clamp_season_range(season_min, season_max, show.total_seasons)
    seen = parse_history(history)

    episode: Optional[Episode] = None
    for attempt in range(1, attempts + 1):
        season = rng.randint(seasons.start, seasons.end)
        num_episodes = await provider.get_season_episode_count(show, season) or 1
        number = choose_episode(num_episodes, season_history(seen, season), rng)

        episode = await _fetch_episode(provider, show_id, season, number)
        if episode.has_details or num_episodes == 1:
            break
        logger.debug(
            "Attempt %s/%s for %s S%sE%s had no title or plot",
            attempt,
            attempts,
            show_id,
            season,
            number,
        )

    logger.info(
        "Picked %s S%sE%s from seasons %s-%s",
        show_id,
        episode.season,
        episode.episode,
        seasons.start,
        seasons.end,
    )
    return EpisodeSelection(episode=_with_show(episode, show), show=show.summary())


async def get_episode(
    provider: MetadataProvider, show_id: str, season: int, episode: int
) -> EpisodeSelection:
    """Fetch a specific episode, e.g. when restoring a shared link."""
    show = await provider.get_show_details(show_id)
    details = await provider.get_episode_details(show_id, season, episode)
    return EpisodeSelection(episode=_with_show(details, show), show=show.summary())


async def get_show(provider: MetadataProvider, show_id: str) -> Show:
    """Fetch a show's summary."""
    show = await provider.get_show_details(show_id)
    return show.summary()

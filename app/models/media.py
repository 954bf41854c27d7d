"""Normalized show and episode models shared by every metadata provider."""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model serialized with camelCase keys for the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Show(WireModel):
    """A TV series as returned by search and show lookups."""

    id: str
    title: str
    poster_url: Optional[str] = None
    year_start: Optional[int] = None
    year_end: Optional[int] = None  # None while the show is still running
    total_seasons: Optional[int] = None
    popularity: float = 0.0


class SeasonSummary(WireModel):
    """Episode count of a single season."""

    season_number: int
    episode_count: int


class ShowDetails(Show):
    """A show together with its season structure."""

    total_seasons: int = 1
    seasons: List[SeasonSummary] = []

    def episode_count(self, season: int) -> Optional[int]:
        """Return the known episode count for ``season``, if any."""
        for summary in self.seasons:
            if summary.season_number == season:
                return summary.episode_count or None
        return None

    def summary(self) -> Show:
        """Drop the season listing."""
        return Show.model_validate(self.model_dump(exclude={"seasons"}))


class Episode(WireModel):
    """A single episode, with the owning show's run information."""

    season: int
    episode: int
    title: Optional[str] = None
    plot: Optional[str] = None
    poster_url: Optional[str] = None
    rating: Optional[str] = None
    year: Optional[int] = None
    total_seasons: int = 1
    show_year_end: Optional[int] = None

    @property
    def has_details(self) -> bool:
        """Whether the provider returned a title or plot for this episode."""
        return bool(self.title or self.plot)


class EpisodeSelection(WireModel):
    """An episode paired with its show, as returned to the client."""

    episode: Episode
    show: Show


@dataclass(frozen=True)
class SeasonRange:
    """Inclusive, 1-based season bounds: ``1 <= start <= end <= total``."""

    start: int
    end: int

import os

import pytest

# app.main reads settings at import time
os.environ.setdefault("TMDB_API_KEY", "test-key")
os.environ.setdefault("METADATA_PROVIDER", "tmdb")

from app.core.exceptions import NotFoundError  # noqa: E402
from app.models.media import Episode, SeasonSummary, ShowDetails  # noqa: E402
from app.providers.base import MetadataProvider  # noqa: E402


class FakeProvider(MetadataProvider):
    """In-memory provider with a fixed season structure."""

    def __init__(self, episode_counts, blank=False, known_ids=("42",)):
        self.session = None
        self.episode_counts = episode_counts
        self.blank = blank
        self.known_ids = set(known_ids)
        self.episode_calls = []

    @property
    def name(self) -> str:
        return "fake"

    async def search_shows(self, query):
        return []

    async def get_show_details(self, show_id):
        if show_id not in self.known_ids:
            raise NotFoundError(f"Show {show_id} not found")
        return ShowDetails(
            id=show_id,
            title="Test Show",
            poster_url="http://img/show.jpg",
            year_start=2001,
            year_end=2005,
            total_seasons=len(self.episode_counts),
            seasons=[
                SeasonSummary(season_number=i + 1, episode_count=count)
                for i, count in enumerate(self.episode_counts)
            ],
        )

    async def get_episode_details(self, show_id, season, episode):
        self.episode_calls.append((season, episode))
        if self.blank:
            return Episode(season=season, episode=episode)
        return Episode(
            season=season,
            episode=episode,
            title=f"Episode {season}x{episode}",
            plot="Things happen.",
            rating="8.1",
        )


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider

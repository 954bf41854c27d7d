"""Favourites, remembered season ranges and the spoiler-avoidance flag."""

import json
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from app.client.store import KeyValueStore

STORAGE_KEY_FAVOURITES = "favourites"
STORAGE_KEY_SHOWS = "seasonRangeById"
STORAGE_KEY_SPOILER_AVOIDANCE_MODE = "spoilerAvoidanceMode"


class Favourite(BaseModel):
    id: str
    title: str


class Preferences:
    """Client preferences kept in a key/value store as JSON strings.

    Corrupt stored values read as their defaults.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self, key: str, default: Any) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return default
        try:
            value = json.loads(raw)
        except ValueError:
            return default
        return value if isinstance(value, type(default)) else default

    # Favourites

    def favourites(self) -> List[Favourite]:
        try:
            return [Favourite.model_validate(f) for f in self._load(STORAGE_KEY_FAVOURITES, [])]
        except ValidationError:
            return []

    def is_favourite(self, show_id: str) -> bool:
        return any(f.id == show_id for f in self.favourites())

    def add_favourite(self, show_id: str, title: str) -> List[Favourite]:
        favourites = self.favourites()
        if not any(f.id == show_id for f in favourites):
            favourites.append(Favourite(id=show_id, title=title))
            self._save_favourites(favourites)
        return favourites

    def remove_favourite(self, show_id: str) -> List[Favourite]:
        favourites = [f for f in self.favourites() if f.id != show_id]
        self._save_favourites(favourites)
        return favourites

    def _save_favourites(self, favourites: List[Favourite]) -> None:
        self.store.set(
            STORAGE_KEY_FAVOURITES, json.dumps([f.model_dump() for f in favourites])
        )

    # Season ranges

    def _season_ranges(self) -> Dict[str, Any]:
        return self._load(STORAGE_KEY_SHOWS, {})

    def season_range(self, show_id: str) -> Optional[Tuple[int, int]]:
        """The remembered ``(min, max)`` for a show, or None for the full range."""
        stored = self._season_ranges().get(show_id)
        if (
            isinstance(stored, list)
            and len(stored) == 2
            and all(isinstance(v, int) and not isinstance(v, bool) and v > 0 for v in stored)
        ):
            return stored[0], stored[1]
        return None

    def remember_season_range(
        self, show_id: str, season_min: int, season_max: int, total_seasons: int
    ) -> None:
        """Store a show's range; the full range is the default and is forgotten."""
        ranges = self._season_ranges()
        if season_min == 1 and season_max == total_seasons:
            ranges.pop(show_id, None)
        else:
            ranges[show_id] = [season_min, season_max]
        self.store.set(STORAGE_KEY_SHOWS, json.dumps(ranges))

    # Spoiler avoidance

    @property
    def spoiler_avoidance(self) -> bool:
        return self.store.get(STORAGE_KEY_SPOILER_AVOIDANCE_MODE) == "true"

    @spoiler_avoidance.setter
    def spoiler_avoidance(self, enabled: bool) -> None:
        self.store.set(STORAGE_KEY_SPOILER_AVOIDANCE_MODE, "true" if enabled else "false")

"""Immutable client session state and its transitions.

The session moves through ``idle -> searching -> show_selected ->
episode_loaded``, with ``error`` reachable from any request. Each transition
returns a new state; nothing is mutated in place.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from app.models.media import Episode, EpisodeSelection, Show


class Phase(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    SHOW_SELECTED = "show_selected"
    EPISODE_LOADED = "episode_loaded"
    ERROR = "error"


class SessionState(BaseModel):
    """Everything the client remembers during one browsing session."""

    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.IDLE
    query: str = ""
    search_seq: int = 0
    suggestions: Tuple[Show, ...] = ()
    show: Optional[Show] = None
    season_min: Optional[int] = None  # None means season 1
    season_max: Optional[int] = None  # None means the last season
    has_stored_range: bool = False
    episode: Optional[Episode] = None
    history: Tuple[Tuple[int, int], ...] = ()
    suggestion_history: Tuple[Episode, ...] = ()
    position: int = -1
    error: Optional[str] = None

    def _resting_phase(self) -> Phase:
        if self.episode is not None:
            return Phase.EPISODE_LOADED
        if self.show is not None:
            return Phase.SHOW_SELECTED
        return Phase.IDLE

    def start_search(self, query: str) -> "SessionState":
        """Begin a search; the new ``search_seq`` tags its response."""
        return self.model_copy(
            update={
                "phase": Phase.SEARCHING,
                "query": query,
                "search_seq": self.search_seq + 1,
                "error": None,
            }
        )

    def search_finished(self, seq: int, suggestions: Tuple[Show, ...]) -> "SessionState":
        """Apply search results unless a newer search has started since."""
        if seq != self.search_seq:
            return self
        base = self.model_copy(update={"suggestions": tuple(suggestions)})
        return base.model_copy(update={"phase": base._resting_phase()})

    def select_show(
        self, show: Show, stored_range: Optional[Tuple[int, int]] = None
    ) -> "SessionState":
        """Switch to ``show``, forgetting the previous show's history."""
        season_min, season_max = stored_range or (None, None)
        return self.model_copy(
            update={
                "phase": Phase.SHOW_SELECTED,
                "show": show,
                "season_min": season_min,
                "season_max": season_max,
                "has_stored_range": stored_range is not None,
                "episode": None,
                "history": (),
                "suggestion_history": (),
                "position": -1,
                "error": None,
            }
        )

    def set_season_range(self, season_min: int, season_max: int) -> "SessionState":
        return self.model_copy(
            update={"season_min": season_min, "season_max": season_max}
        )

    def episode_loaded(self, selection: EpisodeSelection) -> "SessionState":
        """Record a freshly picked episode.

        Re-picking an already seen episode means the client has cycled
        through that season, so the season's history restarts from it.
        """
        new = selection.episode
        pair = (new.season, new.episode)
        if pair in self.history:
            history = tuple(h for h in self.history if h[0] != new.season) + (pair,)
        else:
            history = self.history + (pair,)

        update = {
            "phase": Phase.EPISODE_LOADED,
            "show": self.show or selection.show,
            "episode": new,
            "history": history,
            "suggestion_history": self.suggestion_history + (new,),
            "position": len(self.suggestion_history),
            "error": None,
        }
        if not self.has_stored_range:
            update["season_min"] = self.season_min or 1
            update["season_max"] = self.season_max or new.total_seasons
        return self.model_copy(update=update)

    def failed(self, message: str = "An error occurred, please try again") -> "SessionState":
        return self.model_copy(update={"phase": Phase.ERROR, "error": message})

    def _move(self, offset: int) -> "SessionState":
        position = self.position + offset
        if not 0 <= position < len(self.suggestion_history):
            return self
        return self.model_copy(
            update={
                "position": position,
                "episode": self.suggestion_history[position],
                "phase": Phase.EPISODE_LOADED,
            }
        )

    def go_previous(self) -> "SessionState":
        return self._move(-1)

    def go_next(self) -> "SessionState":
        return self._move(1)

    @property
    def can_go_previous(self) -> bool:
        return self.position > 0

    @property
    def can_go_next(self) -> bool:
        return 0 <= self.position < len(self.suggestion_history) - 1

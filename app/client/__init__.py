"""Client-side helpers: API client, session state and preferences."""

from app.client.debounce import Debouncer
from app.client.http import RerunClient
from app.client.preferences import Favourite, Preferences
from app.client.state import Phase, SessionState
from app.client.store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "Debouncer",
    "Favourite",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "Phase",
    "Preferences",
    "RerunClient",
    "SessionState",
]

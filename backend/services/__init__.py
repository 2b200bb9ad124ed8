from .game import GameController
from .session_locks import session_locks
from .store import JsonFileStore, KeyValueStore, MemoryStore, StoreError, get_store

__all__ = [
    "GameController",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "StoreError",
    "get_store",
    "session_locks",
]

"""Key-value store for per-channel game state. Keys look like "<channel_id>:<suffix>"."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol

import redis

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """The backing store could not be read or written."""


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise StoreError(f"Value for {key!r} is not JSON serializable") from exc


class MemoryStore:
    """
    In-process store. Values are kept JSON-encoded so callers see the same
    round-trip behavior as a networked store (e.g. int dict keys come back as str).
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = _encode(key, value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data


class JsonFileStore:
    """
    Single JSON document on disk holding every key.

    Each write rewrites the whole file through a temp file + rename, so a crash
    mid-write leaves the previous document in place.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        _encode(key, value)
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StoreError(f"Could not read store file {self.path}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self.path} does not hold a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Could not write store file {self.path}") from exc


class RedisStore:
    """
    Redis-backed store, shared by every worker pointed at the same server.

    Values are JSON-encoded strings, so the same keys can be read by any
    client that speaks JSON.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisStore:
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._client.get(key)
        except redis.RedisError as exc:
            raise StoreError(f"Could not read {key!r} from Redis") from exc
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise StoreError(f"Value at {key!r} is not valid JSON") from exc

    def set(self, key: str, value: Any) -> None:
        encoded = _encode(key, value)
        try:
            self._client.set(key, encoded)
        except redis.RedisError as exc:
            raise StoreError(f"Could not write {key!r} to Redis") from exc

    def delete(self, key: str) -> None:
        # DEL on a missing key is a no-op returning 0.
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise StoreError(f"Could not delete {key!r} from Redis") from exc


def get_redis_url() -> str | None:
    """Redis connection URL from REDIS_URL, or None when Redis is not configured."""
    return os.environ.get("REDIS_URL", "").strip() or None


def get_store_path() -> str | None:
    """JSON store path from CTT_STORE_PATH, or None for the in-memory store."""
    return os.environ.get("CTT_STORE_PATH", "").strip() or None


_store: KeyValueStore | None = None
_store_lock = threading.Lock()


def get_store() -> KeyValueStore:
    """Process-wide store, created on first use."""
    global _store
    with _store_lock:
        if _store is None:
            redis_url = get_redis_url()
            path = get_store_path()
            if redis_url:
                logger.info("[store] Using Redis store")
                _store = RedisStore.from_url(redis_url)
            elif path:
                logger.info("[store] Using JSON file store at %s", path)
                _store = JsonFileStore(path)
            else:
                logger.info("[store] REDIS_URL and CTT_STORE_PATH not set; using in-memory store")
                _store = MemoryStore()
        return _store


def reset_store() -> None:
    """Forget the process-wide store so the next get_store() re-reads the environment."""
    global _store
    with _store_lock:
        _store = None

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class SessionLocks:
    """
    One lock per session key, kept only while some request holds or waits on it.

    Commands for the same channel read, modify and write several store keys;
    holding the channel's lock for the whole command keeps two of them from
    interleaving inside this process. Other channels never wait on each other.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # session_id -> [lock, number of requests holding or waiting on it]
        self._locks: dict[str, list] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def __contains__(self, session_id: object) -> bool:
        with self._guard:
            return session_id in self._locks

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(session_id, [threading.Lock(), 0])
            entry[1] += 1
        lock: threading.Lock = entry[0]
        try:
            with lock:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[session_id]


session_locks = SessionLocks()

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True)
class _Entry:
    text: str
    stored_at: float


@dataclass
class _Shard:
    lock: threading.Lock = field(default_factory=threading.Lock)
    entries: dict[str, _Entry] = field(default_factory=dict)


class SessionStore:
    """Process-lifetime mapping from session id to extracted resume text.

    Keys are spread over independently locked shards so requests for
    unrelated sessions never wait on each other. No lock is held once a
    method returns.
    """

    def __init__(self, shards: int = 16, clock: Callable[[], float] = time.monotonic):
        if shards < 1:
            raise ValueError("shards must be >= 1")
        self._shards = tuple(_Shard() for _ in range(shards))
        self._clock = clock

    def _shard(self, session_id: str) -> _Shard:
        return self._shards[hash(session_id) % len(self._shards)]

    def put(self, session_id: str, text: str) -> None:
        shard = self._shard(session_id)
        entry = _Entry(text=text, stored_at=self._clock())
        with shard.lock:
            shard.entries[session_id] = entry

    def get(self, session_id: str) -> str | None:
        shard = self._shard(session_id)
        with shard.lock:
            entry = shard.entries.get(session_id)
        return entry.text if entry is not None else None

    def has(self, session_id: str) -> bool:
        shard = self._shard(session_id)
        with shard.lock:
            return session_id in shard.entries

    def remove(self, session_id: str) -> None:
        shard = self._shard(session_id)
        with shard.lock:
            shard.entries.pop(session_id, None)

    def purge_expired(self, max_age_seconds: float) -> int:
        cutoff = self._clock() - max_age_seconds
        removed = 0
        for shard in self._shards:
            with shard.lock:
                stale = [key for key, entry in shard.entries.items() if entry.stored_at < cutoff]
                for key in stale:
                    del shard.entries[key]
            removed += len(stale)
        return removed

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total

"""Keyed snapshot cache for market-wide data (global stats, listings, charts)."""

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass
class _Snapshot:
    value: object
    stored_at: float
    expires_at: float


class TTLCache:
    """Thread-safe snapshot store; a snapshot is live until ``now >= expires_at``."""

    def __init__(self, default_ttl_seconds: int = 60, clock: Clock = time.time) -> None:
        self.default_ttl_seconds = max(1, default_ttl_seconds)
        self._clock = clock
        self._snapshots: dict[str, _Snapshot] = {}
        self._lock = Lock()

    def _live(self, key: str, now: float) -> _Snapshot | None:
        snapshot = self._snapshots.get(key)
        if snapshot is None:
            return None
        if snapshot.expires_at <= now:
            del self._snapshots[key]
            return None
        return snapshot

    def get(self, key: str) -> object | None:
        with self._lock:
            snapshot = self._live(key, self._clock())
        return snapshot.value if snapshot else None

    def age(self, key: str) -> float | None:
        """Seconds since the live snapshot under ``key`` was stored."""
        now = self._clock()
        with self._lock:
            snapshot = self._live(key, now)
        return None if snapshot is None else now - snapshot.stored_at

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else max(1, ttl_seconds)
        now = self._clock()
        with self._lock:
            self._snapshots[key] = _Snapshot(value=value, stored_at=now, expires_at=now + ttl)

    def get_or_load(
        self,
        key: str,
        load: Callable[[], T],
        ttl_seconds: int | None = None,
        keep: Callable[[T], bool] = lambda value: value is not None,
    ) -> T:
        """Return the live snapshot, else load one and store it when ``keep`` accepts it.

        The loader runs outside the lock, so concurrent misses may both load.
        """
        cached = self.get(key)
        if cached is not None:
            return cached  # type: ignore[return-value]
        value = load()
        if keep(value):
            self.set(key, value, ttl_seconds=ttl_seconds)
        return value

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, snapshot in self._snapshots.items() if snapshot.expires_at <= now]
            for key in expired:
                del self._snapshots[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()

    def __len__(self) -> int:
        self.purge_expired()
        with self._lock:
            return len(self._snapshots)

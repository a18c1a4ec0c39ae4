"""Per-symbol coin price cache with a fixed freshness window."""

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock

from crypto_portfolio.cache.ttl_cache import Clock
from crypto_portfolio.providers.models import CoinQuote

DEFAULT_FRESHNESS_SECONDS = 5 * 60


@dataclass(frozen=True)
class CachedCoin:
    price: float
    name: str
    coin_id: str
    fetched_at: float

    def to_quote(self) -> CoinQuote:
        return CoinQuote(price=self.price, name=self.name, coin_id=self.coin_id)


class PriceCache:
    """Symbol-keyed quotes; an entry is fresh while ``now - fetched_at < ttl``.

    Entries are replaced wholesale on every write. Symbols are matched
    case-insensitively.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_FRESHNESS_SECONDS, clock: Clock = time.time) -> None:
        self.ttl_seconds = max(0.0, float(ttl_seconds))
        self._clock = clock
        self._entries: dict[str, CachedCoin] = {}
        self._lock = Lock()

    @staticmethod
    def _key(symbol: str) -> str:
        return symbol.strip().lower()

    def get(self, symbol: str) -> CachedCoin | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(self._key(symbol))
        if entry is None or now - entry.fetched_at >= self.ttl_seconds:
            return None
        return entry

    def put(self, symbol: str, quote: CoinQuote) -> CachedCoin:
        entry = CachedCoin(price=quote.price, name=quote.name, coin_id=quote.coin_id, fetched_at=self._clock())
        with self._lock:
            self._entries[self._key(symbol)] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

from crypto_portfolio.cache.price_cache import PriceCache
from crypto_portfolio.cache.ttl_cache import TTLCache
from crypto_portfolio.providers.models import CoinQuote


class _Clock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_price_cache_entry_valid_inside_window_only() -> None:
    clock = _Clock(100.0)
    cache = PriceCache(ttl_seconds=300, clock=clock)
    cache.put("BTC", CoinQuote(price=30000.0, name="Bitcoin", coin_id="bitcoin"))

    clock.now = 399.9
    assert cache.get("btc") is not None
    clock.now = 400.0
    assert cache.get("btc") is None


def test_price_cache_replaces_entries_wholesale() -> None:
    clock = _Clock(10.0)
    cache = PriceCache(clock=clock)
    cache.put("eth", CoinQuote(price=2000.0, name="Ethereum", coin_id="ethereum"))
    clock.now = 20.0
    cache.put("ETH", CoinQuote(price=2100.0, name="Ether", coin_id="ethereum"))

    entry = cache.get("eth")
    assert entry.price == 2100.0
    assert entry.name == "Ether"
    assert entry.fetched_at == 20.0
    assert len(cache) == 1


def test_ttl_cache_expires_with_injected_clock() -> None:
    clock = _Clock(0.0)
    cache = TTLCache(default_ttl_seconds=60, clock=clock)
    cache.set("k", {"v": 1})
    clock.now = 59.0
    assert cache.get("k") == {"v": 1}
    clock.now = 60.0
    assert cache.get("k") is None


def test_ttl_cache_clear() -> None:
    cache = TTLCache()
    cache.set("a", 1)
    cache.clear()
    assert cache.get("a") is None


def test_ttl_cache_get_or_load_keeps_only_accepted_values() -> None:
    clock = _Clock(0.0)
    cache = TTLCache(clock=clock)
    loads: list[str] = []

    def _load_empty() -> list[str]:
        loads.append("empty")
        return []

    assert cache.get_or_load("listing", _load_empty, keep=bool) == []
    assert cache.get_or_load("listing", _load_empty, keep=bool) == []
    assert loads == ["empty", "empty"]

    assert cache.get_or_load("listing", lambda: ["bitcoin"], ttl_seconds=30, keep=bool) == ["bitcoin"]
    assert cache.get_or_load("listing", _load_empty, keep=bool) == ["bitcoin"]
    assert loads == ["empty", "empty"]


def test_ttl_cache_age_and_purge() -> None:
    clock = _Clock(100.0)
    cache = TTLCache(default_ttl_seconds=60, clock=clock)
    cache.set("global", {"btc_dominance": 52.1})
    cache.set("chart", [1, 2], ttl_seconds=30)

    clock.now = 110.0
    assert cache.age("global") == 10.0
    assert len(cache) == 2

    clock.now = 130.0
    assert cache.purge_expired() == 1
    assert cache.age("chart") is None
    assert len(cache) == 1

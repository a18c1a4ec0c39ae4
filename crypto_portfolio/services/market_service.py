"""Market-domain service: sentiment, global stats and coin listings."""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from crypto_portfolio.cache.ttl_cache import TTLCache
from crypto_portfolio.portfolio.errors import ValidationError
from crypto_portfolio.providers.alternative_me import FearGreedClient
from crypto_portfolio.providers.coingecko import CoinGeckoClient
from crypto_portfolio.providers.http import ProviderError
from crypto_portfolio.providers.models import FearGreedReading, GlobalMarketSnapshot, MarketChart, MarketCoin, TrendingCoin
from crypto_portfolio.services.base import ErrorEnvelope, ServiceResult, envelope_from_provider_error, run_with_cache

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)

FEAR_GREED_TTL_SECONDS = 60 * 60
GLOBAL_TTL_SECONDS = 60
TOP_COINS_TTL_SECONDS = 30
TRENDING_TTL_SECONDS = 5 * 60
COIN_DIRECTORY_TTL_SECONDS = 10 * 60
PRICE_HISTORY_TTL_SECONDS = 30
MAX_HISTORY_DAYS = 365


def _rank_key(coin: MarketCoin) -> tuple[int, int]:
    if coin.market_cap_rank is None:
        return (1, 0)
    return (0, coin.market_cap_rank)


def filter_coins(coins: list[MarketCoin], query: str) -> list[MarketCoin]:
    """Rank-ordered coins whose name or symbol contains ``query`` (case-insensitive)."""
    ranked = sorted(coins, key=_rank_key)
    needle = (query or "").strip().lower()
    if not needle:
        return ranked
    return [coin for coin in ranked if needle in coin.name.lower() or needle in coin.symbol.lower()]


class MarketService:
    def __init__(
        self,
        coingecko: CoinGeckoClient,
        fear_greed: FearGreedClient,
        cache: TTLCache | None = None,
    ) -> None:
        self.coingecko = coingecko
        self.fear_greed = fear_greed
        self.cache = cache if cache is not None else TTLCache(default_ttl_seconds=GLOBAL_TTL_SECONDS)

    def _fetch(self, operation: str, source: str, call: Callable[[], T | None]) -> ServiceResult[T]:
        try:
            value = call()
        except ProviderError as error:
            LOGGER.warning("market fetch failed: op=%s code=%s status=%s", operation, error.code, error.status)
            return ServiceResult(data=None, error=envelope_from_provider_error(error))
        if value is None:
            return ServiceResult(
                data=None,
                error=ErrorEnvelope(code="NOT_FOUND", message=f"{operation} returned no data.", retriable=True),
            )
        return ServiceResult(data=value, source=source, fetched_at=time.time(), data_provider=source)

    def get_fear_greed(self) -> ServiceResult[FearGreedReading]:
        return run_with_cache(
            self.cache,
            "market:fear_greed",
            lambda: self._fetch("fear_greed", "alternative.me", self.fear_greed.get_latest),
            ttl_seconds=FEAR_GREED_TTL_SECONDS,
        )

    def get_global_market(self) -> ServiceResult[GlobalMarketSnapshot]:
        return run_with_cache(
            self.cache,
            "market:global",
            lambda: self._fetch("global_market", "CoinGecko", self.coingecko.get_global),
            ttl_seconds=GLOBAL_TTL_SECONDS,
        )

    def get_top_coins(self, limit: int = 20) -> ServiceResult[list[MarketCoin]]:
        limit = max(1, min(int(limit), 250))
        return run_with_cache(
            self.cache,
            f"market:top:{limit}",
            lambda: self._fetch("top_coins", "CoinGecko", lambda: self.coingecko.get_markets(per_page=limit) or None),
            ttl_seconds=TOP_COINS_TTL_SECONDS,
        )

    def get_trending(self) -> ServiceResult[list[TrendingCoin]]:
        return run_with_cache(
            self.cache,
            "market:trending",
            lambda: self._fetch("trending", "CoinGecko", lambda: self.coingecko.get_trending() or None),
            ttl_seconds=TRENDING_TTL_SECONDS,
        )

    def get_market_chart(self, coin_id: str = "bitcoin", days: int = 7) -> ServiceResult[MarketChart]:
        coin = (coin_id or "").strip().lower()
        if not coin:
            raise ValidationError("Coin id is required.", field="coin_id")
        days = max(1, min(int(days), MAX_HISTORY_DAYS))
        return run_with_cache(
            self.cache,
            f"market:chart:{coin}:{days}",
            lambda: self._fetch("price_history", "CoinGecko", lambda: self.coingecko.get_market_chart(coin, days)),
            ttl_seconds=PRICE_HISTORY_TTL_SECONDS,
        )

    def search_coins(self, query: str = "", limit: int = 50) -> ServiceResult[list[MarketCoin]]:
        listing = run_with_cache(
            self.cache,
            "market:directory",
            lambda: self._fetch("coin_listing", "CoinGecko", lambda: self.coingecko.get_markets(per_page=250) or None),
            ttl_seconds=COIN_DIRECTORY_TTL_SECONDS,
        )
        if listing.data is None:
            return listing
        matches = filter_coins(listing.data, query)[: max(1, limit)]
        return ServiceResult(
            data=matches,
            source=listing.source,
            fetched_at=listing.fetched_at,
            data_provider=listing.data_provider,
        )

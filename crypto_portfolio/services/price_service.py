"""Coin price lookup with a symbol cache and ordered resolver fallbacks."""

from __future__ import annotations

import logging
from functools import partial

from crypto_portfolio.cache.price_cache import PriceCache
from crypto_portfolio.portfolio.errors import ResolutionError, ValidationError
from crypto_portfolio.providers.coingecko import CoinGeckoClient
from crypto_portfolio.providers.models import CoinQuote
from crypto_portfolio.services.base import ServiceResult, clean_symbol
from crypto_portfolio.services.resolver_chain import ResolverChain, ResolverStrategy

LOGGER = logging.getLogger(__name__)


def _usable_price(price: float | None) -> bool:
    return price is not None and price > 0


def resolve_by_id(client: CoinGeckoClient, symbol: str) -> CoinQuote | None:
    """Treat the symbol as a CoinGecko id (``bitcoin``, ``ethereum``)."""
    rows = client.get_markets(ids=[symbol.lower()], per_page=1)
    if len(rows) != 1 or not _usable_price(rows[0].current_price):
        return None
    coin = rows[0]
    return CoinQuote(price=coin.current_price, name=coin.name, coin_id=coin.id)


def resolve_by_market_scan(client: CoinGeckoClient, symbol: str, page_size: int = 250) -> CoinQuote | None:
    wanted = symbol.lower()
    for coin in client.get_markets(per_page=page_size):
        if coin.symbol.lower() == wanted and _usable_price(coin.current_price):
            return CoinQuote(price=coin.current_price, name=coin.name, coin_id=coin.id)
    return None


def resolve_by_coin_directory(client: CoinGeckoClient, symbol: str) -> CoinQuote | None:
    wanted = symbol.lower()
    match = next((coin for coin in client.get_coin_list() if coin.symbol.lower() == wanted), None)
    if match is None:
        return None
    price = client.get_simple_prices([match.id]).get(match.id)
    if not _usable_price(price):
        return None
    return CoinQuote(price=price, name=match.name, coin_id=match.id)


class PriceLookupService:
    def __init__(
        self,
        client: CoinGeckoClient,
        cache: PriceCache | None = None,
        market_scan_page_size: int = 250,
        strategies: list[ResolverStrategy[CoinQuote]] | None = None,
    ) -> None:
        self.client = client
        self.cache = cache if cache is not None else PriceCache()
        self.chain: ResolverChain[CoinQuote] = ResolverChain(
            strategies if strategies is not None else self.default_strategies(market_scan_page_size),
            operation="get_coin_price",
        )

    def default_strategies(self, market_scan_page_size: int = 250) -> list[ResolverStrategy[CoinQuote]]:
        return [
            ResolverStrategy("market_by_id", "CoinGecko markets (id)", partial(resolve_by_id, self.client)),
            ResolverStrategy(
                "market_scan",
                "CoinGecko markets (symbol scan)",
                partial(resolve_by_market_scan, self.client, page_size=market_scan_page_size),
            ),
            ResolverStrategy("coin_directory", "CoinGecko coin list", partial(resolve_by_coin_directory, self.client)),
        ]

    def lookup(self, symbol: str) -> ServiceResult[CoinQuote]:
        clean = clean_symbol(symbol)
        if not clean:
            raise ValidationError("Symbol is required.", field="symbol")

        cached = self.cache.get(clean)
        if cached is not None:
            return ServiceResult(
                data=cached.to_quote(),
                source="cache",
                fetched_at=cached.fetched_at,
                data_provider="CoinGecko",
            )

        result = self.chain.execute(clean)
        if result.data is not None:
            entry = self.cache.put(clean, result.data)
            result.fetched_at = entry.fetched_at
        return result

    def get_coin_price(self, symbol: str) -> CoinQuote:
        """Resolve ``symbol`` to a quote or raise ``ResolutionError``."""
        result = self.lookup(symbol)
        if result.data is None:
            message = result.error.message if result.error else None
            raise ResolutionError(clean_symbol(symbol), message)
        return result.data

    def get_batch_prices(self, coin_ids: list[str]) -> dict[str, float]:
        """One quote request for all ids; ``ProviderError`` propagates to the caller."""
        unique = list(dict.fromkeys(coin_id for coin_id in coin_ids if coin_id))
        if not unique:
            return {}
        prices = self.client.get_simple_prices(unique)
        missing = [coin_id for coin_id in unique if coin_id not in prices]
        if missing:
            LOGGER.info("batch quote omitted coins: count=%s ids=%s", len(missing), ",".join(missing))
        return prices

"""Normalized data models shared across providers and tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ProviderName = Literal[
    "coingecko",
    "alternative_me",
    "supabase",
    "clerk",
]


@dataclass
class CoinQuote:
    price: float
    name: str
    coin_id: str


@dataclass
class MarketCoin:
    id: str
    symbol: str
    name: str
    current_price: float | None = None
    market_cap: float | None = None
    market_cap_rank: int | None = None
    total_volume: float | None = None
    price_change_percentage_24h: float | None = None
    image: str | None = None


@dataclass
class DirectoryCoin:
    id: str
    symbol: str
    name: str


@dataclass
class FearGreedReading:
    value: int
    value_classification: str
    timestamp: str | None = None


@dataclass
class GlobalMarketSnapshot:
    total_market_cap: float | None = None
    total_volume: float | None = None
    market_cap_change_percentage_24h: float | None = None
    btc_dominance: float | None = None
    eth_dominance: float | None = None
    active_cryptocurrencies: int | None = None


@dataclass
class TrendingCoin:
    id: str
    symbol: str
    name: str
    market_cap_rank: int | None = None
    price_btc: float | None = None
    score: int | None = None


@dataclass
class PricePoint:
    timestamp: int
    price: float


@dataclass
class MarketChart:
    coin_id: str
    days: int
    prices: list[PricePoint]
    change: float = 0.0
    change_percentage: float = 0.0

"""CoinGecko v3 adapter."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from crypto_portfolio.providers.http import fetch_json
from crypto_portfolio.providers.models import (
    DirectoryCoin,
    GlobalMarketSnapshot,
    MarketChart,
    MarketCoin,
    PricePoint,
    TrendingCoin,
)


class CoinGeckoClient:
    def __init__(
        self,
        api_key: str | None = None,
        timeout_seconds: float = 15.0,
        base_url: str = "https://api.coingecko.com/api/v3",
        vs_currency: str = "usd",
    ) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.base = base_url.rstrip("/")
        self.vs_currency = vs_currency

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key
        return fetch_json(
            f"{self.base}{path}",
            provider="coingecko",
            timeout_seconds=self.timeout_seconds,
            headers=headers,
            params=params,
        )

    @staticmethod
    def _as_float(value: object) -> float | None:
        if value is None or value == "" or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _as_int(value: object) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None

    def _market_coin(self, item: dict[str, Any]) -> MarketCoin | None:
        coin_id = item.get("id")
        symbol = item.get("symbol")
        if not isinstance(coin_id, str) or not isinstance(symbol, str):
            return None
        return MarketCoin(
            id=coin_id,
            symbol=symbol,
            name=str(item.get("name") or symbol.upper()),
            current_price=self._as_float(item.get("current_price")),
            market_cap=self._as_float(item.get("market_cap")),
            market_cap_rank=self._as_int(item.get("market_cap_rank")),
            total_volume=self._as_float(item.get("total_volume")),
            price_change_percentage_24h=self._as_float(item.get("price_change_percentage_24h")),
            image=item.get("image") if isinstance(item.get("image"), str) else None,
        )

    def get_markets(self, ids: list[str] | None = None, per_page: int = 250, page: int = 1) -> list[MarketCoin]:
        params: dict[str, Any] = {
            "vs_currency": self.vs_currency,
            "order": "market_cap_desc",
            "per_page": max(1, min(per_page, 250)),
            "page": max(1, page),
            "sparkline": "false",
        }
        if ids:
            params["ids"] = ",".join(ids)
        data = self._get("/coins/markets", params)
        if not isinstance(data, list):
            return []
        out: list[MarketCoin] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            coin = self._market_coin(item)
            if coin is not None:
                out.append(coin)
        return out

    def get_coin_list(self) -> list[DirectoryCoin]:
        data = self._get("/coins/list")
        if not isinstance(data, list):
            return []
        out: list[DirectoryCoin] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            coin_id = item.get("id")
            symbol = item.get("symbol")
            if isinstance(coin_id, str) and isinstance(symbol, str):
                out.append(DirectoryCoin(id=coin_id, symbol=symbol, name=str(item.get("name") or symbol.upper())))
        return out

    def get_simple_prices(self, coin_ids: list[str]) -> dict[str, float]:
        """Return quoted prices keyed by coin id; ids the provider omits are absent."""
        if not coin_ids:
            return {}
        data = self._get("/simple/price", {"ids": ",".join(coin_ids), "vs_currencies": self.vs_currency})
        if not isinstance(data, dict):
            return {}
        out: dict[str, float] = {}
        for coin_id, row in data.items():
            if not isinstance(row, dict):
                continue
            price = self._as_float(row.get(self.vs_currency))
            if price is not None:
                out[coin_id] = price
        return out

    def get_global(self) -> GlobalMarketSnapshot | None:
        data = self._get("/global")
        body = data.get("data") if isinstance(data, dict) else None
        if not isinstance(body, dict):
            return None
        market_cap = body.get("total_market_cap") or {}
        volume = body.get("total_volume") or {}
        dominance = body.get("market_cap_percentage") or {}
        return GlobalMarketSnapshot(
            total_market_cap=self._as_float(market_cap.get(self.vs_currency)) if isinstance(market_cap, dict) else None,
            total_volume=self._as_float(volume.get(self.vs_currency)) if isinstance(volume, dict) else None,
            market_cap_change_percentage_24h=self._as_float(body.get("market_cap_change_percentage_24h_usd")),
            btc_dominance=self._as_float(dominance.get("btc")) if isinstance(dominance, dict) else None,
            eth_dominance=self._as_float(dominance.get("eth")) if isinstance(dominance, dict) else None,
            active_cryptocurrencies=self._as_int(body.get("active_cryptocurrencies")),
        )

    def get_trending(self) -> list[TrendingCoin]:
        data = self._get("/search/trending")
        coins = data.get("coins") if isinstance(data, dict) else None
        if not isinstance(coins, list):
            return []
        out: list[TrendingCoin] = []
        for wrapper in coins:
            item = wrapper.get("item") if isinstance(wrapper, dict) else None
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                continue
            out.append(
                TrendingCoin(
                    id=item["id"],
                    symbol=str(item.get("symbol") or ""),
                    name=str(item.get("name") or ""),
                    market_cap_rank=self._as_int(item.get("market_cap_rank")),
                    price_btc=self._as_float(item.get("price_btc")),
                    score=self._as_int(item.get("score")),
                )
            )
        return out

    def get_market_chart(self, coin_id: str, days: int = 7) -> MarketChart | None:
        """Price history for one coin; change is measured between the last two points."""
        data = self._get(
            f"/coins/{quote(coin_id, safe='')}/market_chart",
            {"vs_currency": self.vs_currency, "days": days},
        )
        rows = data.get("prices") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            return None
        points: list[PricePoint] = []
        for row in rows:
            if not isinstance(row, list) or len(row) < 2:
                continue
            price = self._as_float(row[1])
            stamp = self._as_float(row[0])
            if price is None or stamp is None:
                continue
            points.append(PricePoint(timestamp=int(stamp), price=price))
        if not points:
            return None
        latest = points[-1].price
        previous = points[-2].price if len(points) > 1 else latest
        change = latest - previous
        return MarketChart(
            coin_id=coin_id,
            days=days,
            prices=points,
            change=change,
            change_percentage=(change / previous * 100.0) if previous else 0.0,
        )

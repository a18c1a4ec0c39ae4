import asyncio

import pytest

from crypto_portfolio.portfolio.models import NewHolding
from crypto_portfolio.portfolio.portfolio_service import PortfolioService
from crypto_portfolio.providers.http import ProviderError
from crypto_portfolio.services.price_service import PriceLookupService
from crypto_portfolio.store.memory_store import InMemoryHoldingStore

USER = "user_1"


class _BatchQuotes:
    def __init__(self, prices: dict[str, float] | None = None, error: ProviderError | None = None) -> None:
        self.prices = prices or {}
        self.error = error
        self.requested: list[list[str]] = []

    def get_simple_prices(self, coin_ids):
        self.requested.append(list(coin_ids))
        if self.error:
            raise self.error
        return {coin_id: self.prices[coin_id] for coin_id in coin_ids if coin_id in self.prices}


def _holding(symbol: str, amount: float, avg_price: float, coin_id: str) -> NewHolding:
    return NewHolding(
        symbol=symbol,
        name=symbol.title(),
        amount=amount,
        avg_price=avg_price,
        coin_id=coin_id,
        purchase_date="2024-03-01",
    )


def _service(quotes: _BatchQuotes, holdings: list[NewHolding]) -> PortfolioService:
    store = InMemoryHoldingStore(lambda: "opaque-token")
    for payload in holdings:
        store.create_holding(USER, payload)
    return PortfolioService(store, PriceLookupService(quotes))


def test_portfolio_combines_purchases_of_one_coin() -> None:
    quotes = _BatchQuotes({"bitcoin": 30000.0})
    service = _service(quotes, [_holding("BTC", 1, 20000, "bitcoin"), _holding("BTC", 1, 30000, "bitcoin")])

    summary = asyncio.run(service.get_portfolio(USER))

    [btc] = summary.holdings
    assert btc.total_quantity == 2
    assert btc.average_buy_price == pytest.approx(25000)
    assert btc.current_value == pytest.approx(60000)
    assert btc.profit_or_loss == pytest.approx(10000)
    assert btc.profit_or_loss_percentage == pytest.approx(20.0)
    assert summary.total_portfolio_value == pytest.approx(60000)
    assert summary.total_profit_or_loss_percentage == pytest.approx(20.0)
    assert quotes.requested == [["bitcoin"]]


def test_empty_portfolio_skips_quote_request() -> None:
    quotes = _BatchQuotes({"bitcoin": 30000.0})
    summary = asyncio.run(_service(quotes, []).get_portfolio(USER))

    assert summary.holdings == []
    assert summary.total_portfolio_value == 0
    assert summary.total_profit_or_loss_percentage == 0
    assert quotes.requested == []


def test_batch_quote_failure_values_holdings_at_cost() -> None:
    quotes = _BatchQuotes(error=ProviderError("coingecko", "RATE_LIMIT", "Provider request failed with status 429.", 429))
    service = _service(quotes, [_holding("BTC", 1, 20000, "bitcoin"), _holding("ETH", 4, 1500, "ethereum")])

    summary = asyncio.run(service.get_portfolio(USER))

    assert len(summary.holdings) == 2
    assert all(holding.profit_or_loss == pytest.approx(0.0) for holding in summary.holdings)
    assert summary.total_profit_or_loss == pytest.approx(0.0)
    assert summary.total_portfolio_value == pytest.approx(summary.total_invested)


def test_coin_missing_from_batch_falls_back_alone() -> None:
    quotes = _BatchQuotes({"ethereum": 2000.0})
    service = _service(quotes, [_holding("BTC", 1, 20000, "bitcoin"), _holding("ETH", 2, 1500, "ethereum")])

    summary = asyncio.run(service.get_portfolio(USER))
    by_symbol = {holding.symbol: holding for holding in summary.holdings}

    assert by_symbol["BTC"].current_price == pytest.approx(20000)
    assert by_symbol["ETH"].profit_or_loss == pytest.approx(1000)


def test_entries_cover_every_stored_holding_once() -> None:
    holdings = [
        _holding("BTC", 1, 20000, "bitcoin"),
        _holding("ETH", 2, 1500, "ethereum"),
        _holding("BTC", 0.5, 26000, "bitcoin"),
        _holding("SOL", 10, 25, "solana"),
    ]
    quotes = _BatchQuotes({"bitcoin": 30000.0, "ethereum": 2000.0, "solana": 30.0})
    service = _service(quotes, holdings)

    summary = asyncio.run(service.get_portfolio(USER))
    stored = {record.id for record in service.store.list_holdings(USER)}
    entry_ids = [entry.id for holding in summary.holdings for entry in holding.entries]

    assert len(entry_ids) == len(stored)
    assert set(entry_ids) == stored
    assert sorted(quotes.requested[0]) == ["bitcoin", "ethereum", "solana"]


def test_allocation_sorted_by_value() -> None:
    quotes = _BatchQuotes({"bitcoin": 30000.0, "ethereum": 2000.0})
    service = _service(quotes, [_holding("ETH", 5, 1500, "ethereum"), _holding("BTC", 1, 20000, "bitcoin")])

    payload = asyncio.run(service.get_allocation(USER))

    assert payload["total_portfolio_value"] == pytest.approx(40000)
    assert [row["symbol"] for row in payload["allocation"]] == ["BTC", "ETH"]
    assert payload["allocation"][0]["percentage"] == pytest.approx(75.0)
    assert sum(row["percentage"] for row in payload["allocation"]) == pytest.approx(100.0)

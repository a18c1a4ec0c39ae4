import pytest

from crypto_portfolio.portfolio.analytics import calculate_allocation, calculate_contribution_to_return, top_holdings
from crypto_portfolio.portfolio.models import AggregatedHolding, PortfolioSummary


def _summary() -> PortfolioSummary:
    holdings = [
        AggregatedHolding(symbol="ETH", name="Ethereum", coin_id="ethereum", total_invested=4000, current_value=5000,
                          profit_or_loss=1000),
        AggregatedHolding(symbol="BTC", name="Bitcoin", coin_id="bitcoin", total_invested=16000, current_value=15000,
                          profit_or_loss=-1000),
    ]
    return PortfolioSummary(total_portfolio_value=20000, total_invested=20000, holdings=holdings)


def test_allocation_percentages_sum_to_100() -> None:
    rows = calculate_allocation(_summary())
    assert [row["symbol"] for row in rows] == ["BTC", "ETH"]
    assert rows[0]["percentage"] == pytest.approx(75.0)
    assert sum(row["percentage"] for row in rows) == pytest.approx(100.0)


def test_allocation_with_zero_value_is_zero_percent() -> None:
    summary = PortfolioSummary(holdings=[AggregatedHolding(symbol="X", name="X", coin_id="x")])
    assert calculate_allocation(summary)[0]["percentage"] == 0.0


def test_contribution_to_return() -> None:
    contribution = calculate_contribution_to_return(_summary())
    assert contribution["ETH"] == pytest.approx(5.0)
    assert contribution["BTC"] == pytest.approx(-5.0)


def test_top_holdings_by_value() -> None:
    assert [holding.symbol for holding in top_holdings(_summary(), limit=1)] == ["BTC"]

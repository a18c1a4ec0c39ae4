from crypto_portfolio.lib.formatters import (
    FINANCIAL_DISCLAIMER,
    format_portfolio_summary,
    format_price,
    format_response,
    line_money,
)
from crypto_portfolio.portfolio.models import AggregatedHolding, PortfolioSummary


def test_format_response_includes_disclaimer() -> None:
    output = format_response("Title", ["a", "b"], source="X", warning="Y")
    assert "Title" in output
    assert "Source: X" in output
    assert "Warning: Y" in output
    assert FINANCIAL_DISCLAIMER in output


def test_price_precision_scales_for_small_coins() -> None:
    assert line_money("Price", 10.123) == "Price: $10.12"
    assert format_price(0.5) == "$0.5000"
    assert format_price(0.000123) == "$0.000123"
    assert format_price(None) == "n/a"


def test_portfolio_summary_lists_each_holding() -> None:
    summary = PortfolioSummary(
        total_portfolio_value=60000,
        total_invested=50000,
        total_profit_or_loss=10000,
        total_profit_or_loss_percentage=20,
        holdings=[
            AggregatedHolding(
                symbol="BTC",
                name="Bitcoin",
                coin_id="bitcoin",
                total_quantity=2,
                average_buy_price=25000,
                total_invested=50000,
                current_price=30000,
                current_value=60000,
                profit_or_loss=10000,
                profit_or_loss_percentage=20,
            )
        ],
    )
    output = format_portfolio_summary(summary)
    assert "Total value: $60,000.00" in output
    assert "- BTC (Bitcoin): qty 2 |" in output
    assert "(20.00%)" in output


def test_losses_put_the_sign_before_the_currency() -> None:
    assert format_price(-0.5) == "-$0.5000"
    assert format_price(-1000) == "-$1,000.00"
    assert format_price(-0.004) == "-$0.004000"
    assert line_money("Profit/loss", -250.5) == "Profit/loss: -$250.50"


def _holding(symbol: str, value: float) -> AggregatedHolding:
    return AggregatedHolding(
        symbol=symbol,
        name=symbol.title(),
        coin_id=symbol.lower(),
        total_quantity=1,
        average_buy_price=value,
        total_invested=value,
        current_price=value,
        current_value=value,
        profit_or_loss=0,
        profit_or_loss_percentage=0,
    )


def test_portfolio_summary_names_largest_positions() -> None:
    holdings = [_holding("DOGE", 50), _holding("BTC", 30000), _holding("ADA", 10), _holding("ETH", 2000)]
    summary = PortfolioSummary(
        total_portfolio_value=32060,
        total_invested=32060,
        total_profit_or_loss=0,
        total_profit_or_loss_percentage=0,
        holdings=holdings,
    )
    assert "Largest positions: BTC, ETH, DOGE" in format_portfolio_summary(summary)

"""Plain-text formatting for portfolio reports."""

from __future__ import annotations

from crypto_portfolio.portfolio.analytics import top_holdings
from crypto_portfolio.portfolio.models import PortfolioSummary

FINANCIAL_DISCLAIMER = "Informational use only. This is not financial advice."


def format_price(value: float | None) -> str:
    if value is None:
        return "n/a"
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if 0 < magnitude < 0.01:
        return f"{sign}${magnitude:.6f}"
    if 0 < magnitude < 1:
        return f"{sign}${magnitude:.4f}"
    return f"{sign}${magnitude:,.2f}"


def _fmt_number(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return "n/a"
    return f"{value:.{decimals}f}"


def _fmt_percent(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:.2f}%"


def format_response(
    title: str,
    lines: list[str],
    source: str | None = None,
    warning: str | None = None,
    include_disclaimer: bool = True,
) -> str:
    chunks: list[str] = [title]
    if source:
        chunks.append(f"Source: {source}")
    if warning:
        chunks.append(f"Warning: {warning}")
    chunks.extend(lines)
    if include_disclaimer:
        chunks.extend(["---", FINANCIAL_DISCLAIMER])
    return "\n".join(chunks)


def line_money(label: str, value: float | None) -> str:
    return f"{label}: {format_price(value)}"


def line_number(label: str, value: float | None, decimals: int = 2) -> str:
    return f"{label}: {_fmt_number(value, decimals)}"


def line_percent(label: str, value: float | None) -> str:
    return f"{label}: {_fmt_percent(value)}"


def format_portfolio_summary(summary: PortfolioSummary) -> str:
    lines = [
        line_money("Total value", summary.total_portfolio_value),
        line_money("Total invested", summary.total_invested),
        line_money("Profit/loss", summary.total_profit_or_loss),
        line_percent("Profit/loss %", summary.total_profit_or_loss_percentage),
    ]
    if not summary.holdings:
        lines.append("No holdings recorded.")
    else:
        lines.append("Largest positions: " + ", ".join(holding.symbol for holding in top_holdings(summary, limit=3)))
    for holding in summary.holdings:
        lines.append(
            f"- {holding.symbol} ({holding.name}): qty {_fmt_number(holding.total_quantity, 8).rstrip('0').rstrip('.')}"
            f" | avg {format_price(holding.average_buy_price)} | now {format_price(holding.current_price)}"
            f" | value {format_price(holding.current_value)} | P/L {format_price(holding.profit_or_loss)}"
            f" ({_fmt_percent(holding.profit_or_loss_percentage)})"
        )
    return format_response("Portfolio summary", lines)

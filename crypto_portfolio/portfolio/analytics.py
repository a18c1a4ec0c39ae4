"""Allocation analytics over an aggregated portfolio."""

from __future__ import annotations

import pandas as pd

from crypto_portfolio.portfolio.models import AggregatedHolding, PortfolioSummary


def holdings_frame(summary: PortfolioSummary) -> pd.DataFrame:
    columns = ["Symbol", "Name", "Quantity", "Current_Value", "Total_Invested", "PnL"]
    rows = [
        {
            "Symbol": holding.symbol,
            "Name": holding.name,
            "Quantity": holding.total_quantity,
            "Current_Value": holding.current_value,
            "Total_Invested": holding.total_invested,
            "PnL": holding.profit_or_loss,
        }
        for holding in summary.holdings
    ]
    return pd.DataFrame(rows, columns=columns)


def calculate_allocation(summary: PortfolioSummary) -> list[dict[str, float | str]]:
    """Share of portfolio value per symbol, in percent, largest first."""
    frame = holdings_frame(summary)
    if frame.empty:
        return []
    total_value = float(frame["Current_Value"].sum())
    frame["Allocation_Percent"] = frame["Current_Value"] / total_value * 100.0 if total_value > 0 else 0.0
    frame = frame.sort_values("Current_Value", ascending=False, kind="stable")
    return [
        {
            "symbol": str(row.Symbol),
            "name": str(row.Name),
            "value": float(row.Current_Value),
            "percentage": float(row.Allocation_Percent),
        }
        for row in frame.itertuples(index=False)
    ]


def calculate_contribution_to_return(summary: PortfolioSummary) -> dict[str, float]:
    frame = holdings_frame(summary)
    invested = float(frame["Total_Invested"].sum()) if not frame.empty else 0.0
    if invested <= 0:
        return {str(symbol): 0.0 for symbol in frame["Symbol"]}
    return {str(row.Symbol): float(row.PnL / invested * 100.0) for row in frame.itertuples(index=False)}


def top_holdings(summary: PortfolioSummary, limit: int = 2) -> list[AggregatedHolding]:
    ranked = sorted(summary.holdings, key=lambda holding: holding.current_value, reverse=True)
    return ranked[: max(0, limit)]

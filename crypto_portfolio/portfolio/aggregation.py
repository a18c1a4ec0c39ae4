"""Per-symbol aggregation of raw holdings into a portfolio summary.

Holdings are grouped by ``symbol``, not by ``coin_id``: two coins that share
a ticker end up in one aggregate priced by the first entry's coin id.
"""

from __future__ import annotations

from crypto_portfolio.portfolio.models import AggregatedHolding, HoldingRecord, PortfolioEntry, PortfolioSummary


def entry_from_record(record: HoldingRecord) -> PortfolioEntry:
    return PortfolioEntry(
        id=record.id,
        symbol=record.symbol,
        quantity=record.amount,
        price_used=record.avg_price,
        total_cost=record.amount * record.avg_price,
        timestamp=record.purchase_date,
        name=record.name,
        coin_id=record.coin_id,
    )


def distinct_coin_ids(records: list[HoldingRecord]) -> list[str]:
    return list(dict.fromkeys(record.coin_id for record in records if record.coin_id))


def _percentage(part: float, whole: float) -> float:
    return (part / whole) * 100.0 if whole > 0 else 0.0


def finalize_holding(group: AggregatedHolding, prices: dict[str, float]) -> AggregatedHolding:
    group.average_buy_price = group.total_invested / group.total_quantity if group.total_quantity > 0 else 0.0
    quote = prices.get(group.coin_id)
    group.current_price = quote if quote is not None and quote > 0 else group.average_buy_price
    group.current_value = group.total_quantity * group.current_price
    group.profit_or_loss = group.current_value - group.total_invested
    group.profit_or_loss_percentage = _percentage(group.profit_or_loss, group.total_invested)
    return group


def aggregate_holdings(records: list[HoldingRecord], prices: dict[str, float]) -> list[AggregatedHolding]:
    """Group in first-seen symbol order, accumulating in store order."""
    groups: dict[str, AggregatedHolding] = {}
    for record in records:
        group = groups.get(record.symbol)
        if group is None:
            group = AggregatedHolding(symbol=record.symbol, name=record.name, coin_id=record.coin_id)
            groups[record.symbol] = group
        group.entries.append(entry_from_record(record))
        group.total_quantity += record.amount
        group.total_invested += record.amount * record.avg_price
    return [finalize_holding(group, prices) for group in groups.values()]


def summarize(holdings: list[AggregatedHolding]) -> PortfolioSummary:
    total_value = sum(holding.current_value for holding in holdings)
    total_invested = sum(holding.total_invested for holding in holdings)
    total_pnl = total_value - total_invested
    return PortfolioSummary(
        total_portfolio_value=total_value,
        total_invested=total_invested,
        total_profit_or_loss=total_pnl,
        total_profit_or_loss_percentage=_percentage(total_pnl, total_invested),
        holdings=holdings,
    )

"""Typed portfolio models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields


@dataclass
class HoldingRecord:
    id: str
    symbol: str
    name: str
    coin_id: str
    amount: float
    avg_price: float
    purchase_date: str
    notes: str | None = None
    user_id: str | None = None
    created_at: str | None = None


@dataclass
class NewHolding:
    symbol: str
    name: str
    amount: float
    avg_price: float
    coin_id: str
    purchase_date: str
    notes: str | None = None


@dataclass
class HoldingUpdate:
    symbol: str | None = None
    name: str | None = None
    amount: float | None = None
    avg_price: float | None = None
    coin_id: str | None = None
    purchase_date: str | None = None
    notes: str | None = None

    def changes(self) -> dict[str, object]:
        """Fields that were set, in store column naming."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass
class AddAssetRequest:
    symbol: str
    quantity: float
    use_real_time_price: bool = True
    custom_price: float | None = None


@dataclass
class PortfolioEntry:
    id: str
    symbol: str
    quantity: float
    price_used: float
    total_cost: float
    timestamp: str
    name: str
    coin_id: str


@dataclass
class AggregatedHolding:
    symbol: str
    name: str
    coin_id: str
    total_quantity: float = 0.0
    average_buy_price: float = 0.0
    total_invested: float = 0.0
    current_price: float = 0.0
    current_value: float = 0.0
    profit_or_loss: float = 0.0
    profit_or_loss_percentage: float = 0.0
    entries: list[PortfolioEntry] = field(default_factory=list)


@dataclass
class PortfolioSummary:
    total_portfolio_value: float = 0.0
    total_invested: float = 0.0
    total_profit_or_loss: float = 0.0
    total_profit_or_loss_percentage: float = 0.0
    holdings: list[AggregatedHolding] = field(default_factory=list)

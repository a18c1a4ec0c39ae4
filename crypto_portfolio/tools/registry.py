"""Domain tool registry entrypoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from mcp.server.fastmcp import FastMCP

from crypto_portfolio.portfolio.asset_service import AssetService
from crypto_portfolio.portfolio.portfolio_service import PortfolioService
from crypto_portfolio.runtime.monitoring import ServerMetrics
from crypto_portfolio.services.market_service import MarketService
from crypto_portfolio.services.price_service import PriceLookupService
from crypto_portfolio.store.base import HoldingStore
from crypto_portfolio.tools.market_tools import register_market_tools
from crypto_portfolio.tools.portfolio_tools import register_portfolio_tools


@dataclass
class ToolServices:
    prices: PriceLookupService
    assets: AssetService
    portfolio: PortfolioService
    market: MarketService
    current_user: Callable[[], str]
    metrics: ServerMetrics = field(default_factory=ServerMetrics)


def build_tool_services(
    store: HoldingStore,
    prices: PriceLookupService,
    market: MarketService,
    current_user: Callable[[], str],
    metrics: ServerMetrics | None = None,
) -> ToolServices:
    return ToolServices(
        prices=prices,
        assets=AssetService(store, prices),
        portfolio=PortfolioService(store, prices),
        market=market,
        current_user=current_user,
        metrics=metrics or ServerMetrics(),
    )


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_market_tools(mcp, services)
    register_portfolio_tools(mcp, services)

"""Portfolio read path: holdings plus live quotes into a summary."""

from __future__ import annotations

import asyncio
import logging

from crypto_portfolio.portfolio.aggregation import aggregate_holdings, distinct_coin_ids, summarize
from crypto_portfolio.portfolio.analytics import calculate_allocation, calculate_contribution_to_return
from crypto_portfolio.portfolio.models import PortfolioSummary
from crypto_portfolio.providers.http import ProviderError
from crypto_portfolio.services.price_service import PriceLookupService
from crypto_portfolio.store.base import HoldingStore

LOGGER = logging.getLogger(__name__)


class PortfolioService:
    def __init__(self, store: HoldingStore, prices: PriceLookupService) -> None:
        self.store = store
        self.prices = prices

    async def _fetch_current_prices(self, coin_ids: list[str]) -> dict[str, float]:
        try:
            return await asyncio.to_thread(self.prices.get_batch_prices, coin_ids)
        except ProviderError as error:
            LOGGER.warning(
                "batch quote failed, using average buy prices: coins=%s code=%s status=%s",
                len(coin_ids),
                error.code,
                error.status,
            )
            return {}

    async def get_portfolio(self, user_id: str) -> PortfolioSummary:
        records = await asyncio.to_thread(self.store.list_holdings, user_id)
        if not records:
            return PortfolioSummary()

        prices = await self._fetch_current_prices(distinct_coin_ids(records))
        summary = summarize(aggregate_holdings(records, prices))
        LOGGER.info(
            "portfolio aggregated: user=%s entries=%s symbols=%s priced=%s",
            user_id,
            len(records),
            len(summary.holdings),
            len(prices),
        )
        return summary

    async def get_allocation(self, user_id: str) -> dict[str, object]:
        summary = await self.get_portfolio(user_id)
        return {
            "total_portfolio_value": summary.total_portfolio_value,
            "allocation": calculate_allocation(summary),
            "contribution_to_return": calculate_contribution_to_return(summary),
        }

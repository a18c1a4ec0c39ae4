"""Holding writes: add, update and delete assets."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from crypto_portfolio.portfolio.errors import ResolutionError
from crypto_portfolio.portfolio.models import AddAssetRequest, HoldingRecord, HoldingUpdate, NewHolding, PortfolioEntry
from crypto_portfolio.portfolio.validation import validate_add_asset_request, validate_holding_update
from crypto_portfolio.services.price_service import PriceLookupService
from crypto_portfolio.store.base import HoldingStore

LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssetService:
    def __init__(
        self,
        store: HoldingStore,
        prices: PriceLookupService,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.prices = prices
        self._now = now

    async def add_asset(self, request: AddAssetRequest, user_id: str) -> PortfolioEntry:
        """Validate, price and persist one purchase.

        Real-time pricing aborts on a failed lookup and nothing is written.
        With a custom price the lookup only supplies the display name and
        coin id, and an unknown coin falls back to the symbol itself.
        """
        request = validate_add_asset_request(request)
        symbol = request.symbol

        if request.use_real_time_price:
            quote = await asyncio.to_thread(self.prices.get_coin_price, symbol)
            price_used, name, coin_id = quote.price, quote.name, quote.coin_id
        else:
            price_used = float(request.custom_price)
            try:
                quote = await asyncio.to_thread(self.prices.get_coin_price, symbol)
                name, coin_id = quote.name, quote.coin_id
            except ResolutionError:
                LOGGER.info("custom coin without provider match: symbol=%s", symbol)
                name, coin_id = symbol.upper(), symbol.lower()

        total_cost = request.quantity * price_used
        now = self._now()
        timestamp = now.isoformat()
        payload = NewHolding(
            symbol=symbol.upper(),
            name=name,
            amount=request.quantity,
            avg_price=price_used,
            coin_id=coin_id,
            purchase_date=now.date().isoformat(),
            notes=f"Added via API - Total cost: ${total_cost:.2f}",
        )
        saved = await asyncio.to_thread(self.store.create_holding, user_id, payload)
        LOGGER.info(
            "asset added: user=%s id=%s symbol=%s quantity=%s price=%s real_time=%s",
            user_id,
            saved.id,
            payload.symbol,
            request.quantity,
            price_used,
            request.use_real_time_price,
        )
        return PortfolioEntry(
            id=saved.id,
            symbol=payload.symbol,
            quantity=request.quantity,
            price_used=price_used,
            total_cost=total_cost,
            timestamp=timestamp,
            name=name,
            coin_id=coin_id,
        )

    async def update_asset(self, asset_id: str, user_id: str, update: HoldingUpdate) -> HoldingRecord:
        update = validate_holding_update(update)
        return await asyncio.to_thread(self.store.update_holding, user_id, asset_id, update)

    async def delete_asset(self, asset_id: str, user_id: str) -> None:
        await asyncio.to_thread(self.store.delete_holding, user_id, asset_id)

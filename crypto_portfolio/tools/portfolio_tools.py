"""Portfolio-domain MCP tools."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from crypto_portfolio.lib.formatters import format_portfolio_summary
from crypto_portfolio.portfolio.models import AddAssetRequest, HoldingUpdate
from crypto_portfolio.runtime.response import data_response, result_payload
from crypto_portfolio.tools.common import run_tool

if TYPE_CHECKING:
    from crypto_portfolio.tools.registry import ToolServices


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Resolve a coin symbol or CoinGecko id to its current USD price, name and coin id.")
    async def get_coin_price(symbol: str) -> str:
        async def _call() -> str:
            return result_payload(await asyncio.to_thread(services.prices.lookup, symbol))

        return await run_tool("get_coin_price", _call, services.metrics, symbol=symbol)

    @mcp.tool(description="Record a coin purchase at the real-time price or at a custom price per unit.")
    async def add_asset(
        symbol: str,
        quantity: float,
        use_real_time_price: bool = True,
        custom_price: float | None = None,
    ) -> str:
        async def _call() -> str:
            request = AddAssetRequest(
                symbol=symbol,
                quantity=quantity,
                use_real_time_price=use_real_time_price,
                custom_price=custom_price,
            )
            user_id = await asyncio.to_thread(services.current_user)
            entry = await services.assets.add_asset(request, user_id)
            return data_response(entry)

        return await run_tool("add_asset", _call, services.metrics, symbol=symbol)

    @mcp.tool(description="Get the aggregated portfolio: cost basis, current value and profit/loss per coin.")
    async def get_portfolio() -> str:
        async def _call() -> str:
            user_id = await asyncio.to_thread(services.current_user)
            return data_response(await services.portfolio.get_portfolio(user_id))

        return await run_tool("get_portfolio", _call, services.metrics)

    @mcp.tool(description="Get each coin's share of portfolio value and contribution to return.")
    async def get_portfolio_allocation() -> str:
        async def _call() -> str:
            user_id = await asyncio.to_thread(services.current_user)
            return data_response(await services.portfolio.get_allocation(user_id))

        return await run_tool("get_portfolio_allocation", _call, services.metrics)

    @mcp.tool(description="Get a plain-text portfolio report.")
    async def portfolio_report() -> str:
        async def _call() -> str:
            user_id = await asyncio.to_thread(services.current_user)
            summary = await services.portfolio.get_portfolio(user_id)
            return format_portfolio_summary(summary)

        return await run_tool("portfolio_report", _call, services.metrics)

    @mcp.tool(description="Delete one recorded holding by id.")
    async def delete_asset(asset_id: str) -> str:
        async def _call() -> str:
            user_id = await asyncio.to_thread(services.current_user)
            await services.assets.delete_asset(asset_id, user_id)
            return data_response({"id": asset_id, "deleted": True})

        return await run_tool("delete_asset", _call, services.metrics)

    @mcp.tool(description="Update fields of one recorded holding; omitted fields are left unchanged.")
    async def update_asset(
        asset_id: str,
        amount: float | None = None,
        avg_price: float | None = None,
        symbol: str | None = None,
        name: str | None = None,
        coin_id: str | None = None,
        purchase_date: str | None = None,
        notes: str | None = None,
    ) -> str:
        async def _call() -> str:
            update = HoldingUpdate(
                symbol=symbol,
                name=name,
                amount=amount,
                avg_price=avg_price,
                coin_id=coin_id,
                purchase_date=purchase_date,
                notes=notes,
            )
            user_id = await asyncio.to_thread(services.current_user)
            record = await services.assets.update_asset(asset_id, user_id, update)
            return data_response(record)

        return await run_tool("update_asset", _call, services.metrics)

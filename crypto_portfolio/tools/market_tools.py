"""Market-domain MCP tools."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from crypto_portfolio.runtime.response import result_payload
from crypto_portfolio.tools.common import run_tool

if TYPE_CHECKING:
    from crypto_portfolio.tools.registry import ToolServices


def register_market_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Get the latest crypto Fear & Greed index reading.")
    async def get_fear_greed_index() -> str:
        async def _call() -> str:
            return result_payload(await asyncio.to_thread(services.market.get_fear_greed))

        return await run_tool("get_fear_greed_index", _call, services.metrics)

    @mcp.tool(description="Get global crypto market stats: market cap, volume and BTC/ETH dominance.")
    async def get_global_market() -> str:
        async def _call() -> str:
            return result_payload(await asyncio.to_thread(services.market.get_global_market))

        return await run_tool("get_global_market", _call, services.metrics)

    @mcp.tool(description="Get the top coins by market cap (limit 1-250).")
    async def get_top_coins(limit: int = 20) -> str:
        async def _call() -> str:
            return result_payload(await asyncio.to_thread(services.market.get_top_coins, limit))

        return await run_tool("get_top_coins", _call, services.metrics)

    @mcp.tool(description="Get coins currently trending in searches.")
    async def get_trending_coins() -> str:
        async def _call() -> str:
            return result_payload(await asyncio.to_thread(services.market.get_trending))

        return await run_tool("get_trending_coins", _call, services.metrics)

    @mcp.tool(description="Get a coin's price history over the last N days (1-365) with the latest change.")
    async def get_price_history(coin_id: str = "bitcoin", days: int = 7) -> str:
        async def _call() -> str:
            return result_payload(await asyncio.to_thread(services.market.get_market_chart, coin_id, days))

        return await run_tool("get_price_history", _call, services.metrics, symbol=coin_id)

    @mcp.tool(description="Search the top 250 coins by name or symbol, ordered by market cap rank.")
    async def search_coins(query: str = "", limit: int = 50) -> str:
        async def _call() -> str:
            return result_payload(await asyncio.to_thread(services.market.search_coins, query, limit))

        return await run_tool("search_coins", _call, services.metrics)

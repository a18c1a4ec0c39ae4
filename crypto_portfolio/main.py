"""Application entrypoint for the crypto portfolio MCP server."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from dataclasses import asdict

from mcp.server.fastmcp import FastMCP
from starlette.responses import JSONResponse, Response

from crypto_portfolio.auth.session import EnvTokenSource, SessionTokenManager, token_subject
from crypto_portfolio.cache.price_cache import PriceCache
from crypto_portfolio.cache.ttl_cache import TTLCache
from crypto_portfolio.config.settings import Settings, get_settings
from crypto_portfolio.portfolio.errors import AuthenticationError
from crypto_portfolio.providers.alternative_me import FearGreedClient
from crypto_portfolio.providers.clerk import ClerkTokenClient
from crypto_portfolio.providers.coingecko import CoinGeckoClient
from crypto_portfolio.runtime.monitoring import ServerMetrics
from crypto_portfolio.services.market_service import MarketService
from crypto_portfolio.services.price_service import PriceLookupService
from crypto_portfolio.store.base import HoldingStore
from crypto_portfolio.store.memory_store import InMemoryHoldingStore
from crypto_portfolio.store.supabase_store import SupabaseHoldingStore
from crypto_portfolio.tools.registry import ToolServices, build_tool_services, register_all_tools

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if os.getenv("RENDER") and configured_mode == "stdio":
        return "http"
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    if os.getenv("RENDER") or os.getenv("PORT"):
        return "http"
    return "stdio"


def resolve_http_transport(configured_transport: str) -> str:
    if configured_transport in {"sse", "streamable"}:
        return configured_transport
    return "sse"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_token_manager(settings: Settings) -> SessionTokenManager:
    if settings.clerk_configured:
        clerk = ClerkTokenClient(
            settings.clerk_secret_key or "",
            settings.clerk_session_id or "",
            template=settings.clerk_jwt_template,
            timeout_seconds=settings.request_timeout_seconds,
            base_url=settings.clerk_api_url,
        )
        source = clerk.fetch_session_token
    else:
        source = EnvTokenSource()
    return SessionTokenManager(source, refresh_interval_seconds=settings.token_refresh_interval_seconds)


def build_store(settings: Settings, tokens: SessionTokenManager) -> HoldingStore:
    if settings.holding_store == "supabase" and settings.supabase_configured:
        return SupabaseHoldingStore(
            settings.supabase_url or "",
            settings.supabase_anon_key or "",
            tokens.get_valid_token,
            table=settings.holdings_table,
            timeout_seconds=settings.request_timeout_seconds,
        )
    LOGGER.warning("Supabase is not configured; holdings are kept in memory for this process only.")
    return InMemoryHoldingStore(tokens.get_valid_token)


def current_user_resolver(settings: Settings, tokens: SessionTokenManager):
    def _current_user() -> str:
        if settings.portfolio_user_id:
            return settings.portfolio_user_id
        token = tokens.get_valid_token()
        subject = token_subject(token) if token else None
        if not subject:
            raise AuthenticationError("No signed-in user. Set PORTFOLIO_USER_ID or provide a session token.")
        return subject

    return _current_user


def build_services(settings: Settings, tokens: SessionTokenManager, metrics: ServerMetrics) -> ToolServices:
    coingecko = CoinGeckoClient(
        settings.coingecko_api_key,
        settings.request_timeout_seconds,
        base_url=settings.coingecko_base_url,
        vs_currency=settings.vs_currency,
    )
    prices = PriceLookupService(
        coingecko,
        PriceCache(ttl_seconds=settings.price_cache_ttl_seconds),
        market_scan_page_size=settings.market_scan_page_size,
    )
    market = MarketService(
        coingecko,
        FearGreedClient(settings.request_timeout_seconds, url=settings.fear_greed_url),
        TTLCache(default_ttl_seconds=60),
    )
    return build_tool_services(
        build_store(settings, tokens),
        prices,
        market,
        current_user_resolver(settings, tokens),
        metrics=metrics,
    )


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    metrics = ServerMetrics()
    tokens = build_token_manager(settings)
    services = build_services(settings, tokens, metrics)

    mcp = FastMCP(
        name=settings.app_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    register_all_tools(mcp, services)
    resolved_mode = resolve_transport_mode(settings.transport_mode)
    resolved_http_transport = resolve_http_transport(settings.http_transport)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health_check(_: object) -> Response:
        return JSONResponse(
            {
                "status": "ok",
                "service": settings.app_name,
                "version": settings.app_version,
                "mode": resolved_mode,
                "holding_store": settings.holding_store,
                "metrics": asdict(metrics.snapshot()),
                "cache": {
                    "price_quotes": len(services.prices.cache),
                    "market_snapshots": len(services.market.cache),
                },
            }
        )

    stop = asyncio.Event()
    refresher = asyncio.create_task(tokens.refresh_periodically(stop))
    LOGGER.info(
        "starting server: mode=%s http_transport=%s store=%s",
        resolved_mode,
        resolved_http_transport,
        settings.holding_store,
    )
    try:
        if resolved_mode == "stdio":
            await mcp.run_stdio_async()
        elif resolved_http_transport == "streamable":
            await mcp.run_streamable_http_async()
        else:
            await mcp.run_sse_async()
    finally:
        stop.set()
        await refresher


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()

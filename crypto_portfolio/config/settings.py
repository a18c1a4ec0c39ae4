"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Runtime settings for local/stdin and HTTP-hosted modes."""

    app_name: str = "crypto-portfolio"
    app_version: str = "1.0.0"
    transport_mode: str = "auto"
    http_transport: str = "sse"
    host: str = "0.0.0.0"
    port: int = 8000
    mcp_path: str = "/mcp"
    health_path: str = "/health"
    log_level: str = "INFO"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: str | None = None
    fear_greed_url: str = "https://api.alternative.me/fng/"
    vs_currency: str = "usd"
    market_scan_page_size: int = 250
    request_timeout_seconds: float = 15.0
    price_cache_ttl_seconds: int = 300
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    holdings_table: str = "portfolio_holdings"
    holding_store: str = "supabase"
    portfolio_user_id: str | None = None
    clerk_api_url: str = "https://api.clerk.com/v1"
    clerk_secret_key: str | None = None
    clerk_session_id: str | None = None
    clerk_jwt_template: str = "supabase"
    token_refresh_interval_seconds: int = 45 * 60

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def clerk_configured(self) -> bool:
        return bool(self.clerk_secret_key and self.clerk_session_id)


def _as_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _resolve_store(value: str | None, supabase_ready: bool) -> str:
    choice = (value or "").strip().lower()
    if choice == "memory":
        return "memory"
    return "supabase" if supabase_ready else "memory"


def get_settings() -> Settings:
    """Load runtime settings from environment variables."""
    load_dotenv()

    supabase_url = os.getenv("SUPABASE_URL") or None
    supabase_anon_key = os.getenv("SUPABASE_ANON_KEY") or None
    return Settings(
        transport_mode=os.getenv("TRANSPORT_MODE", "auto").strip().lower(),
        http_transport=os.getenv("HTTP_TRANSPORT", "sse").strip().lower(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_as_int(os.getenv("PORT"), 8000),
        mcp_path=os.getenv("MCP_PATH", "/mcp"),
        health_path=os.getenv("HEALTH_PATH", "/health"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        coingecko_base_url=os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3").rstrip("/"),
        coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
        fear_greed_url=os.getenv("FEAR_GREED_URL", "https://api.alternative.me/fng/"),
        vs_currency=os.getenv("VS_CURRENCY", "usd").strip().lower() or "usd",
        market_scan_page_size=_as_int(os.getenv("MARKET_SCAN_PAGE_SIZE"), 250),
        request_timeout_seconds=_as_float(os.getenv("REQUEST_TIMEOUT_SECONDS"), 15.0),
        price_cache_ttl_seconds=_as_int(os.getenv("PRICE_CACHE_TTL_SECONDS"), 300),
        supabase_url=supabase_url.rstrip("/") if supabase_url else None,
        supabase_anon_key=supabase_anon_key,
        holdings_table=os.getenv("HOLDINGS_TABLE", "portfolio_holdings"),
        holding_store=_resolve_store(os.getenv("HOLDING_STORE"), bool(supabase_url and supabase_anon_key)),
        portfolio_user_id=os.getenv("PORTFOLIO_USER_ID") or None,
        clerk_api_url=os.getenv("CLERK_API_URL", "https://api.clerk.com/v1").rstrip("/"),
        clerk_secret_key=os.getenv("CLERK_SECRET_KEY") or None,
        clerk_session_id=os.getenv("CLERK_SESSION_ID") or None,
        clerk_jwt_template=os.getenv("CLERK_JWT_TEMPLATE", "supabase"),
        token_refresh_interval_seconds=_as_int(os.getenv("TOKEN_REFRESH_INTERVAL_SECONDS"), 45 * 60),
    )

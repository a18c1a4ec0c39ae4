"""Shared tool-layer helpers."""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable

from crypto_portfolio.portfolio.errors import PortfolioError
from crypto_portfolio.runtime.monitoring import ServerMetrics, log_tool_event
from crypto_portfolio.runtime.response import error_response

LOGGER = logging.getLogger(__name__)
GENERIC_ERROR = "Request failed. Please try again later."


async def run_tool(
    tool: str,
    call: Callable[[], Awaitable[str]],
    metrics: ServerMetrics | None = None,
    symbol: str | None = None,
) -> str:
    """Run one tool body, turning domain errors into JSON error payloads."""
    started = time.perf_counter()
    code: str | None = None
    try:
        return await call()
    except PortfolioError as error:
        code = error.code
        return error_response(error.code, error.message)
    except Exception:
        code = "INTERNAL"
        LOGGER.exception("tool failed unexpectedly: tool=%s symbol=%s", tool, symbol)
        return error_response("INTERNAL", GENERIC_ERROR)
    finally:
        latency_ms = (time.perf_counter() - started) * 1000.0
        log_tool_event(tool=tool, latency_ms=latency_ms, success=code is None, symbol=symbol, code=code)
        if metrics is not None:
            metrics.record(latency_ms=latency_ms, success=code is None)

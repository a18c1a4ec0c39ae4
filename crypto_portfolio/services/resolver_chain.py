"""Ordered fallback over coin price resolver strategies."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from crypto_portfolio.providers.http import ProviderError
from crypto_portfolio.services.base import ErrorEnvelope, ServiceResult

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverStrategy(Generic[T]):
    key: str
    label: str
    resolve: Callable[[str], T | None]


class ResolverChain(Generic[T]):
    """Try each strategy in order; the first non-None answer wins.

    A ``ProviderError`` or an empty answer moves on to the next strategy.
    Nothing is retried.
    """

    def __init__(self, strategies: list[ResolverStrategy[T]], operation: str = "resolve") -> None:
        self.strategies = list(strategies)
        self.operation = operation

    def execute(self, symbol: str) -> ServiceResult[T]:
        had_fallback = False
        last_error: ProviderError | None = None
        for strategy in self.strategies:
            started = time.perf_counter()
            try:
                value = strategy.resolve(symbol)
            except ProviderError as error:
                had_fallback = True
                last_error = error
                LOGGER.warning(
                    "resolver attempt failed: op=%s symbol=%s strategy=%s code=%s status=%s latency_ms=%s",
                    self.operation,
                    symbol,
                    strategy.key,
                    error.code,
                    error.status,
                    round((time.perf_counter() - started) * 1000, 2),
                )
                continue

            LOGGER.info(
                "resolver attempt complete: op=%s symbol=%s strategy=%s success=%s latency_ms=%s",
                self.operation,
                symbol,
                strategy.key,
                value is not None,
                round((time.perf_counter() - started) * 1000, 2),
            )
            if value is not None:
                return ServiceResult(
                    data=value,
                    source=strategy.label,
                    warning="Resolved through a fallback lookup." if had_fallback else None,
                    fetched_at=time.time(),
                    data_provider=strategy.label,
                )
            had_fallback = True

        retriable = last_error is not None and last_error.code in {"RATE_LIMIT", "NETWORK", "UPSTREAM"}
        return ServiceResult(
            data=None,
            error=ErrorEnvelope(
                code="NOT_FOUND",
                message=f"Coin {symbol} not found or price unavailable.",
                retriable=retriable,
                provider=last_error.provider if last_error else None,
            ),
        )

"""Shared service orchestration helpers."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from crypto_portfolio.cache.ttl_cache import TTLCache
from crypto_portfolio.providers.http import ProviderError

T = TypeVar("T")


@dataclass
class ErrorEnvelope:
    code: str
    message: str
    retriable: bool = True
    provider: str | None = None


@dataclass
class ServiceResult(Generic[T]):
    data: T | None
    source: str | None = None
    warning: str | None = None
    error: ErrorEnvelope | None = None
    fetched_at: float | None = None
    data_provider: str | None = None


def clean_symbol(symbol: str | None) -> str:
    return (symbol or "").strip()


def envelope_from_provider_error(error: ProviderError) -> ErrorEnvelope:
    retriable = error.code in {"RATE_LIMIT", "NETWORK", "UPSTREAM", "BAD_RESPONSE"}
    return ErrorEnvelope(code=error.code, message=error.message, retriable=retriable, provider=error.provider)


def run_with_cache(
    cache: TTLCache,
    cache_key: str,
    call: Callable[[], ServiceResult[T]],
    ttl_seconds: int | None = None,
) -> ServiceResult[T]:
    """Serve a cached successful result, otherwise call and cache on success."""

    def _load() -> ServiceResult[T]:
        value = call()
        if value.data is not None:
            value.fetched_at = value.fetched_at or time.time()
        return value

    return cache.get_or_load(cache_key, _load, ttl_seconds=ttl_seconds, keep=lambda value: value.data is not None)

"""Access-token lifecycle for the holding store."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
import time
from typing import Any, Callable

from dotenv import load_dotenv
from jose import JWTError, jwt

from crypto_portfolio.cache.ttl_cache import Clock
from crypto_portfolio.providers.http import ProviderError

LOGGER = logging.getLogger(__name__)
DEFAULT_REFRESH_INTERVAL_SECONDS = 45 * 60

TokenSource = Callable[[], "str | None"]


def token_claims(token: str) -> dict[str, Any] | None:
    """Unverified JWT claims; the backend performs signature checks."""
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    return claims if isinstance(claims, dict) else None


def token_subject(token: str) -> str | None:
    claims = token_claims(token)
    subject = claims.get("sub") if claims else None
    return subject if isinstance(subject, str) and subject else None


def is_token_expired(token: str, now: float | None = None) -> bool:
    claims = token_claims(token)
    if claims is None:
        return True
    exp = claims.get("exp")
    if exp is None:
        return False
    try:
        return float(exp) <= (time.time() if now is None else now)
    except (TypeError, ValueError):
        return True


class EnvTokenSource:
    """Reads the access token from the environment (and ``.env``) on every refresh."""

    def __init__(self, variable: str = "PORTFOLIO_ACCESS_TOKEN") -> None:
        self.variable = variable

    def __call__(self) -> str | None:
        load_dotenv(override=True)
        return os.getenv(self.variable) or None


class SessionTokenManager:
    """Hands out a token that is present, unexpired and not older than the refresh interval."""

    def __init__(
        self,
        token_source: TokenSource,
        refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        clock: Clock = time.time,
    ) -> None:
        self._token_source = token_source
        self.refresh_interval_seconds = max(1.0, float(refresh_interval_seconds))
        self._clock = clock
        self._lock = threading.Lock()
        self._token: str | None = None
        self._refreshed_at: float | None = None

    @property
    def token(self) -> str | None:
        return self._token

    def _needs_refresh(self) -> bool:
        if not self._token or self._refreshed_at is None:
            return True
        now = self._clock()
        if now - self._refreshed_at >= self.refresh_interval_seconds:
            return True
        return is_token_expired(self._token, now)

    def refresh(self) -> str | None:
        with self._lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> str | None:
        try:
            token = self._token_source()
        except ProviderError as error:
            LOGGER.warning("token refresh failed: code=%s status=%s", error.code, error.status)
            token = None
        # Opaque tokens are accepted here and re-fetched on the next call.
        if token and (token_claims(token) is None or not is_token_expired(token, self._clock())):
            self._token = token
            self._refreshed_at = self._clock()
            LOGGER.info("token refreshed: subject=%s", token_subject(token))
            return token
        if token:
            LOGGER.warning("token source returned an expired token")
        else:
            LOGGER.warning("token source returned no token")
        self._token = None
        self._refreshed_at = None
        return None

    def get_valid_token(self) -> str | None:
        with self._lock:
            if self._needs_refresh():
                return self._refresh_locked()
            return self._token

    def clear(self) -> None:
        with self._lock:
            self._token = None
            self._refreshed_at = None

    async def refresh_periodically(self, stop: asyncio.Event) -> None:
        """Refresh every interval until ``stop`` is set."""
        while not stop.is_set():
            await asyncio.to_thread(self.refresh)
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.refresh_interval_seconds)
            except asyncio.TimeoutError:
                continue

"""HTTP utilities and normalized provider errors."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, Mapping

import requests
from requests.adapters import HTTPAdapter

from crypto_portfolio.providers.models import ProviderName

ProviderErrorCode = Literal["RATE_LIMIT", "AUTH", "NOT_FOUND", "CONFLICT", "UPSTREAM", "NETWORK", "BAD_RESPONSE"]

_SESSION = requests.Session()
_SESSION.mount("https://", HTTPAdapter(pool_connections=20, pool_maxsize=50))
_SESSION.mount("http://", HTTPAdapter(pool_connections=20, pool_maxsize=50))


@dataclass
class ProviderError(Exception):
    provider: ProviderName
    code: ProviderErrorCode
    message: str
    status: int | None = None

    def __str__(self) -> str:
        return self.message


def map_status_to_code(status: int) -> ProviderErrorCode:
    if status in {401, 403}:
        return "AUTH"
    if status == 404:
        return "NOT_FOUND"
    if status == 409:
        return "CONFLICT"
    if status == 429:
        return "RATE_LIMIT"
    return "UPSTREAM"


def _decode(response: requests.Response, provider: ProviderName) -> Any:
    raw = response.text or ""
    parsed: Any = None
    if raw:
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as error:
            if response.ok:
                raise ProviderError(
                    provider,
                    "BAD_RESPONSE",
                    "Provider returned non-JSON content.",
                    response.status_code,
                ) from error
    if not response.ok:
        raise ProviderError(
            provider,
            map_status_to_code(response.status_code),
            f"Provider request failed with status {response.status_code}.",
            response.status_code,
        )
    return parsed


def send_json(
    method: str,
    url: str,
    provider: ProviderName,
    timeout_seconds: float = 15.0,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, Any] | None = None,
    body: Any = None,
) -> Any:
    """Issue one request and decode its JSON body with uniform error mapping.

    A single attempt is made; callers own any fallback behaviour.
    """
    try:
        response = _SESSION.request(
            method,
            url,
            params=params,
            json=body,
            headers=dict(headers or {}),
            timeout=timeout_seconds,
        )
    except requests.RequestException as error:
        raise ProviderError(provider, "NETWORK", "Provider request failed due to network error.") from error
    return _decode(response, provider)


def fetch_json(
    url: str,
    provider: ProviderName,
    timeout_seconds: float = 15.0,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, Any] | None = None,
) -> Any:
    """Fetch JSON with uniform provider/network error mapping."""
    return send_json("GET", url, provider, timeout_seconds=timeout_seconds, headers=headers, params=params)

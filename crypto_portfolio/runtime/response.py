"""JSON payloads returned by the portfolio and market tools."""

from __future__ import annotations

import json
import math
import time
from dataclasses import asdict, is_dataclass
from typing import Any

from crypto_portfolio.services.base import ErrorEnvelope, ServiceResult

DISCLAIMER = "Crypto prices are volatile. Data is informational only and is not financial advice."


def _jsonable(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        return _jsonable(asdict(data))
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _jsonable(value) for key, value in data.items()}
    # NaN and infinity are not valid JSON
    if isinstance(data, float) and not math.isfinite(data):
        return None
    return data


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps({key: value for key, value in payload.items() if value is not None}, ensure_ascii=True)


def _freshness(fetched_at: float | None) -> dict[str, Any]:
    now = time.time()
    ts = fetched_at or now
    return {"timestamp": int(ts), "age_seconds": round(max(0.0, now - ts), 3)}


def success_response(result: ServiceResult[Any]) -> str:
    return _dump(
        {
            "data": _jsonable(result.data),
            "data_freshness": _freshness(result.fetched_at),
            "data_provider": result.data_provider or result.source or "unknown",
            "source": result.source,
            "warning": result.warning,
            "disclaimer": DISCLAIMER,
        }
    )


def data_response(data: Any, **extra: Any) -> str:
    """Payload for portfolio data read from the holding store."""
    return _dump({"data": _jsonable(data), **extra})


def error_response(code: str, message: str, envelope: ErrorEnvelope | None = None) -> str:
    payload: dict[str, Any] = {"error": True, "code": code, "message": message, "timestamp": int(time.time())}
    if envelope is not None:
        payload["retriable"] = envelope.retriable
        payload["provider"] = envelope.provider
    return _dump(payload)


def result_payload(result: ServiceResult[Any]) -> str:
    """Data when the lookup produced some, otherwise its error envelope."""
    if result.data is not None:
        return success_response(result)
    if result.error:
        return error_response(result.error.code, result.error.message, result.error)
    return error_response("NOT_FOUND", "No data returned.")

"""alternative.me Fear & Greed index adapter."""

from __future__ import annotations

from crypto_portfolio.providers.http import fetch_json
from crypto_portfolio.providers.models import FearGreedReading


def classify_fear_greed(value: int) -> str:
    if value <= 25:
        return "Extreme Fear"
    if value <= 45:
        return "Fear"
    if value <= 55:
        return "Neutral"
    if value <= 75:
        return "Greed"
    return "Extreme Greed"


class FearGreedClient:
    def __init__(self, timeout_seconds: float = 15.0, url: str = "https://api.alternative.me/fng/") -> None:
        self.timeout_seconds = timeout_seconds
        self.url = url

    def get_latest(self) -> FearGreedReading | None:
        data = fetch_json(self.url, provider="alternative_me", timeout_seconds=self.timeout_seconds)
        rows = data.get("data") if isinstance(data, dict) else None
        if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
            return None
        row = rows[0]
        try:
            value = int(row.get("value"))
        except (TypeError, ValueError):
            return None
        classification = row.get("value_classification")
        if not isinstance(classification, str) or not classification:
            classification = classify_fear_greed(value)
        timestamp = row.get("timestamp")
        return FearGreedReading(
            value=value,
            value_classification=classification,
            timestamp=str(timestamp) if timestamp is not None else None,
        )

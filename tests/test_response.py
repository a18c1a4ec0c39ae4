import json

from crypto_portfolio.providers.models import CoinQuote
from crypto_portfolio.runtime.response import data_response, result_payload
from crypto_portfolio.services.base import ErrorEnvelope, ServiceResult


def test_quote_payload_carries_freshness_and_provider() -> None:
    result = ServiceResult(data=CoinQuote(price=30000.0, name="Bitcoin", coin_id="bitcoin"), source="CoinGecko")
    payload = json.loads(result_payload(result))

    assert payload["data"] == {"price": 30000.0, "name": "Bitcoin", "coin_id": "bitcoin"}
    assert payload["data_provider"] == "CoinGecko"
    assert payload["data_freshness"]["age_seconds"] >= 0
    assert "warning" not in payload


def test_provider_failure_reports_retriable_flag() -> None:
    envelope = ErrorEnvelope(code="RATE_LIMIT", message="Slow down.", retriable=True, provider="coingecko")
    payload = json.loads(result_payload(ServiceResult(data=None, error=envelope)))

    assert payload["error"] is True
    assert payload["code"] == "RATE_LIMIT"
    assert payload["retriable"] is True
    assert payload["provider"] == "coingecko"


def test_empty_result_is_not_found() -> None:
    payload = json.loads(result_payload(ServiceResult(data=None)))
    assert payload["code"] == "NOT_FOUND"
    assert "retriable" not in payload


def test_non_finite_numbers_become_null() -> None:
    payload = json.loads(data_response({"profit_or_loss_percentage": float("nan"), "total": 1.5}))
    assert payload["data"] == {"profit_or_loss_percentage": None, "total": 1.5}

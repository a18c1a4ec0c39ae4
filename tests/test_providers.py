import pytest
import requests

from crypto_portfolio.providers import alternative_me, clerk, coingecko, http
from crypto_portfolio.providers.alternative_me import FearGreedClient
from crypto_portfolio.providers.clerk import ClerkTokenClient
from crypto_portfolio.providers.coingecko import CoinGeckoClient
from crypto_portfolio.providers.http import ProviderError, map_status_to_code


class _Response:
    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


def test_map_status_to_code() -> None:
    assert map_status_to_code(401) == "AUTH"
    assert map_status_to_code(403) == "AUTH"
    assert map_status_to_code(404) == "NOT_FOUND"
    assert map_status_to_code(409) == "CONFLICT"
    assert map_status_to_code(429) == "RATE_LIMIT"
    assert map_status_to_code(503) == "UPSTREAM"


def test_send_json_decodes_body(monkeypatch) -> None:
    monkeypatch.setattr(http._SESSION, "request", lambda *args, **kwargs: _Response(200, '{"ok": true}'))
    assert http.fetch_json("https://example.test", provider="coingecko") == {"ok": True}


def test_send_json_maps_rate_limit(monkeypatch) -> None:
    monkeypatch.setattr(http._SESSION, "request", lambda *args, **kwargs: _Response(429, '{"status": "limited"}'))
    with pytest.raises(ProviderError) as exc:
        http.fetch_json("https://example.test", provider="coingecko")
    assert exc.value.code == "RATE_LIMIT"
    assert exc.value.status == 429


def test_send_json_non_json_success_is_bad_response(monkeypatch) -> None:
    monkeypatch.setattr(http._SESSION, "request", lambda *args, **kwargs: _Response(200, "<html>"))
    with pytest.raises(ProviderError) as exc:
        http.fetch_json("https://example.test", provider="coingecko")
    assert exc.value.code == "BAD_RESPONSE"


def test_send_json_network_failure(monkeypatch) -> None:
    def _boom(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(http._SESSION, "request", _boom)
    with pytest.raises(ProviderError) as exc:
        http.send_json("POST", "https://example.test", provider="supabase", body={"a": 1})
    assert exc.value.code == "NETWORK"


def test_coingecko_markets_by_id_parses_rows(monkeypatch) -> None:
    seen: dict = {}

    def _fetch(url, provider, timeout_seconds=15.0, headers=None, params=None):
        seen.update(url=url, headers=headers, params=params)
        return [
            {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin", "current_price": 30000, "market_cap_rank": 1},
            {"symbol": "broken"},
        ]

    monkeypatch.setattr(coingecko, "fetch_json", _fetch)
    rows = CoinGeckoClient(api_key="demo-key").get_markets(ids=["bitcoin"], per_page=1)

    assert [row.id for row in rows] == ["bitcoin"]
    assert rows[0].current_price == 30000.0
    assert seen["url"].endswith("/coins/markets")
    assert seen["params"]["ids"] == "bitcoin"
    assert seen["params"]["per_page"] == 1
    assert seen["headers"]["x-cg-demo-api-key"] == "demo-key"


def test_coingecko_simple_prices_omits_missing_ids(monkeypatch) -> None:
    monkeypatch.setattr(
        coingecko,
        "fetch_json",
        lambda url, provider, timeout_seconds=15.0, headers=None, params=None: {
            "bitcoin": {"usd": 30000},
            "ethereum": {},
        },
    )
    prices = CoinGeckoClient().get_simple_prices(["bitcoin", "ethereum", "nothing"])
    assert prices == {"bitcoin": 30000.0}


def test_coingecko_global_snapshot(monkeypatch) -> None:
    body = {
        "data": {
            "total_market_cap": {"usd": 2.5e12},
            "total_volume": {"usd": 9.0e10},
            "market_cap_percentage": {"btc": 52.1, "eth": 17.3},
            "market_cap_change_percentage_24h_usd": -1.2,
            "active_cryptocurrencies": 13000,
        }
    }
    monkeypatch.setattr(coingecko, "fetch_json", lambda *args, **kwargs: body)
    snapshot = CoinGeckoClient().get_global()
    assert snapshot.btc_dominance == 52.1
    assert snapshot.total_market_cap == 2.5e12
    assert snapshot.active_cryptocurrencies == 13000


def test_fear_greed_client_classifies_when_label_missing(monkeypatch) -> None:
    monkeypatch.setattr(
        alternative_me,
        "fetch_json",
        lambda *args, **kwargs: {"data": [{"value": "62", "timestamp": "1700000000"}]},
    )
    reading = FearGreedClient().get_latest()
    assert reading.value == 62
    assert reading.value_classification == "Greed"


def test_clerk_token_client_returns_jwt(monkeypatch) -> None:
    seen: dict = {}

    def _send(method, url, provider, timeout_seconds=15.0, headers=None, params=None, body=None):
        seen.update(method=method, url=url, headers=headers)
        return {"object": "token", "jwt": "header.payload.signature"}

    monkeypatch.setattr(clerk, "send_json", _send)
    token = ClerkTokenClient("sk_test", "sess_123").fetch_session_token()

    assert token == "header.payload.signature"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.clerk.com/v1/sessions/sess_123/tokens/supabase"
    assert seen["headers"]["Authorization"] == "Bearer sk_test"


def test_coingecko_market_chart_change_between_last_points(monkeypatch) -> None:
    seen: dict = {}

    def _fetch(url, provider, timeout_seconds=15.0, headers=None, params=None):
        seen.update(url=url, params=params)
        return {"prices": [[1700000000000, 100.0], [1700003600000, 98.0], ["bad"], [1700007200000, 107.8]]}

    monkeypatch.setattr(coingecko, "fetch_json", _fetch)
    chart = CoinGeckoClient().get_market_chart("bitcoin", days=7)

    assert seen["url"].endswith("/coins/bitcoin/market_chart")
    assert seen["params"] == {"vs_currency": "usd", "days": 7}
    assert [point.price for point in chart.prices] == [100.0, 98.0, 107.8]
    assert chart.prices[-1].timestamp == 1700007200000
    assert chart.change == pytest.approx(9.8)
    assert chart.change_percentage == pytest.approx(10.0)


def test_coingecko_market_chart_without_prices_is_none(monkeypatch) -> None:
    monkeypatch.setattr(coingecko, "fetch_json", lambda *args, **kwargs: {"prices": []})
    assert CoinGeckoClient().get_market_chart("bitcoin", days=1) is None

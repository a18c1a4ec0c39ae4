"""Supabase (PostgREST) adapter for the holdings table."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from crypto_portfolio.portfolio.errors import StoreError
from crypto_portfolio.portfolio.models import HoldingRecord, HoldingUpdate, NewHolding
from crypto_portfolio.providers.http import ProviderError, send_json
from crypto_portfolio.store.base import HoldingStore, TokenGetter

LOGGER = logging.getLogger(__name__)


def _as_float(value: object) -> float:
    try:
        return float(value)  # numeric columns may arrive as strings
    except (TypeError, ValueError):
        return 0.0


def record_from_row(row: dict[str, Any]) -> HoldingRecord:
    symbol = str(row.get("symbol") or "")
    return HoldingRecord(
        id=str(row.get("id") or ""),
        symbol=symbol,
        name=str(row.get("name") or symbol),
        coin_id=str(row.get("coin_id") or symbol.lower()),
        amount=_as_float(row.get("amount")),
        avg_price=_as_float(row.get("avg_price")),
        purchase_date=str(row.get("purchase_date") or ""),
        notes=row.get("notes"),
        user_id=row.get("user_id"),
        created_at=row.get("created_at"),
    )


class SupabaseHoldingStore(HoldingStore):
    def __init__(
        self,
        base_url: str,
        anon_key: str,
        get_valid_token: TokenGetter,
        table: str = "portfolio_holdings",
        timeout_seconds: float = 15.0,
    ) -> None:
        super().__init__(get_valid_token)
        self.base = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.anon_key = anon_key
        self.timeout_seconds = timeout_seconds

    def _headers(self, token: str, returning: bool = False) -> dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        if returning:
            headers["Prefer"] = "return=representation"
        return headers

    def _call(
        self,
        operation: str,
        method: str,
        token: str,
        params: dict[str, str],
        body: Any = None,
        returning: bool = False,
    ) -> Any:
        try:
            return send_json(
                method,
                self.base,
                provider="supabase",
                timeout_seconds=self.timeout_seconds,
                headers=self._headers(token, returning=returning),
                params=params,
                body=body,
            )
        except ProviderError as error:
            LOGGER.error("holding store %s failed: code=%s status=%s", operation, error.code, error.status)
            raise StoreError(f"Holding store {operation} failed: {error.message}", code=error.code) from error

    @staticmethod
    def _rows(data: Any) -> list[dict[str, Any]]:
        if isinstance(data, dict):
            return [data]
        if isinstance(data, list):
            return [row for row in data if isinstance(row, dict)]
        return []

    def list_holdings(self, user_id: str) -> list[HoldingRecord]:
        token = self._authorize(user_id)
        data = self._call(
            "list",
            "GET",
            token,
            params={"select": "*", "user_id": f"eq.{user_id}", "order": "created_at.desc"},
        )
        records = [record_from_row(row) for row in self._rows(data)]
        LOGGER.info("holdings fetched: user=%s count=%s", user_id, len(records))
        return records

    def create_holding(self, user_id: str, payload: NewHolding) -> HoldingRecord:
        token = self._authorize(user_id)
        body = {"user_id": user_id, **asdict(payload)}
        rows = self._rows(self._call("create", "POST", token, params={"select": "*"}, body=body, returning=True))
        if not rows:
            raise StoreError("Holding store create returned no row.", code="BAD_RESPONSE")
        record = record_from_row(rows[0])
        LOGGER.info("holding created: user=%s id=%s symbol=%s", user_id, record.id, record.symbol)
        return record

    def update_holding(self, user_id: str, holding_id: str, update: HoldingUpdate) -> HoldingRecord:
        token = self._authorize(user_id)
        rows = self._rows(
            self._call(
                "update",
                "PATCH",
                token,
                params={"id": f"eq.{holding_id}", "user_id": f"eq.{user_id}", "select": "*"},
                body=update.changes(),
                returning=True,
            )
        )
        if not rows:
            raise StoreError(f"Holding {holding_id} not found.", code="NOT_FOUND")
        LOGGER.info("holding updated: user=%s id=%s", user_id, holding_id)
        return record_from_row(rows[0])

    def delete_holding(self, user_id: str, holding_id: str) -> None:
        token = self._authorize(user_id)
        rows = self._rows(
            self._call(
                "delete",
                "DELETE",
                token,
                params={"id": f"eq.{holding_id}", "user_id": f"eq.{user_id}"},
                returning=True,
            )
        )
        if not rows:
            raise StoreError(f"Holding {holding_id} not found.", code="NOT_FOUND")
        LOGGER.info("holding deleted: user=%s id=%s", user_id, holding_id)

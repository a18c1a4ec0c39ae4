"""Process-local holding store for local runs and tests."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock

from crypto_portfolio.cache.ttl_cache import Clock
from crypto_portfolio.portfolio.errors import StoreError
from crypto_portfolio.portfolio.models import HoldingRecord, HoldingUpdate, NewHolding
from crypto_portfolio.store.base import HoldingStore, TokenGetter

LOGGER = logging.getLogger(__name__)


class InMemoryHoldingStore(HoldingStore):
    def __init__(self, get_valid_token: TokenGetter, clock: Clock = time.time) -> None:
        super().__init__(get_valid_token)
        self._clock = clock
        self._rows: dict[str, HoldingRecord] = {}
        self._lock = Lock()

    def _owned(self, user_id: str, holding_id: str) -> HoldingRecord:
        row = self._rows.get(holding_id)
        if row is None or row.user_id != user_id:
            raise StoreError(f"Holding {holding_id} not found.", code="NOT_FOUND")
        return row

    def list_holdings(self, user_id: str) -> list[HoldingRecord]:
        self._authorize(user_id)
        with self._lock:
            rows = [replace(row) for row in self._rows.values() if row.user_id == user_id]
        rows.reverse()
        return rows

    def create_holding(self, user_id: str, payload: NewHolding) -> HoldingRecord:
        self._authorize(user_id)
        record = HoldingRecord(
            id=str(uuid.uuid4()),
            symbol=payload.symbol,
            name=payload.name,
            coin_id=payload.coin_id,
            amount=payload.amount,
            avg_price=payload.avg_price,
            purchase_date=payload.purchase_date,
            notes=payload.notes,
            user_id=user_id,
            created_at=datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat(),
        )
        with self._lock:
            self._rows[record.id] = record
        LOGGER.info("holding created: user=%s id=%s symbol=%s", user_id, record.id, record.symbol)
        return replace(record)

    def update_holding(self, user_id: str, holding_id: str, update: HoldingUpdate) -> HoldingRecord:
        self._authorize(user_id)
        with self._lock:
            updated = replace(self._owned(user_id, holding_id), **update.changes())
            self._rows[holding_id] = updated
        LOGGER.info("holding updated: user=%s id=%s", user_id, holding_id)
        return replace(updated)

    def delete_holding(self, user_id: str, holding_id: str) -> None:
        self._authorize(user_id)
        with self._lock:
            self._owned(user_id, holding_id)
            del self._rows[holding_id]
        LOGGER.info("holding deleted: user=%s id=%s", user_id, holding_id)

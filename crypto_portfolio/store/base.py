"""Holding store contract shared by the Supabase and in-memory adapters."""

from __future__ import annotations

from typing import Callable

from crypto_portfolio.auth.session import token_subject
from crypto_portfolio.portfolio.errors import AuthenticationError, StoreError
from crypto_portfolio.portfolio.models import HoldingRecord, HoldingUpdate, NewHolding

TokenGetter = Callable[[], "str | None"]


class HoldingStore:
    """Row-level CRUD over one user's holdings.

    Every call obtains a token first and fails with ``AuthenticationError``
    before touching the backend when none is available.
    """

    def __init__(self, get_valid_token: TokenGetter) -> None:
        self._get_valid_token = get_valid_token

    def _authorize(self, user_id: str) -> str:
        if not user_id:
            raise AuthenticationError("No signed-in user.")
        token = self._get_valid_token()
        if not token:
            raise AuthenticationError()
        subject = token_subject(token)
        if subject is not None and subject != user_id:
            raise StoreError(f"Credential is not authorized for user {user_id}.", code="FORBIDDEN")
        return token

    def list_holdings(self, user_id: str) -> list[HoldingRecord]:
        raise NotImplementedError

    def create_holding(self, user_id: str, payload: NewHolding) -> HoldingRecord:
        raise NotImplementedError

    def update_holding(self, user_id: str, holding_id: str, update: HoldingUpdate) -> HoldingRecord:
        raise NotImplementedError

    def delete_holding(self, user_id: str, holding_id: str) -> None:
        raise NotImplementedError

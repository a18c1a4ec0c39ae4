"""Clerk backend adapter for session-scoped JWTs."""

from __future__ import annotations

from urllib.parse import quote

from crypto_portfolio.providers.http import send_json


class ClerkTokenClient:
    """Mints a fresh JWT from a Clerk JWT template for one signed-in session."""

    def __init__(
        self,
        secret_key: str,
        session_id: str,
        template: str = "supabase",
        timeout_seconds: float = 15.0,
        base_url: str = "https://api.clerk.com/v1",
    ) -> None:
        self.secret_key = secret_key
        self.session_id = session_id
        self.template = template
        self.timeout_seconds = timeout_seconds
        self.base = base_url.rstrip("/")

    def fetch_session_token(self) -> str | None:
        url = f"{self.base}/sessions/{quote(self.session_id, safe='')}/tokens/{quote(self.template, safe='')}"
        data = send_json(
            "POST",
            url,
            provider="clerk",
            timeout_seconds=self.timeout_seconds,
            headers={"Authorization": f"Bearer {self.secret_key}"},
        )
        token = data.get("jwt") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

"""Error taxonomy for portfolio operations."""

from __future__ import annotations


class PortfolioError(Exception):
    code = "PORTFOLIO_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def __str__(self) -> str:
        return self.message


class ValidationError(PortfolioError):
    """Caller input rejected before any network or store access."""

    code = "VALIDATION"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ResolutionError(PortfolioError):
    """Every price lookup strategy failed for a symbol."""

    code = "NOT_FOUND"

    def __init__(self, symbol: str, message: str | None = None) -> None:
        super().__init__(message or f"Unable to fetch price for {symbol}")
        self.symbol = symbol


class StoreError(PortfolioError):
    """Holding backend rejected a call (not found, ownership mismatch, upstream failure)."""

    code = "STORE_ERROR"


class AuthenticationError(PortfolioError):
    code = "AUTH"

    def __init__(self, message: str = "Failed to get valid authentication token") -> None:
        super().__init__(message)

"""Input validation for holding writes."""

from __future__ import annotations

import math

from crypto_portfolio.portfolio.errors import ValidationError
from crypto_portfolio.portfolio.models import AddAssetRequest, HoldingUpdate


def _positive_number(value: object, field: str, label: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{label} is required.", field=field)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError(f"{label} must be a number.", field=field) from None
    if not isinstance(value, (int, float)):
        raise ValidationError(f"{label} must be a number.", field=field)
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{label} must be a positive number.", field=field)
    return number


def validate_add_asset_request(request: AddAssetRequest) -> AddAssetRequest:
    """Return a cleaned copy of ``request`` or raise ``ValidationError``."""
    symbol = (request.symbol or "").strip() if isinstance(request.symbol, str) else ""
    if not symbol:
        raise ValidationError("Symbol is required.", field="symbol")
    quantity = _positive_number(request.quantity, "quantity", "Quantity")

    custom_price: float | None = None
    if not request.use_real_time_price:
        if request.custom_price is None:
            raise ValidationError(
                "Custom price is required when use_real_time_price is false.",
                field="custom_price",
            )
        custom_price = _positive_number(request.custom_price, "custom_price", "Custom price")

    return AddAssetRequest(
        symbol=symbol,
        quantity=quantity,
        use_real_time_price=bool(request.use_real_time_price),
        custom_price=custom_price,
    )


def validate_holding_update(update: HoldingUpdate) -> HoldingUpdate:
    changes = update.changes()
    if not changes:
        raise ValidationError("At least one field must be updated.")
    if update.amount is not None:
        amount = update.amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount < 0:
            raise ValidationError("Amount must be a non-negative number.", field="amount")
    avg_price = (
        _positive_number(update.avg_price, "avg_price", "Average price") if update.avg_price is not None else None
    )
    symbol = update.symbol.strip().upper() if update.symbol is not None else None
    if symbol == "":
        raise ValidationError("Symbol cannot be empty.", field="symbol")
    return HoldingUpdate(
        symbol=symbol,
        name=update.name,
        amount=float(update.amount) if update.amount is not None else None,
        avg_price=avg_price,
        coin_id=update.coin_id,
        purchase_date=update.purchase_date,
        notes=update.notes,
    )

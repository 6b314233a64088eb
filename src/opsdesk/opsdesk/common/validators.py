from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def to_money(value, field_name: str) -> Decimal:
    """Coerce int/float/str/Decimal into Decimal, rejecting garbage."""
    if value is None:
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    return amount


def require_non_negative_money(value, field_name: str) -> Decimal:
    amount = to_money(value, field_name)
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return amount


def require_positive_money(value, field_name: str) -> Decimal:
    amount = to_money(value, field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return amount

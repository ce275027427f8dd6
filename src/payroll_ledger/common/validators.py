from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_amount(value: Any, field_name: str) -> Decimal:
    """Coerce to a non-negative Decimal. Accepts numbers and numeric strings."""
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number") from None
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def is_same_name(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()

from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_unit_interval(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not 0.0 <= number <= 1.0:
        raise ValidationError(f"{field_name} must be between 0 and 1")
    return number


def require_length(values: Sequence, field_name: str, length: int) -> Sequence:
    if values is None or len(values) != length:
        raise ValidationError(f"{field_name} must contain exactly {length} values")
    return values

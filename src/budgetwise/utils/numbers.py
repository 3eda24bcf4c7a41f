"""Decimal helpers shared by the data models, prompt and CLI."""
from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError


def to_decimal(value, field_name: str) -> Decimal:
    """Convert a user- or wire-supplied number to Decimal."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from e
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    return result


def format_number(value: Decimal) -> str:
    """Plain notation without trailing zeros: 120.50 -> '120.5', 5E+3 -> '5000'."""
    # to_integral_value keeps the exponent, so 1E+30 never hits context precision.
    if value == value.to_integral_value():
        return format(value.to_integral_value(), "f")
    return format(value.normalize(), "f")


def to_json_number(value: Decimal):
    """int for whole values, float otherwise."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)

"""Input validation helpers shared by services; all raise before any I/O."""

import re
from decimal import Decimal, InvalidOperation

from app.core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# Values must stay below 1e15 in magnitude
MAX_ADJUSTED_EXPONENT = 15


def parse_decimal(raw: object, field: str) -> Decimal:
    """Convert raw input to a finite Decimal."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"{field} must be a numeric value", details={"field": field})
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a numeric value", details={"field": field}) from exc
    if not value.is_finite():
        raise ValidationError(f"{field} must be a finite number", details={"field": field})
    # Magnitude check without context arithmetic
    if value and value.adjusted() >= MAX_ADJUSTED_EXPONENT:
        raise ValidationError(f"{field} is too large", details={"field": field})
    return value


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a strictly positive Decimal."""
    amount = parse_decimal(raw, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero", details={"field": field})
    return amount


def validate_required_str(value: object, field: str, max_length: int = 200) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", details={"field": field})
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty", details={"field": field})
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", details={"field": field})
    return trimmed


def validate_optional_str(value: object, field: str, max_length: int = 500) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return validate_required_str(value, field, max_length)


def validate_email(email: object) -> str:
    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        raise ValidationError("Please enter a valid email address", details={"field": "email"})
    return email.strip().lower()


# Request bodies accept JSON numbers or numeric strings; services do the parsing.
RawAmount = str | int | float

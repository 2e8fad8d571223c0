"""
Shared validators for input normalization.

All validators raise ValueError with a human-readable message; domain
services turn that into a ValidationFailure.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from shared.config.constants import Limits

CENTS = Decimal("0.01")

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def sanitize_text(value: Optional[str], max_length: int = Limits.MAX_NAME_LENGTH) -> str:
    """
    Trim whitespace, strip control characters and cap the length.

    Returns an empty string for None.
    """
    if not value:
        return ""

    value = _CONTROL_CHARS.sub("", value.strip())
    return value[:max_length]


def require_text(value: Optional[str], field: str, max_length: int = Limits.MAX_NAME_LENGTH) -> str:
    """Sanitize a required text field, rejecting blank values."""
    cleaned = sanitize_text(value, max_length)
    if not cleaned:
        raise ValueError(f"{field} is required")
    return cleaned


def validate_quantity(
    quantity: int,
    min_val: int = Limits.MIN_QUANTITY,
    max_val: int = Limits.MAX_QUANTITY,
) -> int:
    """
    Validate quantity is within acceptable range.

    Raises:
        ValueError: If quantity is outside allowed range
    """
    if quantity < min_val:
        raise ValueError(f"Quantity must be at least {min_val}")
    if quantity > max_val:
        raise ValueError(f"Quantity must be at most {max_val}")
    return quantity


def to_money(value: object, field: str = "amount") -> Decimal:
    """
    Convert a number or numeric string to a non-negative Decimal with two places.

    Floats go through str() so 0.1 becomes Decimal("0.10"), not its binary expansion.
    Values with sub-cent precision are rejected, never rounded.
    """
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    try:
        amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError):
        raise ValueError(f"{field} must be a number")

    if not amount.is_finite():
        raise ValueError(f"{field} must be a finite number")
    if amount < 0:
        raise ValueError(f"{field} cannot be negative")
    if amount >= 10 ** Limits.MAX_MONEY_DIGITS:
        raise ValueError(f"{field} must be less than {10 ** Limits.MAX_MONEY_DIGITS}")

    try:
        cents = amount.quantize(CENTS)
    except InvalidOperation:
        raise ValueError(f"{field} must be a number")
    if cents != amount:
        raise ValueError(f"{field} cannot have more than two decimal places")
    return cents


def short_id(identifier: Optional[str], length: int = Limits.SHORT_ID_LENGTH) -> str:
    """Random tail of an identifier, used as the order reference on receipts and reports."""
    if not identifier:
        return ""
    return identifier[-length:]

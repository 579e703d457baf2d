"""Helpers for converting backend JSON values into Python types."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_date(value: Any) -> date | None:
    """Parse ``YYYY-MM-DD`` (or a full ISO timestamp) into a date."""
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Invalid date: {value!r}") from e

def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp; a trailing ``Z`` means UTC."""
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value)
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid timestamp: {value!r}") from e

def parse_amount(value: Any, default: Decimal = Decimal('0')) -> Decimal:
    """Parse a money amount sent as a number or numeric string."""
    if value in (None, ''):
        return default
    try:
        # str() first so floats like 25000.0 do not carry binary noise
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount

def format_date(value: date | datetime | None) -> str | None:
    """Serialize a date back to ``YYYY-MM-DD``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()

def format_datetime(value: datetime | None) -> str | None:
    """Serialize a timestamp back to ISO 8601."""
    return value.isoformat() if value is not None else None

def amount_to_json(value: Decimal) -> int | float:
    """Money as a JSON number; whole amounts stay integers."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)

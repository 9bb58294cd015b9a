"""
Utility functions for the application.
"""
from typing import Any, Dict
from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce numbers coming from the database or JSON into Decimal."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


def qround(value: Decimal) -> Decimal:
    """Round a money amount to cents."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response

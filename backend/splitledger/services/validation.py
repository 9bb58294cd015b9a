"""
Input validation shared by the record services.
"""
from decimal import Decimal
from typing import Any, Iterable, Optional
from splitledger.core.config import settings
from splitledger.core.exceptions import ValidationFailed
from splitledger.core.utils import to_decimal


def _split_amount(split: Any) -> Decimal:
    if isinstance(split, dict):
        return to_decimal(split.get("amount"))
    return to_decimal(split.amount)


def validate_split_sum(total: Any, splits: Iterable[Any], tolerance: Optional[Decimal] = None) -> bool:
    """
    True if the split amounts add up to ``total`` within ``tolerance``.

    Splits may be ORM rows, pydantic models or dicts with an ``amount`` key.
    """
    if tolerance is None:
        tolerance = settings.SPLIT_TOLERANCE
    split_sum = sum((_split_amount(s) for s in splits), Decimal(0))
    return abs(to_decimal(total) - split_sum) <= to_decimal(tolerance)


def require_non_empty(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationFailed(f"{field} cannot be empty")
    return value.strip()


def require_positive(amount: Any, field: str = "Amount") -> Decimal:
    value = to_decimal(amount)
    if value <= 0:
        raise ValidationFailed(f"{field} must be positive")
    return value

"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from splitledger.models.expense import SplitType


class SplitCreate(BaseModel):
    """One participant's share in an expense creation request."""
    user_id: int
    amount: Decimal
    paid: bool = False


class ExpenseCreate(BaseModel):
    """Schema for expense creation."""
    description: str
    amount: Decimal
    category: Optional[str] = None
    date: Optional[datetime] = None  # Defaults to now
    payer_id: int
    split_type: SplitType = SplitType.EQUAL
    splits: List[SplitCreate]
    group_id: Optional[int] = None  # None => personal expense


class SplitResponse(BaseModel):
    """Schema for split response."""
    user_id: int
    amount: Decimal
    paid: bool

    class Config:
        from_attributes = True


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    description: str
    amount: Decimal
    category: str
    date: datetime
    payer_id: int
    group_id: Optional[int] = None
    split_type: SplitType
    created_by_id: int
    splits: List[SplitResponse] = []

    class Config:
        from_attributes = True


class SplitValidationRequest(BaseModel):
    """Schema for checking splits against a total before creating an expense."""
    total_amount: Decimal
    splits: List[SplitCreate]


class SplitValidationResponse(BaseModel):
    valid: bool

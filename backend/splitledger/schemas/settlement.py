"""
Pydantic schemas for Settlement entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class SettlementCreate(BaseModel):
    """Schema for recording a payment between two users."""
    amount: Decimal
    note: Optional[str] = None
    date: Optional[datetime] = None  # Defaults to now
    payer_id: int
    receiver_id: int
    group_id: Optional[int] = None  # None => one-on-one
    related_expense_ids: Optional[List[int]] = None


class SettlementResponse(BaseModel):
    """Schema for settlement response."""
    id: int
    amount: Decimal
    note: Optional[str] = None
    date: datetime
    payer_id: int
    receiver_id: int
    group_id: Optional[int] = None
    related_expense_ids: Optional[List[int]] = None
    created_by_id: int

    class Config:
        from_attributes = True

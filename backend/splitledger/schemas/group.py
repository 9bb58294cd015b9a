"""
Pydantic schemas for Group entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from splitledger.models.group import GroupRole


class GroupCreate(BaseModel):
    """Schema for group creation. The creator is always added as admin."""
    name: str
    description: Optional[str] = None
    member_ids: List[int] = []


class GroupSummary(BaseModel):
    """Group identity fields."""
    id: int
    name: str
    description: Optional[str] = None


class GroupResponse(GroupSummary):
    """Schema for group response."""
    created_by_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class GroupMemberResponse(BaseModel):
    """Member details with their role in the group."""
    id: int
    name: str
    email: Optional[str] = None
    image_url: Optional[str] = None
    role: GroupRole


class GroupWithBalance(GroupSummary):
    """A group in the caller's list, with the caller's balance in it."""
    member_count: int
    balance: Decimal

"""
Pydantic schemas for derived balances.

Amounts are signed where the field is a balance (positive means the other
party owes the perspective user) and absolute where the field is a list item.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime
from decimal import Decimal
from splitledger.models.group import GroupRole
from splitledger.schemas.expense import ExpenseResponse
from splitledger.schemas.group import GroupSummary, GroupMemberResponse
from splitledger.schemas.settlement import SettlementResponse


class CounterpartInfo(BaseModel):
    """Display fields of the other party."""
    user_id: int
    name: str
    email: Optional[str] = None
    image_url: Optional[str] = None


class CounterpartAmount(BaseModel):
    """Dashboard list item; amount is absolute."""
    user_id: int
    name: str
    image_url: Optional[str] = None
    amount: Decimal


class DashboardBalances(BaseModel):
    """Balances of the current user against all personal counterparts."""
    you_owe: Decimal
    you_are_owed: Decimal
    total_balance: Decimal
    owed_by: List[CounterpartAmount]
    owe: List[CounterpartAmount]


class PersonBalance(BaseModel):
    """Balance between the current user and one counterpart."""
    counterpart: CounterpartInfo
    net_balance: Decimal
    you_are_owed: Decimal
    you_owe: Decimal


class OwesItem(BaseModel):
    to_id: int
    amount: Decimal


class OwedByItem(BaseModel):
    from_id: int
    amount: Decimal


class MemberBalance(BaseModel):
    """One row of the group balance matrix."""
    id: int
    name: str
    image_url: Optional[str] = None
    role: GroupRole
    total_balance: Decimal
    owes: List[OwesItem]
    owed_by: List[OwedByItem]


class CounterpartSettlement(BaseModel):
    """Clamped figures between the current user and one group member."""
    user_id: int
    name: str
    image_url: Optional[str] = None
    you_are_owed: Decimal
    you_owe: Decimal
    net_balance: Decimal


class UserSettlementData(BaseModel):
    type: str = "user"
    counterpart: CounterpartInfo
    you_are_owed: Decimal
    you_owe: Decimal
    net_balance: Decimal


class GroupSettlementData(BaseModel):
    type: str = "group"
    group: GroupSummary
    balances: List[CounterpartSettlement]


class GroupExpensesResponse(BaseModel):
    """Everything the group page shows."""
    group: GroupSummary
    members: List[GroupMemberResponse]
    expenses: List[ExpenseResponse]
    settlements: List[SettlementResponse]
    balances: List[MemberBalance]
    user_lookup_map: Dict[int, GroupMemberResponse]


class ExpensesBetweenResponse(BaseModel):
    """Personal history between the current user and one counterpart."""
    expenses: List[ExpenseResponse]
    settlements: List[SettlementResponse]
    other_user: CounterpartInfo
    balance: Decimal


class MonthlySpending(BaseModel):
    month: datetime  # First instant of the month
    total: Decimal


class TotalSpent(BaseModel):
    year: int
    total: Decimal

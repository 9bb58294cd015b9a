"""Models package - Import all models for SQLAlchemy registration."""
from splitledger.models.user import User
from splitledger.models.group import Group, GroupMember, GroupRole
from splitledger.models.expense import Expense, ExpenseSplit, SplitType
from splitledger.models.settlement import Settlement

__all__ = [
    "User",
    "Group",
    "GroupMember",
    "GroupRole",
    "Expense",
    "ExpenseSplit",
    "SplitType",
    "Settlement",
]

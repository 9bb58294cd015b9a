"""
Expense model for shared costs.
"""
from sqlalchemy import Column, String, Numeric, DateTime, Boolean, Enum as SQLEnum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel
import enum


class SplitType(str, enum.Enum):
    """How the amount was divided. Informational only."""
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    EXACT = "exact"


class Expense(BaseModel):
    """Expense model representing a single shared cost."""
    __tablename__ = "expenses"

    description = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    category = Column(String(50), nullable=False, default="other")
    date = Column(DateTime, nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=True, index=True)  # NULL => personal expense
    split_type = Column(SQLEnum(SplitType), default=SplitType.EQUAL, nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    payer = relationship("User", foreign_keys=[payer_id], back_populates="expenses_paid")
    group = relationship("Group", back_populates="expenses")
    splits = relationship(
        "ExpenseSplit",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseSplit.id"
    )


class ExpenseSplit(BaseModel):
    """One participant's share of an expense."""
    __tablename__ = "expense_splits"

    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    paid = Column(Boolean, default=False, nullable=False)  # Settled outside the ledger

    # Relationships
    expense = relationship("Expense", back_populates="splits")
    user = relationship("User")

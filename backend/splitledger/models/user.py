"""
User model for ledger participants.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel


class User(BaseModel):
    """User model; read-only from the ledger's point of view."""
    __tablename__ = "users"

    name = Column(String(100), nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    image_url = Column(String(500), nullable=True)

    # Relationships
    groups = relationship("GroupMember", back_populates="user", cascade="all, delete-orphan")
    expenses_paid = relationship("Expense", foreign_keys="Expense.payer_id", back_populates="payer")

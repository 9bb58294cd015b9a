"""
Settlement model for direct payments between users.
"""
from sqlalchemy import Column, Numeric, Text, DateTime, ForeignKey, Integer, JSON
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel


class Settlement(BaseModel):
    """Payment from one user to another that reduces outstanding debt."""
    __tablename__ = "settlements"

    amount = Column(Numeric(15, 2), nullable=False)
    note = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=True, index=True)  # NULL => one-on-one
    related_expense_ids = Column(JSON, nullable=True)  # Informational link, not used in balance math
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    payer = relationship("User", foreign_keys=[payer_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
    group = relationship("Group", back_populates="settlements")

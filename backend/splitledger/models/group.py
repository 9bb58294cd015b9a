"""
Group model for shared-expense groups.
"""
from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel, utcnow
import enum


class GroupRole(str, enum.Enum):
    """Group member role enumeration."""
    ADMIN = "admin"
    MEMBER = "member"


class Group(BaseModel):
    """Group model; its expenses and settlements are scoped by its id."""
    __tablename__ = "groups"

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    members = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.id"
    )
    expenses = relationship("Expense", back_populates="group")
    settlements = relationship("Settlement", back_populates="group")

    def member_ids(self) -> list:
        return [m.user_id for m in self.members]

    def has_member(self, user_id: int) -> bool:
        return any(m.user_id == user_id for m in self.members)


class GroupMember(BaseModel):
    """Junction table for Group and User many-to-many relationship."""
    __tablename__ = "group_members"

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(SQLEnum(GroupRole), default=GroupRole.MEMBER, nullable=False)
    joined_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    group = relationship("Group", back_populates="members")
    user = relationship("User", back_populates="groups")

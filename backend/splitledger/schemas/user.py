"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr
from typing import List, Optional


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    name: str
    email: EmailStr
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class ContactUser(BaseModel):
    """Someone the current user shares personal expenses with."""
    id: int
    name: str
    email: str
    image_url: str = ""
    type: str = "user"


class ContactGroup(BaseModel):
    """A group the current user belongs to."""
    id: int
    name: str
    description: str = ""
    member_count: int
    type: str = "group"


class ContactsResponse(BaseModel):
    """Schema for the contacts page."""
    users: List[ContactUser]
    groups: List[ContactGroup]

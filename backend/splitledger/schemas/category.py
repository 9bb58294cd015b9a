"""
Pydantic schemas for expense categories.
"""
from pydantic import BaseModel


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: str
    name: str

    class Config:
        from_attributes = True

"""
Expense category routes.
"""
from fastapi import APIRouter
from typing import List
from splitledger.schemas.category import CategoryResponse
from splitledger.services.category_service import get_available_categories, get_category_by_id

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories():
    """Get all expense categories."""
    return get_available_categories()


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str):
    """Get one category; unknown ids resolve to "other"."""
    return get_category_by_id(category_id)

"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, status
from splitledger.models.user import User
from splitledger.schemas.expense import ExpenseCreate, ExpenseResponse, SplitValidationRequest, SplitValidationResponse
from splitledger.services.expense_service import create_expense, delete_expense
from splitledger.services.repository import LedgerRepository
from splitledger.services.validation import validate_split_sum
from splitledger.api.dependencies import get_current_user, get_repository

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_new_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    repository: LedgerRepository = Depends(get_repository)
):
    """Create a new expense with its splits."""
    return create_expense(repository, current_user, expense_data)


@router.post("/validate-splits", response_model=SplitValidationResponse)
async def validate_splits(
    request: SplitValidationRequest,
    current_user: User = Depends(get_current_user)
):
    """Check whether splits add up to the total before submitting."""
    return SplitValidationResponse(valid=validate_split_sum(request.total_amount, request.splits))


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_expense(
    expense_id: int,
    current_user: User = Depends(get_current_user),
    repository: LedgerRepository = Depends(get_repository)
):
    """Delete an expense."""
    delete_expense(repository, current_user, expense_id)

"""
User routes.
"""
from fastapi import APIRouter, Depends
from typing import List
from splitledger.core.exceptions import NotFound
from splitledger.schemas.user import UserResponse, ContactUser, ContactsResponse
from splitledger.schemas.balance import PersonBalance, ExpensesBetweenResponse
from splitledger.models.user import User
from splitledger.services.balance_service import BalanceService
from splitledger.services.group_service import get_contacts, search_users
from splitledger.services.repository import LedgerRepository
from splitledger.api.dependencies import get_current_user, get_repository, get_balance_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user


@router.get("/contacts", response_model=ContactsResponse)
async def list_contacts(
    current_user: User = Depends(get_current_user),
    repository: LedgerRepository = Depends(get_repository)
):
    """People and groups the current user shares expenses with."""
    return get_contacts(repository, current_user)


@router.get("/search", response_model=List[ContactUser])
async def search_for_users(
    query: str = "",
    current_user: User = Depends(get_current_user),
    repository: LedgerRepository = Depends(get_repository)
):
    """Search other users by name or email."""
    return search_users(repository, current_user, query)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    repository: LedgerRepository = Depends(get_repository)
):
    """Get user by ID."""
    user = repository.get_user(user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/{user_id}/balance", response_model=PersonBalance)
async def get_person_balance(user_id: int, service: BalanceService = Depends(get_balance_service)):
    """Balance between the current user and another user."""
    return service.compute_person_balance(user_id)


@router.get("/{user_id}/expenses", response_model=ExpensesBetweenResponse)
async def get_expenses_between(user_id: int, service: BalanceService = Depends(get_balance_service)):
    """Personal expenses and settlements shared with another user."""
    return service.get_expenses_between_users(user_id)

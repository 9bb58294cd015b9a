"""
Group routes.
"""
from fastapi import APIRouter, Depends, status
from typing import List
from splitledger.models.user import User
from splitledger.schemas.group import GroupCreate, GroupResponse, GroupWithBalance
from splitledger.schemas.balance import MemberBalance, GroupExpensesResponse
from splitledger.services.balance_service import BalanceService
from splitledger.services.group_service import create_group
from splitledger.services.repository import LedgerRepository
from splitledger.api.dependencies import get_current_user, get_repository, get_balance_service

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=List[GroupWithBalance])
async def list_groups(service: BalanceService = Depends(get_balance_service)):
    """List the current user's groups with their balance in each."""
    return service.get_user_groups()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_new_group(
    group_data: GroupCreate,
    current_user: User = Depends(get_current_user),
    repository: LedgerRepository = Depends(get_repository)
):
    """Create a new group."""
    return create_group(repository, current_user, group_data)


@router.get("/{group_id}/balances", response_model=List[MemberBalance])
async def get_group_balances(group_id: int, service: BalanceService = Depends(get_balance_service)):
    """Who owes whom inside a group."""
    return service.compute_group_balances(group_id)


@router.get("/{group_id}/expenses", response_model=GroupExpensesResponse)
async def get_group_expenses(group_id: int, service: BalanceService = Depends(get_balance_service)):
    """Group details, records and balances."""
    return service.get_group_expenses(group_id)

"""
Settlement routes.
"""
from fastapi import APIRouter, Depends, status
from typing import Union
from splitledger.models.user import User
from splitledger.schemas.settlement import SettlementCreate, SettlementResponse
from splitledger.schemas.balance import UserSettlementData, GroupSettlementData
from splitledger.services.balance_service import BalanceService
from splitledger.services.settlement_service import create_settlement
from splitledger.services.repository import LedgerRepository
from splitledger.api.dependencies import get_current_user, get_repository, get_balance_service

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def create_new_settlement(
    settlement_data: SettlementCreate,
    current_user: User = Depends(get_current_user),
    repository: LedgerRepository = Depends(get_repository)
):
    """Record a payment between two users."""
    return create_settlement(repository, current_user, settlement_data)


@router.get("/{entity_type}/{entity_id}", response_model=Union[UserSettlementData, GroupSettlementData])
async def get_settlement_data(
    entity_type: str,
    entity_id: int,
    service: BalanceService = Depends(get_balance_service)
):
    """Settle-up figures against a user or within a group."""
    return service.get_settlement_data(entity_type, entity_id)

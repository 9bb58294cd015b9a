"""
Dashboard routes.
"""
from fastapi import APIRouter, Depends
from typing import List
from splitledger.schemas.balance import DashboardBalances, MonthlySpending, TotalSpent
from splitledger.services.balance_service import BalanceService
from splitledger.api.dependencies import get_balance_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/balances", response_model=DashboardBalances)
async def get_dashboard_balances(service: BalanceService = Depends(get_balance_service)):
    """What the current user owes and is owed across personal expenses."""
    return service.compute_dashboard_balances()


@router.get("/total-spent", response_model=TotalSpent)
async def get_total_spent(service: BalanceService = Depends(get_balance_service)):
    """Current user's share of expenses this year."""
    return service.get_total_spent()


@router.get("/monthly-spending", response_model=List[MonthlySpending])
async def get_monthly_spending(service: BalanceService = Depends(get_balance_service)):
    """Current user's share of expenses per month this year."""
    return service.get_monthly_spending()

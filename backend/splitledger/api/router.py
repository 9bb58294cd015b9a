"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from splitledger.api.routes import (
    users, groups, expenses, settlements, dashboard, categories
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(users.router)
api_router.include_router(groups.router)
api_router.include_router(expenses.router)
api_router.include_router(settlements.router)
api_router.include_router(dashboard.router)
api_router.include_router(categories.router)

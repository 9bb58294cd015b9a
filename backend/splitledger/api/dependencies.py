"""
Shared FastAPI dependencies: repository, current user and services.
"""
from typing import Callable, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from splitledger.core.exceptions import AuthenticationRequired
from splitledger.core.security import user_id_from_token
from splitledger.db.session import get_db
from splitledger.models.user import User
from splitledger.services.balance_service import BalanceService
from splitledger.services.repository import LedgerRepository

bearer_scheme = HTTPBearer(auto_error=False)


def get_repository(db: Session = Depends(get_db)) -> LedgerRepository:
    """Repository bound to the request's session."""
    return LedgerRepository(db)


def get_current_user_accessor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repository: LedgerRepository = Depends(get_repository)
) -> Callable[[], User]:
    """Return a callable that resolves the bearer token to a user or raises AuthenticationRequired."""
    token = credentials.credentials if credentials else None

    def current_user() -> User:
        user_id = user_id_from_token(token)
        if user_id is None:
            raise AuthenticationRequired("Could not validate credentials")
        user = repository.get_user(user_id)
        if user is None:
            raise AuthenticationRequired("User not found")
        return user

    return current_user


def get_current_user(accessor: Callable[[], User] = Depends(get_current_user_accessor)) -> User:
    """Get current authenticated user."""
    return accessor()


def get_balance_service(
    repository: LedgerRepository = Depends(get_repository),
    accessor: Callable[[], User] = Depends(get_current_user_accessor)
) -> BalanceService:
    return BalanceService(repository, accessor)

"""
Expense service for expense-related business logic.
"""
import logging
from datetime import datetime
from splitledger.core.exceptions import AuthorizationDenied, NotFound, ValidationFailed
from splitledger.core.utils import to_decimal, qround
from splitledger.models.user import User
from splitledger.models.expense import Expense, ExpenseSplit
from splitledger.schemas.expense import ExpenseCreate
from splitledger.services.category_service import normalize_category_id
from splitledger.services.repository import LedgerRepository
from splitledger.services.validation import validate_split_sum, require_non_empty, require_positive

logger = logging.getLogger(__name__)


def create_expense(repository: LedgerRepository, current_user: User, data: ExpenseCreate) -> Expense:
    """
    Validate and store an expense with its splits.

    Everything is checked before the expense is added to the session, so a
    rejected request writes nothing.
    """
    description = require_non_empty(data.description, "Description")
    amount = require_positive(qround(data.amount))

    if not data.splits:
        raise ValidationFailed("At least one split is required")

    user_ids = [s.user_id for s in data.splits]
    if len(user_ids) != len(set(user_ids)):
        raise ValidationFailed("Duplicate users found in splits")

    if any(to_decimal(s.amount) < 0 for s in data.splits):
        raise ValidationFailed("Split amounts cannot be negative")

    if not validate_split_sum(amount, data.splits):
        logger.warning(f"Rejected expense from user {current_user.id}: splits do not add up to {amount}")
        raise ValidationFailed("Split amounts must add up to the total expense amount")

    if data.group_id is not None:
        group = repository.get_group(data.group_id)
        if not group:
            raise NotFound("Group not found")
        if not group.has_member(current_user.id):
            raise AuthorizationDenied("You are not a member of this group")
        outsiders = [uid for uid in [data.payer_id] + user_ids if not group.has_member(uid)]
        if outsiders:
            logger.warning(f"Rejected expense for group {group.id}: users {outsiders} are not members")
            raise AuthorizationDenied("Payer and every split user must be members of the group")

    known_users = repository.get_users(set(user_ids) | {data.payer_id})
    if data.payer_id not in known_users:
        raise NotFound("Payer not found")
    missing = [uid for uid in user_ids if uid not in known_users]
    if missing:
        raise NotFound(f"Users not found: {missing}")

    expense = Expense(
        description=description,
        amount=amount,
        category=normalize_category_id(data.category),
        date=data.date or datetime.now(),
        payer_id=data.payer_id,
        group_id=data.group_id,
        split_type=data.split_type,
        created_by_id=current_user.id,
        splits=[
            ExpenseSplit(user_id=s.user_id, amount=qround(s.amount), paid=s.paid)
            for s in data.splits
        ]
    )
    expense = repository.add(expense)
    logger.info(f"Created expense {expense.id} ({amount}) paid by user {expense.payer_id}")
    return expense


def delete_expense(repository: LedgerRepository, current_user: User, expense_id: int) -> None:
    """Delete an expense; only its creator or payer may do so."""
    expense = repository.get_expense(expense_id)
    if not expense:
        raise NotFound("Expense not found")

    if current_user.id not in (expense.created_by_id, expense.payer_id):
        raise AuthorizationDenied("You don't have permission to delete this expense")

    repository.delete(expense)
    logger.info(f"Deleted expense {expense_id} by user {current_user.id}")

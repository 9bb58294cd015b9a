"""
Split model helpers.

A split is outstanding while ``paid`` is false. Paid splits were settled
outside the ledger (e.g. at the point of purchase) and never take part in
balance arithmetic.
"""
from decimal import Decimal
from typing import List, Optional, Tuple
from splitledger.core.utils import to_decimal
from splitledger.models.expense import Expense, ExpenseSplit


def is_outstanding(split: ExpenseSplit) -> bool:
    return not split.paid


def find_split(expense: Expense, user_id: int) -> Optional[ExpenseSplit]:
    """Return the user's split on an expense, or None if they are not involved."""
    for split in expense.splits:
        if split.user_id == user_id:
            return split
    return None


def owed_amount(expense: Expense, user_id: int) -> Optional[Tuple[Decimal, bool]]:
    """(amount, paid) for the user's share, or None if not involved."""
    split = find_split(expense, user_id)
    if split is None:
        return None
    return to_decimal(split.amount), bool(split.paid)


def outstanding_amount(expense: Expense, user_id: int) -> Decimal:
    """Outstanding share of a user; zero when paid or not involved."""
    split = find_split(expense, user_id)
    if split is None or not is_outstanding(split):
        return Decimal(0)
    return to_decimal(split.amount)


def outstanding_shares(expense: Expense, exclude_user_id: Optional[int] = None) -> List[Tuple[int, Decimal]]:
    """(user_id, amount) for every unpaid split, optionally skipping one user."""
    return [
        (split.user_id, to_decimal(split.amount))
        for split in expense.splits
        if is_outstanding(split) and split.user_id != exclude_user_id
    ]


def involves(expense: Expense, user_id: int) -> bool:
    return expense.payer_id == user_id or find_split(expense, user_id) is not None

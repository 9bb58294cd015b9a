"""
Data-store access for the ledger.

Every read returns fully loaded ORM rows so the balance code can run on them
without touching the session again.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy import or_, and_
from sqlalchemy.orm import Session, selectinload
from splitledger.models.user import User
from splitledger.models.group import Group, GroupMember
from splitledger.models.expense import Expense, ExpenseSplit
from splitledger.models.settlement import Settlement


class LedgerRepository:
    """Fetch expenses, settlements, users and groups matching filters."""

    def __init__(self, db: Session):
        self.db = db

    # Users and groups

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_users(self, user_ids: Iterable[int]) -> Dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        users = self.db.query(User).filter(User.id.in_(ids)).all()
        return {u.id: u for u in users}

    def search_users(self, query: str, exclude_user_id: Optional[int] = None) -> List[User]:
        """Users whose name or email contains ``query``; name matches come first."""
        pattern = f"%{query}%"

        def matching(column) -> List[User]:
            q = self.db.query(User).filter(column.ilike(pattern))
            if exclude_user_id is not None:
                q = q.filter(User.id != exclude_user_id)
            return q.order_by(User.name, User.id).all()

        by_name = matching(User.name)
        seen = {u.id for u in by_name}
        return by_name + [u for u in matching(User.email) if u.id not in seen]

    def get_group(self, group_id: int) -> Optional[Group]:
        return self.db.query(Group).options(
            selectinload(Group.members).selectinload(GroupMember.user)
        ).filter(Group.id == group_id).first()

    def get_user_groups(self, user_id: int) -> List[Group]:
        return self.db.query(Group).options(
            selectinload(Group.members)
        ).join(GroupMember).filter(
            GroupMember.user_id == user_id
        ).order_by(Group.id).all()

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        return self.db.query(Expense).options(
            selectinload(Expense.splits)
        ).filter(Expense.id == expense_id).first()

    # Ledger records

    def fetch_expenses(
        self,
        payer_id: Optional[int] = None,
        payer_ids: Optional[Iterable[int]] = None,
        group_id: Optional[int] = None,
        personal_only: bool = False,
        involving_user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[Expense]:
        """
        Expenses matching every given filter.

        ``personal_only`` restricts to expenses without a group; ``end`` is
        exclusive.
        """
        query = self.db.query(Expense).options(selectinload(Expense.splits))

        if payer_id is not None:
            query = query.filter(Expense.payer_id == payer_id)
        if payer_ids is not None:
            query = query.filter(Expense.payer_id.in_(list(payer_ids)))
        if group_id is not None:
            query = query.filter(Expense.group_id == group_id)
        if personal_only:
            query = query.filter(Expense.group_id.is_(None))
        if involving_user_id is not None:
            query = query.filter(or_(
                Expense.payer_id == involving_user_id,
                Expense.splits.any(ExpenseSplit.user_id == involving_user_id)
            ))
        if start is not None:
            query = query.filter(Expense.date >= start)
        if end is not None:
            query = query.filter(Expense.date < end)

        return query.order_by(Expense.date.desc(), Expense.id.desc()).all()

    def fetch_settlements(
        self,
        payer_id: Optional[int] = None,
        receiver_id: Optional[int] = None,
        party_id: Optional[int] = None,
        between: Optional[Tuple[int, int]] = None,
        group_id: Optional[int] = None,
        personal_only: bool = False,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[Settlement]:
        """
        Settlements matching every given filter.

        ``party_id`` matches either side; ``between`` matches a payment in
        either direction between the two users.
        """
        query = self.db.query(Settlement)

        if payer_id is not None:
            query = query.filter(Settlement.payer_id == payer_id)
        if receiver_id is not None:
            query = query.filter(Settlement.receiver_id == receiver_id)
        if party_id is not None:
            query = query.filter(or_(
                Settlement.payer_id == party_id,
                Settlement.receiver_id == party_id
            ))
        if between is not None:
            a, b = between
            query = query.filter(or_(
                and_(Settlement.payer_id == a, Settlement.receiver_id == b),
                and_(Settlement.payer_id == b, Settlement.receiver_id == a)
            ))
        if group_id is not None:
            query = query.filter(Settlement.group_id == group_id)
        if personal_only:
            query = query.filter(Settlement.group_id.is_(None))
        if start is not None:
            query = query.filter(Settlement.date >= start)
        if end is not None:
            query = query.filter(Settlement.date < end)

        return query.order_by(Settlement.date.desc(), Settlement.id.desc()).all()

    # Writes

    def add(self, record):
        """Insert one record (with its children) in a single commit."""
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record):
        self.db.delete(record)
        self.db.commit()

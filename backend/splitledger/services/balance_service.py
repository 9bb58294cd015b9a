"""
Balance service: the read-only scope aggregators.

Every call resolves the current user through the injected accessor,
fetches one snapshot of records from the repository and recomputes balances
from scratch. Nothing is cached between calls.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple, Union
from splitledger.core.exceptions import AuthenticationRequired, AuthorizationDenied, NotFound, ValidationFailed
from splitledger.core.utils import to_decimal
from splitledger.models.user import User
from splitledger.models.group import Group
from splitledger.models.expense import Expense
from splitledger.models.settlement import Settlement
from splitledger.schemas.balance import (
    CounterpartInfo, CounterpartAmount, DashboardBalances, PersonBalance,
    OwesItem, OwedByItem, MemberBalance, CounterpartSettlement,
    UserSettlementData, GroupSettlementData, GroupExpensesResponse,
    ExpensesBetweenResponse, MonthlySpending, TotalSpent
)
from splitledger.schemas.expense import ExpenseResponse
from splitledger.schemas.group import GroupSummary, GroupMemberResponse, GroupWithBalance
from splitledger.schemas.settlement import SettlementResponse
from splitledger.services.ledger import accumulate_ledger, pair_balance, scope_balance, build_group_ledger
from splitledger.services.netting import NettingMode
from splitledger.services.repository import LedgerRepository
from splitledger.services.splits import involves, find_split

logger = logging.getLogger(__name__)

UNKNOWN_USER_NAME = "Unknown User"

CurrentUserAccessor = Callable[[], Optional[User]]


class BalanceService:
    """Computes balances for the current user over a repository snapshot."""

    def __init__(self, repository: LedgerRepository, current_user: CurrentUserAccessor):
        self.repository = repository
        self._current_user = current_user

    # Shared guards

    def current_user(self) -> User:
        user = self._current_user()
        if user is None:
            raise AuthenticationRequired("Not authenticated")
        return user

    def require_group_member(self, group_id: int, user_id: int) -> Group:
        """Load a group, failing with NotFound or AuthorizationDenied."""
        group = self.repository.get_group(group_id)
        if not group:
            raise NotFound("Group not found")
        if not group.has_member(user_id):
            raise AuthorizationDenied("You are not a member of this group")
        return group

    def require_counterpart(self, me: User, counterpart_id: int) -> User:
        if counterpart_id == me.id:
            raise ValidationFailed("Cannot query a balance with yourself")
        other = self.repository.get_user(counterpart_id)
        if not other:
            raise NotFound("User not found")
        return other

    def _personal_records_between(self, me: User, other: User) -> Tuple[List[Expense], List[Settlement]]:
        """Personal expenses paid by either party that involve both, plus their settlements."""
        candidates = self.repository.fetch_expenses(personal_only=True, payer_ids=[me.id, other.id])
        expenses = [e for e in candidates if involves(e, me.id) and involves(e, other.id)]
        settlements = self.repository.fetch_settlements(personal_only=True, between=(me.id, other.id))
        return expenses, settlements

    # a. Dashboard

    def compute_dashboard_balances(self) -> DashboardBalances:
        """
        Net balance against every personal counterpart of the current user.

        Settlements reduce directional debts in clamped mode, so an overpaid
        settlement never turns into a debt in the other direction here.
        """
        me = self.current_user()
        expenses = self.repository.fetch_expenses(personal_only=True, involving_user_id=me.id)
        settlements = self.repository.fetch_settlements(personal_only=True, party_id=me.id)
        logger.debug(f"Dashboard for user {me.id}: {len(expenses)} expenses, {len(settlements)} settlements")

        ledger = accumulate_ledger(me.id, expenses, settlements, NettingMode.CLAMPED)
        nets = {uid: entry.net for uid, entry in ledger.items() if entry.net != 0}
        users = self.repository.get_users(nets.keys())

        owed_by: List[CounterpartAmount] = []
        owe: List[CounterpartAmount] = []
        you_are_owed = Decimal(0)
        you_owe = Decimal(0)

        for uid, net in nets.items():
            user = users.get(uid)
            item = CounterpartAmount(
                user_id=uid,
                name=user.name if user else UNKNOWN_USER_NAME,
                image_url=user.image_url if user else None,
                amount=abs(net)
            )
            if net > 0:
                owed_by.append(item)
                you_are_owed += net
            else:
                owe.append(item)
                you_owe += -net

        owed_by.sort(key=lambda i: (-i.amount, i.user_id))
        owe.sort(key=lambda i: (-i.amount, i.user_id))

        return DashboardBalances(
            you_owe=you_owe,
            you_are_owed=you_are_owed,
            total_balance=you_are_owed - you_owe,
            owed_by=owed_by,
            owe=owe
        )

    # b. Person pair

    def compute_person_balance(self, counterpart_id: int) -> PersonBalance:
        """
        Balance between the current user and one counterpart.

        ``net_balance`` is the unclamped pair balance (a settlement beyond the
        debt shows up as a prepayment). ``you_are_owed`` and ``you_owe`` are the
        clamped directional figures shown on the settle-up page.
        """
        me = self.current_user()
        other = self.require_counterpart(me, counterpart_id)
        expenses, settlements = self._personal_records_between(me, other)

        entry = accumulate_ledger(me.id, expenses, settlements, NettingMode.CLAMPED).get(other.id)
        return PersonBalance(
            counterpart=_counterpart_info(other),
            net_balance=pair_balance(me.id, other.id, expenses, settlements),
            you_are_owed=entry.owed if entry else Decimal(0),
            you_owe=entry.owing if entry else Decimal(0)
        )

    # c. Group matrix

    def compute_group_balances(self, group_id: int) -> List[MemberBalance]:
        """Balance matrix for every member of a group the current user belongs to."""
        me = self.current_user()
        group = self.require_group_member(group_id, me.id)
        return self._group_member_balances(group)

    def _group_member_balances(self, group: Group) -> List[MemberBalance]:
        expenses = self.repository.fetch_expenses(group_id=group.id)
        settlements = self.repository.fetch_settlements(group_id=group.id)
        logger.debug(f"Group {group.id}: {len(expenses)} expenses, {len(settlements)} settlements")

        # Symmetric mode: raw fold-in of settlements, then per-pair normalization.
        group_ledger = build_group_ledger(group.member_ids(), expenses, settlements)

        balances = []
        for member in group.members:
            uid = member.user_id
            balances.append(MemberBalance(
                id=uid,
                name=member.user.name if member.user else UNKNOWN_USER_NAME,
                image_url=member.user.image_url if member.user else None,
                role=member.role,
                total_balance=group_ledger.totals[uid],
                owes=[OwesItem(to_id=to_id, amount=amount) for to_id, amount in group_ledger.owes(uid)],
                owed_by=[OwedByItem(from_id=from_id, amount=amount) for from_id, amount in group_ledger.owed_by(uid)]
            ))
        return balances

    # d. Settlement data

    def get_settlement_data(self, entity_type: str, entity_id: int) -> Union[UserSettlementData, GroupSettlementData]:
        """Clamped owed/owing figures for the settle-up page of a user or a group."""
        me = self.current_user()

        if entity_type == "user":
            other = self.require_counterpart(me, entity_id)
            expenses, settlements = self._personal_records_between(me, other)
            entry = accumulate_ledger(me.id, expenses, settlements, NettingMode.CLAMPED).get(other.id)
            owed = entry.owed if entry else Decimal(0)
            owing = entry.owing if entry else Decimal(0)
            return UserSettlementData(
                counterpart=_counterpart_info(other),
                you_are_owed=owed,
                you_owe=owing,
                net_balance=owed - owing
            )

        if entity_type == "group":
            group = self.require_group_member(entity_id, me.id)
            expenses = self.repository.fetch_expenses(group_id=group.id)
            settlements = self.repository.fetch_settlements(group_id=group.id)
            ledger = accumulate_ledger(me.id, expenses, settlements, NettingMode.CLAMPED)

            balances = []
            for member in group.members:
                if member.user_id == me.id:
                    continue
                entry = ledger.get(member.user_id)
                owed = entry.owed if entry else Decimal(0)
                owing = entry.owing if entry else Decimal(0)
                balances.append(CounterpartSettlement(
                    user_id=member.user_id,
                    name=member.user.name if member.user else UNKNOWN_USER_NAME,
                    image_url=member.user.image_url if member.user else None,
                    you_are_owed=owed,
                    you_owe=owing,
                    net_balance=owed - owing
                ))
            return GroupSettlementData(group=_group_summary(group), balances=balances)

        raise ValidationFailed("Invalid entity type; expected 'user' or 'group'")

    # e. Group list

    def get_user_groups(self) -> List[GroupWithBalance]:
        """Groups of the current user with their unclamped balance in each."""
        me = self.current_user()
        result = []
        for group in self.repository.get_user_groups(me.id):
            expenses = self.repository.fetch_expenses(group_id=group.id)
            settlements = self.repository.fetch_settlements(group_id=group.id, party_id=me.id)
            result.append(GroupWithBalance(
                id=group.id,
                name=group.name,
                description=group.description,
                member_count=len(group.members),
                balance=scope_balance(me.id, expenses, settlements)
            ))
        return result

    # f. Group page

    def get_group_expenses(self, group_id: int) -> GroupExpensesResponse:
        me = self.current_user()
        group = self.require_group_member(group_id, me.id)

        members = [
            GroupMemberResponse(
                id=m.user_id,
                name=m.user.name if m.user else UNKNOWN_USER_NAME,
                email=m.user.email if m.user else None,
                image_url=m.user.image_url if m.user else None,
                role=m.role
            )
            for m in group.members
        ]
        expenses = self.repository.fetch_expenses(group_id=group.id)
        settlements = self.repository.fetch_settlements(group_id=group.id)

        return GroupExpensesResponse(
            group=_group_summary(group),
            members=members,
            expenses=[ExpenseResponse.model_validate(e) for e in expenses],
            settlements=[SettlementResponse.model_validate(s) for s in settlements],
            balances=self._group_member_balances(group),
            user_lookup_map={m.id: m for m in members}
        )

    # g. Personal history

    def get_expenses_between_users(self, user_id: int) -> ExpensesBetweenResponse:
        me = self.current_user()
        other = self.require_counterpart(me, user_id)
        expenses, settlements = self._personal_records_between(me, other)

        return ExpensesBetweenResponse(
            expenses=[ExpenseResponse.model_validate(e) for e in expenses],
            settlements=[SettlementResponse.model_validate(s) for s in settlements],
            other_user=_counterpart_info(other),
            balance=pair_balance(me.id, other.id, expenses, settlements)
        )

    # h. Spending statistics

    def _my_shares_this_year(self, me: User, now: Optional[datetime]) -> Tuple[int, List[Tuple[datetime, Decimal]]]:
        now = now or datetime.now()
        start = datetime(now.year, 1, 1)
        end = datetime(now.year + 1, 1, 1)
        expenses = self.repository.fetch_expenses(involving_user_id=me.id, start=start, end=end)

        shares = []
        for expense in expenses:
            split = find_split(expense, me.id)
            if split is not None:
                shares.append((expense.date, to_decimal(split.amount)))
        return now.year, shares

    def get_total_spent(self, now: Optional[datetime] = None) -> TotalSpent:
        """Sum of the current user's own shares this calendar year."""
        me = self.current_user()
        year, shares = self._my_shares_this_year(me, now)
        return TotalSpent(year=year, total=sum((amount for _, amount in shares), Decimal(0)))

    def get_monthly_spending(self, now: Optional[datetime] = None) -> List[MonthlySpending]:
        """Current user's shares this year bucketed by month, January first."""
        me = self.current_user()
        year, shares = self._my_shares_this_year(me, now)

        totals: Dict[datetime, Decimal] = {datetime(year, month, 1): Decimal(0) for month in range(1, 13)}
        for when, amount in shares:
            totals[datetime(when.year, when.month, 1)] += amount

        return [MonthlySpending(month=month, total=total) for month, total in sorted(totals.items())]


def _counterpart_info(user: User) -> CounterpartInfo:
    return CounterpartInfo(user_id=user.id, name=user.name, email=user.email, image_url=user.image_url)


def _group_summary(group: Group) -> GroupSummary:
    return GroupSummary(id=group.id, name=group.name, description=group.description)

"""
Ledger accumulation over already-fetched expenses and settlements.

Everything here is a pure function of its inputs: no session, no I/O.
Expenses are always folded in before settlements, so results do not depend
on the order records are passed in.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple
from splitledger.core.utils import to_decimal
from splitledger.models.expense import Expense
from splitledger.models.settlement import Settlement
from splitledger.services.netting import NettingMode, reduce_debt, net_balance, empty_matrix, normalize_pairwise
from splitledger.services.splits import find_split, is_outstanding, outstanding_amount, outstanding_shares

logger = logging.getLogger(__name__)


class LedgerEntry:
    """Directional accumulators between the perspective user and one counterpart."""

    def __init__(self, owed: Decimal = Decimal(0), owing: Decimal = Decimal(0)):
        self.owed = owed    # counterpart owes the perspective user
        self.owing = owing  # perspective user owes the counterpart

    @property
    def net(self) -> Decimal:
        return net_balance(self.owed, self.owing)

    def __eq__(self, other):
        if not isinstance(other, LedgerEntry):
            return NotImplemented
        return self.owed == other.owed and self.owing == other.owing

    def __repr__(self):
        return f"LedgerEntry(owed={self.owed}, owing={self.owing})"


def accumulate_ledger(
    perspective_id: int,
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
    mode: NettingMode
) -> Dict[int, LedgerEntry]:
    """
    Build counterpart id -> LedgerEntry for one perspective user.

    ``mode`` decides how settlements reduce the accumulators (see
    ``splitledger.services.netting``). Records that do not involve the
    perspective user are skipped.
    """
    ledger: Dict[int, LedgerEntry] = {}

    def entry(user_id: int) -> LedgerEntry:
        if user_id not in ledger:
            ledger[user_id] = LedgerEntry()
        return ledger[user_id]

    for expense in expenses:
        if expense.payer_id == perspective_id:
            for user_id, amount in outstanding_shares(expense, exclude_user_id=perspective_id):
                entry(user_id).owed += amount
            continue

        my_split = find_split(expense, perspective_id)
        if my_split is not None and is_outstanding(my_split):
            entry(expense.payer_id).owing += to_decimal(my_split.amount)

    for settlement in settlements:
        amount = to_decimal(settlement.amount)
        if settlement.payer_id == perspective_id:
            counterpart = entry(settlement.receiver_id)
            counterpart.owing = reduce_debt(counterpart.owing, amount, mode)
        elif settlement.receiver_id == perspective_id:
            counterpart = entry(settlement.payer_id)
            counterpart.owed = reduce_debt(counterpart.owed, amount, mode)

    return ledger


def pair_balance(
    perspective_id: int,
    counterpart_id: int,
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement]
) -> Decimal:
    """
    Signed balance between exactly two users, positive if the counterpart owes.

    No floor is applied: a settlement larger than the debt is a prepayment and
    pushes the balance past zero.
    """
    balance = Decimal(0)

    for expense in expenses:
        if expense.payer_id == perspective_id:
            balance += outstanding_amount(expense, counterpart_id)
        elif expense.payer_id == counterpart_id:
            balance -= outstanding_amount(expense, perspective_id)

    for settlement in settlements:
        amount = to_decimal(settlement.amount)
        if settlement.payer_id == perspective_id and settlement.receiver_id == counterpart_id:
            balance += amount
        elif settlement.payer_id == counterpart_id and settlement.receiver_id == perspective_id:
            balance -= amount

    return balance


def scope_balance(perspective_id: int, expenses: Iterable[Expense], settlements: Iterable[Settlement]) -> Decimal:
    """Unclamped signed balance of one user against everyone in a scope."""
    balance = Decimal(0)

    for expense in expenses:
        if expense.payer_id == perspective_id:
            for _, amount in outstanding_shares(expense, exclude_user_id=perspective_id):
                balance += amount
        else:
            balance -= outstanding_amount(expense, perspective_id)

    for settlement in settlements:
        if settlement.payer_id == perspective_id:
            balance += to_decimal(settlement.amount)
        elif settlement.receiver_id == perspective_id:
            balance -= to_decimal(settlement.amount)

    return balance


class GroupLedger:
    """Per-member totals plus the normalized pairwise debt matrix of a group."""

    def __init__(self, member_ids: List[int]):
        self.member_ids = list(member_ids)
        self.totals: Dict[int, Decimal] = {uid: Decimal(0) for uid in self.member_ids}
        self.matrix: Dict[int, Dict[int, Decimal]] = empty_matrix(self.member_ids)

    def owes(self, member_id: int) -> List[Tuple[int, Decimal]]:
        """(creditor_id, amount) pairs this member still owes."""
        return [
            (other, self.matrix[member_id][other])
            for other in self.member_ids
            if other != member_id and self.matrix[member_id][other] > 0
        ]

    def owed_by(self, member_id: int) -> List[Tuple[int, Decimal]]:
        """(debtor_id, amount) pairs that owe this member."""
        return [
            (other, self.matrix[other][member_id])
            for other in self.member_ids
            if other != member_id and self.matrix[other][member_id] > 0
        ]


def build_group_ledger(
    member_ids: Iterable[int],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement]
) -> GroupLedger:
    """
    Fold a group's records into totals and a pairwise matrix, then net each pair.

    Uses the symmetric strategy: settlements are subtracted from the raw cell
    with no floor and only afterwards is each pair collapsed to one direction.
    """
    group_ledger = GroupLedger(member_ids)
    members = set(group_ledger.member_ids)
    totals = group_ledger.totals
    matrix = group_ledger.matrix

    for expense in expenses:
        payer = expense.payer_id
        if payer not in members:
            logger.warning(f"Skipping expense {expense.id}: payer {payer} is not a group member")
            continue
        for debtor, amount in outstanding_shares(expense, exclude_user_id=payer):
            if debtor not in members:
                logger.warning(f"Skipping split of expense {expense.id}: user {debtor} is not a group member")
                continue
            totals[payer] += amount
            totals[debtor] -= amount
            matrix[debtor][payer] += amount

    for settlement in settlements:
        payer, receiver = settlement.payer_id, settlement.receiver_id
        if payer not in members or receiver not in members or payer == receiver:
            logger.warning(f"Skipping settlement {settlement.id}: parties are not both group members")
            continue
        amount = to_decimal(settlement.amount)
        totals[payer] += amount
        totals[receiver] -= amount
        matrix[payer][receiver] = reduce_debt(matrix[payer][receiver], amount, NettingMode.SYMMETRIC)

    normalize_pairwise(matrix, group_ledger.member_ids)
    return group_ledger

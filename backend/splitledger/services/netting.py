"""
Pairwise netting strategies.

Two policies, each named explicitly at its call site:

* ``CLAMPED``: a settlement reduces a directional debt but never below zero.
  Any excess is absorbed. Used for the "you owe / you are owed" figures on
  the dashboard and settlement pages.
* ``SYMMETRIC``: settlements are folded into the raw ledger without a floor,
  then every unordered member pair is collapsed to a single direction.
  Used for the group balance matrix.

With an overpaid settlement the two give different numbers.
"""
import enum
from decimal import Decimal
from typing import Dict, Iterable


class NettingMode(str, enum.Enum):
    """Netting policy selected by each aggregator."""
    CLAMPED = "clamped"
    SYMMETRIC = "symmetric"


def reduce_debt(current: Decimal, amount: Decimal, mode: NettingMode) -> Decimal:
    """Apply a settlement amount to one directional accumulator."""
    remaining = current - amount
    if mode == NettingMode.CLAMPED:
        return max(Decimal(0), remaining)
    return remaining


def net_balance(owed: Decimal, owing: Decimal) -> Decimal:
    """Signed net: positive means the counterpart owes the perspective user."""
    return owed - owing


def empty_matrix(member_ids: Iterable[int]) -> Dict[int, Dict[int, Decimal]]:
    """Zero debt cell for every ordered pair of distinct members."""
    ids = list(member_ids)
    return {a: {b: Decimal(0) for b in ids if b != a} for a in ids}


def normalize_pairwise(ledger: Dict[int, Dict[int, Decimal]], member_ids: Iterable[int]) -> Dict[int, Dict[int, Decimal]]:
    """
    Collapse bidirectional debts so each pair keeps at most one positive cell.

    ``ledger[a][b]`` is what ``a`` owes ``b``. Pairs are visited once each in
    sorted id order and both cells are always rewritten, so running this on an
    already normalized ledger changes nothing. Mutates and returns ``ledger``.
    """
    ids = sorted(set(member_ids))
    for i, a in enumerate(ids):
        for b in ids[i + 1:]:
            diff = ledger[a][b] - ledger[b][a]
            if diff > 0:
                ledger[a][b] = diff
                ledger[b][a] = Decimal(0)
            elif diff < 0:
                ledger[b][a] = -diff
                ledger[a][b] = Decimal(0)
            else:
                ledger[a][b] = Decimal(0)
                ledger[b][a] = Decimal(0)
    return ledger

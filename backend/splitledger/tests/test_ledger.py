"""
Tests for ledger accumulation, pair balances and the group matrix.
"""
import itertools
from decimal import Decimal
from splitledger.services.ledger import (
    LedgerEntry, accumulate_ledger, pair_balance, scope_balance, build_group_ledger
)
from splitledger.services.netting import NettingMode
from splitledger.tests.factories import expense, settlement, D

P, Q, R, S = 1, 2, 3, 4


def test_payer_is_owed_outstanding_splits():
    records = [expense(P, [(P, 30, True), (Q, 30, False), (R, 30, False)])]
    ledger = accumulate_ledger(P, records, [], NettingMode.CLAMPED)
    assert ledger == {Q: LedgerEntry(owed=D(30)), R: LedgerEntry(owed=D(30))}


def test_participant_owes_payer():
    records = [expense(Q, [(Q, 20, True), (P, 20, False)])]
    ledger = accumulate_ledger(P, records, [], NettingMode.CLAMPED)
    assert ledger == {Q: LedgerEntry(owing=D(20))}
    assert ledger[Q].net == D(-20)


def test_records_not_involving_perspective_are_skipped():
    records = [expense(Q, [(Q, 10, False), (R, 10, False)])]
    settlements = [settlement(Q, R, 5)]
    assert accumulate_ledger(P, records, settlements, NettingMode.CLAMPED) == {}


def test_paid_split_is_excluded_and_others_unaffected():
    unpaid = expense(P, [(Q, 40, False), (R, 40, False)])
    partly_paid = expense(P, [(Q, 40, True), (R, 40, False)])

    before = accumulate_ledger(P, [unpaid], [], NettingMode.CLAMPED)
    after = accumulate_ledger(P, [partly_paid], [], NettingMode.CLAMPED)

    assert before[Q].owed == D(40)
    assert Q not in after
    assert after[R] == before[R]


def test_clamped_settlement_floors_at_zero():
    records = [expense(Q, [(P, 50, False)])]
    settlements = [settlement(P, Q, 80)]
    ledger = accumulate_ledger(P, records, settlements, NettingMode.CLAMPED)
    assert ledger[Q].owing == Decimal(0)
    assert ledger[Q].net == Decimal(0)


def test_symmetric_settlement_is_not_floored():
    records = [expense(Q, [(P, 50, False)])]
    settlements = [settlement(P, Q, 80)]
    ledger = accumulate_ledger(P, records, settlements, NettingMode.SYMMETRIC)
    assert ledger[Q].owing == D(-30)


def test_received_settlement_reduces_owed():
    records = [expense(P, [(Q, 60, False)])]
    settlements = [settlement(Q, P, 25)]
    ledger = accumulate_ledger(P, records, settlements, NettingMode.CLAMPED)
    assert ledger[Q].owed == D(35)


def test_accumulation_is_order_independent():
    expenses = [
        expense(P, [(P, 10, True), (Q, 10, False), (R, 10, False)]),
        expense(Q, [(P, 25, False), (Q, 25, True)]),
        expense(R, [(P, 7, False), (S, 3, False)]),
        expense(P, [(S, 12, False)]),
    ]
    settlements = [settlement(P, Q, 30), settlement(R, P, 4), settlement(P, Q, 5), settlement(S, P, 20)]

    for mode in NettingMode:
        expected = accumulate_ledger(P, expenses, settlements, mode)
        for exp_order in itertools.permutations(expenses):
            for set_order in itertools.permutations(settlements):
                assert accumulate_ledger(P, exp_order, set_order, mode) == expected


def test_pair_balance_equal_split_settle_up():
    records = [expense(P, [(P, 50, True), (Q, 50, False)])]
    assert pair_balance(P, Q, records, []) == D(50)
    assert pair_balance(P, Q, records, [settlement(Q, P, 50)]) == Decimal(0)
    assert pair_balance(Q, P, records, []) == D(-50)


def test_pair_balance_is_unclamped():
    records = [expense(Q, [(P, 20, False)])]
    assert pair_balance(P, Q, records, [settlement(P, Q, 50)]) == D(30)


def test_pair_balance_ignores_other_parties():
    records = [expense(P, [(Q, 10, False), (R, 10, False)])]
    assert pair_balance(P, Q, records, [settlement(R, P, 10)]) == D(10)


def test_scope_balance():
    records = [
        expense(P, [(P, 30, True), (Q, 30, False), (R, 30, False)]),
        expense(Q, [(P, 15, False), (Q, 15, True)]),
    ]
    assert scope_balance(P, records, [settlement(P, Q, 5)]) == D(50)


def test_group_matrix_normalization():
    records = [expense(P, [(P, 30, True), (Q, 30, False), (R, 30, False)])]
    group = build_group_ledger([P, Q, R], records, [])

    assert group.matrix[Q][P] == D(30)
    assert group.matrix[R][P] == D(30)
    assert group.owes(Q) == [(P, D(30))]
    assert group.owed_by(P) == [(Q, D(30)), (R, D(30))]
    assert group.totals == {P: D(60), Q: D(-30), R: D(-30)}


def test_group_partial_settlement_is_folded_before_normalization():
    records = [expense(P, [(P, 30, True), (Q, 30, False), (R, 30, False)])]
    group = build_group_ledger([P, Q, R], records, [settlement(Q, P, 10)])

    assert group.owes(Q) == [(P, D(20))]
    assert group.matrix[P][Q] == Decimal(0)
    assert group.totals[P] == D(50)
    assert group.totals[Q] == D(-20)


def test_group_overpaid_settlement_flips_direction():
    records = [expense(P, [(Q, 30, False)])]
    group = build_group_ledger([P, Q], records, [settlement(Q, P, 50)])

    assert group.owes(Q) == []
    assert group.owes(P) == [(Q, D(20))]


def test_group_mutual_debts_are_netted():
    records = [
        expense(P, [(Q, 40, False)]),
        expense(Q, [(P, 15, False)]),
    ]
    group = build_group_ledger([P, Q], records, [])
    assert group.owes(Q) == [(P, D(25))]
    assert group.owes(P) == []


def test_group_skips_records_of_non_members():
    records = [expense(P, [(Q, 10, False), (S, 10, False)])]
    group = build_group_ledger([P, Q], records, [settlement(S, P, 5)])
    assert group.totals == {P: D(10), Q: D(-10)}
    assert group.owed_by(P) == [(Q, D(10))]

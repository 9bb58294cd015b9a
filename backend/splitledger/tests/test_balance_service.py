"""
Tests for the scope aggregators over a real session.
"""
import pytest
from datetime import datetime
from decimal import Decimal
from splitledger.core.exceptions import AuthenticationRequired, AuthorizationDenied, NotFound, ValidationFailed
from splitledger.models.group import GroupRole
from splitledger.services.balance_service import BalanceService
from splitledger.schemas.balance import UserSettlementData, GroupSettlementData
from splitledger.tests.factories import add_user, add_group, add_expense, add_settlement, D


def test_unauthenticated_calls_fail(repository):
    service = BalanceService(repository, lambda: None)
    with pytest.raises(AuthenticationRequired):
        service.compute_dashboard_balances()
    with pytest.raises(AuthenticationRequired):
        service.compute_group_balances(1)


def test_dashboard_partition(db, service_for, alice, bob, carol):
    add_expense(db, alice, [(alice, 30, True), (bob, 30, False)])
    add_expense(db, carol, [(carol, 20, True), (alice, 20, False)])

    result = service_for(alice).compute_dashboard_balances()

    assert result.you_are_owed == D(30)
    assert result.you_owe == D(20)
    assert result.total_balance == D(10)
    assert [(i.user_id, i.amount) for i in result.owed_by] == [(bob.id, D(30))]
    assert [(i.user_id, i.amount) for i in result.owe] == [(carol.id, D(20))]
    assert result.owed_by[0].name == "Bob"


def test_dashboard_excludes_zero_nets_and_group_records(db, service_for, alice, bob, carol):
    add_expense(db, alice, [(bob, 40, False)])
    add_settlement(db, bob, alice, 40)
    group = add_group(db, "Trip", alice, [carol])
    add_expense(db, alice, [(carol, 99, False)], group=group)

    result = service_for(alice).compute_dashboard_balances()

    assert result.owed_by == []
    assert result.owe == []
    assert result.total_balance == Decimal(0)


def test_dashboard_sorts_descending_and_clamps_overpayment(db, service_for, alice, bob, carol):
    dave = add_user(db, "Dave")
    add_expense(db, alice, [(bob, 10, False), (carol, 50, False)])
    add_expense(db, dave, [(alice, 5, False)])
    add_settlement(db, alice, dave, 25)  # overpays Dave by 20

    result = service_for(alice).compute_dashboard_balances()

    assert [i.user_id for i in result.owed_by] == [carol.id, bob.id]
    assert result.owe == []
    assert result.you_owe == Decimal(0)
    assert result.you_are_owed == D(60)


def test_person_balance_equal_split_settle_up(db, service_for, alice, bob):
    add_expense(db, alice, [(alice, 50, True), (bob, 50, False)])

    before = service_for(alice).compute_person_balance(bob.id)
    assert before.net_balance == D(50)
    assert before.you_are_owed == D(50)
    assert before.you_owe == Decimal(0)

    add_settlement(db, bob, alice, 50)

    after = service_for(alice).compute_person_balance(bob.id)
    assert after.net_balance == Decimal(0)
    assert after.counterpart.user_id == bob.id


def test_person_balance_prepayment_is_not_clamped(db, service_for, alice, bob):
    add_expense(db, bob, [(alice, 20, False)])
    add_settlement(db, alice, bob, 50)

    result = service_for(alice).compute_person_balance(bob.id)

    assert result.net_balance == D(30)
    assert result.you_owe == Decimal(0)


def test_person_balance_ignores_third_parties(db, service_for, alice, bob, carol):
    add_expense(db, alice, [(bob, 10, False), (carol, 10, False)])
    add_expense(db, carol, [(alice, 70, False)])

    assert service_for(alice).compute_person_balance(bob.id).net_balance == D(10)


def test_person_balance_errors(service_for, alice):
    service = service_for(alice)
    with pytest.raises(NotFound):
        service.compute_person_balance(999)
    with pytest.raises(ValidationFailed):
        service.compute_person_balance(alice.id)


def test_group_matrix_scenario(db, service_for, alice, bob, carol):
    group = add_group(db, "Flat", alice, [bob, carol])
    add_expense(db, alice, [(alice, 30, True), (bob, 30, False), (carol, 30, False)], group=group)

    balances = {b.id: b for b in service_for(bob).compute_group_balances(group.id)}

    assert [(o.to_id, o.amount) for o in balances[bob.id].owes] == [(alice.id, D(30))]
    assert [(o.from_id, o.amount) for o in balances[alice.id].owed_by] == [(bob.id, D(30)), (carol.id, D(30))]
    assert balances[alice.id].total_balance == D(60)
    assert balances[alice.id].role == GroupRole.ADMIN
    assert balances[carol.id].role == GroupRole.MEMBER


def test_group_partial_settlement(db, service_for, alice, bob, carol):
    group = add_group(db, "Flat", alice, [bob, carol])
    add_expense(db, alice, [(alice, 30, True), (bob, 30, False), (carol, 30, False)], group=group)
    add_settlement(db, bob, alice, 10, group=group)

    balances = {b.id: b for b in service_for(alice).compute_group_balances(group.id)}

    assert [(o.to_id, o.amount) for o in balances[bob.id].owes] == [(alice.id, D(20))]
    assert balances[bob.id].total_balance == D(-20)


def test_group_balances_authorization(db, service_for, alice, bob, carol):
    group = add_group(db, "Pair", alice, [bob])
    with pytest.raises(AuthorizationDenied):
        service_for(carol).compute_group_balances(group.id)
    with pytest.raises(NotFound):
        service_for(carol).compute_group_balances(12345)


def test_user_settlement_data_is_clamped(db, service_for, alice, bob):
    add_expense(db, bob, [(alice, 50, False)])
    add_settlement(db, alice, bob, 80)

    data = service_for(alice).get_settlement_data("user", bob.id)

    assert isinstance(data, UserSettlementData)
    assert data.you_owe == Decimal(0)
    assert data.net_balance == Decimal(0)


def test_group_settlement_data(db, service_for, alice, bob, carol):
    group = add_group(db, "Flat", alice, [bob, carol])
    add_expense(db, alice, [(bob, 30, False), (carol, 30, False)], group=group)
    add_expense(db, carol, [(alice, 12, False)], group=group)
    add_settlement(db, bob, alice, 45, group=group)

    data = service_for(alice).get_settlement_data("group", group.id)

    assert isinstance(data, GroupSettlementData)
    figures = {b.user_id: b for b in data.balances}
    assert set(figures) == {bob.id, carol.id}
    assert figures[bob.id].you_are_owed == Decimal(0)
    assert figures[carol.id].you_are_owed == D(30)
    assert figures[carol.id].you_owe == D(12)
    assert figures[carol.id].net_balance == D(18)


def test_settlement_data_rejects_unknown_entity_type(service_for, alice):
    with pytest.raises(ValidationFailed):
        service_for(alice).get_settlement_data("team", 1)


def test_user_groups_carry_scalar_balance(db, service_for, alice, bob, carol):
    group = add_group(db, "Flat", alice, [bob, carol])
    add_expense(db, bob, [(alice, 25, False), (carol, 25, False)], group=group)
    add_settlement(db, alice, bob, 40, group=group)
    add_group(db, "Other", carol, [bob])

    groups = service_for(alice).get_user_groups()

    assert [(g.name, g.member_count) for g in groups] == [("Flat", 3)]
    assert groups[0].balance == D(15)


def test_group_expenses_view(db, service_for, alice, bob):
    group = add_group(db, "Pair", alice, [bob])
    add_expense(db, alice, [(alice, 10, True), (bob, 10, False)], group=group)
    add_settlement(db, bob, alice, 4, group=group)

    view = service_for(bob).get_group_expenses(group.id)

    assert view.group.name == "Pair"
    assert len(view.expenses) == 1
    assert len(view.settlements) == 1
    assert set(view.user_lookup_map) == {alice.id, bob.id}
    assert {b.id: b.total_balance for b in view.balances} == {alice.id: D(6), bob.id: D(-6)}


def test_expenses_between_users(db, service_for, alice, bob, carol):
    add_expense(db, alice, [(bob, 15, False)], date=datetime(2024, 3, 1))
    add_expense(db, bob, [(alice, 5, False)], date=datetime(2024, 4, 1))
    add_expense(db, carol, [(alice, 9, False), (bob, 9, False)])

    view = service_for(alice).get_expenses_between_users(bob.id)

    assert [e.amount for e in view.expenses] == [D(5), D(15)]
    assert view.balance == D(10)
    assert view.other_user.name == "Bob"


def test_spending_statistics(db, service_for, alice, bob):
    add_expense(db, alice, [(alice, 20, True), (bob, 20, False)], date=datetime(2024, 2, 10))
    add_expense(db, bob, [(alice, 7, False)], date=datetime(2024, 2, 20))
    add_expense(db, bob, [(alice, 3, False)], date=datetime(2024, 11, 5))
    add_expense(db, bob, [(alice, 100, False)], date=datetime(2023, 12, 31))

    service = service_for(alice)
    now = datetime(2024, 6, 1)

    assert service.get_total_spent(now=now).total == D(30)
    monthly = service.get_monthly_spending(now=now)
    assert len(monthly) == 12
    assert monthly[0].month == datetime(2024, 1, 1)
    assert monthly[1].total == D(27)
    assert monthly[10].total == D(3)
    assert sum(m.total for m in monthly) == D(30)

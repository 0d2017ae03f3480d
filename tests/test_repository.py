"""
Test suite for the repository.
Covers round-trips, not-found signals and how failures surface.
"""

import threading

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from entities import Expense, ExpenseStatus, Goal, Income
from errors import PersistenceError
from models import IncomeEntity
from repository import Repository

NOW = datetime(2026, 10, 15, 12, 0)


def broken_session(**failures):
    session = MagicMock()
    session.info = {}
    for name in failures:
        getattr(session, name).side_effect = OperationalError('stmt', {}, Exception('disk I/O error'))
    return session


class TestCreateAndFind:

    def test_create_then_get(self, repo):
        income = Income(amount=Decimal('1500.25'), description='Salário', category='Trabalho', date=NOW)
        repo.create(income)
        found = repo.get(Income, income.id)
        assert found == income
        assert isinstance(found.amount, Decimal)

    def test_money_keeps_exact_decimals(self, repo):
        income = Income(amount=Decimal('0.1') + Decimal('0.2'), description='Troco', date=NOW)
        repo.create(income)
        assert repo.get(Income, income.id).amount == Decimal('0.3')

    def test_find_all_default_sort(self, repo):
        older = Income(amount=Decimal('1'), description='old', date=NOW - timedelta(days=3))
        newer = Income(amount=Decimal('2'), description='new', date=NOW)
        repo.create(older)
        repo.create(newer)
        assert [i.description for i in repo.find_all(Income)] == ['new', 'old']
        assert [i.description for i in repo.find_all(Income, descending=False)] == ['old', 'new']

    def test_goals_sorted_by_name(self, repo):
        for name in ('Viagem', 'Carro', 'Reserva'):
            repo.create(Goal(name=name, target_amount=Decimal('100')))
        assert [g.name for g in repo.find_all(Goal)] == ['Carro', 'Reserva', 'Viagem']

    def test_find_by_status(self, repo):
        paid = Expense(Decimal('10'), 'Luz', 'Casa', NOW, ExpenseStatus.PAID)
        unpaid = Expense(Decimal('20'), 'Água', 'Casa', NOW)
        repo.create(paid)
        repo.create(unpaid)
        assert [e.id for e in repo.find_by(Expense, status=ExpenseStatus.PAID)] == [paid.id]
        assert [e.id for e in repo.unpaid_expenses()] == [unpaid.id]

    def test_find_by_criteria(self, repo):
        repo.create(Income(amount=Decimal('5'), description='in range', date=NOW))
        repo.create(Income(amount=Decimal('5'), description='too old', date=NOW - timedelta(days=60)))
        found = repo.find_by(Income, IncomeEntity.date >= NOW - timedelta(days=1))
        assert [i.description for i in found] == ['in range']

    def test_incomes_between_excludes_end(self, repo):
        repo.create(Income(amount=Decimal('5'), description='edge', date=datetime(2026, 11, 1)))
        assert repo.incomes_between(datetime(2026, 10, 1), datetime(2026, 11, 1)) == []

    def test_returned_models_are_detached(self, repo):
        goal = Goal(name='Carro', target_amount=Decimal('100'))
        repo.create(goal)
        copy = repo.get(Goal, goal.id)
        copy.name = 'Changed'
        assert repo.get(Goal, goal.id).name == 'Carro'


class TestUpdateAndDelete:

    def test_update_round_trip(self, repo):
        expense = Expense(Decimal('99.90'), 'Academia', 'Saúde', NOW)
        repo.create(expense)
        expense.amount = Decimal('120.00')
        expense.description = 'Academia anual'
        expense.status = ExpenseStatus.PAID
        expense.paid_date = NOW
        assert repo.update(expense) is True
        stored = repo.find_by(Expense, id=expense.id)
        assert stored == [expense]

    def test_update_goal_can_overwrite_accumulated(self, repo):
        goal = Goal(name='Carro', target_amount=Decimal('100'), accumulated_amount=Decimal('60'))
        repo.create(goal)
        goal.accumulated_amount = Decimal('10')
        repo.update(goal)
        assert repo.get(Goal, goal.id).accumulated_amount == Decimal('10')

    def test_update_missing_returns_false(self, repo):
        ghost = Income(amount=Decimal('1'), description='ghost', date=NOW)
        assert repo.update(ghost) is False
        assert repo.find_all(Income) == []

    def test_delete_then_find_is_empty(self, repo):
        goal = Goal(name='Viagem', target_amount=Decimal('1000'))
        repo.create(goal)
        assert repo.delete(Goal, goal.id) is True
        assert repo.find_by(Goal, id=goal.id) == []

    def test_delete_missing_returns_false(self, repo):
        assert repo.delete(Expense, 'does-not-exist') is False

    def test_save_without_changes_is_noop(self, repo):
        repo.session = MagicMock(new=[], dirty=[], deleted=[])
        repo.save()
        repo.session.commit.assert_not_called()

    def test_save_commits_pending_changes(self, repo, ctx):
        entity = IncomeEntity()
        entity.update_from(Income(amount=Decimal('3'), description='pending', date=NOW))
        repo.session.add(entity)
        assert repo.has_changes()
        repo.save()
        assert not repo.has_changes()
        assert len(repo.find_all(Income)) == 1


class TestFailures:

    def test_read_failure_degrades_to_empty(self, caplog):
        session = broken_session(query=True)
        repo = Repository(session)
        assert repo.find_all(Income) == []
        assert repo.get(Goal, 'x') is None
        session.rollback.assert_called()
        assert 'query for Income failed' in caplog.text

    def test_read_failure_inside_transaction_raises(self):
        session = broken_session(query=True)
        repo = Repository(session)
        with pytest.raises(PersistenceError):
            with repo.transaction():
                repo.find_all(Income)
        session.commit.assert_not_called()
        session.rollback.assert_called()

    def test_write_failure_raises(self):
        session = broken_session(commit=True)
        repo = Repository(session)
        with pytest.raises(PersistenceError):
            repo.create(Income(amount=Decimal('1'), description='x', date=NOW))
        session.rollback.assert_called_once()

    def test_update_lookup_failure_raises(self):
        repo = Repository(broken_session(get=True))
        with pytest.raises(PersistenceError):
            repo.update(Goal(name='x', target_amount=Decimal('1')))


class TestTransaction:

    def test_commits_once_at_the_end(self, repo):
        first = Income(amount=Decimal('1'), description='a', date=NOW)
        second = Income(amount=Decimal('2'), description='b', date=NOW)
        with repo.transaction():
            repo.create(first)
            repo.create(second)
        assert len(repo.find_all(Income)) == 2

    def test_error_inside_rolls_everything_back(self, repo):
        income = Income(amount=Decimal('1'), description='a', date=NOW)
        with pytest.raises(RuntimeError):
            with repo.transaction():
                repo.create(income)
                raise RuntimeError('boom')
        assert repo.find_all(Income) == []

    def test_open_transaction_in_another_thread_does_not_defer_commits(self, ctx):
        repo = ctx.repository
        entered, release = threading.Event(), threading.Event()

        def hold_transaction():
            with ctx.app_context():
                with repo.transaction():
                    entered.set()
                    release.wait(5)

        worker = threading.Thread(target=hold_transaction)
        worker.start()
        assert entered.wait(5)
        income = Income(amount=Decimal('7'), description='concurrent', date=NOW)
        try:
            repo.create(income)
        finally:
            release.set()
            worker.join(5)

        repo.session.remove()
        assert repo.get(Income, income.id) == income

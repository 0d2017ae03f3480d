"""
Test suite for reminder planning and scheduling.
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from clock import FixedClock
from entities import Expense, ExpenseStatus
from notifications import (
    InMemoryScheduler,
    NotificationPlanner,
    Reminder,
    plan_reminders,
    reminder_ids,
)

NOW = datetime(2026, 10, 15, 12, 0)


def make_expense(days, status=ExpenseStatus.UNPAID, id='abc'):
    return Expense(Decimal('1234.5'), 'Aluguel', 'Casa', NOW + timedelta(days=days), status, id=id)


@pytest.fixture
def scheduler():
    scheduler = InMemoryScheduler()
    scheduler.request_authorization()
    return scheduler


@pytest.fixture
def planner(scheduler):
    return NotificationPlanner(scheduler, FixedClock(NOW))


class TestPlanReminders:

    def test_due_in_five_days_gets_both(self):
        reminders = plan_reminders(make_expense(5), NOW)
        assert [r.identifier for r in reminders] == ['abc-3dias', 'abc-vencimento']
        assert reminders[0].fire_at == NOW + timedelta(days=2)
        assert reminders[1].fire_at == NOW + timedelta(days=5)

    def test_due_tomorrow_gets_only_due_date(self):
        reminders = plan_reminders(make_expense(1), NOW)
        assert [r.identifier for r in reminders] == ['abc-vencimento']

    def test_past_due_gets_none(self):
        assert plan_reminders(make_expense(-1), NOW) == []

    def test_paid_gets_none(self):
        assert plan_reminders(make_expense(10, ExpenseStatus.PAID), NOW) == []

    def test_body_carries_description_and_amount(self):
        reminder = plan_reminders(make_expense(1), NOW)[0]
        assert reminder.title == 'Despesa vence hoje!'
        assert reminder.body == 'Aluguel - R$ 1.234,50'

    def test_ids_are_deterministic(self):
        assert reminder_ids('xyz') == ['xyz-3dias', 'xyz-vencimento']


class TestScheduler:

    def test_requires_authorization(self):
        from errors import NotificationError
        scheduler = InMemoryScheduler()
        with pytest.raises(NotificationError):
            scheduler.add(Reminder('a', 't', 'b', NOW))

    def test_pop_due_delivers_once(self, scheduler):
        scheduler.add(Reminder('early', 't', 'b', NOW - timedelta(minutes=1)))
        scheduler.add(Reminder('later', 't', 'b', NOW + timedelta(days=1)))
        assert [r.identifier for r in scheduler.pop_due(NOW)] == ['early']
        assert scheduler.pop_due(NOW) == []
        assert [r.identifier for r in scheduler.pending()] == ['later']


class TestPlanner:

    def test_schedule_replaces_previous(self, planner, scheduler):
        expense = make_expense(5)
        planner.schedule(expense)
        expense.due_date = NOW + timedelta(days=1)
        planner.schedule(expense)
        pending = scheduler.pending()
        assert [r.identifier for r in pending] == ['abc-vencimento']
        assert pending[0].fire_at == NOW + timedelta(days=1)

    def test_paying_clears_reminders(self, planner, scheduler):
        expense = make_expense(5)
        planner.schedule(expense)
        planner.schedule(expense.mark_paid(NOW))
        assert scheduler.pending() == []

    def test_cancel(self, planner, scheduler):
        planner.schedule(make_expense(5))
        planner.schedule(make_expense(5, id='other'))
        planner.cancel('abc')
        assert {r.identifier for r in scheduler.pending()} == {'other-3dias', 'other-vencimento'}
        planner.cancel_all()
        assert scheduler.pending() == []

    def test_rejected_reminders_are_logged_not_raised(self, caplog):
        planner = NotificationPlanner(InMemoryScheduler(), FixedClock(NOW))
        assert planner.schedule(make_expense(5)) == []
        assert 'not authorized' in caplog.text

    def test_refresh_all_plans_unpaid_expenses(self, repo, planner, scheduler):
        repo.create(make_expense(5, id='unpaid'))
        repo.create(make_expense(5, ExpenseStatus.PAID, id='paid'))
        assert planner.refresh_all(repo) == 2
        assert {r.identifier for r in scheduler.pending()} == {'unpaid-3dias', 'unpaid-vencimento'}

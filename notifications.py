"""
Expense reminders.

``plan_reminders`` decides what to schedule for one expense. The planner
hands those to a scheduler, replacing whatever was pending for that expense
under the same identifiers. Scheduler failures are logged and dropped.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from entities import ExpenseStatus
from errors import NotificationError
from formatting import format_number

logger = logging.getLogger(__name__)

EARLY_SUFFIX = '-3dias'
DUE_SUFFIX = '-vencimento'
EARLY_NOTICE = timedelta(days=3)


@dataclass(frozen=True)
class Reminder:
    identifier: str
    title: str
    body: str
    fire_at: datetime


def reminder_ids(expense_id):
    return [f"{expense_id}{EARLY_SUFFIX}", f"{expense_id}{DUE_SUFFIX}"]


def plan_reminders(expense, now):
    if expense.status is not ExpenseStatus.UNPAID:
        return []

    body = f"{expense.description} - R$ {format_number(expense.amount)}"
    early_id, due_id = reminder_ids(expense.id)
    reminders = []

    early = expense.due_date - EARLY_NOTICE
    if early > now:
        reminders.append(Reminder(early_id, 'Despesa vence em 3 dias', body, early))
    if expense.due_date > now:
        reminders.append(Reminder(due_id, 'Despesa vence hoje!', body, expense.due_date))
    return reminders


class InMemoryScheduler:
    """Pending reminders held by the running process.

    Nothing is accepted before ``request_authorization``. Reminders are
    delivered by ``pop_due``, which the app calls on each request.
    """

    def __init__(self):
        self.authorized = False
        self._pending = {}

    def request_authorization(self):
        self.authorized = True
        return self.authorized

    def add(self, reminder):
        if not self.authorized:
            raise NotificationError("notifications are not authorized")
        self._pending[reminder.identifier] = reminder

    def cancel(self, identifiers):
        for identifier in identifiers:
            self._pending.pop(identifier, None)

    def cancel_all(self):
        self._pending.clear()

    def pending(self):
        return sorted(self._pending.values(), key=lambda r: r.fire_at)

    def pop_due(self, now):
        due = [r for r in self.pending() if r.fire_at <= now]
        self.cancel(r.identifier for r in due)
        return due


class NotificationPlanner:

    def __init__(self, scheduler, clock):
        self.scheduler = scheduler
        self.clock = clock

    def schedule(self, expense):
        """Replace the reminders of ``expense``; returns what was accepted."""
        self.cancel(expense.id)
        accepted = []
        for reminder in plan_reminders(expense, self.clock.now()):
            try:
                self.scheduler.add(reminder)
            except NotificationError as exc:
                logger.warning("reminder %s not scheduled: %s", reminder.identifier, exc)
                continue
            accepted.append(reminder)
        return accepted

    def cancel(self, expense_id):
        self.scheduler.cancel(reminder_ids(expense_id))

    def cancel_all(self):
        self.scheduler.cancel_all()

    def refresh_all(self, repository):
        count = 0
        for expense in repository.unpaid_expenses():
            count += len(self.schedule(expense))
        logger.info("%d reminders scheduled", count)
        return count

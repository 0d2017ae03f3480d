"""
In-memory value types for the ledger.

These are detached copies of what the repository stores: changing one does
nothing until it is passed back to ``Repository.update``. No validation is
done here; the forms decide what is acceptable.
"""

import enum
import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

DEFAULT_GOAL_COLOR = '#007AFF'
DUE_SOON_DAYS = 3


def new_id():
    return str(uuid.uuid4())


def whole_days_between(start, end):
    """Whole days from ``start`` to ``end``, truncated toward zero."""
    delta = end - start
    days = delta.total_seconds() / 86400
    return int(days)


class ExpenseStatus(enum.Enum):
    PAID = 'Pago'
    UNPAID = 'Não Pago'
    # Kept so rows written with it still load; nothing assigns it.
    LATE = 'Atrasado'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        for status in cls:
            if value in (status.value, status.name):
                return status
        return cls.UNPAID


@dataclass
class Income:
    amount: Decimal
    description: str
    date: datetime = field(default_factory=datetime.now)
    category: Optional[str] = None
    goal_id: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class Expense:
    amount: Decimal
    description: str
    category: str
    due_date: datetime
    status: ExpenseStatus = ExpenseStatus.UNPAID
    goal_id: Optional[str] = None
    paid_date: Optional[datetime] = None
    id: str = field(default_factory=new_id)

    @property
    def is_paid(self):
        return self.status is ExpenseStatus.PAID

    def is_overdue(self, now=None):
        now = now or datetime.now()
        return self.status is ExpenseStatus.UNPAID and self.due_date < now

    def is_due_soon(self, now=None):
        if self.status is not ExpenseStatus.UNPAID:
            return False
        days = whole_days_between(now or datetime.now(), self.due_date)
        return 0 <= days <= DUE_SOON_DAYS

    def mark_paid(self, when=None):
        return replace(self, status=ExpenseStatus.PAID, paid_date=when or datetime.now())


@dataclass
class Goal:
    name: str
    target_amount: Decimal
    accumulated_amount: Decimal = Decimal('0')
    deadline: Optional[datetime] = None
    description: Optional[str] = None
    color: str = DEFAULT_GOAL_COLOR
    id: str = field(default_factory=new_id)

    @property
    def progress(self):
        """Share of the target already saved, between 0.0 and 1.0."""
        if self.target_amount <= 0:
            return 0.0
        ratio = float(self.accumulated_amount) / float(self.target_amount)
        return min(max(ratio, 0.0), 1.0)

    @property
    def percent(self):
        return math.floor(self.progress * 100)

    @property
    def remaining(self):
        return max(self.target_amount - self.accumulated_amount, Decimal('0'))

    @property
    def is_complete(self):
        return self.accumulated_amount >= self.target_amount

    def days_remaining(self, now=None):
        if self.deadline is None:
            return None
        return whole_days_between(now or datetime.now(), self.deadline)

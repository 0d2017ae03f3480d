"""
Derived financial metrics.

Everything here is recomputed from repository queries on each call; nothing
is cached between requests. Functions that depend on "this month" take a
clock so tests can pin the date.
"""

from collections import namedtuple
from decimal import Decimal

from clock import add_months, month_bounds
from entities import Expense, ExpenseStatus, Goal, Income

CategoryShare = namedtuple('CategoryShare', ['category', 'amount', 'percent'])
Transaction = namedtuple('Transaction', ['kind', 'description', 'amount', 'date'])
ExpenseTotals = namedtuple('ExpenseTotals', ['total', 'paid', 'pending'])

INCOME = 'income'
EXPENSE = 'expense'


def total(records):
    return sum((record.amount for record in records), Decimal('0'))


def balance(repo):
    """All income minus the expenses already paid."""
    incomes = repo.find_all(Income)
    paid = repo.find_by(Expense, status=ExpenseStatus.PAID)
    return total(incomes) - total(paid)


def month_incomes(repo, clock):
    return repo.incomes_between(*month_bounds(clock.now()))


def month_expenses(repo, clock):
    return repo.expenses_due_between(*month_bounds(clock.now()))


def monthly_income_total(repo, clock):
    return total(month_incomes(repo, clock))


def monthly_expense_total(repo, clock):
    return total(month_expenses(repo, clock))


def category_breakdown(repo, clock):
    expenses = month_expenses(repo, clock)
    month_total = total(expenses)
    if month_total <= 0:
        return []

    per_category = {}
    for expense in expenses:
        per_category[expense.category] = per_category.get(expense.category, Decimal('0')) + expense.amount

    return [
        CategoryShare(category, amount, float(amount / month_total * 100))
        for category, amount in sorted(per_category.items())
    ]


def trailing_monthly_series(repo, clock, months=12):
    """Income per calendar month, oldest first and the current month last."""
    current_start, _ = month_bounds(clock.now())
    incomes = repo.find_all(Income)
    series = []
    for offset in range(months - 1, -1, -1):
        start = add_months(current_start, -offset)
        end = add_months(start, 1)
        series.append(float(total(i for i in incomes if start <= i.date < end)))
    return series


def recent_transactions(repo, limit=10):
    rows = [Transaction(INCOME, i.description, i.amount, i.date) for i in repo.find_all(Income)]
    rows.extend(Transaction(EXPENSE, e.description, e.amount, e.due_date) for e in repo.find_all(Expense))
    rows.sort(key=lambda row: row.date, reverse=True)
    return rows[:limit]


def _matches(text, search):
    return not search or search.casefold() in (text or '').casefold()


def filter_incomes(incomes, search='', category=None):
    found = [
        i for i in incomes
        if _matches(i.description, search) and (not category or i.category == category)
    ]
    return sorted(found, key=lambda i: i.date, reverse=True)


def filter_expenses(expenses, search='', status=None, category=None):
    if status:
        status = ExpenseStatus.parse(status)
    found = [
        e for e in expenses
        if _matches(e.description, search)
        and (status is None or e.status is status)
        and (not category or e.category == category)
    ]
    return sorted(found, key=lambda e: e.due_date, reverse=True)


def filter_goals(goals, search=''):
    found = [g for g in goals if _matches(g.name, search)]
    return sorted(found, key=lambda g: g.progress, reverse=True)


def categories_of(records):
    return sorted({r.category for r in records if r.category})


def expense_totals(expenses):
    return ExpenseTotals(
        total=total(expenses),
        paid=total(e for e in expenses if e.status is ExpenseStatus.PAID),
        pending=total(e for e in expenses if e.status is ExpenseStatus.UNPAID),
    )


def goal_overview(goals):
    target = sum((g.target_amount for g in goals), Decimal('0'))
    accumulated = sum((g.accumulated_amount for g in goals), Decimal('0'))
    return {
        'goals': filter_goals(goals),
        'completed': [g for g in goals if g.is_complete],
        'in_progress': [g for g in goals if not g.is_complete],
        'total_target': target,
        'total_accumulated': accumulated,
        'overall_progress': float(accumulated / target) if target > 0 else 0.0,
    }


def dashboard_summary(repo, clock, recent_limit=10):
    now = clock.now()
    expenses = repo.find_all(Expense)
    return {
        'balance': balance(repo),
        'month_income': monthly_income_total(repo, clock),
        'month_expense': monthly_expense_total(repo, clock),
        'breakdown': category_breakdown(repo, clock),
        'series': trailing_monthly_series(repo, clock),
        'series_labels': [add_months(now, -offset) for offset in range(11, -1, -1)],
        'recent': recent_transactions(repo, recent_limit),
        'goals': repo.find_all(Goal),
        'overdue': [e for e in expenses if e.is_overdue(now)],
        'due_soon': [e for e in expenses if e.is_due_soon(now)],
    }

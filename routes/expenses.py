from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

import aggregation
from entities import Expense, ExpenseStatus, Goal
from view_utils import handles_ledger_errors, parse_amount, parse_date, require_text

expenses_bp = Blueprint('expenses', __name__, url_prefix='/expenses')


def expense_from_form(form, existing=None):
    status = ExpenseStatus.parse(form.get('status') or ExpenseStatus.UNPAID)
    fields = dict(
        description=require_text(form.get('description'), 'Descrição'),
        amount=parse_amount(form.get('amount')),
        category=require_text(form.get('category'), 'Categoria'),
        due_date=parse_date(form.get('due_date'), 'Vencimento'),
        status=status,
        goal_id=form.get('goal_id') or None,
    )
    if existing is None:
        expense = Expense(**fields)
    else:
        for name, value in fields.items():
            setattr(existing, name, value)
        expense = existing
    if status is ExpenseStatus.PAID and expense.paid_date is None:
        expense.paid_date = current_app.clock.now()
    elif status is not ExpenseStatus.PAID:
        expense.paid_date = None
    return expense


@expenses_bp.route('/')
def index():
    repo = current_app.repository
    now = current_app.clock.now()
    expenses = repo.find_all(Expense)
    search = request.args.get('q', '')
    status = request.args.get('status') or None
    category = request.args.get('category') or None
    return render_template(
        'expenses.html',
        expenses=aggregation.filter_expenses(expenses, search, status, category),
        categories=aggregation.categories_of(expenses),
        totals=aggregation.expense_totals(expenses),
        overdue=[e for e in expenses if e.is_overdue(now)],
        due_soon=[e for e in expenses if e.is_due_soon(now)],
        statuses=list(ExpenseStatus),
        goals=repo.find_all(Goal),
        search=search,
        status=status,
        category=category,
    )


@expenses_bp.route('/add', methods=['POST'])
@handles_ledger_errors('expenses.index', 'adicionar a despesa')
def add_expense():
    expense = expense_from_form(request.form)
    current_app.repository.create(expense)
    current_app.planner.schedule(expense)
    return redirect(url_for('expenses.index'))


@expenses_bp.route('/edit/<id>', methods=['POST'])
@handles_ledger_errors('expenses.index', 'atualizar a despesa')
def edit_expense(id):
    repo = current_app.repository
    expense = repo.get(Expense, id)
    if expense is None:
        return "Despesa não encontrada", 404
    expense = expense_from_form(request.form, expense)
    if not repo.update(expense):
        return "Despesa não encontrada", 404
    current_app.planner.schedule(expense)
    return redirect(url_for('expenses.index'))


@expenses_bp.route('/pay/<id>', methods=['POST'])
@handles_ledger_errors('expenses.index', 'pagar a despesa')
def pay_expense(id):
    repo = current_app.repository
    expense = repo.get(Expense, id)
    if expense is None:
        return "Despesa não encontrada", 404
    paid = expense.mark_paid(current_app.clock.now())
    repo.update(paid)
    current_app.planner.cancel(paid.id)
    return redirect(url_for('expenses.index'))


@expenses_bp.route('/delete/<id>', methods=['POST'])
@handles_ledger_errors('expenses.index', 'excluir a despesa')
def delete_expense(id):
    if not current_app.repository.delete(Expense, id):
        flash("Esta despesa já havia sido excluída", 'info')
    current_app.planner.cancel(id)
    return redirect(url_for('expenses.index'))

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

import aggregation
from entities import Goal, Income
from view_utils import handles_ledger_errors, parse_amount, parse_date, require_text

income_bp = Blueprint('income', __name__, url_prefix='/income')


def income_from_form(form, existing=None):
    description = require_text(form.get('description'), 'Descrição')
    amount = parse_amount(form.get('amount'))
    fields = dict(
        amount=amount,
        description=description,
        category=(form.get('category') or '').strip() or None,
        date=parse_date(form.get('date'), 'Data', required=False) or current_app.clock.now(),
    )
    if existing is None:
        return Income(goal_id=form.get('goal_id') or None, **fields)
    for name, value in fields.items():
        setattr(existing, name, value)
    return existing


@income_bp.route('/')
def index():
    repo = current_app.repository
    incomes = repo.find_all(Income)
    search = request.args.get('q', '')
    category = request.args.get('category') or None
    return render_template(
        'income.html',
        incomes=aggregation.filter_incomes(incomes, search, category),
        categories=aggregation.categories_of(incomes),
        total=aggregation.total(incomes),
        goals=repo.find_all(Goal),
        search=search,
        category=category,
    )


@income_bp.route('/add', methods=['POST'])
@handles_ledger_errors('income.index', 'adicionar a receita')
def add_income():
    income = income_from_form(request.form)
    current_app.ledger.record_income(income)
    return redirect(url_for('income.index'))


@income_bp.route('/edit/<id>', methods=['POST'])
@handles_ledger_errors('income.index', 'atualizar a receita')
def edit_income(id):
    repo = current_app.repository
    income = repo.get(Income, id)
    if income is None:
        return "Receita não encontrada", 404
    if not repo.update(income_from_form(request.form, income)):
        return "Receita não encontrada", 404
    return redirect(url_for('income.index'))


@income_bp.route('/delete/<id>', methods=['POST'])
@handles_ledger_errors('income.index', 'excluir a receita')
def delete_income(id):
    if not current_app.repository.delete(Income, id):
        flash("Esta receita já havia sido excluída", 'info')
    return redirect(url_for('income.index'))

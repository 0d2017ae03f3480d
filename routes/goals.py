import re
from decimal import Decimal

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

import aggregation
from entities import DEFAULT_GOAL_COLOR, Goal
from view_utils import handles_ledger_errors, parse_amount, parse_date, require_text

goals_bp = Blueprint('goals', __name__, url_prefix='/goals')

HEX_COLOR = re.compile(r'^#[0-9A-Fa-f]{6}$')


def goal_color(raw):
    raw = (raw or '').strip()
    return raw if HEX_COLOR.match(raw) else DEFAULT_GOAL_COLOR


def goal_from_form(form, existing=None):
    fields = dict(
        name=require_text(form.get('name'), 'Nome'),
        target_amount=parse_amount(form.get('target_amount'), 'Valor alvo'),
        deadline=parse_date(form.get('deadline'), 'Prazo', required=False),
        description=(form.get('description') or '').strip() or None,
        color=goal_color(form.get('color')),
    )
    if form.get('accumulated_amount'):
        fields['accumulated_amount'] = parse_amount(form.get('accumulated_amount'), 'Valor acumulado')
    if existing is None:
        return Goal(**fields)
    for name, value in fields.items():
        setattr(existing, name, value)
    return existing


@goals_bp.route('/')
def index():
    goals = current_app.repository.find_all(Goal)
    search = request.args.get('q', '')
    overview = aggregation.goal_overview(goals)
    overview['goals'] = aggregation.filter_goals(goals, search)
    return render_template('goals.html', search=search, **overview)


@goals_bp.route('/add', methods=['POST'])
@handles_ledger_errors('goals.index', 'adicionar a meta')
def add_goal():
    current_app.repository.create(goal_from_form(request.form))
    return redirect(url_for('goals.index'))


@goals_bp.route('/edit/<id>', methods=['POST'])
@handles_ledger_errors('goals.index', 'atualizar a meta')
def edit_goal(id):
    repo = current_app.repository
    goal = repo.get(Goal, id)
    if goal is None or not repo.update(goal_from_form(request.form, goal)):
        return "Meta não encontrada", 404
    return redirect(url_for('goals.index'))


@goals_bp.route('/contribute/<id>', methods=['POST'])
@handles_ledger_errors('goals.index', 'contribuir para a meta')
def contribute(id):
    amount = parse_amount(request.form.get('amount'))
    if amount == Decimal('0'):
        return redirect(url_for('goals.index'))
    if not current_app.ledger.add_contribution(id, amount):
        return "Meta não encontrada", 404
    return redirect(url_for('goals.index'))


@goals_bp.route('/delete/<id>', methods=['POST'])
@handles_ledger_errors('goals.index', 'excluir a meta')
def delete_goal(id):
    if not current_app.repository.delete(Goal, id):
        flash("Esta meta já havia sido excluída", 'info')
    return redirect(url_for('goals.index'))

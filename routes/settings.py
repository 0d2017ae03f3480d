from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from models import db
from view_utils import get_settings, report_error

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')


@settings_bp.route('/')
def index():
    return render_template(
        'settings.html',
        reminders=current_app.scheduler.pending(),
        authorized=current_app.scheduler.authorized,
    )


@settings_bp.route('/update', methods=['POST'])
def update_preferences():
    setting = get_settings()
    setting.display_name = request.form.get('display_name', '').strip()
    setting.show_alerts = 'show_alerts' in request.form
    setting.sync_widgets = 'sync_widgets' in request.form

    try:
        db.session.add(setting)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        report_error(f"Não foi possível salvar as preferências: {exc}")
    return redirect(url_for('settings.index'))


@settings_bp.route('/reminders/refresh', methods=['POST'])
def refresh_reminders():
    if not current_app.scheduler.authorized:
        current_app.scheduler.request_authorization()
    count = current_app.planner.refresh_all(current_app.repository)
    flash(f"{count} lembrete(s) agendado(s)", 'info')
    return redirect(url_for('settings.index'))


@settings_bp.route('/reminders/clear', methods=['POST'])
def clear_reminders():
    current_app.planner.cancel_all()
    flash("Todos os lembretes pendentes foram removidos", 'info')
    return redirect(url_for('settings.index'))

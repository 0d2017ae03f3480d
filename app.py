import logging
import secrets

from flask import Flask, abort, flash, jsonify
from flask_wtf.csrf import CSRFProtect

import aggregation
from clock import SystemClock
from config import Config
from formatting import TEMPLATE_FILTERS, format_brl, format_datetime
from goal_ledger import GoalLedger
from models import db
from notifications import InMemoryScheduler, NotificationPlanner
from repository import Repository
from routes.dashboard import dashboard_bp
from routes.expenses import expenses_bp
from routes.goals import goals_bp
from routes.income import income_bp
from routes.reports import reports_bp
from routes.settings import settings_bp
from view_utils import get_settings

csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    config_class.init_db(app)
    csrf.init_app(app)

    app.clock = SystemClock()
    app.repository = Repository(db.session)
    app.ledger = GoalLedger(app.repository)
    app.scheduler = InMemoryScheduler()
    app.planner = NotificationPlanner(app.scheduler, app.clock)

    if app.config.get('NOTIFICATIONS_ENABLED'):
        app.scheduler.request_authorization()
        with app.app_context():
            app.planner.refresh_all(app.repository)

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(income_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(goals_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(settings_bp)

    app.jinja_env.filters.update(TEMPLATE_FILTERS)

    @app.context_processor
    def inject_settings():
        return {'settings': get_settings(), 'now': app.clock.now()}

    @app.before_request
    def deliver_reminders():
        for reminder in app.scheduler.pop_due(app.clock.now()):
            app.logger.info("reminder %s delivered", reminder.identifier)
            flash(f"{reminder.title} {reminder.body}", 'reminder')

    @app.after_request
    def set_security_headers(response):
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'SAMEORIGIN')
        response.headers.setdefault('X-XSS-Protection', '1; mode=block')
        response.headers.setdefault('Referrer-Policy', 'strict-origin-when-cross-origin')
        return response

    @app.route('/widget.json')
    def widget_snapshot():
        if not get_settings().sync_widgets:
            abort(404)
        repo, clock = app.repository, app.clock
        return jsonify({
            'balance': format_brl(aggregation.balance(repo)),
            'month_income': format_brl(aggregation.monthly_income_total(repo, clock)),
            'month_expense': format_brl(aggregation.monthly_expense_total(repo, clock)),
            'due_soon': [e.description for e in repo.unpaid_expenses() if e.is_due_soon(clock.now())],
            'updated_at': format_datetime(clock.now()),
        })

    return app


if __name__ == '__main__':
    create_app().run(host='127.0.0.1', port=5000)

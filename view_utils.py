from datetime import datetime
from decimal import Decimal, InvalidOperation
from functools import wraps

from flask import current_app, flash, redirect, url_for

from errors import LedgerError
from models import Setting, db


class FormError(ValueError):
    pass


def get_settings():
    setting = db.session.get(Setting, 1)
    if setting is None:
        setting = Setting(id=1, display_name='', show_alerts=True, sync_widgets=True)
    return setting


def report_error(message):
    """Log ``message`` and show it to the user if alerts are on."""
    current_app.logger.error(message)
    if get_settings().show_alerts:
        flash(message, 'error')


MAX_DIGITS = 15


def parse_amount(raw, field='Valor'):
    raw = (raw or '').strip().replace('R$', '').strip()
    if not raw:
        raise FormError(f"Preencha o campo {field}")
    if ',' in raw:
        raw = raw.replace('.', '').replace(',', '.')
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise FormError(f"{field} não é um número válido")
    if not amount.is_finite():
        raise FormError(f"{field} não é um número válido")
    if amount.adjusted() >= MAX_DIGITS:
        raise FormError(f"{field} é grande demais")
    return amount


def parse_date(raw, field='Data', required=True):
    raw = (raw or '').strip()
    if not raw:
        if required:
            raise FormError(f"Preencha o campo {field}")
        return None
    for fmt in ('%Y-%m-%dT%H:%M', '%Y-%m-%d', '%d/%m/%Y'):
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    raise FormError(f"{field} não é uma data válida")


def require_text(raw, field):
    value = (raw or '').strip()
    if not value:
        raise FormError(f"Preencha o campo {field}")
    return value


def handles_ledger_errors(endpoint, action):
    """Turn form and write failures into a flashed message and a redirect."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except FormError as exc:
                flash(str(exc), 'error')
            except LedgerError as exc:
                report_error(f"Não foi possível {action}: {exc}")
            return redirect(url_for(endpoint))
        return wrapper
    return decorator

"""pt-BR presentation helpers shared by templates, reminders and the report."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

MONTHS = [
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
]


def _swap_separators(text):
    return text.replace(',', '_').replace('.', ',').replace('_', '.')


def format_number(value, places=2):
    """``1234.5`` -> ``'1.234,50'``."""
    quantum = Decimal(1).scaleb(-places)
    amount = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return _swap_separators(f"{amount:,.{places}f}")


def format_brl(value):
    if value is None:
        value = 0
    value = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    text = f"R$ {format_number(abs(value))}"
    return f"-{text}" if value < 0 else text


def format_percent(value):
    """Fraction to percent with at most one decimal: ``0.125`` -> ``'12,5%'``."""
    text = f"{value * 100:.1f}".rstrip('0').rstrip('.')
    return f"{text.replace('.', ',')}%"


def format_date(value):
    if value is None:
        return ''
    return value.strftime('%d/%m/%Y')


def format_datetime(value):
    if value is None:
        return ''
    return value.strftime('%d/%m/%Y %H:%M')


def format_long_date(value):
    return f"{value.day} de {MONTHS[value.month - 1]} de {value.year}"


def month_name(value):
    return MONTHS[value.month - 1].capitalize()


def days_until(value, now=None):
    now = now or datetime.now()
    return int((value - now).total_seconds() / 86400)


def due_text(value, now=None):
    days = days_until(value, now)
    if days < 0:
        return f"Atrasado há {abs(days)} dia(s)"
    if days == 0:
        return "Vence hoje"
    if days == 1:
        return "Vence amanhã"
    return f"Vence em {days} dia(s)"


def clamp(value, min_val=0, max_val=100):
    try:
        return max(min(float(value), max_val), min_val)
    except (ValueError, TypeError):
        return 0


TEMPLATE_FILTERS = {
    'brl': format_brl,
    'number': format_number,
    'percent': format_percent,
    'date': format_date,
    'datetime': format_datetime,
    'long_date': format_long_date,
    'month_name': month_name,
    'due_text': due_text,
    'clamp': clamp,
}

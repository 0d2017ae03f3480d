"""Time sources and calendar-month arithmetic."""

from datetime import datetime, timedelta


class SystemClock:
    def now(self):
        return datetime.now()


class FixedClock:
    """Clock pinned to one instant; ``advance`` moves it forward."""

    def __init__(self, moment):
        self.moment = moment

    def now(self):
        return self.moment

    def advance(self, **kwargs):
        self.moment = self.moment + timedelta(**kwargs)
        return self.moment


def start_of_month(moment):
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def add_months(moment, months):
    """Shift to the first day of the month ``months`` away from ``moment``."""
    index = moment.year * 12 + (moment.month - 1) + months
    return start_of_month(moment).replace(year=index // 12, month=index % 12 + 1)


def month_bounds(moment):
    """``(start, end)`` of the calendar month holding ``moment``; ``end`` is exclusive."""
    start = start_of_month(moment)
    return start, add_months(start, 1)

"""
Record store access for incomes, expenses and goals.

Writes raise ``PersistenceError``. Reads outside a transaction never raise:
a failed query is logged and reported as an empty result. Inside
``transaction()`` a failed read raises ``PersistenceError`` instead, so the
block is rolled back as a whole.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from entities import Expense, ExpenseStatus, Goal, Income
from errors import PersistenceError
from models import ENTITY_FOR

logger = logging.getLogger(__name__)

DEFAULT_SORT = {
    Income: ('date', True),
    Expense: ('due_date', True),
    Goal: ('name', False),
}


class Repository:

    def __init__(self, session):
        self.session = session

    @property
    def _depth(self):
        """Open ``transaction()`` blocks on the current session."""
        return self.session.info.get('transaction_depth', 0)

    @_depth.setter
    def _depth(self, value):
        self.session.info['transaction_depth'] = value

    # -- writes --

    def create(self, model):
        entity = ENTITY_FOR[type(model)]()
        entity.update_from(model)
        self.session.add(entity)
        self._commit('create', model)

    def update(self, model):
        """Overwrite the stored record with ``model``'s fields.

        Returns False when no record has that id; nothing is written then.
        """
        entity = self._entity(type(model), model.id)
        if entity is None:
            logger.info("update skipped, %s %s not found", type(model).__name__, model.id)
            return False
        entity.update_from(model)
        self._commit('update', model)
        return True

    def delete(self, kind, id):
        entity = self._entity(kind, id)
        if entity is None:
            logger.info("delete skipped, %s %s not found", kind.__name__, id)
            return False
        self.session.delete(entity)
        self._commit('delete', entity)
        return True

    def save(self):
        if not self.has_changes():
            return
        self._commit('save')

    def has_changes(self):
        return bool(self.session.new or self.session.dirty or self.session.deleted)

    @contextmanager
    def transaction(self):
        """Group several writes into one commit.

        Nested writes only flush; the outermost block commits, or rolls
        everything back and raises ``PersistenceError``.
        """
        self._depth += 1
        try:
            yield self
        except SQLAlchemyError as exc:
            self._depth -= 1
            self.session.rollback()
            logger.error("transaction rolled back: %s", exc)
            raise PersistenceError(str(exc)) from exc
        except Exception:
            self._depth -= 1
            self.session.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            self._commit('transaction')

    def _commit(self, action, subject=None):
        try:
            if self._depth:
                self.session.flush()
            else:
                self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("%s failed for %r: %s", action, subject, exc)
            raise PersistenceError(f"could not {action} record: {exc}") from exc

    # -- reads --

    def find_all(self, kind, sort_key=None, descending=None):
        return self.find_by(kind, sort_key=sort_key, descending=descending)

    def find_by(self, kind, *criteria, sort_key=None, descending=None, **filters):
        """Records of ``kind`` matching SQLAlchemy ``criteria`` and field ``filters``."""
        entity_cls = ENTITY_FOR[kind]
        default_key, default_desc = DEFAULT_SORT[kind]
        sort_key = sort_key or default_key
        descending = default_desc if descending is None else descending
        if 'status' in filters:
            filters['status'] = ExpenseStatus.parse(filters['status']).value

        try:
            query = self.session.query(entity_cls)
            if criteria:
                query = query.filter(*criteria)
            if filters:
                query = query.filter_by(**filters)
            column = getattr(entity_cls, sort_key)
            query = query.order_by(column.desc() if descending else column.asc())
            return [entity.to_model() for entity in query.all()]
        except SQLAlchemyError as exc:
            logger.exception("query for %s failed", kind.__name__)
            if self._depth:
                raise PersistenceError(f"could not read {kind.__name__}: {exc}") from exc
            self.session.rollback()
            return []

    def get(self, kind, id):
        found = self.find_by(kind, id=id)
        return found[0] if found else None

    def incomes_between(self, start, end):
        """Incomes dated in ``[start, end)``."""
        return self.find_by(Income, ENTITY_FOR[Income].date >= start, ENTITY_FOR[Income].date < end)

    def expenses_due_between(self, start, end):
        entity_cls = ENTITY_FOR[Expense]
        return self.find_by(Expense, entity_cls.due_date >= start, entity_cls.due_date < end)

    def unpaid_expenses(self):
        return self.find_by(Expense, status=ExpenseStatus.UNPAID, descending=False)

    def _entity(self, kind, id):
        try:
            return self.session.get(ENTITY_FOR[kind], id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("lookup of %s %s failed: %s", kind.__name__, id, exc)
            raise PersistenceError(f"could not read {kind.__name__} {id}: {exc}") from exc

from decimal import Decimal

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.types import String, TypeDecorator

from entities import DEFAULT_GOAL_COLOR, Expense, ExpenseStatus, Goal, Income

db = SQLAlchemy()


class Money(TypeDecorator):
    """Decimal stored as text so SQLite never rounds it through a float."""

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class IncomeEntity(db.Model):
    __tablename__ = 'income'

    id = db.Column(db.String(36), primary_key=True)
    amount = db.Column(Money, nullable=False, default=Decimal('0'))
    description = db.Column(db.String(200), nullable=False, default='')
    category = db.Column(db.String(50))
    date = db.Column(db.DateTime, nullable=False, index=True)
    goal_id = db.Column(db.String(36))

    def to_model(self):
        return Income(
            id=self.id,
            amount=self.amount if self.amount is not None else Decimal('0'),
            description=self.description or '',
            category=self.category,
            date=self.date,
            goal_id=self.goal_id,
        )

    def update_from(self, model):
        self.id = model.id
        self.amount = model.amount
        self.description = model.description
        self.category = model.category
        self.date = model.date
        self.goal_id = model.goal_id


class ExpenseEntity(db.Model):
    __tablename__ = 'expense'

    id = db.Column(db.String(36), primary_key=True)
    amount = db.Column(Money, nullable=False, default=Decimal('0'))
    description = db.Column(db.String(200), nullable=False, default='')
    category = db.Column(db.String(50), nullable=False, default='')
    due_date = db.Column(db.DateTime, nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=ExpenseStatus.UNPAID.value, index=True)
    goal_id = db.Column(db.String(36))
    paid_date = db.Column(db.DateTime)

    def to_model(self):
        return Expense(
            id=self.id,
            amount=self.amount if self.amount is not None else Decimal('0'),
            description=self.description or '',
            category=self.category or '',
            due_date=self.due_date,
            status=ExpenseStatus.parse(self.status),
            goal_id=self.goal_id,
            paid_date=self.paid_date,
        )

    def update_from(self, model):
        self.id = model.id
        self.amount = model.amount
        self.description = model.description
        self.category = model.category
        self.due_date = model.due_date
        self.status = ExpenseStatus.parse(model.status).value
        self.goal_id = model.goal_id
        self.paid_date = model.paid_date


class GoalEntity(db.Model):
    __tablename__ = 'goal'

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(100), nullable=False, default='')
    target_amount = db.Column(Money, nullable=False, default=Decimal('0'))
    accumulated_amount = db.Column(Money, nullable=False, default=Decimal('0'))
    deadline = db.Column(db.DateTime)
    description = db.Column(db.Text)
    color = db.Column(db.String(9), nullable=False, default=DEFAULT_GOAL_COLOR)

    def to_model(self):
        return Goal(
            id=self.id,
            name=self.name or '',
            target_amount=self.target_amount if self.target_amount is not None else Decimal('0'),
            accumulated_amount=self.accumulated_amount if self.accumulated_amount is not None else Decimal('0'),
            deadline=self.deadline,
            description=self.description,
            color=self.color or DEFAULT_GOAL_COLOR,
        )

    def update_from(self, model):
        self.id = model.id
        self.name = model.name
        self.target_amount = model.target_amount
        self.accumulated_amount = model.accumulated_amount
        self.deadline = model.deadline
        self.description = model.description
        self.color = model.color


class Setting(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    display_name = db.Column(db.String(100), nullable=False, default='')
    show_alerts = db.Column(db.Boolean, nullable=False, default=True)
    sync_widgets = db.Column(db.Boolean, nullable=False, default=True)


ENTITY_FOR = {
    Income: IncomeEntity,
    Expense: ExpenseEntity,
    Goal: GoalEntity,
}

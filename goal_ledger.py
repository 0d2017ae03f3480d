import logging

from entities import Goal

logger = logging.getLogger(__name__)


class GoalLedger:
    """Contributions toward savings goals."""

    def __init__(self, repository):
        self.repository = repository

    def add_contribution(self, goal_id, amount):
        """Add ``amount`` (signed, unchecked) to the goal's accumulated total.

        Returns False when the goal no longer exists.
        """
        goal = self.repository.get(Goal, goal_id)
        if goal is None:
            logger.warning("contribution of %s dropped, goal %s not found", amount, goal_id)
            return False
        goal.accumulated_amount += amount
        return self.repository.update(goal)

    def record_income(self, income):
        """Store ``income`` and credit its goal in the same commit."""
        with self.repository.transaction():
            self.repository.create(income)
            if income.goal_id:
                self.add_contribution(income.goal_id, income.amount)

"""
LifeOS Test Suite

This package contains tests for the LifeOS ledger:

- test_entities.py: Derived properties of incomes, expenses and goals
- test_repository.py: Create/read/update/delete, error degradation, transactions
- test_aggregation.py: Balance, monthly totals, category breakdown, series
- test_goal_ledger.py: Contributions and income-to-goal crediting
- test_notifications.py: Reminder planning and the in-memory scheduler
- test_report.py: Report assembly and PDF export
- test_formatting.py: pt-BR currency, number and date helpers
- test_dashboard.py, test_income.py, test_expenses.py, test_goals.py,
  test_settings.py: Views
- test_security.py: CSRF protection, security headers, session cookies

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_repository.py

Run with verbose output:
    pytest tests/ -v
"""

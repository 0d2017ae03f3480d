"""
Shared pytest fixtures for LifeOS tests.
"""

import pytest
import os
import sys
from datetime import datetime
from decimal import Decimal

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from clock import FixedClock  # noqa: E402
from config import Config  # noqa: E402

NOW = datetime(2026, 10, 15, 12, 0)


class TestConfig(Config):
    """Test configuration backed by an in-memory SQLite database."""
    __test__ = False

    SECRET_KEY = 'test-secret-key-for-testing-only'
    TESTING = True
    WTF_CSRF_ENABLED = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    NOTIFICATIONS_ENABLED = True
    LOG_LEVEL = 'DEBUG'


def build_app(csrf=True):
    from app import create_app
    application = create_app(config_class=TestConfig)
    application.config['WTF_CSRF_ENABLED'] = csrf
    application.clock = FixedClock(NOW)
    application.planner.clock = application.clock
    return application


@pytest.fixture
def app():
    """Create application for testing."""
    yield build_app(csrf=True)


@pytest.fixture
def app_no_csrf():
    """Create application for testing without CSRF protection."""
    yield build_app(csrf=False)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def client_no_csrf(app_no_csrf):
    """Create test client without CSRF."""
    return app_no_csrf.test_client()


@pytest.fixture
def ctx(app_no_csrf):
    """Application context for tests that talk to the repository directly."""
    with app_no_csrf.app_context():
        yield app_no_csrf


@pytest.fixture
def repo(ctx):
    return ctx.repository


@pytest.fixture
def clock(app_no_csrf):
    return app_no_csrf.clock


def money(value):
    return Decimal(str(value))

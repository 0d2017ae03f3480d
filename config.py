import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from models import db

load_dotenv()


def default_data_dir():
    if sys.platform == 'darwin':
        base = Path.home() / 'Library' / 'Application Support'
    else:
        base = Path(os.getenv('XDG_DATA_HOME', Path.home() / '.local' / 'share'))
    return base / 'LifeOS'


def _flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY')
    DATA_DIR = Path(os.getenv('LIFEOS_DATA_DIR', default_data_dir()))
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', f"sqlite:///{DATA_DIR / 'LifeOSData.sqlite'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    NOTIFICATIONS_ENABLED = _flag('NOTIFICATIONS_ENABLED', True)
    RECENT_TRANSACTIONS_LIMIT = int(os.getenv('RECENT_TRANSACTIONS_LIMIT', 10))
    REPORT_ITEM_LIMIT = int(os.getenv('REPORT_ITEM_LIMIT', 10))

    @staticmethod
    def init_db(app):
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
            os.makedirs(app.config['DATA_DIR'], exist_ok=True)
        db.init_app(app)
        with app.app_context():
            db.create_all()

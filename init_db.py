from flask import Flask

from config import Config


def init_db():
    app = Flask(__name__)
    app.config.from_object(Config)
    Config.init_db(app)
    return app.config['SQLALCHEMY_DATABASE_URI']


if __name__ == "__main__":
    print(f"Database ready at {init_db()}")

"""
    app.py: application factory

    flask --app bookstore.app dev-setup
    flask --app bookstore.app run
"""
import os
from flask import Flask
from .api import BookstoreAPI
from .auth import Policy
from .cli import dev_setup_command
from .config import get_config
from .db import DB
from .resources import build_registry, policy_rules


def create_app(config=None):
    """
    :param config: dict with configuration values that override the defaults
    :return: Flask app exposing the bookstore api
    """
    app = Flask("bookstore")
    app.config.update(
        SQLALCHEMY_DATABASE_URI=os.environ.get("SQLALCHEMY_DATABASE_URI", "sqlite:///bookstore.sqlite"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
    )
    if config:
        app.config.update(config)

    DB.init_app(app)
    with app.app_context():
        policy = Policy(policy_rules(get_config("ADMIN_ROLE")))
    api = BookstoreAPI(app, build_registry(), policy)
    api.expose_all()
    app.cli.add_command(dev_setup_command)
    return app

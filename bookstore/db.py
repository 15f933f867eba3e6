"""
    db.py: the Flask-SQLAlchemy instance shared by the models and the repository
"""
from flask_sqlalchemy import SQLAlchemy

DB = SQLAlchemy()

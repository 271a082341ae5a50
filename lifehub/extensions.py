"""Flask extensions initialization."""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from celery import Celery
from lifehub.cache.query_cache import QueryCache

# Initialize extensions
db = SQLAlchemy()
login_manager = LoginManager()
celery = Celery()
query_cache = QueryCache()

@login_manager.user_loader
def load_user(user_id):
    """Load user by ID for Flask-Login."""
    from lifehub.models.user import User
    return db.session.get(User, user_id)

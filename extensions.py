"""
Extensions Module - Flask extension singletons, bound to the app in create_app()
Kept apart from app.py so models and blueprints can import them without cycles.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, AnonymousUserMixin


class AnonymousVisitor(AnonymousUserMixin):
    """Public visitor; never an admin"""
    is_admin = False


db = SQLAlchemy()

# Only administrators log in; public pages never require an account
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please log in to access the admin area.'
login_manager.login_message_category = 'error'
login_manager.session_protection = 'basic'
login_manager.anonymous_user = AnonymousVisitor

__all__ = ['db', 'login_manager', 'AnonymousVisitor']

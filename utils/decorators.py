"""
Decorators Module - Authentication and authorization decorators
"""

from functools import wraps
from flask import redirect, url_for, flash, request
from flask_login import current_user


def admin_required(f):
    """Decorator to require a logged-in admin user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            flash('Please log in to access the admin area.', 'error')
            return redirect(url_for('auth.login', next=request.path))
        if not current_user.is_admin:
            flash('Admin access required.', 'error')
            return redirect(url_for('pages.index'))
        return f(*args, **kwargs)
    return decorated_function

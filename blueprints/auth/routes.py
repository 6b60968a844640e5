"""
Auth Routes - Admin authentication
"""

from flask import redirect, url_for, request, flash, current_app
from flask_login import login_user, logout_user, current_user
from models import User
from utils.security import get_client_ip, verify_password
from utils.ui_helpers import render_page
from . import auth_bp


def _safe_next(target):
    # Only same-site relative paths
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return url_for('admin.dashboard')


@auth_bp.route('/admin/login', methods=['GET'])
def login():
    """Admin login page"""
    if current_user.is_authenticated and current_user.is_admin:
        return redirect(url_for('admin.dashboard'))
    return render_page('auth/Login', next=request.args.get('next', ''))


@auth_bp.route('/admin/login', methods=['POST'])
def authenticate():
    email = (request.form.get('email') or '').strip().lower()
    password = request.form.get('password') or ''

    user = User.query.filter_by(email=email).first() if email else None
    if user and user.is_admin and verify_password(password, user.password_hash):
        login_user(user, remember=bool(request.form.get('remember')))
        current_app.logger.info(f"Admin login: {email} from {get_client_ip()}")
        flash(f'Welcome back, {user.name}!', 'success')
        return redirect(_safe_next(request.form.get('next') or request.args.get('next')))

    current_app.logger.warning(f"Failed admin login for '{email}' from {get_client_ip()}")
    flash('Invalid credentials. Please try again.', 'error')
    return redirect(url_for('auth.login'))


@auth_bp.route('/admin/logout', methods=['GET', 'POST'])
def logout():
    """Logout current user"""
    if not current_user.is_authenticated:
        flash('Please login to access this page.', 'error')
        return redirect(url_for('auth.login'))

    logout_user()
    flash('Logged out successfully', 'success')
    return redirect(url_for('auth.login'))

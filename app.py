"""
Portfolio - Main Application Entry Point
Application Factory Pattern

This module initializes the Flask application with its extensions,
configuration and middleware. All route handling is delegated to blueprints.
"""

import os
import click
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix
from config import get_config
from extensions import db, login_manager
from models import User
from utils.notifications import NotificationDispatcher
from utils.security import RateLimiter, hash_password
from utils.ui_helpers import render_page

# Import all blueprints
from blueprints.auth import auth_bp
from blueprints.pages import pages_bp
from blueprints.blog import blog_bp
from blueprints.contact import contact_bp
from blueprints.admin import admin_bp


def create_app(config_name=None):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)

    Returns:
        Flask: Configured Flask application instance
    """

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(get_config(config_name))
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Trust X-Forwarded-For only from configured reverse proxies
    apply_proxy_fix(app)

    # Initialize extensions with app
    initialize_extensions(app)

    # Process-wide services shared by every request
    app.extensions['contact_rate_limiter'] = RateLimiter(
        app.config['CONTACT_RATE_LIMIT_MAX'], app.config['CONTACT_RATE_LIMIT_WINDOW'])
    app.extensions['notification_dispatcher'] = NotificationDispatcher(
        run_async=app.config['NOTIFICATIONS_ASYNC'])

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register request/response hooks
    register_hooks(app)

    # Register CLI commands
    register_commands(app)

    # Health check route
    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'message': 'Portfolio application is running'}, 200

    return app


def apply_proxy_fix(app):
    """Wrap the WSGI app in ProxyFix when PROXY_FIX_X_FOR hops are trusted"""
    hops = app.config.get('PROXY_FIX_X_FOR', 0)
    if hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops)
        app.logger.info(f"Trusting X-Forwarded-For from {hops} proxy hop(s)")


def initialize_extensions(app):
    """Initialize Flask extensions with the app instance"""
    db.init_app(app)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    # Create tables if they don't exist
    with app.app_context():
        try:
            from sqlalchemy import text
            db.create_all()
            # Verify connection
            db.session.execute(text('SELECT 1'))
            app.logger.info("Database initialized successfully")
        except Exception as e:
            app.logger.error(f"Database initialization failed: {str(e)}")


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(auth_bp)
    app.register_blueprint(pages_bp)
    app.register_blueprint(blog_bp)
    app.register_blueprint(contact_bp)
    app.register_blueprint(admin_bp)


def register_error_handlers(app):
    """Register custom error handlers"""

    @app.errorhandler(400)
    def bad_request(e):
        return render_page('errors/400', status=400, message='Bad request')

    @app.errorhandler(403)
    def forbidden(e):
        return render_page('errors/403', status=403, message='Forbidden')

    @app.errorhandler(404)
    def page_not_found(e):
        return render_page('errors/404', status=404, message='Page not found')

    @app.errorhandler(405)
    def method_not_allowed(e):
        return render_page('errors/405', status=405, message='Method not allowed')

    @app.errorhandler(413)
    def payload_too_large(e):
        return render_page('errors/413', status=413, message='Request is too large. Maximum size is 16MB.')

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"Server Error: {str(e)}")
        db.session.rollback()
        return render_page('errors/500', status=500, message='Something went wrong')


def register_hooks(app):
    """Register request/response hooks"""

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response


def register_commands(app):
    """Register CLI commands"""

    @app.cli.command('make-admin')
    @click.option('--name', prompt=True, help='Display name')
    @click.option('--email', prompt=True, help='Login email')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option('--force', is_flag=True, help='Promote and reset the password of an existing user')
    def make_admin(name, email, password, force):
        """Create an admin user, or promote an existing one with --force"""
        email = email.strip().lower()
        if len(password) < 8:
            raise click.BadParameter('Password must be at least 8 characters.', param_hint='--password')

        user = User.query.filter_by(email=email).first()
        if user and not force:
            raise click.ClickException(f"User {email} already exists. Use --force to promote it.")

        if user is None:
            user = User(email=email)
            db.session.add(user)
        user.name = name.strip()
        user.role = 'admin'
        user.password_hash = hash_password(password)
        db.session.commit()

        app.logger.info(f"Admin user ready: {email}")
        click.echo(f"Admin user {email} is ready.")


if __name__ == '__main__':
    # Get environment
    env = os.environ.get('FLASK_ENV', 'development')

    # Create app
    app = create_app(env)

    # Run development server
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=(env == 'development')
    )

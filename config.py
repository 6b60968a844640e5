import os
from datetime import timedelta


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SESSION_SECRET', 'CHANGE-THIS-SECRET-KEY-IN-PRODUCTION')
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Number of reverse proxies in front of the app whose X-Forwarded-For is trusted
    PROXY_FIX_X_FOR = int(os.environ.get('PROXY_FIX_X_FOR', '0'))

    # Database Settings
    _database_url = os.environ.get('DATABASE_URL')
    if not _database_url:
        pg_user = os.environ.get('PGUSER')
        pg_pass = os.environ.get('PGPASSWORD')
        pg_host = os.environ.get('PGHOST')
        pg_port = os.environ.get('PGPORT')
        pg_db = os.environ.get('PGDATABASE')
        if all([pg_user, pg_pass, pg_host, pg_port, pg_db]):
            _database_url = f"postgresql://{pg_user}:{pg_pass}@{pg_host}:{pg_port}/{pg_db}"

    if _database_url and _database_url.startswith("postgres://"):
        _database_url = _database_url.replace("postgres://", "postgresql://", 1)

    SQLALCHEMY_DATABASE_URI = _database_url or 'sqlite:///portfolio.db'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upload Settings
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB
    UPLOAD_URL_PREFIX = '/storage/'

    # JSON Settings
    JSON_AS_ASCII = False

    # Site Settings
    APP_URL = os.environ.get('APP_URL', 'http://localhost:5000')
    DEFAULT_AUTHOR_NAME = os.environ.get('DEFAULT_AUTHOR_NAME', 'Site Owner')
    BLOG_PER_PAGE = 9
    ADMIN_PER_PAGE = 15
    ADMIN_POSTS_PER_PAGE = 10

    # Spam protection
    # The contact limiter counts in process memory: run one worker process
    # (threads are fine) or each worker keeps its own 3-per-hour budget.
    COMMENT_RATE_LIMIT_SECONDS = 120
    CONTACT_RATE_LIMIT_MAX = 3
    CONTACT_RATE_LIMIT_WINDOW = 3600

    # Contact Notification Settings
    MAIL_FROM_ADDRESS = os.environ.get('MAIL_FROM_ADDRESS')
    MAIL_FROM_NAME = os.environ.get('MAIL_FROM_NAME', 'Portfolio')
    CONTACT_OWNER_EMAIL = os.environ.get('CONTACT_OWNER_EMAIL')
    CONTACT_AUTO_REPLY = _env_flag('CONTACT_AUTO_REPLY', True)
    SMTP_HOST = os.environ.get('SMTP_HOST')
    SMTP_PORT = os.environ.get('SMTP_PORT', '587')
    SMTP_USERNAME = os.environ.get('SMTP_USERNAME')
    SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD')
    SMTP_USE_TLS = _env_flag('SMTP_USE_TLS', True)
    TELEGRAM_BOT_TOKEN = os.environ.get('TELEGRAM_BOT_TOKEN')
    TELEGRAM_CHAT_ID = os.environ.get('TELEGRAM_CHAT_ID')
    NOTIFICATIONS_ASYNC = True


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    SECRET_KEY = 'testing-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # For in-memory SQLite during tests, keep engine options empty to avoid
    # passing invalid pool settings to SQLite's StaticPool.
    SQLALCHEMY_ENGINE_OPTIONS = {}
    APP_URL = 'https://example.test'
    MAIL_FROM_ADDRESS = 'hello@example.test'
    CONTACT_OWNER_EMAIL = 'owner@example.test'
    CONTACT_AUTO_REPLY = True
    NOTIFICATIONS_ASYNC = False


# Select configuration based on environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])

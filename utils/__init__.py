"""
Utils Package - Centralized utility modules initialization
Model-backed helpers (blog, content, moderation, submissions, presenters)
are imported from their modules directly.
"""

from .decorators import admin_required
from .errors import ValidationError, RateLimitError, NotFoundError, IntegrityGuardError
from .helpers import (
    utcnow,
    strip_tags,
    limit_text,
    calculate_reading_time,
    format_date,
    time_ago,
    storage_url,
    paginate_payload,
    sanitize_about
)
from .notifications import (
    NotificationSettings,
    NotificationDispatcher,
    send_email,
    send_telegram_notification
)
from .security import (
    get_client_ip,
    get_user_agent,
    RateLimiter,
    hash_password,
    verify_password
)
from .slugs import slugify, unique_slug
from .ui_helpers import render_page, redirect_back, flash_errors

__all__ = [
    # Decorators
    'admin_required',

    # Errors
    'ValidationError',
    'RateLimitError',
    'NotFoundError',
    'IntegrityGuardError',

    # Helpers
    'utcnow',
    'strip_tags',
    'limit_text',
    'calculate_reading_time',
    'format_date',
    'time_ago',
    'storage_url',
    'paginate_payload',
    'sanitize_about',

    # Notifications
    'NotificationSettings',
    'NotificationDispatcher',
    'send_email',
    'send_telegram_notification',

    # Security
    'get_client_ip',
    'get_user_agent',
    'RateLimiter',
    'hash_password',
    'verify_password',

    # Slugs
    'slugify',
    'unique_slug',

    # UI Helpers
    'render_page',
    'redirect_back',
    'flash_errors'
]

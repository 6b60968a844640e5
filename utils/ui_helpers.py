"""
UI Helper Functions - Page payloads for the client-side renderer
================================================================

Every page endpoint answers with one JSON document:

    {"component": "Blog", "props": {...}, "flash": {...}, "errors": {...}, "url": "/blog"}

`component` names the client-side page to mount, `props` is its data.
Mutations follow Post/Redirect/Get: they flash a message and/or stash field
errors in the session, then redirect; the next page payload carries both.
"""

from typing import Dict, Optional
from flask import request, session, redirect, jsonify, get_flashed_messages, url_for

ERRORS_SESSION_KEY = '_errors'
OLD_INPUT_SESSION_KEY = '_old_input'


def flash_errors(errors: Dict[str, str], old_input: Optional[Dict[str, str]] = None) -> None:
    """Stash field errors (and the submitted values) for the next page payload"""
    session[ERRORS_SESSION_KEY] = dict(errors)
    if old_input is not None:
        session[OLD_INPUT_SESSION_KEY] = {
            k: v for k, v in old_input.items() if k not in ('honeypot', 'website', 'password')
        }


def pop_errors() -> Dict[str, str]:
    return session.pop(ERRORS_SESSION_KEY, None) or {}


def pop_old_input() -> Dict[str, str]:
    return session.pop(OLD_INPUT_SESSION_KEY, None) or {}


def collect_flash() -> Dict[str, str]:
    """
    Flashed messages keyed by category: {'success': ..., 'error': ...}

    One message per category; when a category is flashed twice in a
    request the later message wins.
    """
    messages = {}
    for category, message in get_flashed_messages(with_categories=True):
        messages[category] = message
    return messages


def render_page(component: str, status: int = 200, **props):
    """
    Build the page payload response

    Args:
        component: client-side page name (e.g. 'Blog', 'admin/inbox/Index')
        status: HTTP status code
        **props: page data

    Returns:
        tuple: (Response, status)
    """
    payload = {
        'component': component,
        'props': props,
        'flash': collect_flash(),
        'errors': pop_errors(),
        'old': pop_old_input(),
        'url': request.full_path.rstrip('?') if request.query_string else request.path,
    }
    return jsonify(payload), status


def redirect_back(fallback_endpoint: str, **values):
    """Redirect to the referring page, or to `fallback_endpoint`"""
    return redirect(request.referrer or url_for(fallback_endpoint, **values))


__all__ = [
    'flash_errors',
    'pop_errors',
    'pop_old_input',
    'collect_flash',
    'render_page',
    'redirect_back'
]

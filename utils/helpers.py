"""
Helpers Module - Utility functions for common operations
"""

import math
import re
from datetime import datetime, timezone
from flask import current_app
from markupsafe import escape


def utcnow():
    """Naive UTC timestamp, matching how DateTime columns are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def strip_tags(text):
    """Remove HTML tags and collapse whitespace"""
    if not text:
        return ''
    txt = re.sub(r'<(script|style).*?>.*?</\1>', ' ', text, flags=re.I | re.S)
    txt = re.sub(r'<[^>]+>', ' ', txt)
    return re.sub(r'\s+', ' ', txt).strip()


def limit_text(text, limit=100, end='...'):
    """Truncate text to `limit` characters, appending `end` when cut"""
    text = text or ''
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + end


def calculate_reading_time(content, words_per_minute=200):
    """Reading time in whole minutes, at least 1"""
    if not content:
        return 1
    words = re.findall(r"[A-Za-z'\-]+", strip_tags(content))
    return max(1, math.ceil(len(words) / words_per_minute))


def format_date(value, fmt='%b %d, %Y', default=''):
    return value.strftime(fmt) if value else default


def time_ago(value, now=None):
    """Human readable distance to now, e.g. '5 minutes ago'"""
    if not value:
        return ''
    now = now or utcnow()
    seconds = int((now - value).total_seconds())
    if seconds < 0:
        return 'just now'

    units = (
        ('year', 365 * 24 * 3600),
        ('month', 30 * 24 * 3600),
        ('week', 7 * 24 * 3600),
        ('day', 24 * 3600),
        ('hour', 3600),
        ('minute', 60),
        ('second', 1),
    )
    for name, size in units:
        if seconds >= size:
            count = seconds // size
            return f"{count} {name}{'s' if count != 1 else ''} ago"
    return 'just now'


def storage_url(path):
    """Public URL for an uploaded file path (absolute URLs pass through)"""
    if not path:
        return None
    if path.startswith('http://') or path.startswith('https://'):
        return path
    prefix = current_app.config.get('UPLOAD_URL_PREFIX', '/storage/')
    return prefix.rstrip('/') + '/' + path.lstrip('/')


def paginate_payload(pagination, mapper):
    """Shape a Flask-SQLAlchemy Pagination into a serializable page"""
    return {
        'data': [mapper(item) for item in pagination.items],
        'current_page': pagination.page,
        'per_page': pagination.per_page,
        'total': pagination.total,
        'last_page': max(pagination.pages, 1),
        'has_next': pagination.has_next,
        'has_prev': pagination.has_prev,
    }


def sanitize_about(text: str) -> str:
    """Sanitize and normalize a biography field for safe rendering.

    - Removes <script> and <style> blocks
    - Preserves a small set of safe tags (p, br, strong, em, ul, ol, li, span)
    - Keeps `class` attribute only on <span> elements to allow badges
    - If input contains no HTML, converts double-newlines into paragraphs and single newlines into <br>
    """
    try:
        if not text:
            return ''

        # Normalize newlines, collapse multiple blank lines, and trim whitespace
        txt = text.replace('\r\n', '\n').replace('\r', '\n')
        txt = re.sub(r'\n\s*\n+', '\n\n', txt)
        txt = txt.strip()

        # Remove script/style blocks entirely
        txt = re.sub(r'<(script|style).*?>.*?</\1>', '', txt, flags=re.I | re.S)

        # Plain text: escape and convert to paragraphs
        if '<' not in txt and '>' not in txt:
            escaped = str(escape(txt)).strip()
            paragraphs = [p.strip() for p in re.split(r'\n\s*\n', escaped) if p.strip()]
            paragraphs = [p.replace('\n', '<br>\n') for p in paragraphs]
            return ''.join(f'<p>{p}</p>' for p in paragraphs)

        allowed_tags = ['p', 'br', 'strong', 'em', 'ul', 'ol', 'li', 'span', 'b', 'i', 'u']

        # Remove all tags that are not allowed, keep their inner text
        txt = re.sub(r'</?(?!(' + '|'.join(allowed_tags) + r')\b)[^>]*>', '', txt, flags=re.I)

        def _strip_attrs(match):
            tag = match.group(1).lower()
            attrs = match.group(2) or ''
            if tag == 'span':
                m = re.search(r'class\s*=\s*"([^"]+)"', attrs)
                cls = ''
                if m:
                    cls_val = re.sub(r'[^a-zA-Z0-9_\-\s]', '', m.group(1))
                    cls = f' class="{cls_val}"'
                return f'<{tag}{cls}>'
            return f'<{tag}>'

        txt = re.sub(r'<(\w+)([^>]*)>', _strip_attrs, txt, flags=re.I)

        # Collapse multiple <br> into a single <br>
        txt = re.sub(r'(?:(?:<br\s*/?>)\s*){2,}', '<br>\n', txt, flags=re.I)

        blocks = [b.strip() for b in re.split(r'\n\s*\n', txt) if b.strip()]
        normalized_blocks = []
        for block in blocks:
            if '<p' in block.lower():
                normalized_blocks.append(block)
            else:
                b_html = block.replace('\n', '<br>\n')
                normalized_blocks.append(f'<p>{b_html}</p>')
        txt = ''.join(normalized_blocks).strip()

        txt = re.sub(r'^(?:\s|(?:<br\s*/?>))+', '', txt, flags=re.I)
        txt = re.sub(r'(?:\s|(?:<br\s*/?>))+$', '', txt, flags=re.I)
        txt = re.sub(r'^(?:<p>\s*</p>)+', '', txt, flags=re.I)
        txt = re.sub(r'(?:<p>\s*</p>)+$', '', txt, flags=re.I)

        return txt
    except Exception as e:
        current_app.logger.error(f"Error sanitizing biography text: {str(e)}")
        return ''


__all__ = [
    'utcnow',
    'strip_tags',
    'limit_text',
    'calculate_reading_time',
    'format_date',
    'time_ago',
    'storage_url',
    'paginate_payload',
    'sanitize_about'
]

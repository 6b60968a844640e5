"""
WSGI entry point for gunicorn: `gunicorn wsgi:app`

The contact rate limiter keeps its counters in process memory, so serve
with a single worker process and scale with threads:
`gunicorn --workers 1 --threads 8 wsgi:app`
"""

from app import create_app

app = create_app()

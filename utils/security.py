"""
Security Module - Client identification, rate limiting and password helpers
"""

import time
import threading
from collections import deque
from flask import request
from werkzeug.security import generate_password_hash, check_password_hash


def get_client_ip():
    """
    Get real client IP address

    X-Forwarded-For is only honoured through ProxyFix (see PROXY_FIX_X_FOR),
    which rewrites remote_addr for the configured number of trusted hops.
    """
    return request.remote_addr or 'unknown'


def get_user_agent():
    return (request.headers.get('User-Agent') or 'Unknown')[:500]


class RateLimiter:
    """
    Rolling-window counter keyed by client (usually an IP address).

    `hit()` checks the window and records the attempt under one lock, so two
    concurrent requests can never both observe the last free slot. Entries
    expire on their own once they fall out of the window.
    """

    def __init__(self, max_requests, window_seconds, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits = {}  # {key: deque([timestamp, ...])}
        self._lock = threading.Lock()

    def _prune(self, key, now):
        hits = self._hits.get(key)
        if hits is None:
            return None
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()
        if not hits:
            del self._hits[key]
            return None
        return hits

    def hit(self, key):
        """Record one attempt; returns the token on success, None when over the limit"""
        with self._lock:
            now = self.clock()
            hits = self._prune(key, now)
            if hits is not None and len(hits) >= self.max_requests:
                return None
            self._hits.setdefault(key, deque()).append(now)
            return now

    def release(self, key, token):
        """Give back an attempt recorded by hit() whose work was rolled back"""
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return
            try:
                hits.remove(token)
            except ValueError:
                return
            if not hits:
                del self._hits[key]

    def count(self, key):
        with self._lock:
            hits = self._prune(key, self.clock())
            return len(hits) if hits else 0

    def reset(self, key=None):
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """Verify password against hash"""
    return check_password_hash(password_hash, password)


__all__ = [
    'get_client_ip',
    'get_user_agent',
    'RateLimiter',
    'hash_password',
    'verify_password'
]

"""
Admin Blueprint - Content management area
Handles: Dashboard, blog posts, categories, tags, comment moderation, contact inbox
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

from . import routes

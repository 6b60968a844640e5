"""
Contact Blueprint - Public contact form
"""

from flask import Blueprint

contact_bp = Blueprint('contact', __name__, url_prefix='/contact')

from . import routes

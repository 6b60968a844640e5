"""
Contact Routes - Public contact form
"""

from flask import request, redirect, url_for, flash, current_app
from utils.errors import ValidationError
from utils.notifications import NotificationSettings
from utils.security import get_client_ip, get_user_agent
from utils.submissions import ContactSubmissionPipeline
from utils.ui_helpers import render_page, flash_errors
from . import contact_bp


def _contact_pipeline():
    return ContactSubmissionPipeline(
        settings=NotificationSettings.from_config(current_app.config),
        limiter=current_app.extensions['contact_rate_limiter'],
        dispatcher=current_app.extensions['notification_dispatcher'])


@contact_bp.route('', methods=['GET'])
def index():
    """Contact page"""
    return render_page('Contact')


@contact_bp.route('', methods=['POST'])
def store():
    """Contact form processing - stores the message, then queues notifications"""
    try:
        result = _contact_pipeline().submit(request.form, get_client_ip(), get_user_agent())
    except ValidationError as e:
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(url_for('contact.index'))

    flash(result.message, 'success')
    return redirect(url_for('contact.index'))

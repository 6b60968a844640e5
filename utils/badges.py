"""
Badges Module - Display labels and colors for portfolio entities
Handles project status badges, service type and pricing model labels
"""

PROJECT_STATUSES = {
    'completed': {
        'label': 'Completed',
        'icon': 'fa-check-circle',
        'color': 'success',
    },
    'ongoing': {
        'label': 'Ongoing',
        'icon': 'fa-spinner',
        'color': 'warning',
    },
}

PROJECT_TYPE_COLORS = {
    'cyan': 'Cyan',
    'purple': 'Purple',
    'green': 'Green',
    'orange': 'Orange',
    'pink': 'Pink',
}

SERVICE_TYPES = {
    'consulting': 'Consulting',
    'development': 'Development',
    'research': 'Research',
    'freelance': 'Freelance',
    'hiring': 'Hiring',
}

PRICING_MODELS = {
    'hourly': 'Hourly Rate',
    'project': 'Per Project',
    'retainer': 'Monthly Retainer',
    'custom': 'Custom Quote',
}


def _fallback_label(value):
    return (value or '').replace('_', ' ').capitalize()


def get_status_info(status):
    """
    Get project status badge information

    Args:
        status (str): Project status (completed, ongoing)

    Returns:
        dict: Badge information; unknown statuses get a neutral badge
    """
    return PROJECT_STATUSES.get(status, {
        'label': _fallback_label(status),
        'icon': 'fa-circle',
        'color': 'secondary',
    })


def service_type_label(service_type):
    return SERVICE_TYPES.get(service_type, _fallback_label(service_type))


def pricing_model_label(pricing_model):
    return PRICING_MODELS.get(pricing_model, _fallback_label(pricing_model))


__all__ = [
    'PROJECT_STATUSES',
    'PROJECT_TYPE_COLORS',
    'SERVICE_TYPES',
    'PRICING_MODELS',
    'get_status_info',
    'service_type_label',
    'pricing_model_label'
]

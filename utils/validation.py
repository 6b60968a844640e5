"""
Validation Module - Form validation for public submissions and admin edits
Each validator returns the cleaned data dict or raises ValidationError.
"""

import re
from datetime import datetime
from .errors import ValidationError

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class FormValidator:
    """Collects field errors while cleaning raw form values"""

    def __init__(self, form):
        self.form = form
        self.errors = {}
        self.cleaned = {}

    def add_error(self, field, message):
        self.errors.setdefault(field, []).append(message)

    def _raw(self, field):
        value = self.form.get(field)
        if value is None:
            return ''
        return str(value).strip()

    def string(self, field, required=False, max_length=None, min_length=None,
               messages=None):
        messages = messages or {}
        value = self._raw(field)
        if not value:
            if required:
                self.add_error(field, messages.get('required', f'The {field.replace("_", " ")} field is required.'))
            self.cleaned[field] = None
            return None
        if min_length is not None and len(value) < min_length:
            self.add_error(field, messages.get(
                'min', f'The {field.replace("_", " ")} must be at least {min_length} characters.'))
        if max_length is not None and len(value) > max_length:
            self.add_error(field, messages.get(
                'max', f'The {field.replace("_", " ")} may not be greater than {max_length} characters.'))
        self.cleaned[field] = value
        return value

    def email(self, field, required=True, max_length=255, messages=None):
        messages = messages or {}
        value = self.string(field, required=required, max_length=max_length, messages=messages)
        if value and not EMAIL_PATTERN.match(value):
            self.add_error(field, messages.get('email', 'Please enter a valid email address.'))
        return value

    def choice(self, field, choices, required=True, default=None):
        value = self._raw(field) or default
        if not value:
            if required:
                self.add_error(field, f'The {field.replace("_", " ")} field is required.')
        elif value not in choices:
            self.add_error(field, f'The selected {field.replace("_", " ")} is invalid.')
        self.cleaned[field] = value
        return value

    def integer(self, field, min_value=None, default=None):
        raw = self._raw(field)
        if not raw:
            self.cleaned[field] = default
            return default
        try:
            value = int(raw)
        except (ValueError, TypeError):
            self.add_error(field, f'The {field.replace("_", " ")} must be an integer.')
            self.cleaned[field] = default
            return default
        if min_value is not None and value < min_value:
            self.add_error(field, f'The {field.replace("_", " ")} must be at least {min_value}.')
        self.cleaned[field] = value
        return value

    def boolean(self, field):
        value = self._raw(field).lower() in ('1', 'true', 'on', 'yes')
        self.cleaned[field] = value
        return value

    def datetime(self, field):
        raw = self._raw(field)
        if not raw:
            self.cleaned[field] = None
            return None
        for fmt in ('%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%d'):
            try:
                value = datetime.strptime(raw, fmt)
                self.cleaned[field] = value
                return value
            except ValueError:
                continue
        self.add_error(field, f'The {field.replace("_", " ")} is not a valid date.')
        self.cleaned[field] = None
        return None

    def id_list(self, field):
        getlist = getattr(self.form, 'getlist', None)
        if getlist is not None:
            values = getlist(field) or getlist(f'{field}[]')
        else:
            values = self.form.get(field) or []
        ids = [str(v).strip() for v in values if str(v).strip()]
        self.cleaned[field] = ids
        return ids

    def validate(self):
        if self.errors:
            raise ValidationError(self.errors)
        return self.cleaned


def validate_comment_form(form):
    v = FormValidator(form)
    v.string('user_name', required=True, max_length=255,
             messages={'required': 'Please enter your name.'})
    v.email('user_email', messages={
        'required': 'Please enter your email address.',
        'email': 'Please enter a valid email address.',
    })
    v.string('comment_body', required=True, min_length=5, max_length=2000, messages={
        'required': 'Please enter your comment.',
        'min': 'Your comment must be at least 5 characters.',
        'max': 'Your comment cannot exceed 2000 characters.',
    })
    return v.validate()


def validate_contact_form(form):
    v = FormValidator(form)
    v.string('name', required=True, max_length=255,
             messages={'required': 'Please enter your name.'})
    v.email('email', messages={
        'required': 'Please enter your email address.',
        'email': 'Please enter a valid email address.',
    })
    v.string('subject', required=True, max_length=255,
             messages={'required': 'Please enter a subject.'})
    v.string('message', required=True, min_length=10, max_length=5000, messages={
        'required': 'Please enter your message.',
        'min': 'Your message must be at least 10 characters.',
        'max': 'Your message cannot exceed 5000 characters.',
    })
    return v.validate()


def validate_post_form(form, statuses):
    v = FormValidator(form)
    v.string('title', required=True, max_length=255,
             messages={'required': 'The post title is required.'})
    v.string('slug', max_length=255)
    v.string('excerpt', max_length=500)
    v.string('content', required=True,
             messages={'required': 'The post content is required.'})
    v.string('cover_image', max_length=500)
    v.string('author_name', max_length=255)
    v.integer('reading_time', min_value=1)
    v.choice('status', statuses, required=True, default='draft')
    v.datetime('published_at')
    v.boolean('is_featured')
    v.string('meta_title', max_length=70,
             messages={'max': 'The meta title should not exceed 70 characters.'})
    v.string('meta_description', max_length=160,
             messages={'max': 'The meta description should not exceed 160 characters.'})
    v.id_list('categories')
    v.id_list('tags')
    return v.validate()


def validate_category_form(form):
    v = FormValidator(form)
    v.string('name', required=True, max_length=255,
             messages={'required': 'The category name is required.'})
    v.string('slug', max_length=255)
    v.string('description', max_length=1000)
    v.integer('display_order', min_value=0, default=0)
    return v.validate()


def validate_tag_form(form):
    v = FormValidator(form)
    v.string('name', required=True, max_length=255,
             messages={'required': 'The tag name is required.'})
    v.string('slug', max_length=255)
    v.integer('display_order', min_value=0, default=0)
    return v.validate()


__all__ = [
    'FormValidator',
    'validate_comment_form',
    'validate_contact_form',
    'validate_post_form',
    'validate_category_form',
    'validate_tag_form'
]

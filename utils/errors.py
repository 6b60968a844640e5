"""
Errors Module - Exceptions raised by the blog, submission and moderation helpers
Routes translate them into flashed messages, field errors or 404 payloads.
"""


class ValidationError(Exception):
    """Field-keyed validation failure: {field: [messages]}"""

    def __init__(self, errors):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(self._format_message())

    def _format_message(self):
        segments = []
        for field, messages in self.errors.items():
            prefix = field if field != '__all__' else 'non-field'
            segments.append(f"{prefix}: {'; '.join(messages)}")
        return '; '.join(segments)

    def first_errors(self):
        """One message per field, the shape the page payload exposes"""
        return {field: messages[0] for field, messages in self.errors.items() if messages}


class RateLimitError(ValidationError):
    """Submitter must wait before sending again"""

    def __init__(self, field, message):
        self.field = field
        super().__init__({field: [message]})


class NotFoundError(Exception):
    """Unknown slug or id"""

    def __init__(self, entity, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class IntegrityGuardError(Exception):
    """Destructive action refused because rows still reference the target"""

    def __init__(self, message, blocking_count):
        self.blocking_count = blocking_count
        super().__init__(message)


__all__ = [
    'ValidationError',
    'RateLimitError',
    'NotFoundError',
    'IntegrityGuardError'
]

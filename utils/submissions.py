"""
Submissions Module - Public comment and contact form pipelines

Both pipelines run the same steps: honeypot, validation, rate limit,
persistence. A honeypot hit is discarded without a trace yet answered with
the genuine success message, so automated clients cannot tell the difference.
"""

from dataclasses import dataclass
from datetime import timedelta
from flask import current_app
from extensions import db
from models import BlogComment, ContactMessage
from .errors import RateLimitError
from .helpers import utcnow
from .notifications import notify_owner_of_contact, send_contact_auto_reply
from .validation import validate_comment_form, validate_contact_form

HONEYPOT_FIELDS = ('honeypot', 'website')

COMMENT_SUCCESS_MESSAGE = 'Your comment has been submitted and is pending approval.'
COMMENT_RATE_LIMIT_MESSAGE = 'Please wait a moment before posting another comment.'
CONTACT_SUCCESS_MESSAGE = 'Thank you for your message! I will get back to you within 24-48 hours.'
CONTACT_RATE_LIMIT_MESSAGE = 'Too many submissions. Please try again later.'


@dataclass
class SubmissionResult:
    accepted: bool
    message: str
    record: object = None


def honeypot_triggered(form):
    return any((form.get(field) or '').strip() for field in HONEYPOT_FIELDS)


class CommentSubmissionPipeline:
    """
    Accepts a comment for a post. New comments always start unapproved.

    Rate limit: one comment per IP address (any post, any approval state)
    per `window_seconds`, checked against stored comments.
    """

    def __init__(self, window_seconds=120, clock=utcnow):
        self.window_seconds = window_seconds
        self.clock = clock

    def recently_commented(self, ip_address):
        since = self.clock() - timedelta(seconds=self.window_seconds)
        query = BlogComment.query.filter(
            BlogComment.ip_address == ip_address,
            BlogComment.created_at >= since,
        )
        return db.session.query(query.exists()).scalar()

    def submit(self, post, form, ip_address, user_agent):
        if honeypot_triggered(form):
            current_app.logger.warning(f"Honeypot comment discarded from {ip_address} on post {post.slug}")
            return SubmissionResult(False, COMMENT_SUCCESS_MESSAGE)

        data = validate_comment_form(form)

        if self.recently_commented(ip_address):
            current_app.logger.warning(f"Comment rate limit hit by {ip_address}")
            raise RateLimitError('comment_body', COMMENT_RATE_LIMIT_MESSAGE)

        now = self.clock()
        comment = BlogComment(
            blog_post_id=post.id,
            user_name=data['user_name'],
            user_email=data['user_email'],
            comment_body=data['comment_body'],
            is_approved=False,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
            updated_at=now,
        )
        db.session.add(comment)
        db.session.commit()

        current_app.logger.info(f"Comment {comment.id} queued for moderation on post {post.slug}")
        return SubmissionResult(True, COMMENT_SUCCESS_MESSAGE, comment)

    @classmethod
    def from_config(cls, config):
        return cls(window_seconds=config.get('COMMENT_RATE_LIMIT_SECONDS', 120))


def contact_snapshot(message):
    """Plain copy of a ContactMessage, safe to hand to a background job"""
    return {
        'id': message.id,
        'name': message.name,
        'email': message.email,
        'subject': message.subject,
        'message': message.message,
        'created_at': message.created_at.strftime('%Y-%m-%d %H:%M UTC') if message.created_at else '',
    }


class ContactSubmissionPipeline:
    """
    Accepts a contact message, then queues the owner alert and (when
    enabled) the sender auto-reply. Queued jobs are best-effort; their
    failure never touches the stored message.

    Args:
        settings (NotificationSettings): owner address, auto-reply toggle, transport
        limiter (RateLimiter): per-IP rolling window shared across requests
        dispatcher (NotificationDispatcher): background job runner
    """

    def __init__(self, settings, limiter, dispatcher, clock=utcnow):
        self.settings = settings
        self.limiter = limiter
        self.dispatcher = dispatcher
        self.clock = clock

    def submit(self, form, ip_address, user_agent):
        if honeypot_triggered(form):
            current_app.logger.warning(f"Honeypot contact submission discarded from {ip_address}")
            return SubmissionResult(False, CONTACT_SUCCESS_MESSAGE)

        data = validate_contact_form(form)

        token = self.limiter.hit(ip_address)
        if token is None:
            current_app.logger.warning(f"Contact rate limit hit by {ip_address}")
            raise RateLimitError('message', CONTACT_RATE_LIMIT_MESSAGE)

        now = self.clock()
        message = ContactMessage(
            name=data['name'],
            email=data['email'],
            subject=data['subject'],
            message=data['message'],
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
            updated_at=now,
        )
        try:
            db.session.add(message)
            db.session.commit()
        except Exception:
            db.session.rollback()
            self.limiter.release(ip_address, token)
            raise

        current_app.logger.info(f"Contact message {message.id} stored from {ip_address}")
        self._queue_notifications(contact_snapshot(message))
        return SubmissionResult(True, CONTACT_SUCCESS_MESSAGE, message)

    def _queue_notifications(self, snapshot):
        jobs = [notify_owner_of_contact]
        if self.settings.auto_reply:
            jobs.append(send_contact_auto_reply)
        for job in jobs:
            try:
                self.dispatcher.enqueue(job, self.settings, snapshot)
            except Exception as e:
                current_app.logger.error(f"Could not queue {job.__name__} for message {snapshot['id']}: {str(e)}")


__all__ = [
    'SubmissionResult',
    'CommentSubmissionPipeline',
    'ContactSubmissionPipeline',
    'honeypot_triggered',
    'contact_snapshot',
    'COMMENT_SUCCESS_MESSAGE',
    'CONTACT_SUCCESS_MESSAGE'
]

"""
Moderation Module - Admin state transitions for comments, posts and the inbox
Every action only persists a flag change; nothing is sent anywhere.
"""

from flask import current_app
from extensions import db
from models import BlogComment, BlogPost, ContactMessage
from .helpers import utcnow


# Comments

def set_comment_approval(comment, approved):
    comment.is_approved = bool(approved)
    db.session.commit()
    current_app.logger.info(f"Comment {comment.id} {'approved' if approved else 'unapproved'}")
    return comment


def toggle_comment_approval(comment):
    return set_comment_approval(comment, not comment.is_approved)


def delete_comment(comment):
    comment_id = comment.id
    db.session.delete(comment)
    db.session.commit()
    current_app.logger.info(f"Comment {comment_id} deleted")


def _existing_ids(model, ids):
    ids = [str(i) for i in ids if i]
    if not ids:
        return []
    return [row[0] for row in db.session.query(model.id).filter(model.id.in_(ids)).all()]


def bulk_approve_comments(ids):
    """Approve every existing id; unknown ids are skipped. Returns the affected count."""
    existing = _existing_ids(BlogComment, ids)
    if existing:
        BlogComment.query.filter(BlogComment.id.in_(existing)).update(
            {BlogComment.is_approved: True}, synchronize_session=False)
        db.session.commit()
    current_app.logger.info(f"Bulk approved {len(existing)} comment(s)")
    return len(existing)


def bulk_delete_comments(ids):
    """Delete every existing id; unknown ids are skipped. Returns the affected count."""
    existing = _existing_ids(BlogComment, ids)
    if existing:
        BlogComment.query.filter(BlogComment.id.in_(existing)).delete(synchronize_session=False)
        db.session.commit()
    current_app.logger.info(f"Bulk deleted {len(existing)} comment(s)")
    return len(existing)


# Posts

def toggle_post_publish(post, now=None):
    """published <-> draft; first publish stamps published_at"""
    if post.status == BlogPost.STATUS_PUBLISHED:
        post.status = BlogPost.STATUS_DRAFT
    else:
        post.status = BlogPost.STATUS_PUBLISHED
        if post.published_at is None:
            post.published_at = now or utcnow()
    db.session.commit()
    current_app.logger.info(f"Post {post.slug} is now {post.status}")
    return post


def toggle_post_featured(post):
    post.is_featured = not post.is_featured
    db.session.commit()
    current_app.logger.info(f"Post {post.slug} featured={post.is_featured}")
    return post


# Contact inbox

def set_message_read(message, read=True):
    message.is_read = bool(read)
    db.session.commit()
    return message


def toggle_message_read(message):
    return set_message_read(message, not message.is_read)


def set_message_replied(message, replied=True):
    message.is_replied = bool(replied)
    db.session.commit()
    return message


def toggle_message_replied(message):
    return set_message_replied(message, not message.is_replied)


def delete_message(message):
    message_id = message.id
    db.session.delete(message)
    db.session.commit()
    current_app.logger.info(f"Contact message {message_id} deleted")


def bulk_set_messages_read(ids, read=True):
    existing = _existing_ids(ContactMessage, ids)
    if existing:
        ContactMessage.query.filter(ContactMessage.id.in_(existing)).update(
            {ContactMessage.is_read: bool(read)}, synchronize_session=False)
        db.session.commit()
    return len(existing)


def bulk_delete_messages(ids):
    existing = _existing_ids(ContactMessage, ids)
    if existing:
        ContactMessage.query.filter(ContactMessage.id.in_(existing)).delete(synchronize_session=False)
        db.session.commit()
    current_app.logger.info(f"Bulk deleted {len(existing)} contact message(s)")
    return len(existing)


__all__ = [
    'set_comment_approval',
    'toggle_comment_approval',
    'delete_comment',
    'bulk_approve_comments',
    'bulk_delete_comments',
    'toggle_post_publish',
    'toggle_post_featured',
    'set_message_read',
    'toggle_message_read',
    'set_message_replied',
    'toggle_message_replied',
    'delete_message',
    'bulk_set_messages_read',
    'bulk_delete_messages'
]

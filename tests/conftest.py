from datetime import timedelta

import pytest

import utils.notifications as notifications
from app import create_app
from extensions import db
from models import BlogCategory, BlogComment, BlogPost, BlogTag, ContactMessage, User
from utils.helpers import utcnow
from utils.security import hash_password

ADMIN_EMAIL = "admin@example.test"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sent_mail(monkeypatch):
    """Recording mail transport; Telegram is silenced"""
    outbox = []

    def record(settings, recipient, subject, body, html=False, reply_to=None):
        outbox.append({"to": recipient, "subject": subject, "body": body, "reply_to": reply_to})
        return True

    monkeypatch.setattr(notifications, "send_email", record)
    monkeypatch.setattr(notifications, "send_telegram_notification", lambda settings, text: False)
    return outbox


@pytest.fixture
def make_category(app):
    def factory(name="Python", slug=None, display_order=0):
        category = BlogCategory(name=name, slug=slug or name.lower().replace(" ", "-"),
                                display_order=display_order)
        db.session.add(category)
        db.session.commit()
        return category

    return factory


@pytest.fixture
def make_tag(app):
    def factory(name="flask", slug=None, display_order=0):
        tag = BlogTag(name=name, slug=slug or name.lower().replace(" ", "-"), display_order=display_order)
        db.session.add(tag)
        db.session.commit()
        return tag

    return factory


@pytest.fixture
def make_post(app):
    counter = {"n": 0}

    def factory(title=None, status=BlogPost.STATUS_PUBLISHED, published_at=None, days_ago=1,
                categories=(), tags=(), is_featured=False, content="Some words about Python.",
                excerpt=None, slug=None):
        counter["n"] += 1
        title = title or f"Post {counter['n']}"
        if published_at is None and status == BlogPost.STATUS_PUBLISHED:
            published_at = utcnow() - timedelta(days=days_ago)
        post = BlogPost(
            title=title,
            slug=slug or f"post-{counter['n']}",
            excerpt=excerpt,
            content=content,
            author_name="Site Owner",
            status=status,
            published_at=published_at,
            is_featured=is_featured,
            views_count=0,
        )
        post.categories = list(categories)
        post.tags = list(tags)
        db.session.add(post)
        db.session.commit()
        return post

    return factory


@pytest.fixture
def make_comment(app):
    def factory(post, approved=False, ip_address="10.0.0.9", created_at=None, body="A thoughtful reply."):
        comment = BlogComment(
            blog_post_id=post.id,
            user_name="Reader",
            user_email="reader@example.test",
            comment_body=body,
            is_approved=approved,
            ip_address=ip_address,
            user_agent="pytest",
            created_at=created_at or utcnow(),
        )
        db.session.add(comment)
        db.session.commit()
        return comment

    return factory


@pytest.fixture
def make_message(app):
    def factory(subject="Project inquiry", is_read=False, is_replied=False, name="Ada"):
        message = ContactMessage(
            name=name,
            email="ada@example.test",
            subject=subject,
            message="I would like to talk about a project.",
            is_read=is_read,
            is_replied=is_replied,
            ip_address="10.0.0.5",
            user_agent="pytest",
        )
        db.session.add(message)
        db.session.commit()
        return message

    return factory


@pytest.fixture
def admin_user(app):
    user = User(name="Admin", email=ADMIN_EMAIL, role="admin", password_hash=hash_password(ADMIN_PASSWORD))
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_client(client, admin_user):
    response = client.post("/admin/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 302
    return client

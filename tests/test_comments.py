from datetime import timedelta

from app import apply_proxy_fix
from models import BlogComment, BlogPost
from utils.helpers import utcnow
from utils.submissions import COMMENT_SUCCESS_MESSAGE, CommentSubmissionPipeline

VALID_COMMENT = {
    "user_name": "Grace",
    "user_email": "grace@example.test",
    "comment_body": "Great write-up, thanks!",
}


def _post_comment(client, post, data=None, ip="203.0.113.7", **kwargs):
    return client.post(
        f"/blog/{post.id}/comments",
        data=data or VALID_COMMENT,
        environ_base={"REMOTE_ADDR": ip},
        **kwargs,
    )


def test_comment_is_stored_pending_and_redirects_to_comments(client, make_post):
    post = make_post(slug="hello")

    response = _post_comment(client, post, headers={"User-Agent": "pytest-agent"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/blog/hello#comments")
    comment = BlogComment.query.one()
    assert comment.is_approved is False
    assert comment.blog_post_id == post.id
    assert comment.ip_address == "203.0.113.7"
    assert comment.user_agent == "pytest-agent"


def test_success_flash_and_pending_comment_not_shown(client, make_post):
    post = make_post(slug="hello")

    response = _post_comment(client, post, follow_redirects=True)

    payload = response.get_json()
    assert payload["flash"] == {"success": COMMENT_SUCCESS_MESSAGE}
    assert payload["props"]["post"]["comments"] == []


def test_forwarded_for_is_ignored_without_trusted_proxy(client, make_post):
    post = make_post()
    _post_comment(client, post, headers={"X-Forwarded-For": "198.51.100.4, 10.0.0.1"})
    assert BlogComment.query.one().ip_address == "203.0.113.7"


def test_spoofed_forwarded_for_cannot_dodge_comment_window(client, make_post):
    first, second = make_post(), make_post()
    _post_comment(client, first, headers={"X-Forwarded-For": "198.51.100.1"})
    _post_comment(client, second, headers={"X-Forwarded-For": "198.51.100.2"})
    assert BlogComment.query.count() == 1


def test_trusted_proxy_hop_supplies_client_ip(app, client, make_post):
    app.config["PROXY_FIX_X_FOR"] = 1
    apply_proxy_fix(app)
    post = make_post()

    _post_comment(client, post, ip="10.0.0.1", headers={"X-Forwarded-For": "198.51.100.4"})

    assert BlogComment.query.one().ip_address == "198.51.100.4"


def test_validation_errors_are_reported_per_field(client, make_post):
    post = make_post()
    bad = {"user_name": "", "user_email": "not-an-email", "comment_body": "hey"}

    response = _post_comment(client, post, data=bad, follow_redirects=True)

    payload = response.get_json()
    assert payload["errors"] == {
        "user_name": "Please enter your name.",
        "user_email": "Please enter a valid email address.",
        "comment_body": "Your comment must be at least 5 characters.",
    }
    assert payload["old"]["user_email"] == "not-an-email"
    assert BlogComment.query.count() == 0


def test_comment_body_length_limit(client, make_post):
    post = make_post()
    data = dict(VALID_COMMENT, comment_body="x" * 2001)

    response = _post_comment(client, post, data=data, follow_redirects=True)

    assert response.get_json()["errors"]["comment_body"] == "Your comment cannot exceed 2000 characters."
    assert BlogComment.query.count() == 0


def test_second_comment_within_window_is_rejected(client, make_post):
    first, second = make_post(), make_post()
    _post_comment(client, first)

    response = _post_comment(client, second, follow_redirects=True)

    assert response.get_json()["errors"] == {
        "comment_body": "Please wait a moment before posting another comment."
    }
    assert BlogComment.query.count() == 1


def test_rate_limit_is_per_ip(client, make_post):
    post = make_post()
    _post_comment(client, post, ip="203.0.113.7")
    _post_comment(client, post, ip="203.0.113.8")
    assert BlogComment.query.count() == 2


def test_rate_limit_counts_pending_comments_and_expires(app, make_post, make_comment):
    post = make_post()
    pipeline = CommentSubmissionPipeline.from_config(app.config)
    make_comment(post, approved=False, ip_address="203.0.113.7", created_at=utcnow() - timedelta(seconds=60))
    assert pipeline.recently_commented("203.0.113.7")

    later = CommentSubmissionPipeline(window_seconds=120, clock=lambda: utcnow() + timedelta(seconds=90))
    assert not later.recently_commented("203.0.113.7")


def test_honeypot_is_silently_discarded(client, make_post):
    post = make_post(slug="hello")
    data = dict(VALID_COMMENT, website="http://spam.example")

    response = _post_comment(client, post, data=data)

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/blog/hello#comments")
    assert BlogComment.query.count() == 0
    follow = client.get("/blog/hello").get_json()
    assert follow["flash"] == {"success": COMMENT_SUCCESS_MESSAGE}


def test_honeypot_does_not_consume_rate_limit(client, make_post):
    post = make_post()
    _post_comment(client, post, data=dict(VALID_COMMENT, honeypot="bot"))
    _post_comment(client, post)
    assert BlogComment.query.count() == 1


def test_comments_rejected_on_unpublished_posts(client, make_post):
    draft = make_post(status=BlogPost.STATUS_DRAFT)
    scheduled = make_post(published_at=utcnow() + timedelta(days=1))

    assert _post_comment(client, draft).status_code == 404
    assert _post_comment(client, scheduled).status_code == 404
    assert client.post("/blog/no-such-id/comments", data=VALID_COMMENT).status_code == 404
    assert BlogComment.query.count() == 0


def test_approved_comments_listed_oldest_first(client, make_post, make_comment):
    post = make_post(slug="hello")
    make_comment(post, approved=True, body="second", created_at=utcnow() - timedelta(hours=1))
    make_comment(post, approved=True, body="first", created_at=utcnow() - timedelta(hours=2))

    comments = client.get("/blog/hello").get_json()["props"]["post"]["comments"]
    assert [c["comment_body"] for c in comments] == ["first", "second"]
    assert comments[0]["time_ago"] == "2 hours ago"

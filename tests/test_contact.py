import utils.notifications as notifications
import utils.submissions as submissions
from models import ContactMessage
from utils.notifications import NotificationSettings
from utils.submissions import CONTACT_SUCCESS_MESSAGE

VALID_MESSAGE = {
    "name": "Ada Lovelace",
    "email": "ada@example.test",
    "subject": "Collaboration",
    "message": "Would you be open to a short project together?",
}


def _send(client, data=None, ip="192.0.2.10", **kwargs):
    return client.post("/contact", data=data or VALID_MESSAGE, environ_base={"REMOTE_ADDR": ip}, **kwargs)


def test_contact_page_renders(client):
    payload = client.get("/contact").get_json()
    assert payload["component"] == "Contact"


def test_message_is_stored_and_notifications_sent(client, sent_mail):
    response = _send(client)

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/contact")

    message = ContactMessage.query.one()
    assert message.subject == "Collaboration"
    assert message.is_read is False
    assert message.is_replied is False
    assert message.ip_address == "192.0.2.10"

    owner, reply = sent_mail
    assert owner["to"] == "owner@example.test"
    assert owner["reply_to"] == "ada@example.test"
    assert "Collaboration" in owner["subject"]
    assert f"/admin/inbox/{message.id}" in owner["body"]
    assert reply["to"] == "ada@example.test"
    assert reply["body"].startswith("Hi Ada Lovelace,")


def test_success_flash_after_redirect(client, sent_mail):
    payload = _send(client, follow_redirects=True).get_json()
    assert payload["flash"] == {"success": CONTACT_SUCCESS_MESSAGE}
    assert payload["errors"] == {}


def test_auto_reply_can_be_disabled(app, client, sent_mail):
    app.config["CONTACT_AUTO_REPLY"] = False
    _send(client)
    assert [mail["to"] for mail in sent_mail] == ["owner@example.test"]


def test_validation_errors(client, sent_mail):
    bad = {"name": "Ada", "email": "ada@", "subject": "", "message": "too short"}

    payload = _send(client, data=bad, follow_redirects=True).get_json()

    assert payload["errors"] == {
        "email": "Please enter a valid email address.",
        "subject": "Please enter a subject.",
        "message": "Your message must be at least 10 characters.",
    }
    assert payload["old"]["name"] == "Ada"
    assert ContactMessage.query.count() == 0
    assert sent_mail == []


def test_invalid_submissions_do_not_consume_the_limit(app, client, sent_mail):
    for _ in range(5):
        _send(client, data=dict(VALID_MESSAGE, message="short"))
    assert app.extensions["contact_rate_limiter"].count("192.0.2.10") == 0

    _send(client)
    assert ContactMessage.query.count() == 1


def test_fourth_message_within_the_hour_is_rejected(client, sent_mail):
    for _ in range(3):
        _send(client)

    payload = _send(client, follow_redirects=True).get_json()

    assert payload["errors"] == {"message": "Too many submissions. Please try again later."}
    assert ContactMessage.query.count() == 3
    assert len(sent_mail) == 6


def test_limit_is_per_ip(client, sent_mail):
    for _ in range(3):
        _send(client, ip="192.0.2.10")
    _send(client, ip="192.0.2.11")
    assert ContactMessage.query.count() == 4


def test_rotating_forwarded_for_shares_one_budget(client, sent_mail):
    for i in range(4):
        _send(client, headers={"X-Forwarded-For": f"10.9.9.{i}"})

    assert ContactMessage.query.count() == 3
    assert {m.ip_address for m in ContactMessage.query.all()} == {"192.0.2.10"}


def test_limit_window_rolls(app, client, sent_mail):
    now = [1000.0]
    limiter = app.extensions["contact_rate_limiter"]
    limiter.clock = lambda: now[0]

    for _ in range(3):
        _send(client)
    now[0] += 3599
    _send(client)
    assert ContactMessage.query.count() == 3

    now[0] += 1
    _send(client)
    assert ContactMessage.query.count() == 4


def test_honeypot_submission_is_discarded(client, sent_mail):
    payload = _send(client, data=dict(VALID_MESSAGE, honeypot="I am a bot"), follow_redirects=True).get_json()

    assert payload["flash"] == {"success": CONTACT_SUCCESS_MESSAGE}
    assert ContactMessage.query.count() == 0
    assert sent_mail == []


def test_notification_failure_keeps_message(client, sent_mail, monkeypatch):
    def broken(settings, message):
        raise RuntimeError("smtp down")

    monkeypatch.setattr(submissions, "notify_owner_of_contact", broken)

    payload = _send(client, follow_redirects=True).get_json()

    assert payload["flash"] == {"success": CONTACT_SUCCESS_MESSAGE}
    assert ContactMessage.query.count() == 1
    # the auto-reply job still runs
    assert [mail["to"] for mail in sent_mail] == ["ada@example.test"]


def test_telegram_alert_escapes_visitor_text(app, monkeypatch):
    alerts = []
    monkeypatch.setattr(notifications, "send_email", lambda *args, **kwargs: True)
    monkeypatch.setattr(notifications, "send_telegram_notification",
                        lambda settings, text: alerts.append(text) or True)
    settings = NotificationSettings.from_config(app.config)

    notifications.notify_owner_of_contact(settings, {
        "id": "abc", "name": "Bob <b>", "email": "bob@example.test", "subject": "Hi & bye",
        "message": "I <3 your work", "created_at": "2026-01-01 10:00",
    })

    (text,) = alerts
    assert "Bob &lt;b&gt;" in text
    assert "Hi &amp; bye" in text
    assert "I &lt;3 your work" in text

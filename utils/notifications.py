"""
Notifications Module - Email and Telegram notifications
Outbound messages are handed to a NotificationDispatcher so a slow or failing
transport never delays or fails the request that triggered them.
"""

import smtplib
import threading
import requests
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from flask import current_app
from markupsafe import escape


@dataclass(frozen=True)
class NotificationSettings:
    """Mail/alert settings resolved from app config once, at construction time"""
    owner_email: str = None
    auto_reply: bool = True
    from_address: str = None
    from_name: str = 'Portfolio'
    smtp_host: str = None
    smtp_port: int = 587
    smtp_username: str = None
    smtp_password: str = None
    smtp_use_tls: bool = True
    telegram_bot_token: str = None
    telegram_chat_id: str = None
    app_url: str = 'http://localhost:5000'

    @classmethod
    def from_config(cls, config):
        from_address = config.get('MAIL_FROM_ADDRESS')
        return cls(
            owner_email=config.get('CONTACT_OWNER_EMAIL') or from_address,
            auto_reply=bool(config.get('CONTACT_AUTO_REPLY', True)),
            from_address=from_address,
            from_name=config.get('MAIL_FROM_NAME') or 'Portfolio',
            smtp_host=config.get('SMTP_HOST'),
            smtp_port=int(config.get('SMTP_PORT') or 587),
            smtp_username=config.get('SMTP_USERNAME') or from_address,
            smtp_password=config.get('SMTP_PASSWORD'),
            smtp_use_tls=bool(config.get('SMTP_USE_TLS', True)),
            telegram_bot_token=config.get('TELEGRAM_BOT_TOKEN'),
            telegram_chat_id=config.get('TELEGRAM_CHAT_ID'),
            app_url=(config.get('APP_URL') or 'http://localhost:5000').rstrip('/'),
        )

    @property
    def smtp_configured(self):
        return bool(self.smtp_host and self.from_address)

    @property
    def telegram_configured(self):
        return bool(self.telegram_bot_token and self.telegram_chat_id)


class NotificationDispatcher:
    """
    Fire-and-forget job runner.

    Jobs run on daemon threads inside an app context; with run_async=False
    (testing) they run inline. Either way a failing job is logged and
    swallowed, it never reaches the caller.
    """

    def __init__(self, run_async=True):
        self.run_async = run_async

    def enqueue(self, job, *args, **kwargs):
        app = current_app._get_current_object()

        def _run():
            with app.app_context():
                try:
                    job(*args, **kwargs)
                except Exception as e:
                    app.logger.error(f"Notification job {getattr(job, '__name__', job)} failed: {str(e)}")

        if self.run_async:
            thread = threading.Thread(target=_run)
            thread.daemon = True
            thread.start()
        else:
            _run()


def send_email(settings, recipient, subject, body, html=False, reply_to=None):
    """
    Send email using SMTP

    Args:
        settings (NotificationSettings): transport settings
        recipient (str): Email recipient
        subject (str): Email subject
        body (str): Email body
        html (bool): Whether body is HTML
        reply_to (str, optional): Reply-To header

    Returns:
        bool: Success status
    """
    if not settings.smtp_configured:
        current_app.logger.debug(f"SMTP not configured, skipping email to {recipient}")
        return False

    try:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = formataddr((settings.from_name, settings.from_address))
        msg['To'] = recipient
        if reply_to:
            msg['Reply-To'] = reply_to
        msg.attach(MIMEText(body, 'html' if html else 'plain'))

        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=15) as server:
            if settings.smtp_use_tls:
                server.starttls()
            if settings.smtp_username and settings.smtp_password:
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(msg)

        current_app.logger.info(f"Email sent to {recipient}")
        return True
    except Exception as e:
        current_app.logger.error(f"Error sending email to {recipient}: {str(e)}")
        return False


def send_telegram_notification(settings, message_text):
    """Send an HTML-formatted Telegram message to the site owner's chat"""
    if not settings.telegram_configured:
        current_app.logger.debug("Owner Telegram credentials not configured")
        return False

    try:
        url = f"https://api.telegram.org/bot{settings.telegram_bot_token}/sendMessage"
        payload = {
            'chat_id': settings.telegram_chat_id,
            'text': message_text,
            'parse_mode': 'HTML'
        }
        response = requests.post(url, json=payload, timeout=10)
        if response.status_code == 200:
            current_app.logger.info("Owner Telegram notification sent")
            return True
        current_app.logger.error(f"Telegram API error: {response.status_code}")
        return False
    except Exception as e:
        current_app.logger.error(f"Telegram notification error: {str(e)}")
        return False


def notify_owner_of_contact(settings, message):
    """
    Alert the site owner about a new contact message.

    Args:
        settings (NotificationSettings): transport settings
        message (dict): snapshot of the stored ContactMessage
    """
    if settings.owner_email:
        body = (
            f"New message from your portfolio contact form.\n\n"
            f"From: {message['name']} <{message['email']}>\n"
            f"Subject: {message['subject']}\n"
            f"Received: {message['created_at']}\n\n"
            f"{message['message']}\n\n"
            f"Inbox: {settings.app_url}/admin/inbox/{message['id']}\n"
        )
        send_email(settings, settings.owner_email,
                   f"New contact message: {message['subject']}", body,
                   reply_to=message['email'])
    else:
        current_app.logger.debug("No owner email configured for contact alerts")

    preview = message['message'][:200] + ('...' if len(message['message']) > 200 else '')
    # Sent with parse_mode=HTML: visitor text must be escaped
    send_telegram_notification(
        settings,
        f"📧 <b>New Contact Message</b>\n\n"
        f"👤 <b>From:</b> {escape(message['name'])}\n"
        f"📧 <b>Email:</b> {escape(message['email'])}\n"
        f"📌 <b>Subject:</b> {escape(message['subject'])}\n"
        f"💬 <b>Message:</b>\n{escape(preview)}")


def send_contact_auto_reply(settings, message):
    """Acknowledge a contact message to its sender"""
    body = (
        f"Hi {message['name']},\n\n"
        f"Thank you for reaching out. Your message \"{message['subject']}\" has been "
        f"received and I will get back to you within 24-48 hours.\n\n"
        f"Best regards,\n{settings.from_name}\n{settings.app_url}\n"
    )
    send_email(settings, message['email'], f"Thanks for your message: {message['subject']}", body)


__all__ = [
    'NotificationSettings',
    'NotificationDispatcher',
    'send_email',
    'send_telegram_notification',
    'notify_owner_of_contact',
    'send_contact_auto_reply'
]

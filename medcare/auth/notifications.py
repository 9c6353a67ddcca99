"""
Account notification emails: activation, password reset and account creation.

Sending is best effort. `dispatch` never lets a delivery failure reach the
lifecycle operation that triggered it.
"""
import logging
import smtplib
import ssl
import time
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Callable, Optional

from fastapi import BackgroundTasks

from ..config import settings
from .models import User

# Set up logging
logger = logging.getLogger(__name__)

# Connection timeout settings
SMTP_TIMEOUT = 30
MAX_RETRIES = 3
RETRY_DELAY = 2

TEMPLATE = """
<html>
    <head><title>MedCare - {title}</title></head>
    <body>
        <p>Dear {name},</p>
        <p>{intro}</p>
        <p><a href="{link}">{link}</a></p>
        <p>Regards,<br>MedCare Team</p>
    </body>
</html>
"""


class NotificationDispatcher:
    """
    Builds account emails and delivers them over SMTP.

    When no mail server is configured the message is logged and dropped.
    """

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.base_url).rstrip("/")

    def send_activation(self, user: User) -> None:
        logger.info(f"Sending activation email to '{user.email}'")
        if user.activation_key is None:
            # already activated during registration
            intro = "Your MedCare account has been created and activated, you can sign in here:"
            link = f"{self.base_url}/#/login"
        else:
            intro = "Your MedCare account has been created, please click on the link below to activate it:"
            link = f"{self.base_url}/#/activate?key={user.activation_key}"
        self._send_account_mail(user, subject="MedCare account activation", intro=intro, link=link)

    def send_reset(self, user: User, key: str) -> None:
        logger.info(f"Sending password reset email to '{user.email}'")
        self._send_account_mail(
            user,
            subject="MedCare password reset",
            intro="For your MedCare account a password reset was requested, please click on the link below to reset it:",
            link=f"{self.base_url}/#/reset/finish?key={key}",
        )

    def send_creation(self, user: User) -> None:
        logger.info(f"Sending creation email to '{user.email}'")
        self._send_account_mail(
            user,
            subject="MedCare account created",
            intro="Your MedCare account has been created, please click on the link below to access it:",
            link=f"{self.base_url}/#/reset/finish?key={user.reset_key}",
        )

    def _send_account_mail(self, user: User, subject: str, intro: str, link: str) -> None:
        html_content = TEMPLATE.format(
            title=subject,
            name=user.first_name or user.login,
            intro=intro,
            link=link,
        )
        self.send_email(user.email, subject, html_content)

    def send_email(self, to: str, subject: str, html_content: str) -> None:
        """
        Send an HTML email with retry logic.

        Args:
            to: Recipient address
            subject: Mail subject
            html_content: HTML body

        Raises:
            RuntimeError: If sending fails after all retries
        """
        if not settings.mail_server:
            logger.warning(f"Mail server not configured, email '{subject}' to {to} not sent")
            return

        msg = MIMEMultipart()
        msg["From"] = settings.mail_from
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html_content, "html"))

        last_exception = None
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                with smtplib.SMTP(settings.mail_server, settings.mail_port, timeout=SMTP_TIMEOUT) as server:
                    if settings.mail_starttls:
                        server.starttls(context=ssl.create_default_context())
                    if settings.mail_username:
                        server.login(settings.mail_username, settings.mail_password)
                    server.send_message(msg)
                logger.info(f"Email '{subject}' sent to {to}")
                return
            except (smtplib.SMTPException, OSError) as e:
                logger.error(f"Error sending email on attempt {attempt}/{MAX_RETRIES}: {str(e)}")
                last_exception = e
                if attempt < MAX_RETRIES:
                    time.sleep(RETRY_DELAY)

        raise RuntimeError(f"Failed to send email after {MAX_RETRIES} attempts") from last_exception


def _deliver(send: Callable[..., None], *args) -> None:
    try:
        send(*args)
    except Exception as e:
        logger.error(f"Notification {getattr(send, '__name__', send)} failed: {str(e)}")


def dispatch(send: Callable[..., None], *args, background_tasks: Optional[BackgroundTasks] = None) -> None:
    """
    Fire-and-forget a notification.

    Args:
        send: Bound dispatcher method, e.g. notifier.send_activation
        *args: Arguments for `send`
        background_tasks: Run after the response when given, inline otherwise
    """
    if background_tasks is not None:
        background_tasks.add_task(_deliver, send, *args)
    else:
        _deliver(send, *args)


notification_dispatcher = NotificationDispatcher()

def get_notifier() -> NotificationDispatcher:
    """Dependency returning the process-wide notification dispatcher."""
    return notification_dispatcher

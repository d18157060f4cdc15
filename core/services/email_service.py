# =============================================================================
# core/services/email_service.py - Transactional Email
# =============================================================================
# Renders emails from Jinja2 templates (templates/email/<name>.txt + .html)
# and sends them over SMTP.
#
# Transports:
# - SMTP_HOST set: smtplib with optional STARTTLS and login
# - SMTP_HOST unset: the message is logged instead of sent (development)
#
# These functions are called from Celery tasks (workers/tasks.py), never
# directly from request handlers.
# =============================================================================

import logging
import os
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Any

import jinja2

from app.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates", "email")
SMTP_TIMEOUT_SECONDS = 10


class EmailService:
    """Compose and deliver transactional emails."""

    _jinja_env: jinja2.Environment | None = None

    @classmethod
    def _get_jinja_env(cls) -> jinja2.Environment:
        """Get or create the Jinja2 environment with template loader."""
        if cls._jinja_env is None:
            cls._jinja_env = jinja2.Environment(
                loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
                autoescape=jinja2.select_autoescape(["html"]),
                undefined=jinja2.StrictUndefined,
            )
        return cls._jinja_env

    @classmethod
    def render(cls, template: str, context: dict[str, Any]) -> tuple[str, str]:
        """
        Render the text and HTML bodies of a template.

        Returns:
            (text_body, html_body)
        """
        env = cls._get_jinja_env()
        full_context = {
            "company_name": settings.COMPANY_NAME,
            "company_email": settings.COMPANY_EMAIL,
            "company_url": settings.COMPANY_URL,
            "contribution_percent": round(settings.HOMELESS_CONTRIBUTION_RATE * 100),
            **context,
        }
        text = env.get_template(f"{template}.txt").render(full_context)
        html = env.get_template(f"{template}.html").render(full_context)
        return text.strip(), html

    @staticmethod
    def build_message(to: str, subject: str, text: str, html: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = formataddr((settings.COMPANY_NAME, settings.COMPANY_EMAIL))
        message["To"] = to
        message.attach(MIMEText(text, "plain", "utf-8"))
        message.attach(MIMEText(html, "html", "utf-8"))
        return message

    @staticmethod
    def deliver(message: MIMEMultipart) -> str:
        """
        Send a message with the configured transport.

        Returns:
            "smtp" or "log", the transport that handled it

        Raises:
            smtplib.SMTPException / OSError: On SMTP failure (Celery retries)
        """
        if not settings.smtp_enabled:
            logger.info(
                f"Email (not sent, SMTP disabled) to={message['To']} subject={message['Subject']!r}"
            )
            return "log"

        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USER and settings.SMTP_PASS:
                smtp.login(settings.SMTP_USER, settings.SMTP_PASS)
            smtp.send_message(message)

        logger.info(f"Email sent to={message['To']} subject={message['Subject']!r}")
        return "smtp"

    @classmethod
    def send(cls, to: str, subject: str, template: str, context: dict[str, Any]) -> str:
        text, html = cls.render(template, context)
        return cls.deliver(cls.build_message(to, subject, text, html))

    # -------------------------------------------------------------------------
    # Emails
    # -------------------------------------------------------------------------

    @classmethod
    def send_customer_welcome(cls, email: str, name: str | None) -> str:
        first_name = name.split(" ")[0] if name else "there"
        return cls.send(
            email,
            f"Welcome to {settings.COMPANY_NAME}!",
            "welcome_customer",
            {"first_name": first_name},
        )

    @classmethod
    def send_artist_welcome(cls, email: str, business_name: str) -> str:
        return cls.send(
            email,
            f"Welcome to {settings.COMPANY_NAME}, Artist!",
            "welcome_artist",
            {
                "business_name": business_name,
                "dashboard_url": f"{settings.COMPANY_URL}/artist-cms/dashboard.html",
            },
        )

    @classmethod
    def send_password_reset(cls, email: str, token: str, account: str = "customer") -> str:
        if account == "artist":
            reset_url = f"{settings.FRONTEND_URL}/artist-cms/reset-password.html?token={token}"
        else:
            reset_url = f"{settings.FRONTEND_URL}/frontend/reset-password.html?token={token}"
        return cls.send(
            email,
            f"Reset Your Password - {settings.COMPANY_NAME}",
            "password_reset",
            {
                "reset_url": reset_url,
                "expires_minutes": settings.RESET_TOKEN_EXPIRE_MINUTES,
            },
        )

    @classmethod
    def send_order_confirmation(cls, order: dict[str, Any], items: list[dict[str, Any]]) -> str:
        return cls.send(
            order["customer_email"],
            f"Order {order['order_number']} confirmed - {settings.COMPANY_NAME}",
            "order_confirmation",
            {
                "order": order,
                "items": items,
                "customer_name": order.get("customer_name") or "there",
            },
        )

"""
Transactional email (verification and password reset links) over SMTP.

When SMTP_HOST is not configured the message is not sent; the body, link
included, is written to the debug log instead.
"""
import logging
import smtplib
from email.message import EmailMessage
from html import escape

from pathwise.core import config

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """The SMTP server rejected or could not accept the message."""


def _send(to: str, subject: str, text_body: str, html_body: str) -> None:
    if not config.SMTP_HOST:
        logger.info(f"SMTP not configured - email to {to} not sent. Subject: {subject}")
        logger.debug(f"Unsent email body: {text_body}")
        return

    message = EmailMessage()
    message["From"] = config.EMAIL_FROM
    message["To"] = to
    message["Subject"] = subject
    message.set_content(text_body)
    message.add_alternative(html_body, subtype="html")

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30) as smtp:
            if config.SMTP_USE_TLS:
                smtp.starttls()
            if config.SMTP_USERNAME:
                smtp.login(config.SMTP_USERNAME, config.SMTP_PASSWORD or "")
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to}: {e}")
        raise EmailDeliveryError(str(e)) from e

    logger.info(f"Email sent: to={to}, subject={subject}")


def _button_html(title: str, greeting: str, prompt: str, url: str, label: str, color: str, footer: str) -> str:
    return f"""
<div style="max-width: 600px; margin: 0 auto; padding: 20px; font-family: Arial, sans-serif;">
  <h1 style="color: {color};">{title}</h1>
  <p style="color: #6b7280; font-size: 16px;">{escape(greeting)}</p>
  <p style="color: #374151; font-size: 16px;">{prompt}</p>
  <a href="{escape(url)}" style="display: inline-block; background-color: {color}; color: white; padding: 12px 30px;
     text-decoration: none; border-radius: 6px; font-weight: 600;">{label}</a>
  <p style="color: #6b7280; font-size: 14px;">{footer}</p>
</div>
"""


def send_verification_email(email: str, token: str, name: str) -> None:
    """Send the email-verification link. Raises EmailDeliveryError."""
    url = f"{config.FRONTEND_URL}/verify-email?token={token}"
    text = (
        f"Hi {name}, please verify your email address to get started.\n\n"
        f"{url}\n\nThis verification link will expire in {config.EMAIL_VERIFICATION_TTL_HOURS} hours."
    )
    html_body = _button_html(
        "Welcome to Pathwise!",
        f"Hi {name}, please verify your email address to get started.",
        "Click the button below to verify your email address:",
        url,
        "Verify Email Address",
        "#2563eb",
        f"If you didn't create an account, you can safely ignore this email. "
        f"This verification link will expire in {config.EMAIL_VERIFICATION_TTL_HOURS} hours.",
    )
    _send(email, "Verify Your Email Address", text, html_body)


def send_password_reset_email(email: str, token: str, name: str) -> None:
    """Send the password-reset link. Raises EmailDeliveryError."""
    url = f"{config.FRONTEND_URL}/reset-password?token={token}"
    text = (
        f"Hi {name}, we received a request to reset your password.\n\n"
        f"{url}\n\nThis reset link will expire in {config.PASSWORD_RESET_TTL_HOURS} hour."
    )
    html_body = _button_html(
        "Password Reset Request",
        f"Hi {name}, we received a request to reset your password.",
        "Click the button below to reset your password:",
        url,
        "Reset Password",
        "#dc2626",
        f"If you didn't request a password reset, you can safely ignore this email. "
        f"This reset link will expire in {config.PASSWORD_RESET_TTL_HOURS} hour.",
    )
    _send(email, "Reset Your Password", text, html_body)

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from jinja2 import Template

from .config import settings
from .notifications import NotificationKind

logger = logging.getLogger(__name__)

_fastmail: Optional[FastMail] = None


def get_mailer() -> FastMail:
    """Build the SMTP client on first use so the API can start without mail settings."""
    global _fastmail
    if _fastmail is None:
        email_config = ConnectionConfig(
            MAIL_USERNAME=settings.MAIL_USER,
            MAIL_PASSWORD=settings.MAIL_PASSWORD,
            MAIL_FROM=settings.MAIL_FROM or settings.MAIL_USER,
            MAIL_PORT=settings.MAIL_PORT,
            MAIL_SERVER=settings.MAIL_HOST,
            MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
            MAIL_STARTTLS=settings.MAIL_SECURE,
            MAIL_SSL_TLS=False,
            USE_CREDENTIALS=True,
            VALIDATE_CERTS=True,
        )
        _fastmail = FastMail(email_config)
    return _fastmail


# Email templates
EMAIL_TEMPLATE = """
<html>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: #f8f9fa; padding: 30px; border-radius: 10px;">
        <h2 style="color: #1f2937; margin-bottom: 20px;">
            {{ heading }}
        </h2>

        <p style="color: #4b5563; font-size: 16px; line-height: 1.6;">
            {{ body }}
        </p>

        <div style="text-align: center; margin: 30px 0;">
            <a href="{{ action_url }}"
               style="background-color: #2563eb; color: white; padding: 15px 30px;
                      text-decoration: none; border-radius: 5px; font-weight: bold;
                      display: inline-block;">
                {{ action_label }}
            </a>
        </div>

        <p style="color: #6b7280; font-size: 14px; line-height: 1.6;">
            If you can't click the button, copy and paste this link into your browser:<br>
            <a href="{{ action_url }}" style="color: #2563eb; word-break: break-all;">
                {{ action_url }}
            </a>
        </p>

        <p style="color: #6b7280; font-size: 14px; line-height: 1.6; margin-top: 30px;">
            If you did not request this, you can safely ignore this email.
        </p>

        <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">

        <p style="color: #9ca3af; font-size: 12px; text-align: center;">
            &copy; {{ current_year }} {{ sender_name }}
        </p>
    </div>
</body>
</html>
"""

EMAIL_CONTENT = {
    NotificationKind.ACTIVATION: {
        "subject": "Activate your account",
        "heading": "Activate Your Account",
        "body": "Please click the button below to activate your storage account.",
        "action_label": "Activate Account",
    },
    NotificationKind.DEACTIVATION: {
        "subject": "Confirm account deactivation",
        "heading": "Confirm Account Deactivation",
        "body": "We received a request to deactivate your account. Click the button below to confirm.",
        "action_label": "Deactivate Account",
    },
    NotificationKind.PASSWORD_RESET: {
        "subject": "Reset your password",
        "heading": "Reset Your Password",
        "body": "We received a request to reset your password. Click the button below to choose a new one.",
        "action_label": "Reset Password",
    },
}


def get_action_url(kind: NotificationKind, token: str) -> str:
    """Link the recipient follows to confirm the workflow."""
    if kind == NotificationKind.ACTIVATION:
        return f"{settings.BRIDGE_URL}/activations/{token}"
    if kind == NotificationKind.DEACTIVATION:
        return f"{settings.BRIDGE_URL}/deactivations/{token}"
    # Password resets need a form to collect the new password
    return f"{settings.FRONTEND_URL}/resets/{token}"


def render_email(kind: NotificationKind, token: str) -> str:
    """Generate the HTML body for a workflow email."""
    content = EMAIL_CONTENT[kind]
    template = Template(EMAIL_TEMPLATE)
    return template.render(
        heading=content["heading"],
        body=content["body"],
        action_label=content["action_label"],
        action_url=get_action_url(kind, token),
        sender_name=settings.MAIL_FROM_NAME,
        current_year=datetime.now(timezone.utc).year,
    )


async def send_email(kind: NotificationKind, recipient: str, token: str) -> None:
    """Send a workflow email. Delivery errors propagate to the caller."""
    message = MessageSchema(
        subject=EMAIL_CONTENT[kind]["subject"],
        recipients=[recipient],
        body=render_email(kind, token),
        subtype=MessageType.html,
    )

    await get_mailer().send_message(message)
    logger.info(f"{kind.value} email sent successfully")

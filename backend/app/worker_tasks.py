import asyncio
import logging

from sqlmodel import Session

from .core.database import get_engine
from .core.email import send_email
from .core.errors import BridgeError
from .core.notifications import NotificationKind
from .core.store import CredentialStore

logger = logging.getLogger(__name__)

# Token field consulted for each kind of email
TOKEN_FIELDS = {
    NotificationKind.ACTIVATION: "activator",
    NotificationKind.DEACTIVATION: "deactivator",
    NotificationKind.PASSWORD_RESET: "resetter",
}


def send_activation_email(user_id: str) -> bool:
    return _send_workflow_email(NotificationKind.ACTIVATION, user_id)


def send_deactivation_email(user_id: str) -> bool:
    return _send_workflow_email(NotificationKind.DEACTIVATION, user_id)


def send_password_reset_email(user_id: str) -> bool:
    return _send_workflow_email(NotificationKind.PASSWORD_RESET, user_id)


def _send_workflow_email(kind: NotificationKind, user_id: str) -> bool:
    """
    Email the user the link for their pending workflow.

    Args:
        kind: Which workflow the email belongs to
        user_id: Email-shaped ID of the recipient

    Returns:
        True if an email was sent, False if there was nothing to send or sending failed
    """
    engine = get_engine()
    if engine is None:
        logger.error(f"Database unavailable, cannot send {kind.value} email")
        return False

    try:
        with Session(engine) as session:
            user = CredentialStore(session).get_user(user_id)
            token = getattr(user, TOKEN_FIELDS[kind])
            recipient = user.id
            user_uuid = user.uuid
    except BridgeError as e:
        logger.error(f"Cannot load user for {kind.value} email: {e}")
        return False

    if not token:
        logger.warning(f"User {user_uuid} has no pending {kind.value} token, skipping email")
        return False

    try:
        asyncio.run(send_email(kind, recipient, token))
    except Exception as e:
        logger.error(f"Failed to send {kind.value} email to user {user_uuid}: {e}")
        return False

    return True

import logging
from typing import Optional

from bridge_core import generate_token

from ..core.config import settings
from ..core.errors import (
    AlreadyActive,
    AuthorizationMismatch,
    BridgeError,
    InvalidPublicKey,
    MissingPublicKey,
)
from ..core.notifications import NotificationKind, Notifier
from ..core.store import CredentialStore
from ..models.user import User
from ..schemas.user import UserView, to_view

logger = logging.getLogger(__name__)


class UserLifecycleService:
    """Registration, activation, deactivation and password reset workflows.

    Each workflow issues a single-use token into the user record and notifies
    the user; the matching confirm step looks the user up by that token and
    clears it. Store failures propagate as domain errors.
    """

    def __init__(self, store: CredentialStore, notifier: Notifier, token_bytes: Optional[int] = None):
        self.store = store
        self.notifier = notifier
        self.token_bytes = token_bytes or settings.TOKEN_BYTES

    def _token(self) -> str:
        return generate_token(self.token_bytes)

    def register(
        self,
        email: str,
        password_hash: str,
        pubkey: str,
        partner_name: Optional[str] = None,
    ) -> User:
        """Create an inactive user with a pending activation and register its public key."""
        if not pubkey:
            raise MissingPublicKey("no public key provided")

        candidate = User(id=email, hashpass=password_hash, activator=self._token())

        if partner_name:
            try:
                candidate.referral_partner = self.store.get_partner(partner_name).id
            except BridgeError as e:
                # Partner linkage is best-effort
                logger.warning(f"register: partner lookup for {partner_name!r} failed: {e}")

        user = self.store.create_user(candidate)
        logger.info(f"register: created user {user.uuid}")

        # The user stays created even when the key is rejected
        try:
            self.store.create_public_key(user, pubkey)
        except (InvalidPublicKey, BridgeError) as e:
            logger.error(f"register: public key for user {user.uuid} not stored: {e}")

        self.notifier.dispatch(NotificationKind.ACTIVATION, user.id)
        return user

    def reactivate(self, email: str) -> UserView:
        """Resend the activation email for an inactive account."""
        user = self.store.get_user(email)
        if user.activated:
            raise AlreadyActive(f"user {user.uuid} is already active")

        if not user.activator:
            self.store.set_activator(user.id, self._token())

        self.notifier.dispatch(NotificationKind.ACTIVATION, user.id)
        return to_view(user)

    def confirm_activation(self, token: str) -> UserView:
        user = self.store.find_by_activator(token)
        self.store.set_activated(user.id)
        logger.info(f"confirm_activation: user {user.uuid} activated")
        return to_view(user, activated=True)

    def deactivate(self, user_id: str, requester: Optional[str]) -> UserView:
        """Start deactivation. Only the account owner may ask for it."""
        if requester != user_id:
            raise AuthorizationMismatch("authenticated user does not match target user")

        user = self.store.get_user(user_id)
        self.store.set_deactivator(user.id, self._token())

        self.notifier.dispatch(NotificationKind.DEACTIVATION, user.id)
        return to_view(user)

    def confirm_deactivation(self, token: str) -> UserView:
        user = self.store.find_by_deactivator(token)
        # A fresh activator lets the owner come back through reactivation
        self.store.confirm_deactivation(user.id, self._token())
        logger.info(f"confirm_deactivation: user {user.uuid} deactivated")
        return to_view(user, activated=False)

    def request_password_reset(self, user_id: str) -> UserView:
        user = self.store.get_user(user_id)
        self.store.set_resetter(user.id, self._token())

        self.notifier.dispatch(NotificationKind.PASSWORD_RESET, user.id)
        return to_view(user)

    def confirm_password_reset(self, token: str, password: str) -> UserView:
        user = self.store.find_by_resetter(token)
        self.store.reset_password(user.id, password)
        logger.info(f"confirm_password_reset: password changed for user {user.uuid}")
        return to_view(user)

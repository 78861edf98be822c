import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import FlushError
from sqlmodel import Session, select

from bridge_core import decode_public_key, hash_password, validate_user_id

from .errors import Conflict, NotFound, StoreError
from ..models.partner import Partner
from ..models.public_key import PublicKey
from ..models.user import User

logger = logging.getLogger(__name__)


class CredentialStore:
    """Persistence for users, partners and public keys.

    Every mutating call is a single-row field update committed on its own;
    there are no cross-record transactions.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Users ---

    def create_user(self, candidate: User) -> User:
        """Validate and insert a new user, filling in ``created`` and ``uuid`` when absent."""
        if not candidate.created:
            candidate.created = datetime.now(timezone.utc)
        if not candidate.uuid:
            candidate.uuid = str(uuid4())

        validate_user_id(candidate.id)

        try:
            self.db.add(candidate)
            self.db.commit()
        except (IntegrityError, FlushError) as e:
            self.db.rollback()
            raise Conflict(f"user {candidate.id} already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to create user {candidate.id}") from e

        self.db.refresh(candidate)
        return candidate

    def get_user(self, user_id: str) -> User:
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to load user {user_id}") from e
        if user is None:
            raise NotFound(f"user {user_id} not found")
        return user

    def find_by_activator(self, token: str) -> User:
        return self._find_by_token(User.activator, token)

    def find_by_deactivator(self, token: str) -> User:
        return self._find_by_token(User.deactivator, token)

    def find_by_resetter(self, token: str) -> User:
        return self._find_by_token(User.resetter, token)

    def _find_by_token(self, column, token: str) -> User:
        # Cleared tokens are NULL, an empty value must never match
        if not token:
            raise NotFound("empty token")
        try:
            user = self.db.exec(select(User).where(column == token)).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to look up user by {column.key}") from e
        if user is None:
            raise NotFound(f"no user with matching {column.key}")
        return user

    def set_activator(self, user_id: str, token: str) -> None:
        self._update(user_id, activator=token)

    def set_activated(self, user_id: str) -> None:
        """Mark the user active and consume the activation token."""
        self._update(user_id, activated=True, deactivated=False, activator=None)

    def set_deactivator(self, user_id: str, token: str) -> None:
        self._update(user_id, deactivator=token)

    def confirm_deactivation(self, user_id: str, activator: str) -> None:
        """Deactivate the user, consume the deactivation token and arm reactivation."""
        self._update(
            user_id,
            activated=False,
            deactivated=True,
            deactivator=None,
            activator=activator,
        )

    def set_resetter(self, user_id: str, token: str) -> None:
        self._update(user_id, resetter=token)

    def reset_password(self, user_id: str, password: str) -> str:
        """Store the SHA-256 of ``password`` and consume the reset token. Returns the hash."""
        hashpass = hash_password(password)
        self._update(user_id, resetter=None, hashpass=hashpass)
        return hashpass

    def _update(self, user_id: str, **fields) -> None:
        user = self.get_user(user_id)
        for name, value in fields.items():
            setattr(user, name, value)

        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise Conflict(f"update of {', '.join(fields)} on {user_id} collides with another user") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to update user {user_id}") from e

    # --- Partners ---

    def get_partner(self, name: str) -> Partner:
        try:
            partner = self.db.exec(select(Partner).where(Partner.name == name)).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to look up partner {name}") from e
        if partner is None:
            raise NotFound(f"partner {name} not found")
        return partner

    # --- Public keys ---

    def get_public_key(self, key: str) -> PublicKey:
        try:
            public_key = self.db.get(PublicKey, key)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to load public key") from e
        if public_key is None:
            raise NotFound("public key not found")
        return public_key

    def public_key_exists(self, key: str) -> bool:
        try:
            return self.db.get(PublicKey, key) is not None
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to look up public key") from e

    def create_public_key(self, user: User, key: str) -> Optional[PublicKey]:
        """Register ``key`` for ``user``.

        Raises InvalidPublicKey for anything that is not a secp256k1 point.
        Registering a key that already exists is a no-op and returns None.
        """
        decode_public_key(key)

        if self.public_key_exists(key):
            logger.info(f"Public key already registered, skipping for user {user.uuid}")
            return None

        public_key = PublicKey(id=key, user=user.id)
        try:
            self.db.add(public_key)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to store public key for user {user.uuid}") from e

        self.db.refresh(public_key)
        return public_key

"""
Domain errors raised by the credential store and the user lifecycle service.

Routers translate these into HTTP status codes; nothing below the API layer
knows about HTTP.
"""

from bridge_core import InvalidIdentifier, InvalidPublicKey


class BridgeError(Exception):
    """Base class for user lifecycle failures."""


class MissingPublicKey(BridgeError):
    """Registration request carried no public key."""


class NotFound(BridgeError):
    """No user matched the given identifier or token."""


class AlreadyActive(BridgeError):
    """Reactivation was requested for an account that is already active."""


class AuthorizationMismatch(BridgeError):
    """Authenticated identity does not match the target user."""


class StoreError(BridgeError):
    """Underlying persistence failure."""


class Conflict(StoreError):
    """A record with the same unique key already exists."""


__all__ = [
    "BridgeError",
    "InvalidIdentifier",
    "InvalidPublicKey",
    "MissingPublicKey",
    "NotFound",
    "AlreadyActive",
    "AuthorizationMismatch",
    "StoreError",
    "Conflict",
]

# libs/bridge_core/bridge_core/__init__.py

from .identifiers import InvalidIdentifier, validate_user_id
from .keys import InvalidPublicKey, decode_public_key
from .tokens import MAX_TOKEN_BYTES, MIN_TOKEN_BYTES, generate_token, hash_password

__all__ = [
    "InvalidIdentifier",
    "validate_user_id",
    "InvalidPublicKey",
    "decode_public_key",
    "MIN_TOKEN_BYTES",
    "MAX_TOKEN_BYTES",
    "generate_token",
    "hash_password",
]

import hashlib
import secrets

# 256 bits of entropy is the floor for any confirmation token
MIN_TOKEN_BYTES = 32
# Hex tokens must fit the 512 character token columns
MAX_TOKEN_BYTES = 256


def generate_token(nbytes: int = MIN_TOKEN_BYTES) -> str:
    """Generate an unguessable hex token for activation, deactivation or reset flows.

    The token is drawn from the operating system CSPRNG via ``secrets``.
    """
    if not MIN_TOKEN_BYTES <= nbytes <= MAX_TOKEN_BYTES:
        raise ValueError(
            f"Tokens need between {MIN_TOKEN_BYTES} and {MAX_TOKEN_BYTES} random bytes, got {nbytes}"
        )
    return secrets.token_hex(nbytes)


def hash_password(password: str) -> str:
    """Hash a plain password the way stored ``hashpass`` values are compared."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()

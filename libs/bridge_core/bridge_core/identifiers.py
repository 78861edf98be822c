import logging

from email_validator import EmailNotValidError, validate_email

logger = logging.getLogger(__name__)


class InvalidIdentifier(ValueError):
    """Raised when a user ID is not a syntactically valid email address."""


def validate_user_id(user_id: str) -> str:
    """Check that ``user_id`` is shaped like an email address.

    Only syntax is checked: no DNS lookups, and dotless or special-use domains
    such as ``localhost`` are accepted. IDs must be ASCII because they double
    as HTTP Basic usernames. The identifier is returned unchanged so that the
    stored ID is exactly what the client supplied.
    """
    if not user_id or not isinstance(user_id, str) or not user_id.isascii():
        raise InvalidIdentifier("invalid id format")

    try:
        validate_email(
            user_id,
            allow_smtputf8=False,
            check_deliverability=False,
            globally_deliverable=False,
        )
    except EmailNotValidError as e:
        logger.debug(f"Rejected user id {user_id!r}: {e}")
        raise InvalidIdentifier("invalid id format") from e

    return user_id

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic
from sqlmodel import Session

from .database import get_db
from .notifications import Notifier, get_notifier
from .store import CredentialStore
from ..services.users import UserLifecycleService

logger = logging.getLogger(__name__)

# Missing credentials are rejected by the handlers, not with a 401 challenge
basic_auth = HTTPBasic(auto_error=False)


def get_store(db: Session = Depends(get_db)) -> CredentialStore:
    """Credential store bound to the request's database session."""
    return CredentialStore(db)


def get_user_service(
    store: CredentialStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
) -> UserLifecycleService:
    return UserLifecycleService(store, notifier)


async def get_basic_username(request: Request) -> Optional[str]:
    """Username from HTTP Basic credentials.

    None when the header is absent or cannot be decoded, which the handlers
    treat as an identity mismatch rather than a 401 challenge.
    """
    try:
        credentials = await basic_auth(request)
    except HTTPException as e:
        logger.debug(f"Ignoring unreadable Basic credentials: {e.detail}")
        return None
    if credentials is None:
        return None
    return credentials.username

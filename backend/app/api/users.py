import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core.deps import get_basic_username, get_user_service
from ..core.errors import (
    AlreadyActive,
    AuthorizationMismatch,
    BridgeError,
    InvalidIdentifier,
    MissingPublicKey,
    NotFound,
)
from ..schemas.auth import ActivationRequest, PasswordReset, UserRegister
from ..schemas.user import UserView
from ..services.users import UserLifecycleService

logger = logging.getLogger(__name__)

router = APIRouter()


def _server_error(operation: str, subject: str, error: Exception) -> HTTPException:
    logger.error(f"{operation} failed for {subject}: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{operation} failed",
    )


def _client_error(operation: str, subject: str, error: Exception, detail: str) -> HTTPException:
    logger.warning(f"{operation} rejected for {subject}: {error}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Register a new user. The account stays inactive until the activation link is followed."""
    try:
        service.register(
            email=user_data.email,
            password_hash=user_data.password,
            pubkey=user_data.pubkey,
            partner_name=user_data.referral_partner,
        )
    except MissingPublicKey as e:
        raise _client_error("register", user_data.email, e, "No public key provided")
    except InvalidIdentifier as e:
        raise _client_error("register", user_data.email, e, "Invalid email address")
    except BridgeError as e:
        raise _server_error("register", user_data.email, e)

    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/activations", status_code=status.HTTP_201_CREATED, response_model=UserView)
async def reactivate(
    request_data: ActivationRequest,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Resend the activation email."""
    try:
        return service.reactivate(request_data.email)
    except AlreadyActive as e:
        raise _client_error("reactivate", request_data.email, e, "User is already active")
    except NotFound as e:
        logger.warning(f"reactivate: {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except BridgeError as e:
        raise _server_error("reactivate", request_data.email, e)


@router.get("/activations/{token}", response_model=UserView)
async def confirm_activation(
    token: str,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Activate the account holding this activation token."""
    try:
        return service.confirm_activation(token)
    except BridgeError as e:
        raise _server_error("confirm_activation", "activation token", e)


@router.delete("/users/{user_id}", response_model=UserView)
async def deactivate(
    user_id: str,
    requester: Optional[str] = Depends(get_basic_username),
    service: UserLifecycleService = Depends(get_user_service),
):
    """Start deactivation of the caller's own account."""
    try:
        return service.deactivate(user_id, requester)
    except AuthorizationMismatch as e:
        raise _client_error("deactivate", user_id, e, "Not authorized to deactivate this user")
    except BridgeError as e:
        raise _server_error("deactivate", user_id, e)


@router.get("/deactivations/{token}", response_model=UserView)
async def confirm_deactivation(
    token: str,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Deactivate the account holding this deactivation token."""
    try:
        return service.confirm_deactivation(token)
    except BridgeError as e:
        raise _server_error("confirm_deactivation", "deactivation token", e)


@router.patch("/users/{user_id}", response_model=UserView)
async def request_password_reset(
    user_id: str,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Issue a password reset token and email it to the user."""
    try:
        return service.request_password_reset(user_id)
    except BridgeError as e:
        raise _server_error("request_password_reset", user_id, e)


@router.post("/resets/{token}", response_model=UserView)
async def confirm_password_reset(
    token: str,
    reset_data: PasswordReset,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Set a new password using a reset token."""
    try:
        return service.confirm_password_reset(token, reset_data.password)
    except BridgeError as e:
        raise _server_error("confirm_password_reset", "reset token", e)

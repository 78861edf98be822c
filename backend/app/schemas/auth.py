from typing import Optional
from pydantic import BaseModel, Field


class UserRegister(BaseModel):
    """User registration request.

    ``password`` is the client-side hash of the password and is stored as is.
    """

    email: str = ""
    password: str = ""
    pubkey: str = ""
    referral_partner: Optional[str] = Field(default=None, alias="referralPartner")


class ActivationRequest(BaseModel):
    """Request to resend the activation email."""

    email: str = ""


class PasswordReset(BaseModel):
    """New password for a pending reset."""

    password: str = ""

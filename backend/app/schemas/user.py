from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from ..models.user import User


class Preferences(BaseModel):
    """User preferences."""

    dnt: bool = False


class UserView(BaseModel):
    """Redacted user representation, the only form of a user sent to clients."""

    uuid: str
    activated: bool
    is_free_tier: bool = Field(alias="isFreeTier")
    created: datetime
    payment_processors: List[str] = Field(default_factory=list, alias="paymentProcessors")
    referral_partner: Optional[str] = Field(default=None, alias="referralPartner")
    preferences: Preferences = Field(default_factory=Preferences)

    class Config:
        populate_by_name = True


def to_view(user: User, **overrides) -> UserView:
    """Project ``user`` onto the fields safe for client exposure.

    ``overrides`` replaces projected values, e.g. ``activated=True`` right after
    an activation was confirmed.
    """
    fields = {
        "uuid": user.uuid,
        "activated": user.activated,
        "is_free_tier": user.is_free_tier,
        "created": user.created,
        "payment_processors": list(user.payment_processors or []),
        "referral_partner": user.referral_partner,
        "preferences": Preferences(**(user.preferences or {})),
    }
    fields.update(overrides)
    return UserView(**fields)

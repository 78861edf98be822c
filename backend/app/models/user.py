from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field
from uuid import uuid4
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _new_uuid() -> str:
    return str(uuid4())


class User(SQLModel, table=True):
    """Bridge account keyed by its email address.

    ``uuid`` is the externally visible identity. The email ``id``, the password
    hash and the confirmation tokens never leave the server.
    """

    id: str = Field(primary_key=True, max_length=255)
    uuid: str = Field(default_factory=_new_uuid, unique=True, index=True, max_length=36)

    # Authentication
    hashpass: str = Field(default="", max_length=128)
    activated: bool = Field(default=False)
    deactivated: bool = Field(default=False)
    is_free_tier: bool = Field(default=False)

    # Single-use confirmation tokens, NULL when no workflow is pending
    activator: Optional[str] = Field(default=None, unique=True, index=True, max_length=512)
    deactivator: Optional[str] = Field(default=None, unique=True, index=True, max_length=512)
    resetter: Optional[str] = Field(default=None, unique=True, index=True, max_length=512)

    # Timestamps
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Usage counters: {"lastHourBytes": .., "lastHourStarted": .., ...}
    bytes_uploaded: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    bytes_downloaded: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # Billing and profile
    payment_processors: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    referral_partner: Optional[str] = Field(default=None, max_length=64)
    preferences: Dict[str, Any] = Field(default_factory=lambda: {"dnt": False}, sa_column=Column(JSON))

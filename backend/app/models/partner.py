from sqlmodel import SQLModel, Field
from uuid import uuid4
from datetime import datetime, timezone


class Partner(SQLModel, table=True):
    """Referral partner. Looked up by name at registration, never written by the API."""

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True, max_length=64)
    name: str = Field(unique=True, index=True, max_length=100)
    rev_share_total_percentage: int = Field(default=0)
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

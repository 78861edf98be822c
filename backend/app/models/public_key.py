from sqlmodel import SQLModel, Field
from typing import Optional


class PublicKey(SQLModel, table=True):
    """secp256k1 public key registered to a user. The hex encoded key is the primary key."""

    id: str = Field(primary_key=True, max_length=130)
    user: str = Field(foreign_key="user.id", index=True, max_length=255)
    label: Optional[str] = Field(default=None, max_length=100)

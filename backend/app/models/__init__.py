"""
SQLModel models for the Bridge API.

Importing this package registers every table with ``SQLModel.metadata``.
"""

from .user import User
from .partner import Partner
from .public_key import PublicKey

__all__ = [
    "User",
    "Partner",
    "PublicKey",
]

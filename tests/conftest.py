"""
Shared fixtures: an in-memory SQLite database, a credential store bound to it,
a recording notifier and a TestClient wired to both.
"""

import os
import sys
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Add backend and the core library to path for imports
ROOT = os.path.join(os.path.dirname(__file__), "..")
sys.path.append(os.path.join(ROOT, "backend"))
sys.path.append(os.path.join(ROOT, "libs", "bridge_core"))

from bridge_core import hash_password
from app.core.database import get_db
from app.core.notifications import Notifier, get_notifier
from app.core.store import CredentialStore
from app.models import Partner, PublicKey, User  # noqa: F401


class RecordingNotifier(Notifier):
    """Notifier that remembers what would have been sent."""

    def __init__(self):
        self.sent = []

    def dispatch(self, kind, user_id):
        self.sent.append((kind, user_id))


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine shared by every session in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(engine):
    """Create a database session for testing."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(db_session):
    return CredentialStore(db_session)


@pytest.fixture
def load_user(engine):
    """Read a user back through a fresh session so no cached state leaks in."""

    def _load(user_id):
        with Session(engine) as session:
            user = session.get(User, user_id)
            if user is not None:
                session.expunge(user)
            return user

    return _load


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(engine, notifier):
    """TestClient with the database and notifier dependencies overridden."""
    from main import app

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def pubkey_hex():
    """A freshly generated compressed secp256k1 public key, hex encoded."""
    private_key = ec.generate_private_key(ec.SECP256K1())
    return private_key.public_key().public_bytes(
        Encoding.X962, PublicFormat.CompressedPoint
    ).hex()


@pytest.fixture
def make_user(store):
    """Create and persist a user with a random storj.io address."""

    def _make(activated=False, **fields):
        uid = str(uuid4())
        user = User(
            id=f"{uid}@storj.io",
            uuid=uid,
            hashpass=hash_password("password"),
            activated=activated,
            created=datetime.now(timezone.utc),
            referral_partner="CITIZEN",
            **fields,
        )
        return store.create_user(user)

    return _make

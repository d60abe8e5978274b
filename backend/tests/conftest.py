"""Shared fixtures: in-memory database, recording email sender and a test client."""
from dataclasses import dataclass, field
import os
import re
import sys

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app import models  # noqa: E402,F401
from app.api import accounts, auth, deps, transactions, users  # noqa: E402
from app.database import Base, enable_sqlite_foreign_keys  # noqa: E402
from app.models.confirmation_token import ConfirmationToken  # noqa: E402
from app.models.user import User  # noqa: E402
from app.security import create_access_token  # noqa: E402

PASSWORD = "TestPass123!"


@dataclass
class SentEmail:
    to_email: str
    subject: str
    html_content: str

    @property
    def confirmation_token(self) -> str | None:
        match = re.search(r"token=([0-9a-f-]+)", self.html_content)
        return match.group(1) if match else None


@dataclass
class RecordingEmailSender:
    """Stands in for the SMTP sender and keeps every message."""

    sent: list[SentEmail] = field(default_factory=list)

    def send(self, to_email: str, subject: str, html_content: str) -> bool:
        self.sent.append(SentEmail(to_email, subject, html_content))
        return True

    def to(self, email: str) -> list[SentEmail]:
        return [message for message in self.sent if message.to_email == email]


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def outbox() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def client(session_factory, outbox):
    app = FastAPI()
    for module in (auth, users, accounts, transactions):
        app.include_router(module.router, prefix="/api/v1")

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_email_sender] = lambda: outbox
    return TestClient(app)


def register(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/api/v1/auth/register", json={"email": email, "password": password})


def login(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def latest_token(session_factory, email: str) -> ConfirmationToken:
    with session_factory() as session:
        return (
            session.query(ConfirmationToken)
            .join(User)
            .filter(User.email == email)
            .order_by(ConfirmationToken.created_at.desc())
            .first()
        )


@pytest.fixture
def verified_user(client, outbox):
    """Register, confirm and log in a user; returns (email, bearer headers)."""

    def _create(email: str = "verified@example.com", password: str = PASSWORD):
        assert register(client, email, password).status_code == 201
        token = outbox.to(email)[-1].confirmation_token
        assert client.get("/api/v1/auth/confirm", params={"token": token}).status_code == 200
        response = login(client, email, password)
        assert response.status_code == 200
        return email, auth_headers(response.json()["token"])

    return _create


@pytest.fixture
def unverified_headers(client):
    """Register a user without confirming and hand back a bearer token for it."""

    def _create(email: str = "unverified@example.com"):
        assert register(client, email).status_code == 201
        return auth_headers(create_access_token(email))

    return _create

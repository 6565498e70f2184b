"""
UYNM Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every API test runs against a fresh create_app() wired to:
       - an in-memory aiosqlite database with all tables created
       - FakeIdentityProvider (no network)
       - RecordingMailTransport (captures outgoing notifications)
       httpx's ASGITransport runs FastAPI background tasks before returning the
       response, so notification sends can be asserted right after a request.

Fixture Hierarchy:
    test_settings ─┐
    database ──────┼── app ── client
    identity ──────┤
    mail_transport ┘
"""

import os
import uuid
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import aiosmtplib
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Before any uynm_api import: the module-level app in uynm_api.main is built
# from these values and must never point at a real database or relay.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SUPABASE_URL"] = ""
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASS"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from uynm_api.config import Settings  # noqa: E402
from uynm_api.database import Database  # noqa: E402
from uynm_api.exceptions import IdentityProviderError  # noqa: E402
from uynm_api.main import create_app  # noqa: E402
from uynm_api.services.identity import (  # noqa: E402
    IdentityProvider,
    IdentitySession,
    IdentityUser,
)
from uynm_api.services.mail_transport import MailTransport, OutgoingMail  # noqa: E402

ADMIN_KEY = "test-admin-key"


# ══════════════════════════════════════════════════════════════════════════
# Collaborator Doubles
# ══════════════════════════════════════════════════════════════════════════

class FakeIdentityProvider(IdentityProvider):
    """
    In-memory identity provider.

    Accounts created by sign_up can sign in. Set `outage = True` to make every
    call fail the way an unreachable provider does (→ 502).
    """

    def __init__(self):
        self.accounts: Dict[str, Tuple[str, IdentityUser]] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.outage = False

    def _check_outage(self) -> None:
        if self.outage:
            raise IdentityProviderError(context={"path": "fake"})

    async def sign_up(self, email, password, metadata=None):
        self.calls.append(("sign_up", email))
        self._check_outage()
        if email in self.accounts:
            raise IdentityProviderError("User already registered", caller_error=True)
        user = IdentityUser(id=str(uuid.uuid4()), email=email, user_metadata=metadata or {})
        self.accounts[email] = (password, user)
        return user

    async def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in", email))
        self._check_outage()
        stored = self.accounts.get(email)
        if stored is None or stored[0] != password:
            raise IdentityProviderError("Invalid login credentials", caller_error=True)
        user = stored[1]
        return user, IdentitySession(access_token=f"token-{user.id}", expires_at=1900000000)

    async def sign_out(self, access_token):
        self.calls.append(("sign_out", access_token))
        self._check_outage()
        if access_token == "revoked-token":
            raise IdentityProviderError("Invalid token", caller_error=True)

    async def reset_password_for_email(self, email, redirect_to=None):
        self.calls.append(("reset_password", (email, redirect_to)))
        self._check_outage()


class RecordingMailTransport(MailTransport):
    """Accepts every message and keeps it in `sent`."""

    def __init__(self, configured: bool = True):
        self._configured = configured
        self.sent: List[OutgoingMail] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def send(self, mail: OutgoingMail) -> str:
        self.sent.append(mail)
        return f"<{len(self.sent)}@uynm.test>"


class FailingMailTransport(RecordingMailTransport):
    """Configured, but the relay refuses every connection."""

    async def send(self, mail: OutgoingMail) -> str:
        raise aiosmtplib.SMTPConnectError("Connection refused by smtp.test")


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

def make_settings(**overrides) -> Settings:
    values = dict(
        admin_api_key=ADMIN_KEY,
        smtp_user="mailer@uynm.test",
        smtp_pass="not-a-real-password",
        notification_email="admin@uynm.test",
        frontend_url="https://uynm.test",
        cors_origins="http://localhost:5500,http://127.0.0.1:5500",
        environment="production",
        rate_limit_requests=1000,
        rate_limit_window=900,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def database():
    """
    In-memory SQLite database with every table created.

    StaticPool keeps one connection, so all sessions of a test see the same
    in-memory database. Foreign keys are enforced as on Postgres, so
    ON DELETE CASCADE behaves the same.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    db = Database(engine)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for service tests that need a store failure.

    Usage:
        mock_db_session.commit = AsyncMock(side_effect=IntegrityError(...))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def mail_transport() -> RecordingMailTransport:
    return RecordingMailTransport()


@pytest.fixture
def app(test_settings, database, identity, mail_transport):
    return create_app(
        test_settings,
        database=database,
        identity=identity,
        mail_transport=mail_transport,
    )


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(client):
            response = await client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def sample_member() -> Dict[str, Optional[str]]:
    return {
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+2348012345678",
        "involvementTrack": "mentor",
        "location": "Lagos",
        "reason": "I want to mentor young engineers.",
    }


@pytest.fixture
def sample_contact() -> Dict[str, str]:
    return {
        "firstName": "Chinedu",
        "lastName": "Okafor",
        "email": "chinedu@example.com",
        "subject": "Partnership",
        "message": "We would like to partner on the youth summit.",
    }


@pytest.fixture
def sample_event() -> Dict[str, str]:
    return {
        "title": "Youth Leadership Summit",
        "description": "A day of workshops.",
        "eventDate": "2099-06-01T10:00:00Z",
        "location": "Abuja",
        "imageUrl": "https://uynm.test/img/summit.jpg",
    }

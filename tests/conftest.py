"""
Test Configuration
==================

Pytest fixtures for HMS Nova tests: an in-memory SQLite database per test,
seeded tenants/users, an ASGI client with ``get_db`` overridden, and fakes
for every outbound integration (email, SMS, SDS mailbox).
"""

import os
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from datetime import datetime

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import hmsnova.domain  # noqa: F401  (register all models on Base.metadata)
from hmsnova.core.exceptions import NotificationError
from hmsnova.db.base import Base, get_db
from hmsnova.domain.tenant import Tenant, User, UserTenant
from hmsnova.main import create_app
from hmsnova.services.sds_matching import EmailMessage

TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

@dataclass
class Seed:
    alice: User
    bob: User
    carol: User
    outsider: User


@pytest_asyncio.fixture
async def seed(session: AsyncSession) -> Seed:
    """Two tenants. Alice, Bob and Carol belong to A; the outsider only to B.

    * alice — email only, 1 day lead time (defaults)
    * bob   — email + SMS with a valid Norwegian number, 3 days lead time
    * carol — has turned meeting reminders off
    """
    session.add_all([
        Tenant(id=TENANT_A, name="Bygg AS", slug="bygg-as"),
        Tenant(id=TENANT_B, name="Rør AS", slug="ror-as"),
    ])
    alice = User(email="alice@bygg.no", name="Alice")
    bob = User(
        email="bob@bygg.no", name="Bob", phone="41234567",
        notify_by_sms=True, reminder_days_before=3,
    )
    carol = User(email="carol@bygg.no", name="Carol", notify_meetings=False)
    outsider = User(email="olav@ror.no", name="Olav")
    session.add_all([alice, bob, carol, outsider])
    await session.flush()

    session.add_all([
        UserTenant(user_id=alice.id, tenant_id=TENANT_A, role="HMS"),
        UserTenant(user_id=bob.id, tenant_id=TENANT_A),
        UserTenant(user_id=carol.id, tenant_id=TENANT_A),
        UserTenant(user_id=outsider.id, tenant_id=TENANT_B),
    ])
    await session.commit()
    return Seed(alice=alice, bob=bob, carol=carol, outsider=outsider)


# ---------------------------------------------------------------------------
# Fakes for outbound integrations
# ---------------------------------------------------------------------------

class FakeEmailSender:
    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.sent: list[dict] = []
        self.fail_for = fail_for or set()

    async def send(self, *, to: str, subject: str, html: str) -> str:
        if to in self.fail_for:
            raise NotificationError(f"Email to {to} failed: 500")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"email-{len(self.sent)}"


class FakeSmsSender:
    def __init__(self) -> None:
        self.sent: list[dict] = []

    async def send(self, *, to: str, message: str) -> str:
        self.sent.append({"to": to, "message": message})
        return f"sms-{len(self.sent)}"


@dataclass
class FakeMailbox:
    emails: list[EmailMessage] = field(default_factory=list)
    files: dict[str, bytes] = field(default_factory=dict)
    searched_since: datetime | None = None
    downloads: list[tuple[str, str]] = field(default_factory=list)

    async def search_for_sds_emails(self, since: datetime) -> list[EmailMessage]:
        self.searched_since = since
        return self.emails

    async def download_attachment(self, message_id: str, attachment_id: str) -> bytes:
        self.downloads.append((message_id, attachment_id))
        return self.files.get(attachment_id, b"%PDF-1.4 fake")


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def sms_sender() -> FakeSmsSender:
    return FakeSmsSender()


@pytest.fixture
def mailbox() -> FakeMailbox:
    return FakeMailbox()


@pytest.fixture
def mock_http(monkeypatch):
    """Route every ``httpx.AsyncClient`` through a handler; returns the request log."""
    requests: list[httpx.Request] = []
    real_client = httpx.AsyncClient

    def _install(handler):
        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        monkeypatch.setattr(
            httpx, "AsyncClient",
            lambda **kwargs: real_client(transport=httpx.MockTransport(_record), **kwargs),
        )
        return requests

    return _install


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def app(session_factory):
    app = create_app()

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    app.state.audit_session_factory = session_factory
    return app


@pytest_asyncio.fixture
async def client(app, seed) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Tenant-ID": TENANT_A},
    ) as client:
        yield client

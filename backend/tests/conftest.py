"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.core.identity import create_access_token
from backend.app.core.payment_gateway import PaymentGatewayError, get_payment_gateway
from backend.app.models.enums import UserRole
from backend.app.models.user import User

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

ALICE = "alice@example.com"
BOB = "bob@example.com"
ADMIN = "admin@example.com"


class FakePaymentGateway:
    """Stands in for the card gateway; records every intent request."""

    def __init__(self):
        self.calls = []
        self.fail = False

    async def create_intent(self, amount_cents, currency="usd"):
        if self.fail:
            raise PaymentGatewayError("Payment gateway returned 402: Your card was declined.")
        self.calls.append((amount_cents, currency))
        return {"id": f"pi_{len(self.calls)}", "client_secret": f"pi_{len(self.calls)}_secret_test"}


@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Apply the database override once for the session."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def payment_gateway():
    """Fake payment gateway wired into the app."""
    gateway = FakePaymentGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.pop(get_payment_gateway, None)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


def bearer(email):
    """Authorization header for a token the identity provider accepts."""
    token = create_access_token(data={"sub": email, "email": email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers():
    return bearer(ALICE)


@pytest.fixture
def bob_headers():
    return bearer(BOB)


@pytest.fixture
async def admin_headers(db_session):
    """Admin user inserted directly (admins cannot be created through the API)."""
    db_session.add(User.from_document(
        {"email": ADMIN, "displayName": "Admin"},
        role=UserRole.ADMIN.value,
    ))
    await db_session.commit()
    return bearer(ADMIN)


@pytest.fixture
async def alice_parcel(client, alice_headers):
    """An unpaid parcel owned by Alice; returns its id."""
    response = await client.post(
        "/parcel",
        json={
            "tracking_id": "TRK1",
            "title": "Birthday gift",
            "type": "non-document",
            "created_by": ALICE,
            "senderRegion": "Dhaka",
            "receiverRegion": "Khulna",
            "parcelWeight": 2.5,
            "deliveryCost": 150,
            "created_at": "2026-10-01T10:00:00+00:00",
        },
        headers=alice_headers,
    )
    assert response.status_code == 201
    return response.json()["insertedId"]

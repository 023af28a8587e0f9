"""
Shared fixtures: an in-memory database, the ASGI app wired to it, JWT-signed
bearer tokens and a fake payment gateway.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.database import build_session_factory, create_tables
from core.security import JWTIdentityVerifier, create_access_token
from main import create_app
from models.user import User
from services.payment_service import PaymentGatewayError

TEST_SECRET = "test_secret_for_blood_connect_tests_that_is_long_enough"


class FakePaymentGateway:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []
        self.intents = {}

    def add_intent(self, intent_id, amount, currency="usd", status="succeeded"):
        """Register an intent; `amount` is in minor units."""
        self.intents[intent_id] = {
            "id": intent_id,
            "amount": amount,
            "amount_received": amount if status == "succeeded" else 0,
            "currency": currency,
            "status": status,
        }

    async def create_payment_intent(self, amount, currency, metadata=None):
        self.calls.append({"amount": amount, "currency": currency, "metadata": metadata})
        if self.fail:
            raise PaymentGatewayError("card network unavailable")
        return {"id": "pi_test_123", "client_secret": "pi_test_123_secret_abc"}

    async def retrieve_payment_intent(self, intent_id):
        if self.fail:
            raise PaymentGatewayError("card network unavailable")
        if intent_id not in self.intents:
            raise PaymentGatewayError(f"No such payment_intent: '{intent_id}'", status_code=404)
        return self.intents[intent_id]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def app(session_factory, payment_gateway):
    return create_app(
        session_factory=session_factory,
        identity_verifier=JWTIdentityVerifier(TEST_SECRET),
        payment_gateway=payment_gateway,
    )


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth():
    """Bearer headers for an email."""
    def _auth(email: str) -> dict:
        token = create_access_token(email, secret_key=TEST_SECRET, algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}
    return _auth


@pytest.fixture
def make_user(session_factory):
    async def _make_user(email: str, role: str = "donor", status: str = "active", **fields) -> User:
        async with session_factory() as session:
            user = User(
                email=email,
                name=fields.pop("name", email.split("@")[0].title()),
                role=role,
                status=status,
                login_count=1,
                **fields,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user
    return _make_user


@pytest.fixture
def request_payload():
    def _payload(**overrides) -> dict:
        payload = {
            "recipient_name": "Karim",
            "recipient_district": "Dhaka",
            "recipient_upazila": "Dhanmondi",
            "hospital_name": "Dhaka Medical College Hospital",
            "full_address": "Zahir Raihan Rd, Dhaka 1000",
            "blood_group": "B+",
            "donation_date": "2026-11-02",
            "donation_time": "10:30",
            "request_message": "Two bags needed before surgery",
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def create_request(client, auth, request_payload):
    async def _create(email: str, **overrides) -> dict:
        res = await client.post("/donation-requests", json=request_payload(**overrides), headers=auth(email))
        assert res.status_code == 201, res.text
        return res.json()
    return _create

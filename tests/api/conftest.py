"""API test fixtures — async DB, recording mailer, scripted gateway, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db, get_mailer and get_payment_gateway are overridden; nothing leaves the process
    - db_manager patched so the readiness check sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Fakes record what they were asked to do so tests assert on calls, not on mocks' internals
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.core.errors import EmailDeliveryError, PaymentGatewayError
from app.db.base import Base
import app.models  # noqa: F401
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.mailer import get_mailer
from app.infrastructure.payment_gateway import get_payment_gateway
import app.infrastructure.database as db_module
from app.main import app


class RecordingMailer:
    """Stands in for SmtpMailer; keeps every email it was asked to send."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, email, context=None):
        if self.fail:
            raise EmailDeliveryError("550 mailbox unavailable", email.to, context=context)
        self.sent.append(email)


class ScriptedGateway:
    """Stands in for FlutterwaveGateway; replies with canned JSON."""

    def __init__(self):
        self.calls = []
        self.fail = False
        self.checkout_response = {
            "status": "success",
            "message": "Hosted Link",
            "data": {"link": "https://checkout.flutterwave.test/v3/hosted/pay/abc123"},
        }
        self.verify_response = {
            "status": "success",
            "message": "Transaction fetched successfully",
            "data": {"id": 4975363, "status": "successful", "amount": 25000},
        }

    def _maybe_fail(self, context):
        if self.fail:
            raise PaymentGatewayError(
                '{"status":"error"}', gateway_status=502, context=context,
            )

    async def create_checkout(self, payload, context=None):
        self.calls.append(("create_checkout", payload))
        self._maybe_fail(context)
        return self.checkout_response

    async def verify_transaction(self, transaction_id, context=None):
        self.calls.append(("verify_transaction", transaction_id))
        self._maybe_fail(context)
        return self.verify_response

    async def verify_by_reference(self, tx_ref, context=None):
        self.calls.append(("verify_by_reference", tx_ref))
        self._maybe_fail(context)
        return self.verify_response


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def gateway():
    return ScriptedGateway()


@pytest.fixture
async def client(test_engine, test_session_factory, mailer, gateway):
    """FastAPI test client with DB, mailer and gateway overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def count_rows(test_session_factory):
    """Count rows of a model in a fresh session (sees committed data only)."""
    async def _count(model) -> int:
        async with test_session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(model),
            )
            return result.scalar_one()
    return _count

"""Shared fixtures: in-memory database, factories and an API client."""

from datetime import date, timedelta
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from stallbook import models  # noqa: F401
from stallbook.core.security import create_access_token
from stallbook.database import Base
from stallbook.domain.booking_state import today
from stallbook.domain.pricing import from_minor_units
from stallbook.gateways.base import GatewayOrder, PaymentGateway
from stallbook.gateways.razorpay import RazorpayGateway, compute_signature
from stallbook.models.booking import Booking
from stallbook.models.stall import Stall
from stallbook.models.user import User
from stallbook.services.gateway_service import GatewayService
from stallbook.services.payment_service import PaymentService

TEST_KEY_ID = "rzp_test_key"
TEST_KEY_SECRET = "rzp_test_secret"


class FakeGateway(PaymentGateway):
    """In-process gateway that numbers its orders and signs like Razorpay."""

    def __init__(self, secret: str = TEST_KEY_SECRET, fail_with: Exception | None = None):
        self.secret = secret
        self.fail_with = fail_with
        self.orders: list[tuple[int, str, str]] = []

    @property
    def public_key(self) -> str:
        return TEST_KEY_ID

    async def create_order(self, amount: int, currency: str, receipt: str) -> GatewayOrder:
        if self.fail_with is not None:
            raise self.fail_with
        self.orders.append((amount, currency, receipt))
        return GatewayOrder(
            order_id=f"order_{len(self.orders)}",
            currency=currency,
            amount=from_minor_units(amount),
            receipt=receipt,
        )

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return RazorpayGateway(TEST_KEY_ID, self.secret).verify_signature(order_id, payment_id, signature)

    def sign(self, order_id: str, payment_id: str) -> str:
        return compute_signature(self.secret, order_id, payment_id)


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


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def payments(fake_gateway):
    return PaymentService(GatewayService(fake_gateway))


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _make_user(role: str = "customer", **overrides) -> User:
        counter["n"] += 1
        values = {
            "email": f"{role}{counter['n']}@example.com",
            "password_hash": "not-a-real-hash",
            "full_name": f"{role.title()} {counter['n']}",
            "role": role,
            "is_active": True,
        }
        values.update(overrides)
        user = User(**values)
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest_asyncio.fixture
async def customer(make_user):
    return await make_user("customer", phone="+91 98765 43210")


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user("stall_owner", company_name="Expo Stands")


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("admin")


@pytest.fixture
def make_stall(db):
    async def _make_stall(owner: User, **overrides) -> Stall:
        values = {
            "owner_id": owner.id,
            "name": "Corner Stall",
            "location": "Hall A",
            "size": "3x3",
            "rent_per_day": Decimal("100.00"),
            "status": "available",
        }
        values.update(overrides)
        stall = Stall(**values)
        db.add(stall)
        await db.commit()
        return stall

    return _make_stall


@pytest_asyncio.fixture
async def stall(make_stall, owner):
    return await make_stall(owner)


@pytest.fixture
def make_booking(db):
    """Insert a booking row directly, bypassing date validation."""

    async def _make_booking(stall: Stall, customer: User, start: date, end: date, **overrides) -> Booking:
        values = {
            "stall_id": stall.id,
            "customer_id": customer.id,
            "start_date": start,
            "end_date": end,
            "status": "pending",
            "payment_status": "pending",
        }
        values.update(overrides)
        booking = Booking(**values)
        db.add(booking)
        await db.commit()
        return booking

    return _make_booking


def days_from_now(days: int) -> date:
    return today() + timedelta(days=days)


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def client(session_factory, fake_gateway):
    from stallbook.api.deps import get_payment_service
    from stallbook.database import get_db
    from stallbook.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(
        GatewayService(fake_gateway)
    )

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

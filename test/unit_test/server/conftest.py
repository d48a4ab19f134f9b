from datetime import date, timedelta
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from empowered_camps.core.database import create_all, get_session
from empowered_camps.core.database.entities import (
    Addon,
    Athlete,
    Camp,
    Profile,
    Registration,
    RegistrationAddon,
    Tenant,
)
from empowered_camps.core.models.domain.enums import (
    CampStatus,
    PaymentStatus,
    RegistrationStatus,
    UserRole,
)
from empowered_camps.server.auth import AuthUser, get_current_user, get_optional_user
from empowered_camps.server.services.stripe_gateway import get_stripe_gateway
from test.settings import test_settings
from test.unit_test.server.stripe_fakes import FakeStripeGateway

# Use in-memory SQLite for testing
TEST_DATABASE_URL = test_settings.database.url


class AuthState:
    """Caller the overridden auth dependencies return; ``None`` means anonymous."""

    def __init__(self) -> None:
        self.user: Optional[AuthUser] = None

    def login(self, role: UserRole = UserRole.hq_admin, tenant_id: Optional[str] = None, user_id: str = "user-1"):
        self.user = AuthUser(id=user_id, email=f"{user_id}@example.com", role=role, tenant_id=tenant_id)
        return self.user

    def logout(self) -> None:
        self.user = None


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for every test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_maker() as session:
        yield session


@pytest.fixture
def gateway() -> FakeStripeGateway:
    return FakeStripeGateway()


@pytest.fixture
def auth() -> AuthState:
    state = AuthState()
    state.login()
    return state


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, gateway: FakeStripeGateway, auth: AuthState):
    """Async HTTP client with the database, Stripe and auth dependencies overridden."""
    from empowered_camps.core.errors import UnauthorizedError
    from empowered_camps.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    async def get_current_user_override() -> AuthUser:
        if auth.user is None:
            raise UnauthorizedError()
        return auth.user

    async def get_optional_user_override() -> Optional[AuthUser]:
        return auth.user

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_current_user] = get_current_user_override
    app.dependency_overrides[get_optional_user] = get_optional_user_override
    app.dependency_overrides[get_stripe_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def tenant(session: AsyncSession) -> Tenant:
    tenant = Tenant(
        name="Empowered Chicago",
        slug="chicago-north",
        territory_name="Chicago North",
        royalty_rate=0.10,
        tax_rate_percent=10.0,
    )
    session.add(tenant)
    await session.commit()
    return tenant


@pytest_asyncio.fixture
async def camp(session: AsyncSession, tenant: Tenant) -> Camp:
    start = date.today() + timedelta(days=30)
    camp = Camp(
        tenant_id=tenant.id,
        name="Summer Multi-Sport Week",
        start_date=start,
        end_date=start + timedelta(days=4),
        capacity=10,
        price_cents=30000,
        status=CampStatus.registration_open,
    )
    session.add(camp)
    await session.commit()
    return camp


@pytest_asyncio.fixture
async def addon(session: AsyncSession, tenant: Tenant) -> Addon:
    addon = Addon(tenant_id=tenant.id, name="Camp T-Shirt", price_cents=2000, is_taxable=True)
    session.add(addon)
    await session.commit()
    return addon


@pytest_asyncio.fixture
async def parent(session: AsyncSession) -> Profile:
    profile = Profile(id="parent-1", email="parent@example.com", first_name="Pat", last_name="Parent")
    session.add(profile)
    await session.commit()
    return profile


@pytest_asyncio.fixture
async def finished_camp(session: AsyncSession, camp: Camp, parent: Profile, addon: Addon) -> Camp:
    """Completed camp with one confirmed (34000 cents, 4000 in add-ons) and one cancelled registration."""
    camp.status = CampStatus.completed
    camp.start_date = date.today() - timedelta(days=10)
    camp.end_date = date.today() - timedelta(days=6)
    session.add(camp)
    athlete = Athlete(parent_id=parent.id, first_name="Mia", last_name="Parent", date_of_birth=date(2014, 3, 3))
    session.add(athlete)
    await session.flush()
    confirmed = Registration(
        tenant_id=camp.tenant_id,
        camp_id=camp.id,
        athlete_id=athlete.id,
        parent_id=parent.id,
        status=RegistrationStatus.confirmed,
        payment_status=PaymentStatus.paid,
        base_price_cents=30000,
        addons_total_cents=4000,
        total_price_cents=34000,
    )
    cancelled = Registration(
        tenant_id=camp.tenant_id,
        camp_id=camp.id,
        athlete_id=athlete.id,
        parent_id=parent.id,
        status=RegistrationStatus.cancelled,
        base_price_cents=30000,
        total_price_cents=30000,
    )
    session.add_all([confirmed, cancelled])
    await session.flush()
    session.add(RegistrationAddon(registration_id=confirmed.id, addon_id=addon.id, quantity=2, price_cents=4000))
    await session.commit()
    return camp

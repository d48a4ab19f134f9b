"""Test configuration for database unit tests.

This module provides common fixtures for testing the centralized database
layer against an in-memory SQLite database.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from empowered_camps.core.database import create_all
from empowered_camps.core.database.entities import Athlete, Camp, Profile, Tenant
from empowered_camps.core.models.domain.enums import CampStatus


@pytest_asyncio.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async_session = async_sessionmaker(in_memory_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def sample_tenant(in_memory_session: AsyncSession) -> Tenant:
    tenant = Tenant(name="Empowered Denver", slug="denver-metro", territory_name="Denver Metro", city="Denver")
    in_memory_session.add(tenant)
    await in_memory_session.commit()
    return tenant


@pytest_asyncio.fixture
async def sample_athlete(in_memory_session: AsyncSession) -> Athlete:
    parent = Profile(id="parent-db", email="family@example.com")
    athlete = Athlete(parent_id=parent.id, first_name="Leo", last_name="Family", date_of_birth=date(2015, 6, 1))
    in_memory_session.add_all([parent, athlete])
    await in_memory_session.commit()
    return athlete


@pytest.fixture
def make_camp():
    """Build (unsaved) camps starting `starts_in_days` from today."""

    def _make(tenant: Tenant, status: CampStatus, starts_in_days: int, name: str = "Camp") -> Camp:
        start = date.today() + timedelta(days=starts_in_days)
        return Camp(
            tenant_id=tenant.id,
            name=name,
            start_date=start,
            end_date=start + timedelta(days=4),
            price_cents=25000,
            status=status,
        )

    return _make

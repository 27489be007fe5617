"""
Shared test fixtures and configuration for entire test suite.

Provides: Job record builders, callers, in-memory SQLite gateway,
synchronizer and service fixtures
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timezone

import pytest

from motoshop.core.access import Caller, Role
from motoshop.core.job_lifecycle import (
    Customer,
    JobRecord,
    JobStatus,
    Motorcycle,
    PhotoSet,
    ServiceType,
)

NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)
SHOP_ID = "SHOP-TEST0001"


def photos(kind: str, count: int) -> tuple[str, ...]:
    return tuple(f"https://cdn.example.com/jobs/{kind}/{i}.jpg" for i in range(count))


@pytest.fixture
def now() -> datetime:
    """Fixed transition time."""
    return NOW


@pytest.fixture
def make_job():
    """
    Build JobRecord instances with sensible defaults.

    Returns:
        Callable: build(**overrides) -> JobRecord. start/completion
            keyword arguments give photo counts.
    """
    def build(start: int = 0, completion: int = 0, **overrides) -> JobRecord:
        status = overrides.get("status", JobStatus.PENDING)
        fields = {
            "id": "JOB-TEST0001",
            "customer": Customer(email="rider@example.com", name="Min-jun Park", tracking_id="ABCD1234"),
            "motorcycle": Motorcycle(make="Honda", model="CB500F", year=2021, plate="12GA3456"),
            "service_type": ServiceType.OIL_CHANGE,
            "status": status,
            "date_created": NOW,
            "shop_id": SHOP_ID,
            "created_by": "user-mechanic",
            "photos": PhotoSet(start=photos("start", start), completion=photos("completion", completion)),
        }
        if status is JobStatus.COMPLETED:
            fields["date_completed"] = NOW
            fields["final_cost"] = "150.00"
        fields.update(overrides)
        return JobRecord(**fields)

    return build


@pytest.fixture
def mechanic() -> Caller:
    """Approved mechanic of SHOP_ID."""
    return Caller(
        id="user-mechanic",
        email="mechanic@example.com",
        role=Role.MECHANIC,
        shop_id=SHOP_ID,
        membership_approved=True,
        shop_role=Role.MECHANIC,
    )


@pytest.fixture
def shop_admin() -> Caller:
    """Approved admin member of SHOP_ID."""
    return Caller(
        id="user-owner",
        email="owner@example.com",
        role=Role.MECHANIC,
        shop_id=SHOP_ID,
        membership_approved=True,
        shop_role=Role.ADMIN,
    )


@pytest.fixture
def admin() -> Caller:
    """Global admin without a shop."""
    return Caller(id="user-admin", email="admin@example.com", role=Role.ADMIN)


@pytest.fixture
def outsider() -> Caller:
    """Mechanic of another shop."""
    return Caller(
        id="user-other",
        email="other@example.com",
        role=Role.MECHANIC,
        shop_id="SHOP-OTHER",
        membership_approved=True,
        shop_role=Role.MECHANIC,
    )


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Session factory bound to a fresh schema
    """
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from motoshop.boundary.db.base import Base
    import motoshop.boundary.db.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, autoflush=False, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def gateway(session_factory):
    """SqlDataGateway over the in-memory database."""
    from motoshop.boundary.gateway import ChangeFeed, SqlDataGateway

    return SqlDataGateway(session_factory, change_feed=ChangeFeed())


@pytest.fixture
def synchronizer(gateway):
    """JobSynchronizer with default photo rules and a fixed clock."""
    from motoshop.application.services import JobSynchronizer

    return JobSynchronizer(gateway, clock=lambda: NOW)


@pytest.fixture
async def shop(gateway):
    """Stored shop record for SHOP_ID."""
    return await gateway.insert(
        "shops",
        {"id": SHOP_ID, "name": "Seoul Moto Works", "owner_id": "user-owner"},
    )


@pytest.fixture
async def stored_job(synchronizer, shop, make_job):
    """A pending job inserted through the synchronizer."""
    return await synchronizer.create_job(make_job())

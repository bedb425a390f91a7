import os
from collections.abc import AsyncGenerator

# Settings are read at import time; point them at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from app.dependencies import get_database_engine
from app.main import app
from app.models import clinic_locations, metadata
from app.services.access_control_service import AccessControlService
from app.services.appointment_service import AppointmentService
from app.services.clinic_location_service import ClinicLocationService

# In-memory SQLite shared across connections through a single pooled connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"


def make_engine() -> AsyncEngine:
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite leaves foreign keys unenforced unless asked per connection
    @event.listens_for(test_engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return test_engine


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh database with all tables."""
    test_engine = make_engine()
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def broken_engine() -> AsyncGenerator[AsyncEngine, None]:
    """An engine whose database has no tables, so every query fails."""
    test_engine = make_engine()
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def locations(engine: AsyncEngine) -> dict[str, int]:
    """Two provisioned clinic locations, by name."""
    async with engine.begin() as conn:
        await conn.execute(
            insert(clinic_locations),
            [{"id": 1, "name": "Indiranagar"}, {"id": 2, "name": "Koramangala"}],
        )
    return {"Indiranagar": 1, "Koramangala": 2}


@pytest.fixture
def access_control(engine: AsyncEngine) -> AccessControlService:
    return AccessControlService(engine)


@pytest.fixture
def appointment_service(engine: AsyncEngine) -> AppointmentService:
    return AppointmentService(engine)


@pytest.fixture
def clinic_location_service(engine: AsyncEngine) -> ClinicLocationService:
    return ClinicLocationService(engine)


@pytest_asyncio.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    app.dependency_overrides[get_database_engine] = lambda: engine

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def broken_client(broken_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose database queries all fail."""
    app.dependency_overrides[get_database_engine] = lambda: broken_engine

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload() -> dict:
    """Booking form payload as the browser sends it."""
    return {
        "datetime": "2024-03-10T09:30",
        "name": "Asha",
        "clinicLocation": 1,
        "phone": "9876543210",
        "notes": "First visit",
        "updated_by": "Dr. Rao",
        "timeZone": "Asia/Kolkata",
    }

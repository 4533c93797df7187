"""Pytest configuration and fixtures for async testing."""
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from creditdesk.database import build_engine, build_session_factory, init_db
from creditdesk.main import app
from creditdesk.models.customer import Customer
from creditdesk.models.vendor import Vendor
from creditdesk.state import AppState
from tests.utils.factories import CustomerFactory, VendorFactory


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine on a fresh SQLite file per test, with all tables created.

    Yields:
        AsyncEngine: Engine bound to the temporary database
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'credit-data-test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.

    Yields:
        AsyncSession: Database session for testing
    """
    session_factory = build_session_factory(test_engine)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing with database dependency override.

    The API and the test share one session, so rows committed by a request
    are visible to assertions made through db_session.

    Args:
        db_session: Test database session fixture

    Yields:
        AsyncClient: Async HTTP client for API testing
    """
    from creditdesk.api.deps import get_db

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        """Override database dependency to use test database."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.state.cache = AppState()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_customer(db_session: AsyncSession) -> Customer:
    """
    Create a customer for integration tests.

    Args:
        db_session: Database session

    Returns:
        Customer: Persisted customer
    """
    data = CustomerFactory.create()
    customer = Customer(name=data["name"], email=data["email"], phone=data["phone"], address=data["address"])

    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)

    return customer


@pytest_asyncio.fixture(scope="function")
async def test_vendor(db_session: AsyncSession) -> Vendor:
    """
    Create an active vendor for integration tests.

    Args:
        db_session: Database session

    Returns:
        Vendor: Persisted vendor
    """
    vendor = Vendor(**VendorFactory.create(), is_active=True)

    db_session.add(vendor)
    await db_session.commit()
    await db_session.refresh(vendor)

    return vendor


@pytest.fixture(scope="function")
def sample_subscription_data(test_customer: Customer, test_vendor: Vendor) -> dict:
    """
    Subscription payload consuming 12 credits from test_vendor's "svcX" balance.

    Returns:
        dict: Subscription creation data
    """
    return {
        "customer_id": test_customer.id,
        "service_name": "IPTV 12 months",
        "start_date": "2026-01-01",
        "expiration_date": "2026-12-31",
        "amount_paid": 60.0,
        "credits_used": 12,
        "vendor_id": test_vendor.id,
        "vendor_service_name": "svcX",
    }

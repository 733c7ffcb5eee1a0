"""Pytest configuration and shared fixtures."""

from typing import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.database import DatabaseClient
from ursol.core.dependencies import get_verification_service
from ursol.core.locks import KeyedLocks
from ursol.database.seed import seed_demo_data
from ursol.main import app
from ursol.services.ledger.simulated import SimulatedLedger
from ursol.services.verification.base import VerificationService

DEMO_USER_ID = "demo-user-1"


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def mock_verification() -> AsyncMock:
    """Verification service double with no credentials configured.

    Returns:
        AsyncMock: Mocked verification service
    """
    service = AsyncMock(spec=VerificationService)
    service.has_credentials = False
    return service


@pytest.fixture
def test_client(mock_verification: AsyncMock) -> Iterator[TestClient]:
    """Create FastAPI test client.

    Entering the client runs the lifespan, so every test starts from a
    freshly seeded in-memory store.

    Returns:
        TestClient: FastAPI test client instance
    """
    app.dependency_overrides[get_verification_service] = lambda: mock_verification
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture
async def database() -> AsyncIterator[DatabaseClient]:
    """Isolated in-memory database with the demo data loaded."""
    client = DatabaseClient("sqlite+aiosqlite:///:memory:")
    await client.connect()
    await client.create_tables()
    async with client.session() as session:
        await seed_demo_data(session)
    yield client
    await client.drop_tables()
    await client.disconnect()


@pytest_asyncio.fixture
async def db_session(database: DatabaseClient) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


@pytest.fixture
def ledger() -> SimulatedLedger:
    return SimulatedLedger()


@pytest.fixture
def locks() -> KeyedLocks:
    return KeyedLocks()


@pytest.fixture
def proof_payload() -> dict:
    """Minimal World ID proof payload."""
    return {
        "proof": "0xproof",
        "merkle_root": "0xroot",
        "nullifier_hash": "0xnullifier",
        "verification_level": "orb",
    }

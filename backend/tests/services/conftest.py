"""Service test fixtures — async DB, in-memory ledger, registry service, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_registry_service dependency overridden to use the test registry
    - db_manager and registry_service singletons patched for code that reads them directly
      (readiness probe)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - StaticPool: one shared connection so every session sees the same in-memory database
    - InMemoryLedger with height 100: timestamps are distinguishable from ids in assertions
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import transcript_registry.infrastructure.database as db_module
import transcript_registry.services.registry_service as registry_module
from transcript_registry.api.dependencies import get_registry_service
from transcript_registry.db.base import Base
from transcript_registry.infrastructure.database import DatabaseSessionManager
from transcript_registry.infrastructure.ledger_client import InMemoryLedger
from transcript_registry.main import app
from transcript_registry.services.registry_repository import SqlRegistryRepository
from transcript_registry.services.registry_service import RegistryService
from tests.factories import make_state


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
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
def test_db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine (no pool setup)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def repository(test_db_manager):
    return SqlRegistryRepository(test_db_manager)


@pytest.fixture
def ledger():
    return InMemoryLedger(height=100)


@pytest.fixture
def registry(ledger, repository):
    """Configured registry: ADMIN, ISSUER + OTHER_ISSUER, RECIPIENT set, default fee."""
    return RegistryService(make_state(), ledger, ledger, repository)


@pytest.fixture
async def client(registry, test_db_manager):
    """FastAPI test client with the registry dependency overridden."""
    app.dependency_overrides[get_registry_service] = lambda: registry

    original_manager = db_module.db_manager
    original_registry = registry_module.registry_service
    db_module.db_manager = test_db_manager
    registry_module.registry_service = registry

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    registry_module.registry_service = original_registry

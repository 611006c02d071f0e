"""Fixtures for integration tests against a PostgreSQL database.

``DATABASE_CONFIG__DATABASE_URL`` selects the database. Tables are created
when missing, and every test runs inside a transaction that is rolled back.
Tests are skipped when the database cannot be reached.
"""

from collections.abc import AsyncGenerator, Generator
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from viron.api.main import create_app
from viron.api.routes.due_dates import get_today
from viron.core.config import get_settings
from viron.infrastructure.database import Base
from viron.infrastructure.database.session import get_db
from viron.infrastructure.database.session import create_database_engine

TODAY = date(2025, 8, 20)


@pytest.fixture(autouse=True)
def integration_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Fresh settings without tracing."""
    monkeypatch.setenv("OBSERVABILITY_CONFIG__ENABLE_TRACING", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Engine for the configured database with the schema in place."""
    engine = create_database_engine()
    try:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL is not available: {e}")

    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session bound to a connection-level transaction that is rolled back."""
    async with db_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)
        try:
            async with session:
                yield session
        finally:
            await transaction.rollback()


@pytest.fixture
async def client_with_db(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Client for the full application using the transactional session."""
    test_app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield db_session

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_today] = lambda: TODAY

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    test_app.dependency_overrides.clear()

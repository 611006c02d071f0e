"""Fixtures for API unit tests."""

from collections.abc import AsyncGenerator, Generator
from datetime import date
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture, MockType
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql.dml import Insert

from viron.api.middleware.error_handler import register_exception_handlers
from viron.api.routes import due_dates_router, personal_info_router
from viron.api.routes.due_dates import get_today
from viron.api.utils.responses import ORJSONResponse
from viron.infrastructure.database.session import get_db
from viron.infrastructure.database.models import PersonalInfo

TODAY = date(2025, 8, 20)
UPSERTED_ID = 10


def row_from_insert(stmt: Insert) -> PersonalInfo:
    """Build the row an ``INSERT ... RETURNING`` on personal_info would return."""
    params = stmt.compile(dialect=postgresql.dialect()).params
    columns = PersonalInfo.__table__.columns.keys()
    values = {key: value for key, value in params.items() if key in columns}
    return PersonalInfo(id=UPSERTED_ID, **values)


@pytest.fixture
def api_session(mock_async_session: MockType, mocker: MockerFixture) -> MockType:
    """Mocked session that behaves enough like PostgreSQL for the routes.

    ``refresh`` assigns ids to new dependents, and an insert into
    ``personal_info`` returns the inserted row. Each such row is appended
    to ``session.upserted``.
    """
    next_id = iter(range(100, 1000))

    async def refresh(instance: Any) -> None:
        if instance.id is None:
            instance.id = next(next_id)

    async def execute(stmt: Any, *_args: Any, **_kwargs: Any) -> Any:
        if isinstance(stmt, Insert):
            row = row_from_insert(stmt)
            mock_async_session.upserted.append(row)
            result = mocker.Mock()
            result.scalar_one.return_value = row
            return result
        return mock_async_session.result

    mock_async_session.upserted = []
    mock_async_session.refresh.side_effect = refresh
    mock_async_session.execute.side_effect = execute
    return mock_async_session


@pytest.fixture
def api_app(api_session: MockType) -> FastAPI:
    """Routers and exception handlers without middleware or tracing.

    The database session is the mocked ``api_session`` and today is
    ``TODAY``.
    """
    app = FastAPI(default_response_class=ORJSONResponse)
    register_exception_handlers(app)
    app.include_router(due_dates_router)
    app.include_router(personal_info_router)

    async def override_get_db() -> AsyncGenerator[MockType]:
        yield api_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return app


@pytest.fixture
def client(api_app: FastAPI) -> Generator[TestClient]:
    """Test client for ``api_app``."""
    with TestClient(api_app) as test_client:
        yield test_client

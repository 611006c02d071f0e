"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator

import pytest
from pytest_mock import MockerFixture, MockType

from viron.core.config import Settings, get_settings
from viron.core.error_context import _get_sensitive_fields

APP_ENV_PREFIXES = (
    "APP_",
    "API_",
    "ENVIRONMENT",
    "DEBUG",
    "LOG_CONFIG__",
    "OBSERVABILITY_CONFIG__",
    "DATABASE_CONFIG__",
    "DUE_DATE_CONFIG__",
)


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Start and finish every test with fresh cached settings."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch]:
    """Remove application env vars so defaults apply unless a test sets them."""
    original_env = os.environ.copy()

    for key in list(os.environ):
        if key.startswith(APP_ENV_PREFIXES) or key in ("K_SERVICE", "PORT"):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Real settings built from test environment values.

    Returns:
        Settings: Settings for a development deployment without tracing.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_PORT", "3000")
    monkeypatch.setenv("OBSERVABILITY_CONFIG__ENABLE_TRACING", "false")
    return Settings()


@pytest.fixture
def mock_async_session(mocker: MockerFixture) -> MockType:
    """AsyncSession stand-in; ``execute`` returns ``session.result``.

    Returns:
        MockType: Mock session with async execute/flush/refresh/rollback.
    """
    session = mocker.AsyncMock()
    session.add = mocker.Mock()

    result = mocker.Mock()
    result.scalar_one_or_none.return_value = None
    result.scalars.return_value.all.return_value = []
    result.rowcount = 0

    session.execute.return_value = result
    session.result = result
    return session

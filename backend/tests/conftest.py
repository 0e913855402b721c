"""Pytest configuration and shared fixtures."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from school_admin.core.config import Settings
from school_admin.main import create_app
from tests.helpers.fake_backend import AUTH_HEADER, BACKEND_URL, FakeSchoolBackend

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for an isolated app instance (SQLite audit DB in a temp dir)."""
    return Settings(
        ENV="test",
        DATABASE_URL=f"sqlite:///{tmp_path / 'audit.db'}",
        BACKEND_API_URL=BACKEND_URL,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def backend() -> FakeSchoolBackend:
    """Fake school backend with one draft exam."""
    fake = FakeSchoolBackend()
    fake.add_exam("exam-1", max_score=100)
    return fake


@pytest.fixture
def client(test_settings: Settings, backend: FakeSchoolBackend) -> Generator[TestClient, None, None]:
    """Test client running the full app lifespan against the fake backend."""
    app = create_app(test_settings, http_transport=backend.transport)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": AUTH_HEADER}

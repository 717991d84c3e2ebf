"""Pytest configuration and fixtures for docflow.

Uses docflow.main:app for HTTP tests and docflow.infrastructure.persistence.database
for DB-dependent fixtures. Environment is prepared before the app is imported:
SECRET_KEY is always set, and without DATABASE_URL the database backend is
'none' so DB-backed routes answer 503 and requires_db tests skip.
"""

import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-docflow-tests")
if not os.environ.get("DATABASE_URL"):
    os.environ["DATABASE_BACKEND"] = "none"
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="docflow-tests-"))

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from docflow.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

import docflow.infrastructure.persistence.database as database  # noqa: E402
from docflow.infrastructure.security.jwt import create_access_token  # noqa: E402
from docflow.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_BACKEND=postgres and DATABASE_URL with the schema
    created (python -m scripts.init_db). Skips when Postgres is not
    configured. Mark such tests with @pytest.mark.requires_db; run without
    DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_BACKEND=postgres and DATABASE_URL, "
            "then run: python -m scripts.init_db"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def bearer_headers():
    """Build an Authorization header with a token signed by the test SECRET_KEY."""

    def _headers(
        user_id: str, role_level: int, department_id: str | None = "dept-1"
    ) -> dict[str, str]:
        claims: dict = {"sub": user_id, "role_level": role_level}
        if department_id is not None:
            claims["department_id"] = department_id
        return {"Authorization": f"Bearer {create_access_token(claims)}"}

    return _headers


@pytest.fixture
def app_overrides():
    """Apply FastAPI dependency overrides for one test and remove them after."""
    applied: list = []

    def _override(dependency, factory) -> None:
        app.dependency_overrides[dependency] = factory
        applied.append(dependency)

    yield _override
    for dependency in applied:
        app.dependency_overrides.pop(dependency, None)

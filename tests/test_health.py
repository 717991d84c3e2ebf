"""Smoke tests for health and app wiring."""

from httpx import AsyncClient

from docflow.core.config import get_settings


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"


async def test_root_describes_service(client: AsyncClient) -> None:
    """GET / returns the service name and docs location."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == get_settings().app_name
    assert data["docs"] == "/docs"


async def test_readiness_without_database(client: AsyncClient) -> None:
    """GET /api/v1/health/ready reports not_configured when no database backend is set."""
    if get_settings().database_backend == "postgres":
        return
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["database"] == "not_configured"

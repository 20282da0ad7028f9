"""Integration tests for health endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from gatekeeper.core.database import Database
from gatekeeper.main import create_app


pytestmark = pytest.mark.integration


class TestHealth:
    """Tests for probes and application info."""

    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    async def test_readiness_checks_database(self, client: AsyncClient):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "checks": {"database": "ok"}}

    async def test_info(self, client: AsyncClient):
        response = await client.get("/info")

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == "0.1.0"
        assert data["environment"] == "test"

    async def test_unknown_route_is_problem_document(self, client: AsyncClient):
        response = await client.get("/api/v1/nope")

        assert response.status_code == 404
        assert response.json()["status"] == 404


class TestReadinessDegraded:
    """Readiness against a database that cannot be opened."""

    async def test_unreachable_database_is_503(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'db.sqlite'}")
        app = create_app(database=database)

        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.get("/health/ready")

        await database.dispose()
        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["database"] != "ok"

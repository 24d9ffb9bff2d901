"""
Integration Tests for health endpoints.
"""

from unittest.mock import AsyncMock, patch


class TestHealth:
    async def test_liveness(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_readiness_healthy(self, client):
        with patch(
            "inkline.backend.api.health.check_database",
            AsyncMock(return_value={"status": "healthy", "latency_ms": 1}),
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"

    async def test_readiness_unhealthy(self, client):
        with patch(
            "inkline.backend.api.health.check_database",
            AsyncMock(return_value={"status": "unhealthy", "error": "refused"}),
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 503

    async def test_request_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    async def test_unknown_route_uses_error_envelope(self, client):
        response = await client.get("/no-such-route")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RES_NOT_FOUND"

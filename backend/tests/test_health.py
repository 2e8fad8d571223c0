"""
Tests for health check endpoints.
"""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError


class TestHealthEndpoints:
    """Test health check API endpoints."""

    def test_health_check(self, client):
        """Basic health check should return healthy status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "pos-api"

    def test_detailed_health_check(self, client):
        response = client.get("/api/health/detailed")
        assert response.status_code == 200
        data = response.json()
        assert data["dependencies"]["database"]["status"] == "healthy"
        assert data["mirror"]["configured"] is False

    def test_detailed_health_database_down(self, client):
        with patch("pos_api.routers.health.SessionLocal") as session_factory:
            session_factory.return_value.__enter__.return_value.execute.side_effect = OperationalError(
                "SELECT 1", {}, Exception("could not connect")
            )
            response = client.get("/api/health/detailed")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"


class TestRequestCorrelation:
    def test_generated_when_missing(self, client):
        response = client.get("/api/health")
        assert len(response.headers["X-Request-ID"]) == 36

    def test_unusable_header_replaced(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "x" * 200})
        assert response.headers["X-Request-ID"] != "x" * 200
        assert len(response.headers["X-Request-ID"]) == 36

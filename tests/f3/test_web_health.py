"""Tests for health endpoint (F3)."""


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client):
        """Health endpoint returns status ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_returns_version(self, client):
        """Health endpoint returns version."""
        data = client.get("/health").json()
        assert data["version"] == "0.1.0"

    def test_health_returns_timestamp(self, client):
        """Health endpoint returns timestamp."""
        data = client.get("/health").json()
        # ISO format check
        assert "T" in data["timestamp"]

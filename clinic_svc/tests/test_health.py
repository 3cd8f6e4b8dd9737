"""
Tests for the service info, liveness and readiness endpoints.

- /: Root endpoint with API info
- /health: Liveness probe
- /ready: Readiness probe with a database check
"""
import sqlite3

from core import dependencies as deps


class UnreachableDatabase:
    """Database double whose connections always fail."""

    db_path = "/nonexistent/clinic.db"

    def get_connection(self):
        raise sqlite3.OperationalError("unable to open database file")


# =============================================================================
# ROOT ENDPOINT TESTS
# =============================================================================

def test_root_endpoint(client):
    """Test the root endpoint returns API info."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Clinic Service API"
    assert data["version"] == "1.0.0"
    assert data["patients"] == "/patients"
    assert data["exams"] == "/exams"


# =============================================================================
# HEALTH ENDPOINT TESTS (LIVENESS)
# =============================================================================

def test_health_endpoint(client):
    """Test the /health liveness endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["timestamp"].endswith("Z")


# =============================================================================
# READINESS ENDPOINT TESTS
# =============================================================================

def test_ready_endpoint(client):
    """A reachable database makes the service ready."""
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert [d["name"] for d in data["dependencies"]] == ["database"]
    assert data["dependencies"][0]["status"] == "ok"


def test_ready_endpoint_database_down(client, test_app):
    """An unreachable database returns 503 not_ready."""
    test_app.dependency_overrides[deps.get_database] = lambda: UnreachableDatabase()

    response = client.get("/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["dependencies"][0]["status"] == "unavailable"
    assert "OperationalError" in data["dependencies"][0]["message"]

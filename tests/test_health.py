"""Tests for /health and /ready observability endpoints.

Uses FastAPI TestClient with in-memory SQLite connections to verify
liveness and readiness probes without external dependencies.
"""

from __future__ import annotations

import sqlite3

from fastapi import FastAPI
from fastapi.testclient import TestClient

from appointments.domain.errors import StoreUnavailableError
from appointments.health import register_health_routes
from appointments.store.memory import InMemoryInquiryStore
from appointments.store.schema import open_inquiry_db
from appointments.store.sqlite import SqliteInquiryStore

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_app(services: dict | None = None) -> FastAPI:
    """Create a minimal FastAPI app with health routes and given services."""
    app = FastAPI()
    app.state.services = services or {}
    register_health_routes(app)
    return app


class _DownStore:
    def ping(self) -> None:
        raise StoreUnavailableError("database is locked")


# ---------------------------------------------------------------------------
# /health (liveness)
# ---------------------------------------------------------------------------

class TestHealthEndpoint:
    """GET /health liveness probe."""

    def test_health_returns_200(self) -> None:
        client = TestClient(_make_app())

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


# ---------------------------------------------------------------------------
# /ready (readiness)
# ---------------------------------------------------------------------------

class TestReadyEndpoint:
    """GET /ready readiness probe."""

    def test_ready_returns_200_when_services_ok(self) -> None:
        inquiry_conn = open_inquiry_db(":memory:")
        audit_conn = sqlite3.connect(":memory:", check_same_thread=False)
        app = _make_app({"store": SqliteInquiryStore(inquiry_conn), "audit_conn": audit_conn})

        response = TestClient(app).get("/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"] == {"inquiry_store": "ok", "audit_db": "ok"}

        inquiry_conn.close()
        audit_conn.close()

    def test_ready_returns_503_when_db_missing(self) -> None:
        """audit_conn is None -> audit_db fails."""
        app = _make_app({"store": InMemoryInquiryStore(), "audit_conn": None})

        response = TestClient(app).get("/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "not_ready"
        assert body["checks"]["audit_db"] == "fail"
        assert body["checks"]["inquiry_store"] == "ok"

    def test_ready_returns_503_when_store_down(self) -> None:
        audit_conn = sqlite3.connect(":memory:", check_same_thread=False)
        app = _make_app({"store": _DownStore(), "audit_conn": audit_conn})

        response = TestClient(app).get("/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["checks"]["inquiry_store"] == "fail"
        assert body["checks"]["audit_db"] == "ok"

        audit_conn.close()

    def test_ready_returns_503_when_both_missing(self) -> None:
        response = TestClient(_make_app({})).get("/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "not_ready"
        assert body["checks"] == {"inquiry_store": "fail", "audit_db": "fail"}

    def test_ready_returns_503_when_db_connection_broken(self) -> None:
        """A closed connection that raises on execute -> audit_db fails."""
        conn = sqlite3.connect(":memory:", check_same_thread=False)
        conn.close()
        app = _make_app({"store": InMemoryInquiryStore(), "audit_conn": conn})

        response = TestClient(app).get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["audit_db"] == "fail"

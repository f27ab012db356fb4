"""
End-to-end tests of the request pipeline on the assembled app.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from conftest import USER_ID, events
from opsdesk.main import app
from opsdesk.middleware.edge_auth import build_security_headers


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app, follow_redirects=False)


@pytest.fixture(autouse=True)
def capture_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog


class TestPipeline:
    """Tests for middleware wiring in create_app"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_protected_page_redirect_is_logged(self, client, caplog):
        response = client.get("/admin/reports")

        assert response.status_code == 307
        assert response.headers["location"] == "/login?redirect=%2Fadmin%2Freports"
        for name, value in build_security_headers().items():
            assert response.headers[name] == value
        [completion] = events(caplog, "api_request")
        assert completion.status_code == 307

    def test_authenticated_request_logs_user_id(self, client, caplog, user_headers):
        client.get("/auth/me", headers=user_headers)

        [start] = events(caplog, "request_start")
        [completion] = events(caplog, "api_request")
        assert completion.user_id == USER_ID
        assert completion.request_id == start.request_id

    def test_validation_failure_logs_completion_only(self, client, caplog):
        response = client.post("/auth/login", json={"email": "bad"})

        assert response.status_code == 400
        [completion] = events(caplog, "api_request")
        assert completion.status_code == 400
        assert events(caplog, "error") == []

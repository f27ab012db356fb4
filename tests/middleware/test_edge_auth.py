"""
Tests for EdgeAuthMiddleware.

Tests cover:
- Redirect to login for protected paths without the session cookie
- Pass-through with the cookie and for public paths
- Security headers on every response, redirects included
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from opsdesk.middleware.edge_auth import EdgeAuthMiddleware, build_security_headers


def _build_app(**options):
    app = FastAPI()
    app.add_middleware(EdgeAuthMiddleware, **options)

    @app.get("/admin/reports")
    async def reports():
        return {"page": "reports"}

    @app.get("/dashboard")
    async def dashboard():
        return {"page": "dashboard"}

    @app.get("/administrator")
    async def administrator():
        return {"page": "administrator"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


@pytest.fixture
def anonymous_client():
    return TestClient(_build_app(), follow_redirects=False)


@pytest.fixture
def session_client():
    return TestClient(_build_app(), cookies={"auth-token": "opaque-session"}, follow_redirects=False)


def _assert_security_headers(response):
    for name, value in build_security_headers().items():
        assert response.headers[name] == value


class TestProtectedPaths:
    """Tests for the cookie-presence guard"""

    def test_redirects_without_cookie(self, anonymous_client):
        response = anonymous_client.get("/admin/reports")

        assert response.status_code == 307
        assert response.headers["location"] == "/login?redirect=%2Fadmin%2Freports"
        _assert_security_headers(response)

    def test_exact_prefix_is_protected(self, anonymous_client):
        response = anonymous_client.get("/dashboard")

        assert response.status_code == 307
        assert response.headers["location"] == "/login?redirect=%2Fdashboard"

    def test_cookie_lets_request_through(self, session_client):
        response = session_client.get("/admin/reports")

        assert response.status_code == 200
        assert response.json() == {"page": "reports"}
        _assert_security_headers(response)

    def test_empty_cookie_is_missing(self):
        client = TestClient(_build_app(), cookies={"auth-token": ""}, follow_redirects=False)

        assert client.get("/admin/reports").status_code == 307

    def test_similar_prefix_is_not_protected(self, anonymous_client):
        response = anonymous_client.get("/administrator")

        assert response.status_code == 200

    def test_public_path_gets_headers(self, anonymous_client):
        response = anonymous_client.get("/health")

        assert response.status_code == 200
        _assert_security_headers(response)


class TestConfiguration:
    """Tests for configurable prefixes, cookie and login path"""

    def test_custom_options(self):
        client = TestClient(
            _build_app(protected_prefixes=["health/"], cookie_name="sid", login_path="/entrar"),
            follow_redirects=False,
        )

        response = client.get("/health")

        assert response.status_code == 307
        assert response.headers["location"] == "/entrar?redirect=%2Fhealth"
        assert client.get("/admin/reports").status_code == 200

    def test_is_protected(self):
        middleware = EdgeAuthMiddleware(app=None)

        assert middleware.is_protected("/client")
        assert middleware.is_protected("/client/orders/1")
        assert not middleware.is_protected("/clients")
        assert not middleware.is_protected("/")

    def test_csp_connect_src(self):
        headers = build_security_headers("https://api.opsdesk.example")

        assert "connect-src 'self' https://api.opsdesk.example;" in headers["Content-Security-Policy"]
        assert headers["X-Frame-Options"] == "DENY"
        assert headers["X-Content-Type-Options"] == "nosniff"

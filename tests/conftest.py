"""
Pytest configuration for OpsDesk backend tests.

Sets up test environment and global fixtures.
"""
import os
import time

import jwt
import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables (before any opsdesk import reads them)
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["VALIDATION_LOCALE"] = "pt-BR"
os.environ["VALIDATION_MESSAGES_FILE"] = ""

TEST_JWT_SECRET = "test-jwt-secret"

# 24-hex document ids
USER_ID = "64b7f0c2a1b2c3d4e5f60718"
OTHER_USER_ID = "64b7f0c2a1b2c3d4e5f60799"
EQUIPMENT_ID = "650a1b2c3d4e5f6071829304"


def make_token(user_id: str = USER_ID, role: str = "user", expires_in: int = 3600) -> str:
    """Sign a session token the way the auth service does."""
    payload = {"sub": user_id, "role": role, "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def schema_registry():
    """Registry with the default pt-BR catalog."""
    from opsdesk.schemas.registry import build_schema_registry
    return build_schema_registry()


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {make_token(USER_ID, 'user')}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID, 'admin')}"}


@pytest.fixture
def employee_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID, 'employee')}"}


class FakeClock:
    """Monotonic clock returning scripted readings (seconds)."""

    def __init__(self, *readings: float):
        self.readings = list(readings)

    def __call__(self) -> float:
        return self.readings.pop(0)


def events(caplog, category):
    """Log records emitted with the given pipeline category."""
    return [record for record in caplog.records if getattr(record, "category", None) == category]

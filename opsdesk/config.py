"""
Configuration module for the OpsDesk backend.

Loads environment variables and validates required settings.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # JWT verification (HS256 shared secret issued by the auth service)
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    # Edge auth guard
    AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "auth-token")
    LOGIN_PATH: str = os.getenv("LOGIN_PATH", "/login")
    PROTECTED_PATH_PREFIXES: List[str] = _split_csv(
        os.getenv("PROTECTED_PATH_PREFIXES", "/admin,/client,/dashboard")
    )
    # Extra origin allowed in the CSP connect-src directive (the API host)
    CSP_CONNECT_SRC: str = os.getenv("CSP_CONNECT_SRC", "http://localhost:3001")

    # Request logging
    SLOW_REQUEST_THRESHOLD_MS: int = int(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "1000"))

    # Validation messages
    VALIDATION_LOCALE: str = os.getenv("VALIDATION_LOCALE", "pt-BR")
    # Optional JSON file with message overrides ({"name.min": "..."})
    VALIDATION_MESSAGES_FILE: str = os.getenv("VALIDATION_MESSAGES_FILE", "")

    # CORS Settings
    CORS_ALLOWED_ORIGINS: List[str] = _split_csv(os.getenv("CORS_ALLOWED_ORIGINS", ""))

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing or malformed.
        """
        required_settings = {
            "JWT_SECRET": cls.JWT_SECRET,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

        if cls.SLOW_REQUEST_THRESHOLD_MS <= 0:
            raise ValueError("SLOW_REQUEST_THRESHOLD_MS must be a positive number of milliseconds")

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise

"""
Shared pydantic building blocks for request schemas.

RequestSchema is the base class of every input model in the registry: unknown
keys are dropped, camelCase aliases are accepted on input and used in error
locations, and snake_case names are accepted too.
"""

import re
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from opsdesk.utils.coercion import coerce_integer, coerce_string

# Document store identifiers (24 hex chars)
OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

# Lookaheads are not supported by the pydantic-core regex engine, so the
# password strength rule is checked with Python's re in a validator.
_PASSWORD_STRENGTH = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class RequestSchema(BaseModel):
    """Base model for validated request input."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )


def password_strength(value: str) -> str:
    """Require at least one lowercase letter, one uppercase letter and one digit."""
    if not _PASSWORD_STRENGTH.match(value):
        raise PydanticCustomError(
            "string_pattern_mismatch",
            "Password must contain a lowercase letter, an uppercase letter and a digit",
        )
    return value


def require_any_field(instance: BaseModel) -> BaseModel:
    """Reject partial-update payloads that carry no recognized, non-null field."""
    if not any(getattr(instance, name) is not None for name in type(instance).model_fields):
        raise PydanticCustomError(
            "object_min",
            "At least one field must be provided for update",
        )
    return instance


def reject_null(value: Any) -> Any:
    """Explicit null on an update field; omit the key to leave it unchanged."""
    if value is None:
        raise PydanticCustomError("null_not_allowed", "Field cannot be null")
    return value


# --- Query / path parameter models ---

class PaginationQuery(RequestSchema):
    """
    Query parameters for list endpoints.

    Query strings may repeat a key (?page=2&page=3); repeated values are
    collapsed to their first element before validation.
    """
    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(20, ge=1, le=100, description="Page size")
    sort: Optional[str] = Field(None, max_length=100, description="Sort field")
    order: Literal["asc", "desc"] = Field("desc", description="Sort direction")

    @field_validator("page", "limit", mode="before")
    @classmethod
    def first_integer(cls, value: Any) -> Any:
        if isinstance(value, list):
            return coerce_integer(value)
        return value

    @field_validator("sort", "order", mode="before")
    @classmethod
    def first_string(cls, value: Any) -> Any:
        if isinstance(value, list):
            return coerce_string(value)
        return value


class ObjectIdParams(RequestSchema):
    """Path parameters for routes addressing a single document."""
    id: str = Field(..., pattern=OBJECT_ID_PATTERN, description="Document id (24 hex chars)")


# --- Response envelope ---

class ApiResponse(BaseModel):
    """Standard success envelope returned by business routes."""
    success: bool = Field(True, description="Always true for 2xx responses")
    message: Optional[str] = Field(None, description="Human-readable outcome")
    data: Optional[Dict[str, Any]] = Field(None, description="Route-specific payload")

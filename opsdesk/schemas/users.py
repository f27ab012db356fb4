"""
Pydantic schemas for user account operations.

These models define the input contracts for registration, login, profile
update and password change. Field constraints live here; the text shown to
clients for each violation lives in the message catalog (schemas/messages.py).
"""

from typing import Any, Literal, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from opsdesk.schemas.common import (
    RequestSchema,
    password_strength,
    reject_null,
    require_any_field,
)

# Role enum (matches the user collection's allowed values)
UserRole = Literal["admin", "user", "employee"]


class UserRegisterRequest(RequestSchema):
    """
    Request to register a new user.

    `role` defaults to "user" when omitted.
    """
    name: str = Field(..., min_length=2, max_length=100, examples=["João Silva"])
    email: EmailStr = Field(..., examples=["joao@opsdesk.com.br"])
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole = Field("user", description="Account role")

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return password_strength(value)


class UserLoginRequest(RequestSchema):
    """Request to authenticate with email and password."""
    email: EmailStr = Field(...)
    password: str = Field(..., min_length=1)


class UserUpdateRequest(RequestSchema):
    """
    Request to update a user.

    All fields are optional - only provided fields will be updated.
    At least one field must be provided, and provided fields cannot be null.
    """
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = Field(None)
    role: Optional[UserRole] = Field(None)
    is_active: Optional[bool] = Field(None, alias="isActive")

    @field_validator("name", "email", "role", "is_active", mode="before")
    @classmethod
    def check_not_null(cls, value: Any) -> Any:
        return reject_null(value)

    @model_validator(mode="after")
    def check_any_field(self) -> "UserUpdateRequest":
        return require_any_field(self)


class PasswordChangeRequest(RequestSchema):
    """Request to replace the current password."""
    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=128)

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, value: str) -> str:
        return password_strength(value)

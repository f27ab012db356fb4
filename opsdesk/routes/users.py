"""
User management endpoints.

- PATCH /users/{id} - Partial update of a user

Only the user themself or an admin may update a user, and only admins may
change roles.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from opsdesk.auth.dependencies import AuthenticatedUser, get_authenticated_user
from opsdesk.middleware.validation import validate
from opsdesk.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.patch(
    "/{id}",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Update a user",
)
async def update_user(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    params: Annotated[Dict[str, Any], Depends(validate("object_id", "params"))],
    payload: Annotated[Dict[str, Any], Depends(validate("user_update"))],
) -> ApiResponse:
    """
    Update a user.

    Only fields present in the request are returned in `changes`.
    """
    user_id = params["id"]

    if not auth_user.is_admin and auth_user.id != user_id:
        logger.warning(f"User {auth_user.id} attempted to update user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "forbidden",
                "details": "You can only update your own account"
            }
        )

    if "role" in payload and not auth_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "forbidden",
                "details": "Only admins can change roles"
            }
        )

    logger.info(f"Update accepted for user {user_id} (fields={sorted(payload)})")

    return ApiResponse(
        success=True,
        message="User updated successfully",
        data={"id": user_id, "changes": payload},
    )

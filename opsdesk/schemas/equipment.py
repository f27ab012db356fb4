"""
Pydantic schemas for equipment endpoints.

Equipment items are the company's tools and vehicles (chainsaws, trucks,
protective gear) tracked with a status and a preventive-maintenance interval.
"""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from opsdesk.schemas.common import (
    OBJECT_ID_PATTERN,
    RequestSchema,
    reject_null,
    require_any_field,
)
from opsdesk.utils.coercion import coerce_date, is_valid_date

EquipmentCategory = Literal[
    "motosserra",
    "poda_alta",
    "rocadeira",
    "cortador_grama",
    "caminhao",
    "reboque",
    "epi",
    "outros",
]

EquipmentStatus = Literal["ativo", "manutencao", "inativo", "aposentado"]


def parse_purchase_date(value: Any) -> Optional[datetime]:
    """Parse a purchase date and reject unparsable or future dates."""
    if value is None:
        return None
    parsed = coerce_date(value)
    if not is_valid_date(parsed):
        raise PydanticCustomError("datetime_parsing", "Input should be a valid date")
    if parsed > datetime.now(timezone.utc):
        raise PydanticCustomError("date_max", "Date cannot be in the future")
    return parsed


class MaintenancePlan(RequestSchema):
    preventive_interval: int = Field(30, alias="preventiveInterval", ge=1, le=365)


class MaintenancePlanUpdate(RequestSchema):
    preventive_interval: Optional[int] = Field(None, alias="preventiveInterval", ge=1, le=365)

    @field_validator("preventive_interval", mode="before")
    @classmethod
    def check_not_null(cls, value: Any) -> Any:
        return reject_null(value)


class EquipmentCreateRequest(RequestSchema):
    """
    Request to register a piece of equipment.

    Required: name, category, brand, model. `status` defaults to "ativo".
    """
    name: str = Field(..., min_length=2, max_length=200)
    category: EquipmentCategory = Field(...)
    brand: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    status: EquipmentStatus = Field("ativo")
    serial_number: Optional[str] = Field(None, alias="serialNumber", max_length=100)
    purchase_date: Optional[datetime] = Field(None, alias="purchaseDate")
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=1000)
    maintenance: Optional[MaintenancePlan] = Field(None)

    @field_validator("purchase_date", mode="before")
    @classmethod
    def check_purchase_date(cls, value: Any) -> Optional[datetime]:
        return parse_purchase_date(value)


class EquipmentUpdateRequest(RequestSchema):
    """
    Request to update a piece of equipment.

    All fields are optional; at least one must be provided and none may be null.
    """
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    category: Optional[EquipmentCategory] = Field(None)
    brand: Optional[str] = Field(None, min_length=1, max_length=100)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[EquipmentStatus] = Field(None)
    serial_number: Optional[str] = Field(None, alias="serialNumber", max_length=100)
    purchase_date: Optional[datetime] = Field(None, alias="purchaseDate")
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=1000)
    maintenance: Optional[MaintenancePlanUpdate] = Field(None)

    @field_validator("purchase_date", mode="before")
    @classmethod
    def check_purchase_date(cls, value: Any) -> Optional[datetime]:
        return parse_purchase_date(reject_null(value))

    @field_validator(
        "name",
        "category",
        "brand",
        "model",
        "status",
        "serial_number",
        "location",
        "notes",
        "maintenance",
        mode="before",
    )
    @classmethod
    def check_not_null(cls, value: Any) -> Any:
        return reject_null(value)

    @model_validator(mode="after")
    def check_any_field(self) -> "EquipmentUpdateRequest":
        return require_any_field(self)


class EquipmentAssignmentRequest(RequestSchema):
    """Assign equipment to a user, or clear the assignment with null."""
    assigned_to: Optional[str] = Field(None, alias="assignedTo", pattern=OBJECT_ID_PATTERN)

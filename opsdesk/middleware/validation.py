"""
Request validation stage.

validate(schema, target) builds a FastAPI dependency that reads the request
body, query string or path parameters, runs it through a registered schema
and either hands the normalized value to the route or stops the request with
a 400 VALIDATION_ERROR response listing every violation at once.

Usage:
    >>> @router.post("/auth/register", status_code=201)
    >>> async def register(payload: dict = Depends(validate("user_register"))):
    >>>     ...
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from opsdesk.middleware.context import multi_dict, query_dict
from opsdesk.schemas.registry import Schema, SchemaRegistry
from opsdesk.utils.logging import get_logger, log_event

logger = get_logger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"

TARGETS = ("body", "query", "params")

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# pydantic error type -> message catalog rule
RULE_BY_ERROR_TYPE: Dict[str, str] = {
    "missing": "required",
    "string_too_short": "min",
    "string_too_long": "max",
    "too_short": "min",
    "too_long": "max",
    "greater_than": "min",
    "greater_than_equal": "min",
    "less_than": "max",
    "less_than_equal": "max",
    "string_pattern_mismatch": "pattern",
    # EmailStr reports malformed addresses as value_error
    "value_error": "pattern",
    "literal_error": "only",
    "enum": "only",
    "object_min": "min_fields",
    "date_max": "date_max",
    "null_not_allowed": "type",
    "string_type": "type",
    "bool_type": "type",
    "bool_parsing": "type",
    "int_type": "type",
    "int_parsing": "type",
    "int_from_float": "type",
    "float_type": "type",
    "float_parsing": "type",
    "datetime_type": "type",
    "datetime_parsing": "type",
    "datetime_from_date_parsing": "type",
    "model_type": "type",
    "model_attributes_type": "type",
    "dict_type": "type",
    "json_invalid": "type",
}


@dataclass(frozen=True)
class FieldViolation:
    """One rule failure, addressed by dotted field path."""
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of running a schema over one input."""
    valid: bool
    value: Optional[Dict[str, Any]] = None
    errors: Tuple[FieldViolation, ...] = ()

    @classmethod
    def success(cls, value: Dict[str, Any]) -> "ValidationResult":
        return cls(valid=True, value=value)

    @classmethod
    def failure(cls, errors: Sequence[FieldViolation]) -> "ValidationResult":
        return cls(valid=False, errors=tuple(errors))


class RequestValidationFailed(Exception):
    """Raised by validate() dependencies; rendered by validation_failed_handler."""

    def __init__(self, errors: Sequence[FieldViolation], target: str, schema_name: str):
        self.errors = list(errors)
        self.target = target
        self.schema_name = schema_name
        super().__init__(f"{schema_name} validation failed on {target} ({len(self.errors)} errors)")


def _rule_for(error: Dict[str, Any]) -> str:
    rule = RULE_BY_ERROR_TYPE.get(error.get("type", ""), "invalid")
    if rule in ("min", "pattern") and error.get("input") == "":
        return "empty"
    return rule


def _field_for(loc: Sequence[Any], root_field: str) -> str:
    path = ".".join(str(part) for part in loc)
    return path or root_field


def validate_payload(
    schema: Schema,
    data: Any,
    registry: SchemaRegistry,
    root_field: str = "body",
) -> ValidationResult:
    """
    Validate untrusted input against a schema, collecting every violation.

    Args:
        schema: Registered schema to apply
        data: Decoded input (normally a dict)
        registry: Registry providing the message catalog
        root_field: Field name reported for object-level violations

    Returns:
        ValidationResult.success with the normalized value (API aliases,
        defaults applied; unset fields dropped for partial schemas), or
        ValidationResult.failure with violations in field declaration order.
    """
    try:
        instance = schema.model.model_validate(data)
    except ValidationError as exc:
        violations = []
        for error in exc.errors(include_url=False):
            field_name = _field_for(error.get("loc", ()), root_field)
            message = registry.message_for(
                schema.scope,
                field_name,
                _rule_for(error),
                default=error.get("msg", "Invalid value"),
            )
            violations.append(FieldViolation(field=field_name, message=message))
        return ValidationResult.failure(violations)

    value = instance.model_dump(mode="json", by_alias=True, exclude_unset=schema.partial)
    return ValidationResult.success(value)


def get_schema_registry(request: Request) -> SchemaRegistry:
    registry = getattr(request.app.state, "schema_registry", None)
    if registry is None:
        raise RuntimeError("Schema registry is not configured on app.state.schema_registry")
    return registry


async def read_target(request: Request, target: str) -> Any:
    """
    Read the raw input for a validation target.

    Raises:
        ValueError: If a JSON body cannot be decoded.
    """
    if target == "query":
        return query_dict(request.scope)
    if target == "params":
        return dict(request.path_params)

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return multi_dict(form.multi_items())

    raw = await request.body()
    if not raw.strip():
        return {}
    return json.loads(raw)


def validate(schema: Union[str, Schema], target: str = "body"):
    """
    Build a dependency validating one request target against a schema.

    Args:
        schema: Registry name (resolved per request against
            app.state.schema_registry) or a Schema instance
        target: "body", "query" or "params"

    Returns:
        Async dependency returning the normalized value. The value is also
        stored on request.state.validated[target].

    Raises:
        ValueError: If target is unknown (at route definition time)
    """
    if target not in TARGETS:
        raise ValueError(f"Unknown validation target '{target}', expected one of {TARGETS}")

    schema_label = schema if isinstance(schema, str) else schema.name

    async def dependency(request: Request) -> Dict[str, Any]:
        registry = get_schema_registry(request)
        bound = registry.get(schema) if isinstance(schema, str) else schema

        try:
            data = await read_target(request, target)
        except ValueError:
            message = registry.message_for(bound.scope, target, "type", "Malformed request body")
            raise RequestValidationFailed(
                [FieldViolation(field=target, message=message)],
                target=target,
                schema_name=bound.name,
            )

        result = validate_payload(bound, data, registry, root_field=target)
        if not result.valid:
            raise RequestValidationFailed(result.errors, target=target, schema_name=bound.name)

        validated = dict(getattr(request.state, "validated", None) or {})
        validated[target] = result.value
        request.state.validated = validated
        return result.value

    dependency.__name__ = f"validate_{schema_label}_{target}"
    return dependency


def validation_error_response(violations: Sequence[FieldViolation]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": VALIDATION_ERROR,
            "details": [violation.to_dict() for violation in violations],
        },
    )


async def validation_failed_handler(request: Request, exc: RequestValidationFailed) -> JSONResponse:
    """Render RequestValidationFailed as the 400 VALIDATION_ERROR envelope."""
    log_event(
        logger,
        logging.WARNING,
        f"Validation failed for {exc.schema_name} on {request.method} {request.url.path}",
        request_id=getattr(request.state, "request_id", None),
        fields=[violation.field for violation in exc.errors],
    )
    return validation_error_response(exc.errors)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render FastAPI's own parameter validation errors in the same envelope.

    The leading location element ("body", "query", "path") is dropped so
    field paths match the ones produced by validate().
    """
    violations: List[FieldViolation] = []
    for error in exc.errors():
        loc = list(error.get("loc", ()))
        root = str(loc.pop(0)) if loc else "body"
        violations.append(
            FieldViolation(field=_field_for(loc, root), message=error.get("msg", "Invalid value"))
        )

    log_event(
        logger,
        logging.WARNING,
        f"Request validation error on {request.method} {request.url.path}",
        request_id=getattr(request.state, "request_id", None),
        fields=[violation.field for violation in violations],
    )
    return validation_error_response(violations)

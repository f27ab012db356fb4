"""
Schema registry.

The registry maps operation names ("user_register", "pagination", ...) to
their input schema and holds the message catalog used to render violations.
It is built once at startup by build_schema_registry(), stored on
app.state.schema_registry and only read afterwards.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Type

from pydantic import BaseModel

from opsdesk.schemas.common import ObjectIdParams, PaginationQuery
from opsdesk.schemas.equipment import (
    EquipmentAssignmentRequest,
    EquipmentCreateRequest,
    EquipmentUpdateRequest,
)
from opsdesk.schemas.messages import DEFAULT_LOCALE, MESSAGE_CATALOGS
from opsdesk.schemas.users import (
    PasswordChangeRequest,
    UserLoginRequest,
    UserRegisterRequest,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

# Rules tried, in order, when no message exists for a violation's own rule
RULE_FALLBACKS: Dict[str, Tuple[str, ...]] = {
    "empty": ("empty", "required", "min"),
}


@dataclass(frozen=True)
class Schema:
    """
    One named input contract.

    Attributes:
        name: Operation name used to look the schema up
        model: pydantic model holding the field rules
        partial: True for update schemas; unset fields are left out of the
            normalized value
        message_scope: Prefix for schema-specific message keys (defaults to name)
    """
    name: str
    model: Type[BaseModel]
    partial: bool = False
    message_scope: Optional[str] = None

    @property
    def scope(self) -> str:
        return self.message_scope or self.name


DEFAULT_SCHEMAS: Tuple[Schema, ...] = (
    Schema("user_register", UserRegisterRequest),
    Schema("user_login", UserLoginRequest),
    Schema("user_update", UserUpdateRequest, partial=True),
    Schema("change_password", PasswordChangeRequest),
    Schema("equipment_create", EquipmentCreateRequest, message_scope="equipment"),
    Schema("equipment_update", EquipmentUpdateRequest, partial=True, message_scope="equipment"),
    Schema("equipment_assignment", EquipmentAssignmentRequest, message_scope="equipment"),
    Schema("pagination", PaginationQuery),
    Schema("object_id", ObjectIdParams),
)


@dataclass(frozen=True)
class SchemaRegistry:
    """Read-only lookup of schemas and their localized messages."""
    schemas: Mapping[str, Schema]
    messages: Mapping[str, str]
    locale: str = DEFAULT_LOCALE

    def get(self, name: str) -> Schema:
        try:
            return self.schemas[name]
        except KeyError:
            raise KeyError(f"Unknown validation schema '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self.schemas

    def names(self) -> Tuple[str, ...]:
        return tuple(self.schemas)

    def message_for(self, scope: str, field: str, rule: str, default: str) -> str:
        """
        Resolve the client-facing message for one violation.

        Lookup order per rule: "<scope>.<field>.<rule>", "<field>.<rule>",
        "*.<rule>". Rules listed in RULE_FALLBACKS are tried in sequence;
        `default` (the validator's own text) is returned if nothing matches.
        """
        for candidate in RULE_FALLBACKS.get(rule, (rule,)):
            for key in (f"{scope}.{field}.{candidate}", f"{field}.{candidate}", f"*.{candidate}"):
                message = self.messages.get(key)
                if message:
                    return message
        return default


def load_message_overrides(path: str) -> Dict[str, str]:
    """
    Read message overrides from a JSON object file.

    Raises:
        ValueError: If the file is missing, not valid JSON or not a flat
            string-to-string object. Misconfiguration fails at startup.
    """
    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot load validation messages from {path}: {e}") from e

    if not isinstance(raw, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in raw.items()
    ):
        raise ValueError(f"Validation messages file {path} must be a JSON object of strings")

    return raw


def build_schema_registry(
    locale: str = DEFAULT_LOCALE,
    overrides: Optional[Mapping[str, str]] = None,
    messages_file: Optional[str] = None,
    schemas: Iterable[Schema] = DEFAULT_SCHEMAS,
) -> SchemaRegistry:
    """
    Build the process-wide schema registry.

    Args:
        locale: Message catalog to start from ("pt-BR" or "en"). Unknown
            locales fall back to the default catalog with a warning.
        overrides: Message keys replacing catalog entries
        messages_file: Optional JSON file with further overrides (applied
            after `overrides`)
        schemas: Schemas to register (names must be unique)

    Returns:
        SchemaRegistry with read-only mappings
    """
    catalog = MESSAGE_CATALOGS.get(locale)
    if catalog is None:
        logger.warning(f"Unknown validation locale '{locale}', using {DEFAULT_LOCALE}")
        locale = DEFAULT_LOCALE
        catalog = MESSAGE_CATALOGS[DEFAULT_LOCALE]

    messages = dict(catalog)
    if overrides:
        messages.update(overrides)
    if messages_file:
        messages.update(load_message_overrides(messages_file))

    by_name: Dict[str, Schema] = {}
    for schema in schemas:
        if schema.name in by_name:
            raise ValueError(f"Duplicate validation schema name '{schema.name}'")
        by_name[schema.name] = schema

    logger.info(f"Schema registry built with {len(by_name)} schemas (locale={locale})")

    return SchemaRegistry(
        schemas=MappingProxyType(by_name),
        messages=MappingProxyType(messages),
        locale=locale,
    )

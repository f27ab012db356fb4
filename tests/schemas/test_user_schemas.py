"""
Tests for user account schemas and the schema registry.

Tests cover:
- Required fields, defaults and enum checks on registration
- Password strength rule
- Partial update rules (at least one field, unset fields dropped)
- Message catalog lookup, locales and overrides
- Registry immutability and construction errors
"""

import json
from dataclasses import FrozenInstanceError

import pytest
from pydantic import ValidationError

from opsdesk.middleware.validation import validate_payload
from opsdesk.schemas.registry import (
    DEFAULT_SCHEMAS,
    Schema,
    build_schema_registry,
    load_message_overrides,
)
from opsdesk.schemas.users import UserLoginRequest


def _run(registry, name, data):
    return validate_payload(registry.get(name), data, registry)


def _messages(result):
    return {violation.field: violation.message for violation in result.errors}


VALID_REGISTRATION = {
    "name": "Maria Souza",
    "email": "maria@opsdesk.com.br",
    "password": "Abc12345",
}


class TestUserRegister:
    """Tests for the user_register schema"""

    def test_valid_registration_defaults_role(self, schema_registry):
        result = _run(schema_registry, "user_register", VALID_REGISTRATION)

        assert result.valid is True
        assert result.errors == ()
        assert result.value["role"] == "user"
        assert result.value["email"] == "maria@opsdesk.com.br"

    def test_explicit_role_is_kept(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "role": "employee"})

        assert result.valid is True
        assert result.value["role"] == "employee"

    def test_missing_fields_reported_together_in_order(self, schema_registry):
        result = _run(schema_registry, "user_register", {})

        assert result.valid is False
        assert [violation.field for violation in result.errors] == ["name", "email", "password"]
        assert _messages(result) == {
            "name": "Nome é obrigatório",
            "email": "Email é obrigatório",
            "password": "Senha é obrigatória",
        }

    def test_empty_name_uses_required_message(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "name": ""})

        assert _messages(result) == {"name": "Nome é obrigatório"}

    def test_short_name(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "name": "A"})

        assert _messages(result) == {"name": "Nome deve ter pelo menos 2 caracteres"}

    def test_invalid_email(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "email": "not-an-email"})

        assert _messages(result) == {"email": "Email deve ser válido"}

    @pytest.mark.parametrize("email", ["a@b..c", "a,b@c.d", "a@b.c.", "a@-b.c", "<x>@y.z", "maria@", "maria silva@opsdesk.com.br"])
    def test_malformed_email_rejected(self, schema_registry, email):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "email": email})

        assert _messages(result) == {"email": "Email deve ser válido"}

    def test_empty_email_uses_required_message(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "email": ""})

        assert _messages(result) == {"email": "Email é obrigatório"}

    def test_unknown_role_rejected(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "role": "superuser"})

        assert _messages(result) == {"role": "Role deve ser admin, user ou employee"}

    def test_password_without_uppercase_rejected(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "password": "abc12345"})

        assert _messages(result) == {
            "password": "Senha deve conter pelo menos uma letra minúscula, uma maiúscula e um número"
        }

    def test_short_password_reports_length(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "password": "Ab1"})

        assert _messages(result) == {"password": "Senha deve ter pelo menos 6 caracteres"}

    def test_unknown_keys_are_dropped(self, schema_registry):
        result = _run(schema_registry, "user_register", {**VALID_REGISTRATION, "isAdmin": True})

        assert result.valid is True
        assert "isAdmin" not in result.value

    def test_non_object_body(self, schema_registry):
        result = _run(schema_registry, "user_register", ["not", "an", "object"])

        assert result.valid is False
        assert _messages(result) == {"body": "Corpo da requisição deve ser um objeto JSON válido"}


class TestUserLogin:
    """Tests for the user_login schema"""

    def test_valid_login(self, schema_registry):
        result = _run(schema_registry, "user_login", {"email": "a@b.co", "password": "x"})

        assert result.valid is True
        assert result.value == {"email": "a@b.co", "password": "x"}

    def test_empty_password(self, schema_registry):
        result = _run(schema_registry, "user_login", {"email": "a@b.co", "password": ""})

        assert _messages(result) == {"password": "Senha é obrigatória"}

    def test_model_is_frozen(self):
        login = UserLoginRequest(email="a@b.co", password="x")

        with pytest.raises(ValidationError):
            login.email = "other@b.co"


class TestUserUpdate:
    """Tests for the user_update partial schema"""

    def test_empty_update_rejected(self, schema_registry):
        result = _run(schema_registry, "user_update", {})

        assert result.valid is False
        assert _messages(result) == {
            "body": "Pelo menos um campo deve ser fornecido para atualização"
        }

    def test_single_field_update_only_returns_that_field(self, schema_registry):
        result = _run(schema_registry, "user_update", {"isActive": True})

        assert result.valid is True
        assert result.value == {"isActive": True}

    def test_only_unknown_keys_counts_as_empty(self, schema_registry):
        result = _run(schema_registry, "user_update", {"nickname": "mari"})

        assert result.valid is False
        assert "body" in _messages(result)

    def test_invalid_is_active_type(self, schema_registry):
        result = _run(schema_registry, "user_update", {"isActive": "maybe"})

        assert _messages(result) == {"isActive": "isActive deve ser verdadeiro ou falso"}

    def test_explicit_null_rejected(self, schema_registry):
        result = _run(schema_registry, "user_update", {"isActive": True, "name": None, "email": None})

        assert result.valid is False
        assert _messages(result) == {
            "name": "Tipo de valor inválido",
            "email": "Tipo de valor inválido",
        }

    def test_null_only_payload_rejected(self, schema_registry):
        result = _run(schema_registry, "user_update", {"role": None})

        assert result.valid is False
        assert [violation.field for violation in result.errors] == ["role"]

    def test_role_update(self, schema_registry):
        result = _run(schema_registry, "user_update", {"role": "admin", "name": "Novo Nome"})

        assert result.value == {"role": "admin", "name": "Novo Nome"}


class TestPasswordChange:
    """Tests for the change_password schema"""

    def test_valid_change(self, schema_registry):
        result = _run(
            schema_registry,
            "change_password",
            {"currentPassword": "old", "newPassword": "NewPass1"},
        )

        assert result.valid is True
        assert result.value == {"currentPassword": "old", "newPassword": "NewPass1"}

    def test_weak_new_password(self, schema_registry):
        result = _run(
            schema_registry,
            "change_password",
            {"currentPassword": "old", "newPassword": "newpass1"},
        )

        assert _messages(result) == {
            "newPassword": "Nova senha deve conter pelo menos uma letra minúscula, uma maiúscula e um número"
        }

    def test_missing_both_fields(self, schema_registry):
        result = _run(schema_registry, "change_password", {})

        assert _messages(result) == {
            "currentPassword": "Senha atual é obrigatória",
            "newPassword": "Nova senha é obrigatória",
        }


class TestMessageCatalog:
    """Tests for message lookup, locales and overrides"""

    def test_english_locale(self):
        registry = build_schema_registry(locale="en")

        result = _run(registry, "user_register", {**VALID_REGISTRATION, "role": "root"})

        assert registry.locale == "en"
        assert _messages(result) == {"role": "Role must be admin, user or employee"}

    def test_unknown_locale_falls_back_to_default(self):
        registry = build_schema_registry(locale="fr")

        assert registry.locale == "pt-BR"

    def test_overrides_replace_catalog_entries(self):
        registry = build_schema_registry(overrides={"name.min": "Nome curto demais"})

        result = _run(registry, "user_register", {**VALID_REGISTRATION, "name": "A"})

        assert _messages(result) == {"name": "Nome curto demais"}

    def test_scope_specific_key_wins(self):
        registry = build_schema_registry(
            overrides={"user_register.email.pattern": "Email de cadastro inválido"}
        )

        register = _run(registry, "user_register", {**VALID_REGISTRATION, "email": "x"})
        login = _run(registry, "user_login", {"email": "x", "password": "p"})

        assert _messages(register) == {"email": "Email de cadastro inválido"}
        assert _messages(login) == {"email": "Email deve ser válido"}

    def test_messages_file(self, tmp_path):
        messages_file = tmp_path / "messages.json"
        messages_file.write_text(json.dumps({"email.pattern": "E-mail inválido"}), encoding="utf-8")

        registry = build_schema_registry(messages_file=str(messages_file))
        result = _run(registry, "user_login", {"email": "x", "password": "p"})

        assert _messages(result) == {"email": "E-mail inválido"}

    def test_messages_file_must_be_string_map(self, tmp_path):
        messages_file = tmp_path / "messages.json"
        messages_file.write_text(json.dumps(["not", "a", "map"]), encoding="utf-8")

        with pytest.raises(ValueError):
            load_message_overrides(str(messages_file))

    def test_missing_messages_file(self, tmp_path):
        with pytest.raises(ValueError):
            build_schema_registry(messages_file=str(tmp_path / "missing.json"))

    def test_unmatched_rule_returns_default(self, schema_registry):
        assert schema_registry.message_for("user_register", "name", "nonexistent", "fallback") == "fallback"


class TestSchemaRegistry:
    """Tests for registry construction and immutability"""

    def test_default_schemas_registered(self, schema_registry):
        assert set(schema_registry.names()) == {schema.name for schema in DEFAULT_SCHEMAS}
        assert "user_register" in schema_registry
        assert "unknown" not in schema_registry

    def test_unknown_schema_name(self, schema_registry):
        with pytest.raises(KeyError):
            schema_registry.get("unknown")

    def test_registry_is_read_only(self, schema_registry):
        with pytest.raises(TypeError):
            schema_registry.schemas["extra"] = DEFAULT_SCHEMAS[0]
        with pytest.raises(TypeError):
            schema_registry.messages["name.min"] = "changed"
        with pytest.raises(FrozenInstanceError):
            schema_registry.locale = "en"

    def test_duplicate_names_rejected(self):
        duplicate = Schema("user_login", UserLoginRequest)

        with pytest.raises(ValueError):
            build_schema_registry(schemas=(*DEFAULT_SCHEMAS, duplicate))

    def test_repeated_validation_gives_same_result(self, schema_registry):
        first = _run(schema_registry, "user_register", {"name": "A"})
        second = _run(schema_registry, "user_register", {"name": "A"})

        assert first == second

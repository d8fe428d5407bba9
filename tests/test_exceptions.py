"""Tests for the exception hierarchy and its ``to_dict`` payloads."""

from __future__ import annotations

from datatable_provider.exceptions import (
    DataTableError,
    DuplicateFieldError,
    FieldConfigurationError,
    FieldNotFoundError,
    ProviderStateError,
    UnsupportedOperatorError,
    ValueCoercionError,
)


class TestExceptions:
    def test_base_to_dict(self) -> None:
        exc = ProviderStateError("busy")
        assert isinstance(exc, DataTableError)
        assert exc.to_dict() == {"error": "ProviderStateError", "message": "busy"}

    def test_duplicate_field(self) -> None:
        exc = DuplicateFieldError("name")
        assert isinstance(exc, FieldConfigurationError)
        assert exc.to_dict() == {
            "error": "FIELD_CONFIGURATION_ERROR",
            "message": "Data field 'name' is already registered.",
            "field": "name",
        }

    def test_field_not_found_suggestions(self) -> None:
        exc = FieldNotFoundError("agee", ["name", "age"])
        assert "Did you mean: age?" in str(exc)
        assert exc.to_dict()["available_fields"] == ["age", "name"]

    def test_field_not_found_without_match(self) -> None:
        exc = FieldNotFoundError("zzz", ["name"])
        assert exc.suggestions == []
        assert "Did you mean" not in str(exc)

    def test_unsupported_operator_is_value_error(self) -> None:
        exc = UnsupportedOperatorError("IS_NULL", "in-memory")
        assert isinstance(exc, ValueError)
        assert exc.to_dict() == {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": "IS_NULL",
            "substrate": "in-memory",
        }

    def test_value_coercion(self) -> None:
        exc = ValueCoercionError("abc", "number")
        assert isinstance(exc, ValueError)
        assert exc.to_dict()["value"] == "'abc'"

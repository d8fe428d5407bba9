"""
Data table provider exception hierarchy.

All exceptions inherit from ``DataTableError`` and provide
``to_dict()`` for API-friendly error responses.

Malformed client input is never raised: it is dropped at parse time.
These exceptions cover schema configuration mistakes and the internal
signals the engines use to fail open during evaluation.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class DataTableError(Exception):
    """Base exception for all data table provider errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class FieldConfigurationError(DataTableError):
    """The field schema declared by a provider is invalid."""

    def __init__(self, message: str, field_name: str | None = None) -> None:
        self.message = message
        self.field_name = field_name
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_CONFIGURATION_ERROR",
            "message": self.message,
            "field": self.field_name,
        }


class DuplicateFieldError(FieldConfigurationError):
    """A field with the same name is already registered."""

    def __init__(self, field_name: str) -> None:
        super().__init__(
            f"Data field '{field_name}' is already registered.", field_name
        )


class FieldNotFoundError(FieldConfigurationError):
    """
    A provider asked for a field that was never registered.

    Provides fuzzy-matched suggestions for likely intended names.
    """

    def __init__(self, field_name: str, available_fields: list[str]) -> None:
        self.available_fields = available_fields
        self.suggestions = get_close_matches(
            field_name, available_fields, n=3, cutoff=0.6
        )
        message = f"Unknown data field: '{field_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message, field_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.field_name,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class UnsupportedOperatorError(DataTableError, ValueError):
    """An operator registry has no strategy for the requested operator."""

    def __init__(self, operator: str, substrate: str) -> None:
        self.operator = operator
        self.substrate = substrate
        super().__init__(
            f"Unsupported operator for {substrate} evaluation: {operator}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "substrate": self.substrate,
        }


class ValueCoercionError(DataTableError, ValueError):
    """A value could not be converted to the type declared by its field."""

    def __init__(self, value: Any, value_type: str) -> None:
        self.value = value
        self.value_type = value_type
        super().__init__(f"Cannot coerce {value!r} to {value_type}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALUE_COERCION_ERROR",
            "value": repr(self.value),
            "value_type": self.value_type,
        }


class ProviderStateError(DataTableError):
    """A provider was driven outside of its single request lifecycle."""

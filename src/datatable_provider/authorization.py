"""
Per-field filter authorization.

A :class:`FilterAuthorization` is an ordered list of
``(operator, validator)`` rules. A filter is authorized when a rule's
operator matches (or the filter uses ``AUTO``) and the rule's validator
accepts the filter value.

Three presets cover the common field kinds::

    FilterAuthorization.string()   # =, !=, LIKE, IN, ...
    FilterAuthorization.numeric()  # comparisons, IN, BETWEEN on numbers
    FilterAuthorization.date()     # comparisons, IN, BETWEEN on ISO strings
"""

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from .operators import NULL_OPERATORS, FilterOperator

if TYPE_CHECKING:
    from .request import Filter

Validator = Callable[[Any], bool]


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def is_scalar(value: Any) -> bool:
    return isinstance(value, str | int | float | bool | Decimal)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_numeric(value: Any) -> bool:
    """Numbers and numeric strings (``"12"``, ``" 1.5e3"``) are numeric."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int | Decimal):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return Decimal(value.strip()).is_finite()
        except InvalidOperation:
            return False
    return False


def _array_of(check: Validator) -> Validator:
    def validator(value: Any) -> bool:
        if not isinstance(value, list | tuple):
            return False
        return all(check(item) for item in value)

    return validator


is_array_of_string = _array_of(is_string)
is_array_of_numeric = _array_of(is_numeric)
is_array_of_scalar = _array_of(is_scalar)

_VALIDATORS: dict[str, Validator] = {
    "is_scalar": is_scalar,
    "is_string": is_string,
    "is_numeric": is_numeric,
    "is_array_of_string": is_array_of_string,
    "is_array_of_numeric": is_array_of_numeric,
    "is_array_of_scalar": is_array_of_scalar,
}


def get_validator(name: str) -> Validator:
    """
    Return a named validator.

    Raises:
        KeyError: If no validator is registered under *name*.
    """
    try:
        return _VALIDATORS[name]
    except KeyError:
        raise KeyError(
            f"Unknown validator '{name}'. Valid validators: {', '.join(_VALIDATORS)}"
        ) from None


# ---------------------------------------------------------------------------
# Authorization policy
# ---------------------------------------------------------------------------


class FilterAuthorization:
    """Ordered list of operator rules guarding a field's filters."""

    def __init__(self) -> None:
        self._rules: list[tuple[FilterOperator, Validator | None]] = []

    def __repr__(self) -> str:
        operators = ", ".join(op.value for op, _ in self._rules)
        return f"FilterAuthorization([{operators}])"

    @property
    def operators(self) -> list[FilterOperator]:
        return [op for op, _ in self._rules]

    def add(
        self, operator: FilterOperator | str, validator: Validator | None = None
    ) -> FilterAuthorization:
        """Append a rule. A ``None`` validator accepts any value."""
        self._rules.append((FilterOperator(operator), validator))
        return self

    def reset(self) -> FilterAuthorization:
        self._rules.clear()
        return self

    def is_authorized(self, filter: Filter) -> bool:
        wildcard = filter.operator is FilterOperator.AUTO
        for operator, validator in self._rules:
            if not wildcard and filter.operator is not operator:
                continue
            if validator is None:
                return True
            # Null checks carry no value to validate
            if filter.operator in NULL_OPERATORS and filter.value is None:
                return True
            if validator(filter.value):
                return True
        return False

    # -- presets -------------------------------------------------------------

    @classmethod
    def string(cls) -> FilterAuthorization:
        auth = cls()
        for op in (
            FilterOperator.EQ,
            FilterOperator.NE,
            FilterOperator.IS_NULL,
            FilterOperator.IS_NOT_NULL,
        ):
            auth.add(op, is_scalar)
        auth.add(FilterOperator.LIKE, is_string)
        auth.add(FilterOperator.NOT_LIKE, is_string)
        auth.add(FilterOperator.IN, is_array_of_scalar)
        auth.add(FilterOperator.NOT_IN, is_array_of_scalar)
        return auth

    @classmethod
    def numeric(cls) -> FilterAuthorization:
        return cls._comparable(is_numeric, is_array_of_numeric)

    @classmethod
    def date(cls) -> FilterAuthorization:
        return cls._comparable(is_string, is_array_of_string)

    @classmethod
    def _comparable(
        cls, single: Validator, many: Validator
    ) -> FilterAuthorization:
        auth = cls()
        for op in (
            FilterOperator.EQ,
            FilterOperator.NE,
            FilterOperator.GT,
            FilterOperator.GE,
            FilterOperator.LT,
            FilterOperator.LE,
            FilterOperator.IS_NULL,
            FilterOperator.IS_NOT_NULL,
        ):
            auth.add(op, single)
        for op in (
            FilterOperator.IN,
            FilterOperator.NOT_IN,
            FilterOperator.BETWEEN,
            FilterOperator.NOT_BETWEEN,
        ):
            auth.add(op, many)
        return auth

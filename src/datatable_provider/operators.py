"""Enumerations shared by the request model, the field registry and the engines."""

from __future__ import annotations

from enum import Enum


class FilterOperator(str, Enum):
    """Filter operators accepted from client requests."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    LIKE = "LIKE"
    NOT_LIKE = "!LIKE"
    IN = "IN"
    NOT_IN = "!IN"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "!BETWEEN"
    IS_NULL = "IS_NULL"
    IS_NOT_NULL = "!IS_NULL"

    # Use the field's default operator
    AUTO = "AUTO"

    @classmethod
    def parse(cls, raw: object) -> FilterOperator:
        """Return the matching operator, ``AUTO`` for anything unknown."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw)
            except ValueError:
                return cls.AUTO
        return cls.AUTO


ORDERED_COMPARISON_OPERATORS = frozenset(
    {
        FilterOperator.GT,
        FilterOperator.LT,
        FilterOperator.GE,
        FilterOperator.LE,
    }
)

PATTERN_OPERATORS = frozenset({FilterOperator.LIKE, FilterOperator.NOT_LIKE})

SET_OPERATORS = frozenset({FilterOperator.IN, FilterOperator.NOT_IN})

RANGE_OPERATORS = frozenset({FilterOperator.BETWEEN, FilterOperator.NOT_BETWEEN})

NULL_OPERATORS = frozenset({FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL})


class FilterType(str, Enum):
    FOR_FIELD = "for_field"
    GLOBAL = "global"


class OrderDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: object) -> OrderDirection | None:
        """Case-insensitive parse; ``None`` when *raw* is not a direction."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.lower())
        except ValueError:
            return None


class ProcessingMethod(str, Enum):
    """Where a field's filtering or ordering is executed."""

    QUERY = "query"
    MEMORY_AUTO = "memory_auto"
    MEMORY_CUSTOM = "memory_custom"

    @property
    def in_memory(self) -> bool:
        return self is not ProcessingMethod.QUERY


class ValueType(str, Enum):
    """Declared value type of a field, drives memory-side coercion."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"


# Special scope of a global filter: every non-excluded field
SCOPE_AUTO = "AUTO"

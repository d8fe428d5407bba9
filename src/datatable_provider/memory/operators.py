"""
In-memory operator evaluation strategy.

Each native operator is an isolated :class:`MemoryOperator`; the
:class:`MemoryOperatorRegistry` maps a :class:`FilterOperator` to its
strategy. ``IS_NULL`` and ``!IS_NULL`` are deliberately absent from the
default registry: null checks must run in the query or through a custom
predicate.

Operands reach ``evaluate`` already coerced to the field's value type.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

from ..coercion import to_text
from ..exceptions import UnsupportedOperatorError
from ..operators import FilterOperator


class MemoryOperator(ABC):
    """Strategy interface for in-memory operator evaluation."""

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The row's (transformed, coerced) processing value.
            condition_value: The filter's (transformed, coerced) value.

        Returns:
            True if the row satisfies the condition.
        """
        ...


class MemoryOperatorRegistry:
    """
    Registry of MemoryOperator instances keyed by FilterOperator.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        registry.evaluate(FilterOperator.EQ, actual, expected)
    """

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, MemoryOperator] = {}

    # -- registration --------------------------------------------------------

    def register(self, operator: MemoryOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        for op in operators:
            self.register(op)

    # -- look-up -------------------------------------------------------------

    def get(self, name: FilterOperator) -> MemoryOperator | None:
        return self._operators.get(name)

    # -- evaluation shortcut -------------------------------------------------

    def evaluate(
        self, name: FilterOperator, field_value: Any, condition_value: Any
    ) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            UnsupportedOperatorError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise UnsupportedOperatorError(name.value, "in-memory")
        return op.evaluate(field_value, condition_value)


# ---------------------------------------------------------------------------
# Standard comparison
# ---------------------------------------------------------------------------


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value == condition_value)


class NotEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value != condition_value)


class GreaterThanOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(field_value > condition_value)


class LessThanOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(field_value < condition_value)


class GreaterEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(field_value >= condition_value)


class LessEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(field_value <= condition_value)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


@lru_cache(maxsize=256)
def _sql_pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a SQL LIKE pattern (``%``, ``_``) into an anchored regex."""
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def like_matches(field_value: Any, pattern: Any) -> bool:
    """
    Case-sensitive LIKE.

    A pattern without ``%`` is a plain substring test; with ``%`` it is
    matched as a full SQL LIKE pattern.
    """
    text = to_text(field_value)
    needle = to_text(pattern)
    if "%" not in needle:
        return needle in text
    return _sql_pattern_to_regex(needle).fullmatch(text) is not None


class LikeOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return like_matches(field_value, condition_value)


class NotLikeOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return not like_matches(field_value, condition_value)


# ---------------------------------------------------------------------------
# Sets and ranges
# ---------------------------------------------------------------------------


class InOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value in condition_value


class NotInOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value not in condition_value


class BetweenOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.BETWEEN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        low, high = condition_value
        return bool(low <= field_value <= high)


class NotBetweenOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_BETWEEN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        low, high = condition_value
        return not (low <= field_value <= high)


def build_default_registry() -> MemoryOperatorRegistry:
    """Registry with every native memory operator."""
    registry = MemoryOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
        LikeOperator(),
        NotLikeOperator(),
        InOperator(),
        NotInOperator(),
        BetweenOperator(),
        NotBetweenOperator(),
    )
    return registry

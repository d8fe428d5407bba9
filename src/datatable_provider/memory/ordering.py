"""
Memory-side ordering.

When any applicable order is memory-resolved the whole chain is sorted
here, query-resolved members included. The comparator walks the chain
and returns the first non-zero comparison; rows that tie on every key
keep their relative order (``list.sort`` is stable).

Comparison values are snapshotted once per row before sorting, so order
transforms run exactly once per row and key.
"""

from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any

from ..coercion import coerce_value, to_text
from ..exceptions import ValueCoercionError
from ..operators import ProcessingMethod

if TYPE_CHECKING:
    from ..fields import DataField
    from ..request import Order
    from ..resolution import RequestResolver
    from ..row import Row

logger = logging.getLogger(__name__)


def compare_values(a: Any, b: Any) -> int:
    """
    Three-way comparison with ``None`` lowest.

    Values Python cannot order against each other fall back to comparing
    their string forms.
    """
    if a is None or b is None:
        return (a is not None) - (b is not None)
    try:
        return (a > b) - (a < b)
    except TypeError:
        ta, tb = to_text(a), to_text(b)
        return (ta > tb) - (ta < tb)


class MemoryOrderingEngine:
    """Sort rows of one request by its applicable order chain."""

    def __init__(self, resolver: RequestResolver) -> None:
        self._chain: list[tuple[Order, DataField]] = resolver.applicable_orders()
        self._required = resolver.has_memory_ordering()

    @property
    def required(self) -> bool:
        return self._required

    def apply(self, rows: list[Row]) -> list[Row]:
        """Return *rows* sorted by the chain, or unchanged when not required."""
        if not self._required or not self._chain:
            return list(rows)
        snapshots = [(self._snapshot(row), row) for row in rows]
        snapshots.sort(key=cmp_to_key(self._compare_snapshots))
        return [row for _, row in snapshots]

    def _snapshot(self, row: Row) -> tuple[Any, ...]:
        values: list[Any] = []
        for _, field in self._chain:
            value = row.value_for_processing(field.name)
            transform = field.memory_order_transform
            if callable(transform):
                value = transform(field, value, row)
            if not self._uses_comparator(field):
                try:
                    value = coerce_value(value, field.value_type)
                except ValueCoercionError as exc:
                    logger.warning(
                        "Ordering field '%s' by uncoerced value (%s)", field.name, exc
                    )
            values.append(value)
        return tuple(values)

    @staticmethod
    def _uses_comparator(field: DataField) -> bool:
        return field.ordering_method is ProcessingMethod.MEMORY_CUSTOM and callable(
            field.memory_comparator
        )

    def _compare_snapshots(
        self, left: tuple[tuple[Any, ...], Row], right: tuple[tuple[Any, ...], Row]
    ) -> int:
        a_values, b_values = left[0], right[0]
        for index, (order, field) in enumerate(self._chain):
            a, b = a_values[index], b_values[index]
            comparator = field.memory_comparator
            if self._uses_comparator(field) and comparator is not None:
                result = int(comparator(field, order, a, b))
            else:
                result = compare_values(a, b)
                if order.descending:
                    result = -result
            if result:
                return result
        return 0

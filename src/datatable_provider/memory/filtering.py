"""
Memory-side filtering.

``check_filtering`` decides whether a materialized row is kept:

1. every applicable field filter on a memory-resolved field must pass;
2. a row the query already accepted for the global filters is kept;
3. otherwise, when a global filter has memory-resolved candidates, at
   least one memory (field x global filter) pair must pass.

Evaluation never raises on bad operator/value pairs: an incompatible
pair, an ``AUTO`` filter without a field default, an unsupported
operator or a row value of the wrong type does not exclude the row.
Those cases mean the schema authorizes something it cannot evaluate, so
they are logged at WARNING. A filter value that cannot be read as the
field's type matches no row, as it would in the query.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..coercion import coerce_value
from ..exceptions import UnsupportedOperatorError, ValueCoercionError
from ..operators import PATTERN_OPERATORS, ProcessingMethod
from ..request import is_compatible
from .operators import MemoryOperatorRegistry, build_default_registry

if TYPE_CHECKING:
    from ..fields import DataField
    from ..request import Filter
    from ..resolution import RequestResolver
    from ..row import Row

logger = logging.getLogger(__name__)

# Row metadata key set at ingestion from the query's derived column
GLOBAL_FILTER_ACCEPTED_KEY = "global_filter_already_accepted"


class MemoryFilteringEngine:
    """Evaluate memory-resolved filters against rows of one request."""

    def __init__(
        self,
        resolver: RequestResolver,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self._registry = registry or build_default_registry()
        self._field_filters = [
            (f, field)
            for f, field in resolver.applicable_field_filters()
            if field.filters_in_memory
        ]
        candidates = resolver.global_filter_candidates()
        self._global_pairs = [(c.filter, c.field) for c in candidates if c.in_memory]

    @property
    def has_work(self) -> bool:
        return bool(self._field_filters or self._global_pairs)

    def check_filtering(self, row: Row) -> bool:
        for f, field in self._field_filters:
            if not self._passes(f, field, row):
                return False

        if row.get_metadata(GLOBAL_FILTER_ACCEPTED_KEY) is True:
            return True

        if self._global_pairs:
            return any(self._passes(f, field, row) for f, field in self._global_pairs)
        return True

    def filter_rows(self, rows: list[Row]) -> list[Row]:
        return [row for row in rows if self.check_filtering(row)]

    # -- evaluation ----------------------------------------------------------

    def _passes(self, filter: Filter, field: DataField, row: Row) -> bool:
        value = row.value_for_processing(field.name)
        transform = field.memory_filter_transform
        if callable(transform):
            value = transform(field, value, row)

        predicate = field.memory_filter
        if field.filtering_method is ProcessingMethod.MEMORY_CUSTOM and callable(
            predicate
        ):
            return bool(predicate(field, filter, value, row))
        return self.evaluate_native(filter, field, value)

    def evaluate_native(self, filter: Filter, field: DataField, value: Any) -> bool:
        """Native predicate of *filter* on *field* for an already transformed value."""
        operator = filter.resolve_operator(field)
        if operator is None:
            logger.warning(
                "AUTO filter on field '%s' has no default operator; not excluding",
                field.name,
            )
            return True

        condition = filter.resolve_value(field)
        if not is_compatible(operator, condition):
            logger.warning(
                "Value %r is incompatible with %s on field '%s'; not excluding",
                condition,
                operator.value,
                field.name,
            )
            return True

        if operator not in PATTERN_OPERATORS:
            try:
                condition = coerce_value(condition, field.value_type)
            except ValueCoercionError as exc:
                # No row of this type can equal or fall within such a value
                logger.debug(
                    "Filter value on field '%s' is not a %s (%s); no match",
                    field.name,
                    field.value_type.value,
                    exc,
                )
                return False

        try:
            if operator not in PATTERN_OPERATORS:
                value = coerce_value(value, field.value_type)
            return self._registry.evaluate(operator, value, condition)
        except (UnsupportedOperatorError, ValueCoercionError) as exc:
            logger.warning(
                "Cannot evaluate %s in memory on field '%s' (%s); not excluding",
                operator.value,
                field.name,
                exc,
            )
            return True
        except TypeError as exc:
            logger.warning(
                "Values %r and %r are not comparable with %s on field '%s' "
                "(%s); not excluding",
                value,
                condition,
                operator.value,
                field.name,
                exc,
            )
            return True

"""
Query completion engine.

Folds the query-resolvable part of a request into an
:class:`IQueryBuilder` in four independent passes, always in this
order: SELECT, WHERE, ORDER, LIMIT. :class:`CompletionOptions` turns
each pass off individually.

Global filters are OR-ed across their candidate fields. When every
candidate field is query-resolved, the OR is AND-ed into the WHERE
clause. When at least one candidate is memory-resolved, the query
cannot reject rows on its own; the OR of the query-resolvable
conditions is then selected as the boolean column
``dt_provider_global_filter_result`` and the memory engine accepts
rows whose column is true.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from ..exceptions import UnsupportedOperatorError
from ..request import is_compatible
from .builder import as_expression
from .operators import SQLAlchemyOperatorRegistry, build_default_sqla_registry

if TYPE_CHECKING:
    from ..fields import DataField
    from ..ports import IQueryBuilder
    from ..registry import FieldRegistry
    from ..request import Filter
    from ..resolution import RequestResolver

logger = logging.getLogger(__name__)

GLOBAL_FILTER_RESULT_COLUMN = "dt_provider_global_filter_result"


class CompletionOptions(BaseModel):
    """Which completion passes run."""

    model_config = ConfigDict(frozen=True)

    complete_selects: bool = True
    complete_filters: bool = True
    complete_orders: bool = True
    complete_paging: bool = True


@dataclass(frozen=True)
class CompletionReport:
    """What each pass actually added to the query."""

    selects: bool = False
    filters: bool = False
    orders: bool = False
    paging: bool = False


class QueryCompletionEngine:
    """Complete a query with the selects, filters, orders and paging of a request."""

    def __init__(
        self,
        fields: FieldRegistry,
        resolver: RequestResolver,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._fields = fields
        self._resolver = resolver
        self._registry = registry or build_default_sqla_registry()

    def complete(
        self, builder: IQueryBuilder, options: CompletionOptions | None = None
    ) -> CompletionReport:
        options = options or CompletionOptions()
        report = CompletionReport(
            selects=options.complete_selects and self.complete_selects(builder),
            filters=options.complete_filters and self.complete_filters(builder),
            orders=options.complete_orders and self.complete_orders(builder),
            paging=options.complete_paging and self.complete_paging(builder),
        )
        logger.debug("Query completed: %s", report)
        return report

    # -- SELECT --------------------------------------------------------------

    def complete_selects(self, builder: IQueryBuilder) -> bool:
        added = False
        for field in self._fields.enabled():
            injector = field.select_injector
            if callable(injector):
                injector(field, builder)
                added = True
            elif field.expression is not None:
                builder.add_select(field.expression, label=field.name)
                added = True
        return added

    # -- WHERE ---------------------------------------------------------------

    def complete_filters(self, builder: IQueryBuilder) -> bool:
        added = False
        for f, field in self._resolver.applicable_field_filters():
            if field.filters_in_memory:
                continue
            condition = self.build_condition(f, field, builder)
            if condition is not None:
                builder.add_where(condition)
                added = True
        return self._complete_global_filters(builder) or added

    def _complete_global_filters(self, builder: IQueryBuilder) -> bool:
        candidates = self._resolver.global_filter_candidates()
        if not candidates:
            return False

        scratch = builder.spawn()
        conditions: list[Any] = []
        for candidate in candidates:
            if candidate.in_memory:
                continue
            condition = self.build_condition(candidate.filter, candidate.field, scratch)
            if condition is not None:
                conditions.append(condition)
        if not conditions:
            return False

        if any(c.in_memory for c in candidates):
            logger.debug(
                "Global filters partly memory-resolved; selecting %d "
                "condition(s) as %s",
                len(conditions),
                GLOBAL_FILTER_RESULT_COLUMN,
            )
            builder.add_select_any(conditions, GLOBAL_FILTER_RESULT_COLUMN)
        else:
            builder.add_where_any(conditions)
        builder.merge_parameters(scratch)
        return True

    def build_condition(
        self, filter: Filter, field: DataField, builder: IQueryBuilder
    ) -> Any | None:
        """
        Native (or injected) condition of *filter* on *field*.

        Returns ``None`` when the filter excludes nothing: ``AUTO``
        without a field default, or a value incompatible with the
        operator after the field's filter value transform.
        """
        injector = field.filter_injector
        if callable(injector):
            return injector(field, filter, builder)

        operator = filter.resolve_operator(field)
        if operator is None:
            return None
        value = filter.resolve_value(field)
        if not is_compatible(operator, value):
            logger.debug(
                "Skipping %s on field '%s': incompatible value %r",
                operator.value,
                field.name,
                value,
            )
            return None
        if field.expression is None:
            logger.warning(
                "Field '%s' filters in the query but has no expression", field.name
            )
            return None
        try:
            column = as_expression(field.expression)
            return self._registry.apply(operator, column, value)
        except UnsupportedOperatorError as exc:
            logger.warning(
                "Cannot filter field '%s' in the query: %s", field.name, exc
            )
            return None

    # -- ORDER ---------------------------------------------------------------

    def complete_orders(self, builder: IQueryBuilder) -> bool:
        if self._resolver.has_memory_ordering():
            logger.debug("Order chain is memory-resolved; query ordering skipped")
            return False
        added = False
        for order, field in self._resolver.applicable_orders():
            injector = field.order_injector
            if callable(injector):
                injector(field, order, builder)
                added = True
            elif field.expression is not None:
                builder.order_by(field.expression, order.direction)
                added = True
        return added

    # -- LIMIT ---------------------------------------------------------------

    def complete_paging(self, builder: IQueryBuilder) -> bool:
        request = self._resolver.request
        if not request.has_paging_limit:
            return False
        builder.set_limit(request.paging_offset, request.paging_limit)
        return True

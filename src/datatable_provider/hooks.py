"""
Callback hook types attached to data fields.

Each hook point has its own callable protocol. A field stores the hooks
it needs; a missing or non-callable hook means "use the default
behaviour" for that hook point.

Hooks are trusted synchronous callables. They must not call back into
the provider that is currently running them (re-entrancy is not
supported), nor mutate its field registry or request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .fields import DataField
    from .ports import IQueryBuilder
    from .request import Filter, Order
    from .row import Row


class SelectInjector(Protocol):
    """Add the field's select expression(s) to the query."""

    def __call__(self, field: DataField, builder: IQueryBuilder) -> None: ...


class FilterInjector(Protocol):
    """
    Build the query condition for a filter on a field.

    Returns the boolean condition to apply, or ``None`` to add nothing.
    The engine decides how the condition is combined (AND for field
    filters, OR across fields for global filters). The builder is
    passed so the hook can register joins or bound parameters.
    """

    def __call__(
        self, field: DataField, filter: Filter, builder: IQueryBuilder
    ) -> Any | None: ...


class OrderInjector(Protocol):
    """Add the ORDER BY clause(s) for an order on a field."""

    def __call__(
        self, field: DataField, order: Order, builder: IQueryBuilder
    ) -> None: ...


class FilterValueTransform(Protocol):
    """Rewrite a filter's value before it is compiled or evaluated."""

    def __call__(self, field: DataField, filter: Filter) -> Any: ...


class RowValueTransformer(Protocol):
    """Transform a row's processing value before memory filtering or ordering."""

    def __call__(self, field: DataField, value: Any, row: Row) -> Any: ...


class MemoryPredicate(Protocol):
    """Custom memory filter: return ``True`` to keep the row."""

    def __call__(
        self, field: DataField, filter: Filter, value: Any, row: Row
    ) -> bool: ...


class MemoryComparator(Protocol):
    """Custom memory ordering: negative, zero or positive like ``cmp``."""

    def __call__(self, field: DataField, order: Order, a: Any, b: Any) -> int: ...

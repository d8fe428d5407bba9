"""IQueryBuilder: protocol of the query-construction collaborator."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from .operators import OrderDirection


@runtime_checkable
class IQueryBuilder(Protocol):
    """
    Mutable query under construction.

    The completion engine only appends to it: selects, AND-ed conditions,
    orderings and a paging window. ``execute`` and ``count`` run it.
    """

    def add_select(self, expression: Any, label: str | None = None) -> None:
        """Add *expression* to the select list, optionally labelled."""
        ...

    def add_where(self, condition: Any) -> None:
        """AND *condition* into the WHERE clause."""
        ...

    def add_where_any(self, conditions: Sequence[Any]) -> None:
        """AND the OR of *conditions* into the WHERE clause."""
        ...

    def add_select_any(self, conditions: Sequence[Any], label: str) -> None:
        """Select the OR of *conditions* as a boolean column named *label*."""
        ...

    def set_parameter(self, name: str, value: Any) -> None: ...

    def merge_parameters(self, other: IQueryBuilder) -> None:
        """Copy the bound parameters of *other* into this builder."""
        ...

    @property
    def parameters(self) -> dict[str, Any]: ...

    def order_by(self, expression: Any, direction: OrderDirection) -> None: ...

    def set_limit(self, offset: int, limit: int | None) -> None: ...

    def spawn(self) -> IQueryBuilder:
        """Return an empty scratch builder over the same source."""
        ...

    def execute(self) -> Sequence[Any]:
        """Run the query and return the source records."""
        ...

    def count(self) -> int:
        """Count the matching records, ignoring ordering and paging."""
        ...

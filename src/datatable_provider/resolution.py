"""
Request resolution.

Intersects the parsed request with the field registry to produce the
*applicable* filters and orders, and answers the routing questions that
decide whether the memory engine has anything to do:

* a field filter is applicable when its field exists, is enabled, is
  filterable and authorizes the filter;
* a global filter is applicable when at least one enabled filterable
  field authorizes it and is in its scope;
* an order is applicable when its field exists, is enabled and is
  orderable.

If any applicable order is memory-resolved, the whole order chain runs
in memory, query-resolved members included.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .fields import DataField
    from .registry import FieldRegistry
    from .request import Filter, InputConfiguration, Order


@dataclass(frozen=True)
class GlobalFilterCandidate:
    """One eligible (global filter, field) pair."""

    filter: Filter
    field: DataField

    @property
    def in_memory(self) -> bool:
        return self.field.filters_in_memory


class RequestResolver:
    """Applicable sets and routing predicates for one request."""

    def __init__(self, fields: FieldRegistry, request: InputConfiguration) -> None:
        self._fields = fields
        self._request = request

    @property
    def request(self) -> InputConfiguration:
        return self._request

    # -- applicable sets -----------------------------------------------------

    def field_for(self, filter_or_order: Filter | Order) -> DataField | None:
        return self._fields.find_enabled(filter_or_order.field_name)

    def applicable_field_filters(self) -> list[tuple[Filter, DataField]]:
        """Applicable ``FOR_FIELD`` filters with their field, input order kept."""
        applicable: list[tuple[Filter, DataField]] = []
        for f in self._request.field_filters:
            field = self.field_for(f)
            if field is None or not field.filterable:
                continue
            if field.is_filter_authorized(f):
                applicable.append((f, field))
        return applicable

    def global_filter_candidates(self) -> list[GlobalFilterCandidate]:
        """Every eligible (global filter x field) pair, filter-major order."""
        candidates: list[GlobalFilterCandidate] = []
        enabled = self._fields.enabled()
        for f in self._request.global_filters:
            for field in enabled:
                if not field.filterable:
                    continue
                if field.is_filter_authorized(f) and f.is_field_in_scope(field):
                    candidates.append(GlobalFilterCandidate(f, field))
        return candidates

    def applicable_global_filters(self) -> list[Filter]:
        applicable: list[Filter] = []
        for candidate in self.global_filter_candidates():
            if not any(candidate.filter is f for f in applicable):
                applicable.append(candidate.filter)
        return applicable

    def applicable_orders(self) -> list[tuple[Order, DataField]]:
        applicable: list[tuple[Order, DataField]] = []
        for order in self._request.orders:
            field = self.field_for(order)
            if field is not None and field.orderable:
                applicable.append((order, field))
        return applicable

    def all_applicable_filters(self) -> list[Filter]:
        return [f for f, _ in self.applicable_field_filters()] + (
            self.applicable_global_filters()
        )

    def is_field_concerned_by_filtering(self, name: str) -> bool:
        return any(f.field_name == name for f, _ in self.applicable_field_filters())

    def is_field_concerned_by_ordering(self, name: str) -> bool:
        return any(o.field_name == name for o, _ in self.applicable_orders())

    # -- routing predicates --------------------------------------------------

    def has_memory_field_filtering(self) -> bool:
        return any(
            field.filters_in_memory for _, field in self.applicable_field_filters()
        )

    def has_memory_global_filtering(self) -> bool:
        return any(c.in_memory for c in self.global_filter_candidates())

    def has_memory_filtering(self) -> bool:
        return self.has_memory_field_filtering() or self.has_memory_global_filtering()

    def has_memory_ordering(self) -> bool:
        return any(field.orders_in_memory for _, field in self.applicable_orders())

    def has_memory_processing(self) -> bool:
        return self.has_memory_filtering() or self.has_memory_ordering()

"""
Data field declaration.

A :class:`DataField` declares one column of the result schema: whether
it can be filtered or ordered, which filters it authorizes, and whether
filtering and ordering run in the query or in memory.

Example::

    DataField(
        "age",
        expression=User.age,
        value_type=ValueType.NUMBER,
        authorization=FilterAuthorization.numeric(),
        default_filter_operator=FilterOperator.EQ,
    )
"""

from __future__ import annotations

from dataclasses import KW_ONLY, dataclass, field
from typing import TYPE_CHECKING, Any

from .authorization import FilterAuthorization
from .operators import FilterOperator, ProcessingMethod, ValueType

if TYPE_CHECKING:
    from .hooks import (
        FilterInjector,
        FilterValueTransform,
        MemoryComparator,
        MemoryPredicate,
        OrderInjector,
        RowValueTransformer,
        SelectInjector,
    )
    from .request import Filter


@dataclass(eq=False)
class DataField:
    """
    One named, independently configurable column of the result schema.

    Only ``enabled`` is expected to change after configuration. Hooks
    that are ``None`` (or not callable) fall back to default behaviour.
    """

    name: str
    _: KW_ONLY
    enabled: bool = True
    filterable: bool = True
    orderable: bool = True
    excluded_from_global_filtering: bool = False
    default_filter_operator: FilterOperator | None = FilterOperator.LIKE
    filtering_method: ProcessingMethod = ProcessingMethod.QUERY
    ordering_method: ProcessingMethod = ProcessingMethod.QUERY
    value_type: ValueType = ValueType.STRING
    authorization: FilterAuthorization = field(
        default_factory=FilterAuthorization.string
    )

    # query side
    expression: Any = None
    select_injector: SelectInjector | None = None
    filter_injector: FilterInjector | None = None
    order_injector: OrderInjector | None = None
    filter_value_transform: FilterValueTransform | None = None

    # memory side
    memory_filter_transform: RowValueTransformer | None = None
    memory_order_transform: RowValueTransformer | None = None
    memory_filter: MemoryPredicate | None = None
    memory_comparator: MemoryComparator | None = None

    attributes: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"DataField({self.name!r}, enabled={self.enabled}, "
            f"filtering={self.filtering_method.value}, "
            f"ordering={self.ordering_method.value})"
        )

    def is_filter_authorized(self, filter: Filter) -> bool:
        if self.excluded_from_global_filtering and filter.is_global:
            return False
        return self.authorization.is_authorized(filter)

    @property
    def filters_in_memory(self) -> bool:
        return self.filtering_method.in_memory

    @property
    def orders_in_memory(self) -> bool:
        return self.ordering_method.in_memory

    # -- free-form attributes ------------------------------------------------

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = value

"""
Request model: filters, orders, paging and field selection.

Raw client payloads are parsed leniently. Every filter and order entry is
validated on its own through a pydantic model; an entry that fails
validation is dropped (and logged at DEBUG) instead of rejecting the
whole request.

Expected raw shape::

    {
        "filters": {
            "by_field": {"name": [{"operator": "LIKE", "value": "foo"}]},
            "global": [{"operator": "AUTO", "value": "bar", "scope": "AUTO"}],
        },
        "orders": [{"field": "name", "dir": "asc"}],
        "paging_offset": 0,
        "paging_limit": 25,
        "custom_parameters": {"tenant": 3},
        "required_data": ["id", "user@**"],
    }
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from .authorization import is_numeric, is_scalar
from .operators import (
    NULL_OPERATORS,
    ORDERED_COMPARISON_OPERATORS,
    PATTERN_OPERATORS,
    RANGE_OPERATORS,
    SCOPE_AUTO,
    SET_OPERATORS,
    FilterOperator,
    FilterType,
    OrderDirection,
)

if TYPE_CHECKING:
    from .fields import DataField

logger = logging.getLogger(__name__)


def is_compatible(operator: FilterOperator, value: Any) -> bool:
    """Check that *value* has the shape *operator* needs."""
    if operator is FilterOperator.AUTO or operator in NULL_OPERATORS:
        return True
    if operator in (FilterOperator.EQ, FilterOperator.NE):
        return value is None or is_scalar(value)
    if operator in ORDERED_COMPARISON_OPERATORS or operator in PATTERN_OPERATORS:
        return is_scalar(value) and value != ""
    if operator in SET_OPERATORS:
        return isinstance(value, list | tuple) and len(value) > 0
    if operator in RANGE_OPERATORS:
        return isinstance(value, list | tuple) and len(value) == 2
    return True


# ---------------------------------------------------------------------------
# Parsed request objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Filter:
    """
    A single filter of the request.

    Attributes:
        type: ``FOR_FIELD`` (bound to ``field_name``) or ``GLOBAL``.
        operator: Operator to apply, ``AUTO`` uses the field's default.
        value: Scalar, list, or two-element list for ``BETWEEN``.
        field_name: Target field of a ``FOR_FIELD`` filter.
        scope: ``"AUTO"`` or the field names a ``GLOBAL`` filter may test.
    """

    type: FilterType
    operator: FilterOperator
    value: Any = None
    field_name: str | None = None
    scope: str | tuple[str, ...] = SCOPE_AUTO

    @property
    def is_global(self) -> bool:
        return self.type is FilterType.GLOBAL

    def is_field_in_scope(self, field: DataField) -> bool:
        if not self.is_global:
            return True
        if self.scope == SCOPE_AUTO:
            return True
        if isinstance(self.scope, str):
            return field.name == self.scope
        return field.name in self.scope

    def resolve_operator(self, field: DataField) -> FilterOperator | None:
        """Operator to evaluate for *field*; ``None`` when ``AUTO`` has no default."""
        if self.operator is not FilterOperator.AUTO:
            return self.operator
        return field.default_filter_operator

    def resolve_value(self, field: DataField) -> Any:
        """Filter value after the field's filter value transform, if any."""
        transform = field.filter_value_transform
        if callable(transform):
            return transform(field, self)
        return self.value

    @classmethod
    def from_raw(
        cls,
        raw: Any,
        filter_type: FilterType,
        field_name: str | None = None,
    ) -> Filter | None:
        """Build a filter from a raw entry, ``None`` if it is malformed."""
        if not isinstance(raw, Mapping):
            logger.debug("Dropping non-mapping filter entry: %r", raw)
            return None
        try:
            parsed = RawFilterInput.model_validate(dict(raw))
        except ValidationError as exc:
            logger.debug("Dropping invalid filter entry %r: %s", raw, exc)
            return None
        return cls(
            type=filter_type,
            operator=parsed.operator,
            value=parsed.value,
            field_name=field_name if filter_type is FilterType.FOR_FIELD else None,
            scope=parsed.scope,
        )


@dataclass(frozen=True)
class Order:
    field_name: str
    direction: OrderDirection = OrderDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is OrderDirection.DESC

    @classmethod
    def from_raw(cls, raw: Any) -> Order | None:
        if not isinstance(raw, Mapping):
            logger.debug("Dropping non-mapping order entry: %r", raw)
            return None
        try:
            parsed = RawOrderInput.model_validate(dict(raw))
        except ValidationError as exc:
            logger.debug("Dropping invalid order entry %r: %s", raw, exc)
            return None
        return cls(field_name=parsed.field, direction=parsed.dir)


# ---------------------------------------------------------------------------
# Raw entry validation
# ---------------------------------------------------------------------------


class RawFilterInput(BaseModel):
    """One raw ``{operator, value, scope}`` filter entry."""

    model_config = ConfigDict(extra="ignore")

    operator: FilterOperator = FilterOperator.AUTO
    value: Any = None
    scope: str | tuple[str, ...] = SCOPE_AUTO

    @field_validator("operator", mode="before")
    @classmethod
    def _parse_operator(cls, v: Any) -> FilterOperator:
        return FilterOperator.parse(v)

    @field_validator("scope", mode="before")
    @classmethod
    def _parse_scope(cls, v: Any) -> str | tuple[str, ...]:
        if isinstance(v, str):
            return v if v == SCOPE_AUTO else (v,)
        if isinstance(v, list | tuple):
            return tuple(str(name) for name in v)
        return SCOPE_AUTO

    @model_validator(mode="after")
    def _check_value_shape(self) -> RawFilterInput:
        if self.operator in NULL_OPERATORS:
            return self
        if "value" not in self.model_fields_set or self.value is None:
            raise ValueError(f"Operator {self.operator.value} requires a value")
        if self.value == "":
            raise ValueError("Filter value must not be empty")
        if not is_compatible(self.operator, self.value):
            raise ValueError(
                f"Value {self.value!r} is incompatible with operator "
                f"{self.operator.value}"
            )
        return self


class RawOrderInput(BaseModel):
    """One raw ``{field, dir}`` order entry."""

    model_config = ConfigDict(extra="ignore")

    field: StrictStr
    dir: OrderDirection

    @field_validator("dir", mode="before")
    @classmethod
    def _parse_direction(cls, v: Any) -> OrderDirection:
        direction = OrderDirection.parse(v)
        if direction is None:
            raise ValueError(f"Unknown order direction: {v!r}")
        return direction


def _non_negative_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool) or not is_numeric(value):
        return None
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number >= 0 else None


# ---------------------------------------------------------------------------
# Input configuration
# ---------------------------------------------------------------------------


@dataclass
class InputConfiguration:
    """
    The full parsed client request.

    ``orders`` keeps the client order: it is the sort tie-break chain,
    first entry is the primary key. ``paging_limit`` of ``None`` means
    unlimited.
    """

    filters: list[Filter] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)
    paging_offset: int = 0
    paging_limit: int | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    required_data_selectors: list[str] | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> InputConfiguration:
        """Parse a raw request payload, dropping malformed entries."""
        config = cls()
        if not isinstance(raw, Mapping):
            return config

        config.filters = cls._parse_filters(raw.get("filters"))
        config.orders = cls._parse_orders(raw.get("orders"))

        offset = _non_negative_int(raw.get("paging_offset"))
        if offset is not None:
            config.paging_offset = offset
        config.paging_limit = _non_negative_int(raw.get("paging_limit"))

        parameters = raw.get("custom_parameters")
        if isinstance(parameters, Mapping):
            config.parameters = dict(parameters)

        selectors = raw.get("required_data")
        if isinstance(selectors, list | tuple):
            config.required_data_selectors = [
                s for s in selectors if isinstance(s, str) and s
            ]
        return config

    @staticmethod
    def _parse_filters(raw: Any) -> list[Filter]:
        if not isinstance(raw, Mapping):
            return []
        filters: list[Filter] = []

        by_field = raw.get("by_field")
        if isinstance(by_field, Mapping):
            for field_name, entries in by_field.items():
                if not isinstance(entries, list | tuple):
                    continue
                for entry in entries:
                    f = Filter.from_raw(entry, FilterType.FOR_FIELD, str(field_name))
                    if f is not None:
                        filters.append(f)

        global_entries = raw.get("global")
        if isinstance(global_entries, list | tuple):
            for entry in global_entries:
                f = Filter.from_raw(entry, FilterType.GLOBAL)
                if f is not None:
                    filters.append(f)
        return filters

    @staticmethod
    def _parse_orders(raw: Any) -> list[Order]:
        if not isinstance(raw, list | tuple):
            return []
        orders = [Order.from_raw(entry) for entry in raw]
        return [o for o in orders if o is not None]

    # -- accessors -----------------------------------------------------------

    @property
    def field_filters(self) -> list[Filter]:
        return [f for f in self.filters if not f.is_global]

    @property
    def global_filters(self) -> list[Filter]:
        return [f for f in self.filters if f.is_global]

    def filters_for_field(self, field_name: str) -> list[Filter]:
        return [f for f in self.field_filters if f.field_name == field_name]

    @property
    def has_paging_limit(self) -> bool:
        return self.paging_limit is not None

    @property
    def has_required_data_selectors(self) -> bool:
        return self.required_data_selectors is not None

    def get_parameter(self, name: str, default: Any = None) -> Any:
        return self.parameters.get(name, default)

    def set_parameter(self, name: str, value: Any) -> None:
        self.parameters[name] = value

"""
Select/combobox widget variant.

Same provider core as the grid, with a different envelope (rows under
``"results"``, disabled rows flagged) and a ``search_query`` shortcut in
the request that becomes an automatic global filter.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from .operators import SCOPE_AUTO, FilterOperator, FilterType
from .output import GridOutputFormatter, SelectOutputFormatter
from .provider import AbstractDataTableProvider, QueryDataTableProvider
from .request import Filter, InputConfiguration

SEARCH_QUERY_KEY = "search_query"


class SelectInputConfiguration(InputConfiguration):
    """Request of a select widget: adds the ``search_query`` shortcut."""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> InputConfiguration:
        config = super().from_raw(raw)
        if not isinstance(raw, Mapping):
            return config
        search = raw.get(SEARCH_QUERY_KEY)
        if isinstance(search, str) and search:
            config.filters.append(
                Filter(
                    type=FilterType.GLOBAL,
                    operator=FilterOperator.AUTO,
                    value=search,
                    scope=SCOPE_AUTO,
                )
            )
        return config


class SelectOutputMixin:
    input_configuration_class: ClassVar[type[InputConfiguration]] = (
        SelectInputConfiguration
    )
    output_formatter: ClassVar[GridOutputFormatter] = SelectOutputFormatter()


class AbstractSelectProvider(SelectOutputMixin, AbstractDataTableProvider):
    """Select provider with custom row generation."""


class QuerySelectProvider(SelectOutputMixin, QueryDataTableProvider):
    """Select provider backed by a query builder."""

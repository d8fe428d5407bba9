"""
Data table providers.

A provider owns the field registry and the request of one data table
query, drives the query completion and memory processing engines, and
formats the response envelope. Subclasses declare the schema in
``configure`` and materialize rows in ``generate_rows``.

Lifecycle of one request::

    provider = UserTableProvider(raw_request)   # configure() runs here
    provider.generate()                         # reset, generate_rows()
    payload = provider.get_formatted_output()

A provider instance serves one request at a time. Hooks called while it
runs must not call back into it.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from .exceptions import ProviderStateError
from .memory.filtering import GLOBAL_FILTER_ACCEPTED_KEY, MemoryFilteringEngine
from .memory.ordering import MemoryOrderingEngine
from .memory.paging import apply_page
from .output import GridOutputFormatter
from .query.completion import (
    GLOBAL_FILTER_RESULT_COLUMN,
    CompletionOptions,
    CompletionReport,
    QueryCompletionEngine,
)
from .registry import FieldRegistry
from .request import InputConfiguration
from .resolution import RequestResolver
from .selectors import DEFAULT_SELECTORS, FieldSelectorTree

if TYPE_CHECKING:
    from .fields import DataField
    from .memory.operators import MemoryOperatorRegistry
    from .ports import IQueryBuilder
    from .query.operators import SQLAlchemyOperatorRegistry
    from .request import Filter, Order
    from .row import Row

logger = logging.getLogger(__name__)


def is_global_filter_pre_accepted(source: Any) -> bool:
    """
    Whether the query already accepted *source* for the global filters.

    True when the record itself is ``True`` or exposes a truthy
    ``dt_provider_global_filter_result`` column (SQLAlchemy row mapping,
    plain mapping or attribute). A missing column means no pre-acceptance.
    """
    if isinstance(source, bool):
        return source
    mapping = getattr(source, "_mapping", None)
    if mapping is None and isinstance(source, Mapping):
        mapping = source
    if mapping is not None:
        value = mapping.get(GLOBAL_FILTER_RESULT_COLUMN)
    else:
        value = getattr(source, GLOBAL_FILTER_RESULT_COLUMN, None)
    return value is True or value in (1, "1")


class AbstractDataTableProvider(ABC):
    """Base provider: schema, request, rows and response envelope."""

    input_configuration_class: ClassVar[type[InputConfiguration]] = InputConfiguration
    output_formatter: ClassVar[GridOutputFormatter] = GridOutputFormatter()
    output_whitelist: ClassVar[Sequence[str]] = ("id",)

    def __init__(
        self,
        input_configuration: InputConfiguration | Mapping[str, Any] | None = None,
        *,
        memory_registry: MemoryOperatorRegistry | None = None,
        query_registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self.fields = FieldRegistry()
        self._input_configuration: InputConfiguration | None = None
        self.default_required_data_selectors: list[str] = list(DEFAULT_SELECTORS)
        self.user_output_data: dict[str, Any] = {}
        self._memory_registry = memory_registry
        self._query_registry = query_registry
        self._generating = False
        self.reset_rows()
        self.configure()
        if input_configuration is not None:
            self.set_input_configuration(input_configuration)

    # -- schema --------------------------------------------------------------

    @abstractmethod
    def configure(self) -> None:
        """Register the data fields of this provider."""

    def add_data_field(self, field: DataField) -> DataField:
        return self.fields.add(field)

    def get_data_field(self, name: str) -> DataField:
        return self.fields.get(name)

    def get_enabled_data_fields(self) -> list[DataField]:
        return self.fields.enabled()

    def enable_all_data_fields(self) -> None:
        self.fields.enable_all()

    def disable_all_data_fields(self) -> None:
        self.fields.disable_all()

    # -- request -------------------------------------------------------------

    @property
    def input_configuration(self) -> InputConfiguration:
        """The current request; an empty request when none was set."""
        if self._input_configuration is None:
            return self.input_configuration_class()
        return self._input_configuration

    @property
    def has_input_configuration(self) -> bool:
        return self._input_configuration is not None

    def set_input_configuration(
        self, configuration: InputConfiguration | Mapping[str, Any]
    ) -> None:
        if not isinstance(configuration, InputConfiguration):
            configuration = self.input_configuration_class.from_raw(configuration)
        self._input_configuration = configuration
        self._filtering_engine = None

    @property
    def resolver(self) -> RequestResolver:
        return RequestResolver(self.fields, self.input_configuration)

    def get_applicable_field_filters(self) -> list[Filter]:
        return [f for f, _ in self.resolver.applicable_field_filters()]

    def get_applicable_global_filters(self) -> list[Filter]:
        return self.resolver.applicable_global_filters()

    def get_all_applicable_filters(self) -> list[Filter]:
        return self.resolver.all_applicable_filters()

    def get_applicable_orders(self) -> list[Order]:
        return [o for o, _ in self.resolver.applicable_orders()]

    def is_field_concerned_by_filtering(self, name: str) -> bool:
        return self.resolver.is_field_concerned_by_filtering(name)

    def is_field_concerned_by_ordering(self, name: str) -> bool:
        return self.resolver.is_field_concerned_by_ordering(name)

    def has_memory_filtering(self) -> bool:
        return self.resolver.has_memory_filtering()

    def has_memory_ordering(self) -> bool:
        return self.resolver.has_memory_ordering()

    def has_memory_processing(self) -> bool:
        return self.resolver.has_memory_processing()

    # -- query completion ----------------------------------------------------

    def complete_query(
        self, builder: IQueryBuilder, options: CompletionOptions | None = None
    ) -> CompletionReport:
        engine = QueryCompletionEngine(
            self.fields, self.resolver, self._query_registry
        )
        report = engine.complete(builder, options)
        self._query_paging_applied = report.paging
        return report

    # -- rows ----------------------------------------------------------------

    def reset_rows(self) -> None:
        """Restore the pre-generation state: no rows, counts unset."""
        self.rows: list[Row] = []
        self.total_rows_count: int | None = None
        self.filtered_rows_count = 0
        self._query_paging_applied = False
        self._filtering_engine: MemoryFilteringEngine | None = None

    def add_row(self, row: Row, auto_filter: bool = False) -> bool:
        """
        Append *row*, unless *auto_filter* is set and memory filtering rejects it.

        Returns:
            True if the row was kept.
        """
        row.set_metadata(
            GLOBAL_FILTER_ACCEPTED_KEY, is_global_filter_pre_accepted(row.source)
        )
        if auto_filter and not self.check_filtering(row):
            return False
        self.rows.append(row)
        return True

    def check_filtering(self, row: Row) -> bool:
        return self._memory_filtering().check_filtering(row)

    def apply_filters(self) -> None:
        """Run memory filtering over every accumulated row."""
        engine = self._memory_filtering()
        if engine.has_work:
            self.rows = engine.filter_rows(self.rows)

    def apply_orders(self) -> None:
        self.rows = MemoryOrderingEngine(self.resolver).apply(self.rows)

    def apply_paging(self) -> None:
        """Page in memory, unless the query already applied the paging window."""
        if self._query_paging_applied:
            return
        request = self.input_configuration
        self.rows = apply_page(self.rows, request.paging_offset, request.paging_limit)

    def _memory_filtering(self) -> MemoryFilteringEngine:
        if self._filtering_engine is None:
            self._filtering_engine = MemoryFilteringEngine(
                self.resolver, self._memory_registry
            )
        return self._filtering_engine

    # -- generation ----------------------------------------------------------

    @abstractmethod
    def generate_rows(self) -> None:
        """Materialize rows (through ``add_row``) and set the row counts."""

    def generate(self) -> None:
        """
        Run one generation pass from a clean state.

        Raises:
            ProviderStateError: If called again while already generating.
        """
        if self._generating:
            raise ProviderStateError(
                f"{type(self).__name__} is already generating rows"
            )
        self._generating = True
        start = time.perf_counter()
        try:
            self.reset_rows()
            self.generate_rows()
        finally:
            self._generating = False
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "%s generated %d row(s) (total=%s, filtered=%d) in %.2fms",
            type(self).__name__,
            len(self.rows),
            self.total_rows_count,
            self.filtered_rows_count,
            elapsed,
        )

    # -- field selection -----------------------------------------------------

    @property
    def required_data_selectors(self) -> list[str]:
        request = self.input_configuration
        if request.required_data_selectors is not None:
            return list(request.required_data_selectors)
        return list(self.default_required_data_selectors)

    def set_default_required_data_selectors(self, selectors: Sequence[str]) -> None:
        self.default_required_data_selectors = list(selectors)

    def selector_tree(self) -> FieldSelectorTree:
        return FieldSelectorTree(self.required_data_selectors)

    def is_data_required(self, path: str) -> bool:
        return self.selector_tree().is_data_required(path)

    def is_any_data_required_in_scope(self, scope_path: str) -> bool:
        return self.selector_tree().is_any_data_required_in_scope(scope_path)

    def clean_row(self, row: Row, whitelist: Sequence[str] = ("id",)) -> Row:
        return self.selector_tree().clean_row(row, whitelist)

    # -- output --------------------------------------------------------------

    def get_user_output(self, key: str, default: Any = None) -> Any:
        return self.user_output_data.get(key, default)

    def set_user_output(self, key: str, value: Any) -> None:
        self.user_output_data[key] = value

    def get_formatted_output(self) -> dict[str, Any]:
        return self.output_formatter.format(self)


class QueryDataTableProvider(AbstractDataTableProvider):
    """
    Provider whose rows come from an :class:`IQueryBuilder`.

    ``generate_rows`` counts the unfiltered query, completes it, executes
    it, and feeds the records through ``row_from_record`` with automatic
    memory filtering. Query paging is only used when nothing runs in
    memory; otherwise every matching record is fetched and paged after
    the memory passes.
    """

    completion_options: ClassVar[CompletionOptions] = CompletionOptions()

    @abstractmethod
    def create_query_builder(self) -> IQueryBuilder:
        """Return a fresh builder over the base query of this provider."""

    @abstractmethod
    def row_from_record(self, record: Any) -> Row:
        """Convert one source record into a :class:`Row` (with ``source`` set)."""

    def generate_rows(self) -> None:
        builder = self.create_query_builder()
        self.total_rows_count = builder.count()

        in_memory = self.has_memory_processing()
        options = self.completion_options
        if in_memory and options.complete_paging:
            options = options.model_copy(update={"complete_paging": False})
        self.complete_query(builder, options)

        for record in builder.execute():
            self.add_row(self.row_from_record(record), auto_filter=True)

        if in_memory:
            self.filtered_rows_count = len(self.rows)
        else:
            self.filtered_rows_count = builder.count()

        self.apply_orders()
        self.apply_paging()

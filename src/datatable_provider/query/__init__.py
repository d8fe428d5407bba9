"""Query completion engine: compiles filters, orders and paging onto a query."""

from .builder import SQLAlchemyQueryBuilder, as_expression
from .completion import (
    GLOBAL_FILTER_RESULT_COLUMN,
    CompletionOptions,
    CompletionReport,
    QueryCompletionEngine,
)
from .operators import (
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_default_sqla_registry,
)

__all__ = [
    "GLOBAL_FILTER_RESULT_COLUMN",
    "CompletionOptions",
    "CompletionReport",
    "QueryCompletionEngine",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "SQLAlchemyQueryBuilder",
    "as_expression",
    "build_default_sqla_registry",
]

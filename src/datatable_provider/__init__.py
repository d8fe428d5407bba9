"""
datatable-provider: server-side data table processing.

Declare data fields on a provider, hand it the client request, and it
completes the SQL query for everything the database can do, then
filters, orders and pages the remaining work in memory.
"""

from .authorization import FilterAuthorization
from .exceptions import (
    DataTableError,
    DuplicateFieldError,
    FieldConfigurationError,
    FieldNotFoundError,
    ProviderStateError,
    UnsupportedOperatorError,
    ValueCoercionError,
)
from .fields import DataField
from .operators import (
    SCOPE_AUTO,
    FilterOperator,
    FilterType,
    OrderDirection,
    ProcessingMethod,
    ValueType,
)
from .output import GridOutputFormatter, SelectOutputFormatter
from .ports import IQueryBuilder
from .provider import AbstractDataTableProvider, QueryDataTableProvider
from .query import CompletionOptions, SQLAlchemyQueryBuilder
from .registry import FieldRegistry
from .request import Filter, InputConfiguration, Order
from .row import Row, RowFrontEndConfiguration, SelectRowConfiguration
from .select import (
    AbstractSelectProvider,
    QuerySelectProvider,
    SelectInputConfiguration,
)
from .selectors import FieldSelectorTree

__all__ = [
    "SCOPE_AUTO",
    "AbstractDataTableProvider",
    "AbstractSelectProvider",
    "CompletionOptions",
    "DataField",
    "DataTableError",
    "DuplicateFieldError",
    "FieldConfigurationError",
    "FieldNotFoundError",
    "FieldRegistry",
    "FieldSelectorTree",
    "Filter",
    "FilterAuthorization",
    "FilterOperator",
    "FilterType",
    "GridOutputFormatter",
    "IQueryBuilder",
    "InputConfiguration",
    "Order",
    "OrderDirection",
    "ProcessingMethod",
    "ProviderStateError",
    "QueryDataTableProvider",
    "QuerySelectProvider",
    "Row",
    "RowFrontEndConfiguration",
    "SQLAlchemyQueryBuilder",
    "SelectInputConfiguration",
    "SelectOutputFormatter",
    "SelectRowConfiguration",
    "UnsupportedOperatorError",
    "ValueCoercionError",
    "ValueType",
]

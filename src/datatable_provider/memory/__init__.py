"""Memory processing engine: filtering, ordering and paging of materialized rows."""

from .filtering import GLOBAL_FILTER_ACCEPTED_KEY, MemoryFilteringEngine
from .operators import MemoryOperator, MemoryOperatorRegistry, build_default_registry
from .ordering import MemoryOrderingEngine, compare_values
from .paging import apply_page

__all__ = [
    "GLOBAL_FILTER_ACCEPTED_KEY",
    "MemoryFilteringEngine",
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "MemoryOrderingEngine",
    "apply_page",
    "build_default_registry",
    "compare_values",
]

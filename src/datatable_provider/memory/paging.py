"""Memory-side paging."""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


def apply_page(rows: list[T], offset: int, limit: int | None) -> list[T]:
    """Return the window ``[offset, offset + limit)``; unchanged without a limit."""
    if limit is None:
        return list(rows)
    start = max(offset, 0)
    return rows[start : start + max(limit, 0)]

"""
SQLAlchemy implementation of :class:`IQueryBuilder`.

Clauses are collected and applied to the base ``Select`` only when the
statement is built, so the same builder can produce the paged data
query and the unpaged count query.

Usage::

    builder = SQLAlchemyQueryBuilder(select(User), session)
    builder.add_where(User.active.is_(True))
    builder.order_by(User.name, OrderDirection.ASC)
    builder.set_limit(0, 25)
    rows = builder.execute()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import case, func, literal_column, or_, select

from ..exceptions import ProviderStateError
from ..operators import OrderDirection

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def as_expression(expression: Any) -> Any:
    """Plain strings become literal SQL columns; anything else is passed through."""
    if isinstance(expression, str):
        return literal_column(expression)
    return expression


class SQLAlchemyQueryBuilder:
    """Mutable wrapper over a SQLAlchemy ``Select`` and a sync ``Session``."""

    def __init__(self, statement: Select[Any], session: Session | None = None) -> None:
        self._statement = statement
        self._session = session
        self._columns: list[Any] = []
        self._conditions: list[Any] = []
        self._orderings: list[Any] = []
        self._offset = 0
        self._limit: int | None = None
        self._parameters: dict[str, Any] = {}

    @property
    def statement(self) -> Select[Any]:
        """The base statement, without any collected clause."""
        return self._statement

    @property
    def conditions(self) -> list[Any]:
        return list(self._conditions)

    @property
    def parameters(self) -> dict[str, Any]:
        return dict(self._parameters)

    # -- construction --------------------------------------------------------

    def add_select(self, expression: Any, label: str | None = None) -> None:
        expression = as_expression(expression)
        if label is not None:
            expression = expression.label(label)
        self._columns.append(expression)

    def add_where(self, condition: Any) -> None:
        self._conditions.append(as_expression(condition))

    def add_where_any(self, conditions: Sequence[Any]) -> None:
        if conditions:
            self._conditions.append(or_(*(as_expression(c) for c in conditions)))

    def add_select_any(self, conditions: Sequence[Any], label: str) -> None:
        if not conditions:
            return
        matched = or_(*(as_expression(c) for c in conditions))
        self._columns.append(case((matched, True), else_=False).label(label))

    def set_parameter(self, name: str, value: Any) -> None:
        self._parameters[name] = value

    def merge_parameters(self, other: Any) -> None:
        self._parameters.update(other.parameters)

    def order_by(self, expression: Any, direction: OrderDirection) -> None:
        expression = as_expression(expression)
        if direction is OrderDirection.DESC:
            self._orderings.append(expression.desc())
        else:
            self._orderings.append(expression.asc())

    def set_limit(self, offset: int, limit: int | None) -> None:
        self._offset = max(offset, 0)
        self._limit = limit

    def spawn(self) -> SQLAlchemyQueryBuilder:
        return SQLAlchemyQueryBuilder(self._statement, self._session)

    # -- execution -----------------------------------------------------------

    def build(self, *, ordered: bool = True, paged: bool = True) -> Select[Any]:
        """Apply the collected clauses to the base statement."""
        stmt = self._statement
        if self._columns:
            stmt = stmt.add_columns(*self._columns)
        if self._conditions:
            stmt = stmt.where(*self._conditions)
        if ordered and self._orderings:
            stmt = stmt.order_by(*self._orderings)
        if paged:
            if self._offset:
                stmt = stmt.offset(self._offset)
            if self._limit is not None:
                stmt = stmt.limit(self._limit)
        return stmt

    def build_count(self) -> Select[Any]:
        inner = self.build(ordered=False, paged=False).subquery()
        return select(func.count()).select_from(inner)

    def execute(self) -> Sequence[Any]:
        session = self._require_session()
        stmt = self.build()
        logger.debug("Executing data table query: %s", stmt)
        result = session.execute(stmt, self._parameters or None)
        return result.all()

    def count(self) -> int:
        session = self._require_session()
        result = session.execute(self.build_count(), self._parameters or None)
        return int(result.scalar_one())

    def _require_session(self) -> Session:
        if self._session is None:
            raise ProviderStateError("Query builder has no session to execute with")
        return self._session

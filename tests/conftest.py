"""Shared fixtures: a small field schema and an in-memory SQLite table."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sample_models import PEOPLE, Base, PersonRecord
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from datatable_provider.authorization import FilterAuthorization
from datatable_provider.fields import DataField
from datatable_provider.operators import FilterOperator, ProcessingMethod, ValueType
from datatable_provider.registry import FieldRegistry


@pytest.fixture
def session() -> Iterator[Session]:
    """Session over a populated in-memory ``people`` table."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all(PersonRecord(**person) for person in PEOPLE)
        session.commit()
        yield session
    engine.dispose()


@pytest.fixture
def fields() -> FieldRegistry:
    """
    Registry with one field per routing case.

    ``name`` and ``age`` resolve in the query, ``city`` in memory,
    ``secret`` is excluded from global filtering, ``hidden`` is disabled
    and ``notes`` is neither filterable nor orderable.
    """
    registry = FieldRegistry()
    registry.add(DataField("name", expression=PersonRecord.name))
    registry.add(
        DataField(
            "age",
            expression=PersonRecord.age,
            value_type=ValueType.NUMBER,
            default_filter_operator=FilterOperator.EQ,
            authorization=FilterAuthorization.numeric(),
        )
    )
    registry.add(
        DataField(
            "city",
            expression=PersonRecord.city,
            filtering_method=ProcessingMethod.MEMORY_AUTO,
            ordering_method=ProcessingMethod.MEMORY_AUTO,
        )
    )
    registry.add(DataField("secret", excluded_from_global_filtering=True))
    registry.add(DataField("hidden", enabled=False))
    registry.add(DataField("notes", filterable=False, orderable=False))
    return registry

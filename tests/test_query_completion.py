"""Tests for the query completion engine."""

from __future__ import annotations

from typing import Any

import pytest
from sample_models import PersonRecord
from sqlalchemy import select

from datatable_provider.authorization import FilterAuthorization
from datatable_provider.fields import DataField
from datatable_provider.operators import FilterOperator, ProcessingMethod, ValueType
from datatable_provider.ports import IQueryBuilder
from datatable_provider.query.builder import SQLAlchemyQueryBuilder
from datatable_provider.query.completion import (
    GLOBAL_FILTER_RESULT_COLUMN,
    CompletionOptions,
    QueryCompletionEngine,
)
from datatable_provider.registry import FieldRegistry
from datatable_provider.request import Filter, InputConfiguration, Order
from datatable_provider.resolution import RequestResolver

MEMORY = ProcessingMethod.MEMORY_AUTO


def _registry(*fields: DataField) -> FieldRegistry:
    registry = FieldRegistry()
    for field in fields:
        registry.add(field)
    return registry


def _complete(
    fields: FieldRegistry,
    raw: dict[str, Any],
    options: CompletionOptions | None = None,
) -> tuple[str, Any]:
    builder = SQLAlchemyQueryBuilder(select(PersonRecord.id))
    resolver = RequestResolver(fields, InputConfiguration.from_raw(raw))
    report = QueryCompletionEngine(fields, resolver).complete(builder, options)
    return str(builder.build().compile()), report


def _age() -> DataField:
    return DataField(
        "age",
        expression=PersonRecord.age,
        value_type=ValueType.NUMBER,
        default_filter_operator=FilterOperator.EQ,
        authorization=FilterAuthorization.numeric(),
    )


class TestSelects:
    def test_enabled_fields_are_selected_in_registry_order(self) -> None:
        fields = _registry(
            DataField("name", expression=PersonRecord.name),
            DataField("city", expression=PersonRecord.city, enabled=False),
            _age(),
            DataField("computed"),
        )
        sql, report = _complete(fields, {})
        assert "people.name AS name, people.age AS age" in sql
        assert "AS city" not in sql
        assert report.selects is True

    def test_select_injector_replaces_the_default(self) -> None:
        def inject(field: DataField, builder: IQueryBuilder) -> None:
            builder.add_select("upper(people.name)", label=field.name)

        fields = _registry(DataField("name", select_injector=inject))
        sql, _ = _complete(fields, {})
        assert "upper(people.name) AS name" in sql


class TestFieldFilters:
    def test_field_filters_are_and_ed(self) -> None:
        fields = _registry(DataField("name", expression=PersonRecord.name), _age())
        sql, report = _complete(
            fields,
            {
                "filters": {
                    "by_field": {
                        "name": [{"operator": "LIKE", "value": "a"}],
                        "age": [{"operator": "BETWEEN", "value": [20, 40]}],
                    }
                }
            },
        )
        assert "people.name LIKE :name_1 AND people.age BETWEEN" in sql
        assert report.filters is True

    def test_memory_and_unauthorized_filters_stay_out_of_the_query(self) -> None:
        fields = _registry(
            DataField("name", expression=PersonRecord.name, filtering_method=MEMORY),
            _age(),
        )
        sql, report = _complete(
            fields,
            {
                "filters": {
                    "by_field": {
                        "name": [{"operator": "=", "value": "bob"}],
                        "age": [{"operator": "LIKE", "value": "3"}],
                    }
                }
            },
        )
        assert "WHERE" not in sql
        assert report.filters is False

    def test_filter_value_transform(self) -> None:
        fields = _registry(
            DataField(
                "name",
                expression=PersonRecord.name,
                filter_value_transform=lambda field, f: [f.value, "x"],
                authorization=FilterAuthorization().add(FilterOperator.IN),
            )
        )
        sql, _ = _complete(
            fields,
            {"filters": {"by_field": {"name": [{"operator": "IN", "value": ["a"]}]}}},
        )
        assert "people.name IN" in sql

    def test_incompatible_transformed_value_adds_nothing(self) -> None:
        fields = _registry(
            DataField(
                "name",
                expression=PersonRecord.name,
                filter_value_transform=lambda field, f: "",
            )
        )
        sql, _ = _complete(
            fields,
            {"filters": {"by_field": {"name": [{"operator": "LIKE", "value": "a"}]}}},
        )
        assert "WHERE" not in sql

    def test_filter_injector(self) -> None:
        calls: list[Filter] = []

        def inject(field: DataField, f: Filter, builder: IQueryBuilder) -> Any:
            calls.append(f)
            return PersonRecord.name == str(f.value).upper()

        fields = _registry(
            DataField("name", expression=PersonRecord.name, filter_injector=inject)
        )
        sql, _ = _complete(
            fields,
            {"filters": {"by_field": {"name": [{"operator": "=", "value": "a"}]}}},
        )
        assert "WHERE people.name = :name_1" in sql
        assert len(calls) == 1

    def test_missing_expression_is_skipped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        fields = _registry(DataField("name"))
        sql, _ = _complete(
            fields,
            {"filters": {"by_field": {"name": [{"operator": "=", "value": "a"}]}}},
        )
        assert "WHERE" not in sql
        assert "has no expression" in caplog.text


class TestGlobalFilters:
    def test_query_only_candidates_are_or_ed_into_where(self) -> None:
        fields = _registry(DataField("name", expression=PersonRecord.name), _age())
        sql, _ = _complete(fields, {"filters": {"global": [{"value": "25"}]}})
        assert "WHERE people.name LIKE :name_1 OR people.age = :age_1" in sql
        assert GLOBAL_FILTER_RESULT_COLUMN not in sql

    def test_global_or_is_and_ed_with_field_filters(self) -> None:
        fields = _registry(DataField("name", expression=PersonRecord.name), _age())
        sql, _ = _complete(
            fields,
            {
                "filters": {
                    "by_field": {"age": [{"operator": ">", "value": "20"}]},
                    "global": [{"value": "25"}],
                }
            },
        )
        assert (
            "WHERE people.age > :age_1 AND "
            "(people.name LIKE :name_1 OR people.age = :age_2)"
        ) in sql

    def test_memory_candidate_turns_the_or_into_a_selected_column(self) -> None:
        fields = _registry(
            DataField("name", expression=PersonRecord.name),
            DataField("city", expression=PersonRecord.city, filtering_method=MEMORY),
        )
        sql, report = _complete(fields, {"filters": {"global": [{"value": "par"}]}})
        assert "CASE WHEN" in sql
        assert "people.name LIKE :name_1" in sql
        assert f"AS {GLOBAL_FILTER_RESULT_COLUMN}" in sql
        assert "WHERE" not in sql
        assert report.filters is True

    def test_all_memory_candidates_add_nothing(self) -> None:
        fields = _registry(
            DataField("city", expression=PersonRecord.city, filtering_method=MEMORY)
        )
        sql, report = _complete(fields, {"filters": {"global": [{"value": "par"}]}})
        assert GLOBAL_FILTER_RESULT_COLUMN not in sql
        assert "WHERE" not in sql
        assert report.filters is False

    def test_scope_limits_the_or(self) -> None:
        fields = _registry(DataField("name", expression=PersonRecord.name), _age())
        sql, _ = _complete(
            fields, {"filters": {"global": [{"value": "25", "scope": "age"}]}}
        )
        assert "WHERE people.age = :age_1" in sql
        assert "people.name LIKE" not in sql


class TestOrdersAndPaging:
    def test_orders_follow_the_request(self) -> None:
        fields = _registry(DataField("name", expression=PersonRecord.name), _age())
        sql, report = _complete(
            fields,
            {
                "orders": [
                    {"field": "age", "dir": "desc"},
                    {"field": "name", "dir": "asc"},
                ]
            },
        )
        assert "ORDER BY people.age DESC, people.name ASC" in sql
        assert report.orders is True

    def test_memory_member_moves_the_whole_chain_to_memory(self) -> None:
        fields = _registry(
            DataField("name", expression=PersonRecord.name, ordering_method=MEMORY),
            _age(),
        )
        sql, report = _complete(
            fields,
            {
                "orders": [
                    {"field": "age", "dir": "desc"},
                    {"field": "name", "dir": "asc"},
                ]
            },
        )
        assert "ORDER BY" not in sql
        assert report.orders is False

    def test_order_injector(self) -> None:
        def inject(field: DataField, order: Order, builder: IQueryBuilder) -> None:
            builder.order_by("people.name COLLATE NOCASE", order.direction)

        fields = _registry(DataField("name", order_injector=inject))
        sql, _ = _complete(fields, {"orders": [{"field": "name", "dir": "asc"}]})
        assert "ORDER BY people.name COLLATE NOCASE ASC" in sql

    def test_paging_only_with_a_limit(self) -> None:
        fields = _registry(_age())
        sql, report = _complete(fields, {"paging_offset": 10})
        assert "LIMIT" not in sql
        assert report.paging is False

        sql, report = _complete(fields, {"paging_offset": 10, "paging_limit": 5})
        assert "LIMIT" in sql
        assert "OFFSET" in sql
        assert report.paging is True


def test_options_turn_passes_off() -> None:
    fields = _registry(DataField("name", expression=PersonRecord.name), _age())
    sql, report = _complete(
        fields,
        {
            "filters": {"global": [{"value": "25"}]},
            "orders": [{"field": "age", "dir": "desc"}],
            "paging_limit": 5,
        },
        CompletionOptions(complete_selects=False, complete_paging=False),
    )
    assert "AS name" not in sql
    assert "LIMIT" not in sql
    assert "WHERE" in sql
    assert "ORDER BY" in sql
    assert report.selects is False
    assert report.paging is False

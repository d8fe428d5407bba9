"""Tests for DataField and FieldRegistry."""

from __future__ import annotations

import pytest

from datatable_provider.exceptions import DuplicateFieldError, FieldNotFoundError
from datatable_provider.fields import DataField
from datatable_provider.operators import (
    FilterOperator,
    FilterType,
    ProcessingMethod,
    ValueType,
)
from datatable_provider.registry import FieldRegistry
from datatable_provider.request import Filter


class TestDataField:
    def test_defaults(self) -> None:
        field = DataField("name")
        assert field.enabled is True
        assert field.filterable is True
        assert field.orderable is True
        assert field.default_filter_operator is FilterOperator.LIKE
        assert field.value_type is ValueType.STRING
        assert field.filters_in_memory is False
        assert field.orders_in_memory is False

    def test_each_field_gets_its_own_authorization(self) -> None:
        a, b = DataField("a"), DataField("b")
        a.authorization.reset()
        assert b.authorization.operators != []

    def test_memory_methods(self) -> None:
        field = DataField(
            "a",
            filtering_method=ProcessingMethod.MEMORY_CUSTOM,
            ordering_method=ProcessingMethod.MEMORY_AUTO,
        )
        assert field.filters_in_memory is True
        assert field.orders_in_memory is True

    def test_excluded_from_global_filtering(self) -> None:
        field = DataField("a", excluded_from_global_filtering=True)
        global_filter = Filter(FilterType.GLOBAL, FilterOperator.AUTO, "x")
        field_filter = Filter(FilterType.FOR_FIELD, FilterOperator.EQ, "x", "a")
        assert field.is_filter_authorized(global_filter) is False
        assert field.is_filter_authorized(field_filter) is True

    def test_attributes(self) -> None:
        field = DataField("a", attributes={"width": 120})
        assert field.has_attribute("width")
        field.set_attribute("align", "left")
        assert field.get_attribute("align") == "left"
        assert field.get_attribute("missing", 0) == 0

    def test_identity_equality(self) -> None:
        assert DataField("a") != DataField("a")
        assert "enabled=True" in repr(DataField("a"))


class TestFieldRegistry:
    def test_insertion_order(self, fields: FieldRegistry) -> None:
        assert [f.name for f in fields] == [
            "name",
            "age",
            "city",
            "secret",
            "hidden",
            "notes",
        ]
        assert len(fields) == 6
        assert "city" in fields

    def test_duplicate_name(self, fields: FieldRegistry) -> None:
        with pytest.raises(DuplicateFieldError) as exc_info:
            fields.add(DataField("name"))
        assert exc_info.value.field_name == "name"

    def test_unknown_name_suggests(self, fields: FieldRegistry) -> None:
        with pytest.raises(FieldNotFoundError) as exc_info:
            fields.get("nmae")
        assert exc_info.value.suggestions == ["name"]

    def test_get_returns_disabled_fields(self, fields: FieldRegistry) -> None:
        assert fields.get("hidden").enabled is False
        assert fields.find_enabled("hidden") is None
        assert fields.find_enabled("unknown") is None
        assert fields.find_enabled(None) is None
        assert fields.find_enabled("name") is fields.get("name")

    def test_enable_and_disable_all(self, fields: FieldRegistry) -> None:
        assert [f.name for f in fields.disabled()] == ["hidden"]
        fields.enable_all()
        assert fields.disabled() == []
        fields.disable_all()
        assert fields.enabled() == []

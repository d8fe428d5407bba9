"""Tests for field value coercion."""

from __future__ import annotations

import datetime
from decimal import Decimal

import pytest

from datatable_provider.coercion import coerce_value, to_text
from datatable_provider.exceptions import ValueCoercionError
from datatable_provider.operators import ValueType


class TestNumber:
    def test_numeric_values(self) -> None:
        assert coerce_value("12", ValueType.NUMBER) == 12
        assert coerce_value(" 1.5", ValueType.NUMBER) == 1.5
        assert coerce_value(Decimal("2.0"), ValueType.NUMBER) == 2
        assert coerce_value(True, ValueType.NUMBER) == 1

    @pytest.mark.parametrize("value", ["abc", "nan", "inf", object()])
    def test_rejects_non_numbers(self, value: object) -> None:
        with pytest.raises(ValueCoercionError):
            coerce_value(value, ValueType.NUMBER)

    def test_lists_and_none(self) -> None:
        assert coerce_value(["1", 2], ValueType.NUMBER) == [1, 2]
        assert coerce_value(None, ValueType.NUMBER) is None


class TestDate:
    def test_iso_strings(self) -> None:
        assert coerce_value("2024-01-02", ValueType.DATE) == datetime.datetime(
            2024, 1, 2
        )
        assert coerce_value("2024-01-02T10:00:00Z", ValueType.DATE) == (
            datetime.datetime(2024, 1, 2, 10, 0)
        )

    def test_aware_values_become_naive_utc(self) -> None:
        value = coerce_value("2024-01-02T10:00:00+02:00", ValueType.DATE)
        assert value == datetime.datetime(2024, 1, 2, 8, 0)
        assert value.tzinfo is None

    def test_dates_become_midnight(self) -> None:
        assert coerce_value(datetime.date(2024, 5, 1), ValueType.DATE) == (
            datetime.datetime(2024, 5, 1)
        )

    def test_rejects_garbage(self) -> None:
        with pytest.raises(ValueCoercionError) as exc_info:
            coerce_value("yesterday", ValueType.DATE)
        assert exc_info.value.value_type == "date"


class TestString:
    def test_text_forms(self) -> None:
        assert coerce_value(5, ValueType.STRING) == "5"
        assert to_text(1.0) == "1"
        assert to_text(1.5) == "1.5"
        assert to_text(False) == "0"
        assert to_text(datetime.date(2024, 5, 1)) == "2024-05-01"

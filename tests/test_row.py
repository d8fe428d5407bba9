"""Tests for Row values, metadata and front-end configurations."""

from __future__ import annotations

from datatable_provider.row import (
    Row,
    RowFrontEndConfiguration,
    SelectRowConfiguration,
)


def test_processing_prefers_raw_values() -> None:
    row = Row(raw_values={"a": 1, "b": None}, formatted_values={"a": "1", "b": "x"})
    assert row.value_for_processing("a") == 1
    assert row.value_for_processing("b") == "x"
    assert row.value_for_processing("missing") is None


def test_output_prefers_formatted_values() -> None:
    row = Row(raw_values={"a": 1, "c": 3}, formatted_values={"a": "one"})
    assert row.value_for_output("a") == "one"
    assert row.value_for_output("c") == 3
    assert row.values_for_output() == {"a": "one", "c": 3}
    assert row.values_for_processing() == {"a": 1, "c": 3}


def test_set_value() -> None:
    row = Row()
    row.set_value("a", 1)
    row.set_value("b", 2, "two")
    assert row.raw_values == {"a": 1, "b": 2}
    assert row.formatted_values == {"b": "two"}


def test_metadata() -> None:
    row = Row()
    assert row.get_metadata("flag", False) is False
    row.set_metadata("flag", True)
    assert row.get_metadata("flag") is True


def test_front_end_configuration_by_type() -> None:
    class Highlight(RowFrontEndConfiguration):
        pass

    row = Row()
    assert row.get_front_end_configuration(SelectRowConfiguration) is None
    row.set_front_end_configuration(SelectRowConfiguration(disabled=True))
    row.set_front_end_configuration(Highlight())
    configuration = row.get_front_end_configuration(SelectRowConfiguration)
    assert configuration is not None
    assert configuration.disabled is True
    assert isinstance(row.get_front_end_configuration(Highlight), Highlight)

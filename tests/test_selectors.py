"""Tests for required-data selectors and row pruning."""

from __future__ import annotations

import pytest

from datatable_provider.row import Row
from datatable_provider.selectors import FieldSelectorTree, compile_selector


class TestIsDataRequired:
    @pytest.fixture
    def tree(self) -> FieldSelectorTree:
        return FieldSelectorTree(["user@name", "user@address@**"])

    @pytest.mark.parametrize(
        ("path", "required"),
        [
            ("user@name", True),
            ("user@age", False),
            ("user@address@city", True),
            ("user@address@geo@lat", True),
            ("other@field", False),
            ("user", False),
            ("", False),
        ],
    )
    def test_nested_selectors(
        self, tree: FieldSelectorTree, path: str, required: bool
    ) -> None:
        assert tree.is_data_required(path) is required

    def test_default_requires_everything(self) -> None:
        tree = FieldSelectorTree()
        assert tree.selectors == ["**"]
        assert tree.is_data_required("name") is True
        assert tree.is_data_required("user@address@city") is True

    def test_single_wildcard_covers_one_level(self) -> None:
        tree = FieldSelectorTree(["user@*"])
        assert tree.is_data_required("user@name") is True
        assert tree.is_data_required("user@address@city") is False

    def test_top_level_wildcard(self) -> None:
        tree = FieldSelectorTree(["*"])
        assert tree.is_data_required("name") is True
        assert tree.is_data_required("user@name") is False

    def test_no_selectors_require_nothing(self) -> None:
        tree = FieldSelectorTree([])
        assert tree.is_data_required("id") is False


class TestIsAnyDataRequiredInScope:
    def test_exact_scope_with_content(self) -> None:
        tree = FieldSelectorTree(["user@name"])
        assert tree.is_any_data_required_in_scope("user") is True
        assert tree.is_any_data_required_in_scope("") is True
        assert tree.is_any_data_required_in_scope("user@address") is False
        assert tree.is_any_data_required_in_scope("account") is False

    def test_enclosing_double_wildcard(self) -> None:
        tree = FieldSelectorTree(["user@**"])
        assert tree.is_any_data_required_in_scope("user@address") is True
        assert tree.is_any_data_required_in_scope("account") is False
        assert FieldSelectorTree().is_any_data_required_in_scope("account")

    def test_single_wildcard_does_not_open_nested_scopes(self) -> None:
        tree = FieldSelectorTree(["user@*"])
        assert tree.is_any_data_required_in_scope("user") is True
        assert tree.is_any_data_required_in_scope("user@address") is False


class TestCleanRow:
    def test_drops_unrequested_values_but_keeps_whitelist(self) -> None:
        tree = FieldSelectorTree(["name"])
        row = Row(
            raw_values={"id": 1, "name": "bob", "age": 4},
            formatted_values={"age": "4 years", "name": "Bob"},
        )
        tree.clean_row(row)
        assert row.raw_values == {"id": 1, "name": "bob"}
        assert row.formatted_values == {"name": "Bob"}

    def test_custom_whitelist(self) -> None:
        tree = FieldSelectorTree([])
        row = Row(raw_values={"id": 1, "key": "k"})
        tree.clean_row(row, whitelist=("key",))
        assert row.raw_values == {"key": "k"}


def test_compile_selector_builds_scope_chain() -> None:
    root = compile_selector("user@address@city")
    node, depth = root.deepest(["user", "address", "zip"])
    assert depth == 2
    assert node.leaves == {"city"}
    assert root.is_empty is False

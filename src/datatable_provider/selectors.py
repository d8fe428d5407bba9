"""
Field-selector trees for sparse output pruning.

A selector is a ``@``-separated path whose last component is a field
name, ``*`` (any field exactly one level below) or ``**`` (anything
below)::

    "id"                  -> the top-level ``id`` field
    "user@name"           -> ``name`` inside the ``user`` scope
    "user@*"              -> every direct field of ``user``
    "user@address@**"     -> everything below ``user@address``

Each selector compiles into its own chain of scope nodes. Lookups try
the selectors one after the other; the first that requires the path
wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .row import Row

SEPARATOR = "@"
ANY_FIELD = "*"
ANY_DEPTH = "**"
DEFAULT_SELECTORS: tuple[str, ...] = (ANY_DEPTH,)


@dataclass
class SelectorNode:
    """A scope of a compiled selector: nested scopes plus leaf names."""

    scopes: dict[str, SelectorNode] = field(default_factory=dict)
    leaves: set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not self.scopes and not self.leaves

    def deepest(self, components: Sequence[str]) -> tuple[SelectorNode, int]:
        """Deepest scope reachable along *components*, with the depth reached."""
        node = self
        for depth, component in enumerate(components):
            child = node.scopes.get(component)
            if child is None:
                return node, depth
            node = child
        return node, len(components)


def compile_selector(selector: str) -> SelectorNode:
    """Compile one selector into its root node."""
    *scopes, leaf = selector.split(SEPARATOR)
    root = SelectorNode()
    node = root
    for scope in scopes:
        node = node.scopes.setdefault(scope, SelectorNode())
    node.leaves.add(leaf)
    return root


def _split(path: str) -> list[str]:
    return path.split(SEPARATOR) if path else []


class FieldSelectorTree:
    """Compiled required-data selectors of one request."""

    def __init__(self, selectors: Iterable[str] = DEFAULT_SELECTORS) -> None:
        self._selectors = [s for s in selectors if s]
        self._roots = [compile_selector(s) for s in self._selectors]

    @property
    def selectors(self) -> list[str]:
        return list(self._selectors)

    def is_data_required(self, path: str) -> bool:
        """
        Whether the field at *path* (e.g. ``"user@address@city"``) is required.

        For each selector, the longest prefix of the path that exists as
        a scope is located. The field is required if that scope holds
        ``**``, holds the first path component left unresolved below it
        (the last component when the whole path resolves), or holds ``*``
        with at most one component left unresolved.
        """
        components = _split(path)
        if not components:
            return False
        for root in self._roots:
            node, depth = root.deepest(components)
            unresolved = len(components) - depth
            nearest = components[depth] if unresolved else components[-1]
            if ANY_DEPTH in node.leaves:
                return True
            if nearest in node.leaves:
                return True
            if ANY_FIELD in node.leaves and unresolved < 2:
                return True
        return False

    def is_any_data_required_in_scope(self, scope_path: str) -> bool:
        """
        Whether anything inside the scope at *scope_path* is required.

        An exactly matching scope counts when it is not empty. Otherwise
        only ``**`` on the closest enclosing scope counts. An empty path
        is the root scope.
        """
        components = _split(scope_path)
        for root in self._roots:
            node, depth = root.deepest(components)
            if depth == len(components):
                if not node.is_empty:
                    return True
            elif ANY_DEPTH in node.leaves:
                return True
        return False

    def clean_row(self, row: Row, whitelist: Sequence[str] = ("id",)) -> Row:
        """Drop raw and formatted values that are neither whitelisted nor required."""
        row.raw_values = {
            name: value
            for name, value in row.raw_values.items()
            if name in whitelist or self.is_data_required(name)
        }
        row.formatted_values = {
            name: value
            for name, value in row.formatted_values.items()
            if name in whitelist or self.is_data_required(name)
        }
        return row

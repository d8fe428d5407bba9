"""Insertion-ordered registry of a provider's data fields."""

from __future__ import annotations

from collections.abc import Iterator

from .exceptions import DuplicateFieldError, FieldNotFoundError
from .fields import DataField


class FieldRegistry:
    """
    Mapping of field name to :class:`DataField`.

    Insertion order is preserved; it is the order of the SELECT list.
    Disabled fields stay registered but are skipped by ``enabled()``.
    """

    def __init__(self) -> None:
        self._fields: dict[str, DataField] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[DataField]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def add(self, field: DataField) -> DataField:
        """
        Register *field*.

        Raises:
            DuplicateFieldError: If the name is already registered.
        """
        if field.name in self._fields:
            raise DuplicateFieldError(field.name)
        self._fields[field.name] = field
        return field

    def get(self, name: str) -> DataField:
        """
        Return the field named *name*, enabled or not.

        Raises:
            FieldNotFoundError: If no such field was registered.
        """
        try:
            return self._fields[name]
        except KeyError:
            raise FieldNotFoundError(name, list(self._fields)) from None

    def find_enabled(self, name: str | None) -> DataField | None:
        """Return the enabled field named *name*, ``None`` otherwise."""
        if name is None:
            return None
        field = self._fields.get(name)
        if field is None or not field.enabled:
            return None
        return field

    def enabled(self) -> list[DataField]:
        return [f for f in self._fields.values() if f.enabled]

    def disabled(self) -> list[DataField]:
        return [f for f in self._fields.values() if not f.enabled]

    def enable_all(self) -> None:
        for f in self._fields.values():
            f.enabled = True

    def disable_all(self) -> None:
        for f in self._fields.values():
            f.enabled = False

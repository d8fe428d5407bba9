"""Row value container and per-row presentation annotations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar

C = TypeVar("C", bound="RowFrontEndConfiguration")


class RowFrontEndConfiguration:
    """Base class of per-row presentation annotations, one per subclass."""


@dataclass
class SelectRowConfiguration(RowFrontEndConfiguration):
    """Annotation read by the select output: disabled rows cannot be picked."""

    disabled: bool = True


@dataclass
class Row:
    """
    One result record.

    ``raw_values`` feed filtering and ordering, ``formatted_values`` feed
    the client output. ``source`` is the originating record and is not
    owned by the row.
    """

    raw_values: dict[str, Any] = field(default_factory=dict)
    formatted_values: dict[str, Any] = field(default_factory=dict)
    source: Any = None
    metadata: dict[str, Any] = field(default_factory=dict)
    front_end_configurations: dict[
        type[RowFrontEndConfiguration], RowFrontEndConfiguration
    ] = field(default_factory=dict, repr=False)

    # -- values --------------------------------------------------------------

    def value_for_processing(self, name: str) -> Any:
        """Raw value unless missing or ``None``, formatted value otherwise."""
        value = self.raw_values.get(name)
        if value is None:
            return self.formatted_values.get(name)
        return value

    def value_for_output(self, name: str) -> Any:
        """Formatted value unless missing or ``None``, raw value otherwise."""
        value = self.formatted_values.get(name)
        if value is None:
            return self.raw_values.get(name)
        return value

    def values_for_processing(self) -> dict[str, Any]:
        names = dict.fromkeys([*self.formatted_values, *self.raw_values])
        return {name: self.value_for_processing(name) for name in names}

    def values_for_output(self) -> dict[str, Any]:
        names = dict.fromkeys([*self.raw_values, *self.formatted_values])
        return {name: self.value_for_output(name) for name in names}

    def set_value(self, name: str, raw: Any, formatted: Any = None) -> None:
        self.raw_values[name] = raw
        if formatted is not None:
            self.formatted_values[name] = formatted

    # -- metadata ------------------------------------------------------------

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def set_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    # -- front-end configurations --------------------------------------------

    def set_front_end_configuration(
        self, configuration: RowFrontEndConfiguration
    ) -> None:
        self.front_end_configurations[type(configuration)] = configuration

    def get_front_end_configuration(self, kind: type[C]) -> C | None:
        configuration = self.front_end_configurations.get(kind)
        if isinstance(configuration, kind):
            return configuration
        return None

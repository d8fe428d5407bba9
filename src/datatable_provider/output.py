"""
Response envelope formatting.

One provider core, two thin output adapters:

* :class:`GridOutputFormatter` for grid widgets, rows under ``"data"``;
* :class:`SelectOutputFormatter` for select/combobox widgets, rows under
  ``"results"`` with a ``"disabled"`` flag on disabled rows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .row import SelectRowConfiguration

if TYPE_CHECKING:
    from .provider import AbstractDataTableProvider
    from .row import Row


class GridOutputFormatter:
    """``{userData, recordsTotal, recordsFiltered, data}`` envelope."""

    records_key = "data"

    def format(self, provider: AbstractDataTableProvider) -> dict[str, Any]:
        hidden = {f.name for f in provider.fields.disabled()}
        whitelist = provider.output_whitelist
        tree = provider.selector_tree()
        records = []
        for row in provider.rows:
            tree.clean_row(row, whitelist)
            output = {
                name: value
                for name, value in row.values_for_output().items()
                if name not in hidden
            }
            records.append(self.format_row(row, output))
        return {
            "userData": provider.user_output_data,
            "recordsTotal": provider.total_rows_count,
            "recordsFiltered": provider.filtered_rows_count,
            self.records_key: records,
        }

    def format_row(self, row: Row, output: dict[str, Any]) -> dict[str, Any]:
        return output


class SelectOutputFormatter(GridOutputFormatter):
    """Select widget envelope: ``results`` instead of ``data``."""

    records_key = "results"

    def format_row(self, row: Row, output: dict[str, Any]) -> dict[str, Any]:
        configuration = row.get_front_end_configuration(SelectRowConfiguration)
        if configuration is not None and configuration.disabled:
            output["disabled"] = True
        return output

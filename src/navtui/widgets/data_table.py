"""Filterable listing table widget for TUI."""

from typing import Any, Dict, List, Optional

from textual.reactive import reactive
from textual.widgets import DataTable


class FilterableDataTable(DataTable):
    """Data table over row dicts, filtered by a case-insensitive substring.

    Keys starting with ``_`` are hidden payload (e.g. ``_name``) and are
    neither rendered nor matched by the filter.
    """

    filter_text: reactive[str] = reactive("")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._columns: List[str] = []
        self._all_rows: List[Dict[str, Any]] = []
        self._filtered_rows: List[Dict[str, Any]] = []
        self.cursor_type = "row"

    def set_data(self, columns: List[str], rows: List[Dict[str, Any]]) -> None:
        """Replace columns and rows, keeping the current filter."""
        self._columns = list(columns)
        self._all_rows = list(rows)
        self.clear(columns=True)
        for col in self._columns:
            self.add_column(col, key=col)
        self.apply_filter()

    def _matches(self, row: Dict[str, Any], needle: str) -> bool:
        for key, value in row.items():
            if key.startswith("_"):
                continue
            if isinstance(value, str) and needle in value.lower():
                return True
        return False

    def apply_filter(self) -> None:
        if not self.filter_text:
            self._filtered_rows = list(self._all_rows)
        else:
            needle = self.filter_text.lower()
            self._filtered_rows = [row for row in self._all_rows if self._matches(row, needle)]

        self.clear(columns=False)
        for row in self._filtered_rows:
            self.add_row(*[str(row.get(col, "")) for col in self._columns])

    def set_filter(self, filter_text: str) -> None:
        self.filter_text = filter_text
        self.apply_filter()

    def get_selected_row(self) -> Optional[Dict[str, Any]]:
        """Get the currently selected row data."""
        if not self._filtered_rows or self.cursor_row < 0:
            return None
        if self.cursor_row >= len(self._filtered_rows):
            return None
        return self._filtered_rows[self.cursor_row]

"""
RowStore — authoritative rows of one category, with column layout.
"""
from __future__ import annotations

from typing import Callable, Iterator, Optional

from dashboard.config import HIDDEN_COLUMN_PREFIX
from dashboard.data.schemas import Record, Row
from dashboard.errors import HeaderMismatchError


def initial_visibility(columns: list[str]) -> dict[str, bool]:
    """Every column visible except export placeholders such as ``<none>``."""
    return {c: not c.startswith(HIDDEN_COLUMN_PREFIX) for c in columns}


def _conform(record: Record, columns: list[str]) -> Record:
    """Give a record exactly the category's keys; missing cells become ''."""
    return {col: str(record.get(col, "") or "").strip() for col in columns}


class RowStore:
    """Ordered rows plus the column layout they conform to.

    ``on_change`` is invoked after every mutation so the owner can persist.
    """

    def __init__(self, on_change: Optional[Callable[[], None]] = None) -> None:
        self.columns: list[str] = []
        self.column_visibility: dict[str, bool] = {}
        self.rows: list[Row] = []
        self._on_change = on_change

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    @property
    def records(self) -> list[Record]:
        return [row.record for row in self.rows]

    @property
    def visible_columns(self) -> list[str]:
        return [c for c in self.columns if self.column_visibility.get(c, True)]

    def find(self, row_id: str) -> Row | None:
        return next((r for r in self.rows if r.id == row_id), None)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _new_rows(self, records: list[Record]) -> list[Row]:
        taken = {r.id for r in self.rows}
        rows = []
        for record in records:
            row = Row(record=_conform(record, self.columns))
            while row.id in taken:
                row = Row(record=row.record)
            taken.add(row.id)
            rows.append(row)
        return rows

    def replace_all(self, header: list[str], records: list[Record]) -> list[Row]:
        """Drop everything and load ``records`` under ``header``."""
        self.columns = list(header)
        self.column_visibility = initial_visibility(self.columns)
        self.rows = []
        self.rows = self._new_rows(records)
        self._changed()
        return self.rows

    def append(self, header: list[str], records: list[Record], source: str | None = None) -> list[Row]:
        """Add rows under the existing layout.

        The whole batch is rejected when ``header`` differs from ``columns``
        (names and order). An empty store adopts ``header``.
        """
        if not self.columns:
            self.columns = list(header)
            self.column_visibility = initial_visibility(self.columns)
        elif list(header) != self.columns:
            raise HeaderMismatchError(self.columns, header, source)

        added = self._new_rows(records)
        self.rows.extend(added)
        self._changed()
        return added

    def remove(self, row_id: str) -> bool:
        row = self.find(row_id)
        if row is None:
            return False
        self.rows.remove(row)
        self._changed()
        return True

    def set_selected(self, row_id: str, value: bool) -> bool:
        row = self.find(row_id)
        if row is None:
            return False
        row.selected = bool(value)
        self._changed()
        return True

    def set_all_selected(self, value: bool) -> None:
        for row in self.rows:
            row.selected = bool(value)
        self._changed()

    def set_visibility(self, column: str, visible: bool) -> None:
        if column not in self.columns:
            raise ValueError(f"Unknown column: {column}")
        self.column_visibility[column] = bool(visible)
        self._changed()

    def reorder(self, rows: list[Row]) -> None:
        """Apply a new ordering of the same rows (used by sorting)."""
        if sorted(r.id for r in rows) != sorted(r.id for r in self.rows):
            raise ValueError("reorder() must receive exactly the stored rows")
        self.rows[:] = rows
        self._changed()

    def clear(self) -> None:
        self.columns = []
        self.column_visibility = {}
        self.rows = []
        self._changed()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "columns": list(self.columns),
            "column_visibility": dict(self.column_visibility),
            "rows": [r.to_dict() for r in self.rows],
        }

    def load_dict(self, data: dict) -> None:
        """Restore persisted rows without firing the change callback."""
        self.columns = [str(c) for c in data.get("columns") or []]
        vis = data.get("column_visibility") or {}
        self.column_visibility = {c: bool(vis.get(c, True)) for c in self.columns}
        rows: list[Row] = []
        seen: set[str] = set()
        for raw in data.get("rows") or []:
            row = Row.from_dict(raw)
            if row.id in seen:
                continue
            seen.add(row.id)
            row.record = _conform(row.record, self.columns)
            rows.append(row)
        self.rows = rows

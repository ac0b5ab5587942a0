"""
Totals row: selection-aware sums and means over the visible columns.
"""
from __future__ import annotations

from dashboard.analytics.common import format_number, is_average_column, safe_divide
from dashboard.config import TOTAL_LABEL
from dashboard.data.normalize import numeric_values
from dashboard.data.schemas import Row


def column_total(rows: list[Row], column: str) -> float:
    """Sum or mean of one numeric column over the selected rows.

    Sums count unparseable cells as 0. Means only average the cells that
    parse, and are 0 when none do.
    """
    values = numeric_values(r.get(column) for r in rows if r.selected)
    if is_average_column(column):
        valid = values.dropna()
        return safe_divide(float(valid.sum()), len(valid))
    return float(values.fillna(0).sum())


def compute_totals(
    rows: list[Row],
    visible_columns: list[str],
    numeric_columns: set[str],
) -> dict[str, float | str]:
    """Totals for each visible column.

    Numeric columns get an exact (unrounded) float. Dimensional columns get
    the total label in the first visible position and '' elsewhere.
    """
    totals: dict[str, float | str] = {}
    for idx, col in enumerate(visible_columns):
        if col in numeric_columns:
            totals[col] = column_total(rows, col)
        else:
            totals[col] = TOTAL_LABEL if idx == 0 else ""
    return totals


def format_totals(totals: dict[str, float | str]) -> dict[str, str]:
    """Display form of ``compute_totals`` output."""
    return {
        col: value if isinstance(value, str) else format_number(value)
        for col, value in totals.items()
    }

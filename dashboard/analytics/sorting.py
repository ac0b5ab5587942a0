"""
Row ordering by one column, numeric-aware and stable.
"""
from __future__ import annotations

import unicodedata

import pandas as pd

from dashboard.data.normalize import numeric_values
from dashboard.data.schemas import Row, SortDirection


def next_sort_state(
    current_column: str | None,
    current_direction: SortDirection,
    column: str,
) -> tuple[str, SortDirection]:
    """Clicking the active column flips direction; a new column starts ascending."""
    if column == current_column:
        return column, current_direction.flipped()
    return column, SortDirection.ASC


def text_sort_key(value: str) -> tuple[str, str]:
    """Text ordering key that ignores accents and case.

    This is not a full locale collation: characters are NFKD-decomposed,
    combining marks dropped and the result case-folded, so "Éclair" sorts
    with "eclair" regardless of the process locale. The raw value breaks
    ties, which keeps the order total and deterministic.
    """
    folded = unicodedata.normalize("NFKD", value)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch)).casefold()
    return folded, value


def sort_rows(
    rows: list[Row],
    column: str,
    numeric_columns: set[str],
    direction: SortDirection = SortDirection.ASC,
) -> list[Row]:
    """Return ``rows`` ordered by ``column``.

    Ascending order is a stable sort. Descending is its exact reverse, so
    sorting the same column twice mirrors the first result. In numeric
    columns, cells that are not finite numbers always trail in their prior
    order, whatever the direction.
    """
    if column in numeric_columns:
        values = numeric_values(r.get(column) for r in rows)
        comparable = [(v, r) for v, r in zip(values, rows) if pd.notna(v)]
        invalid = [r for v, r in zip(values, rows) if pd.isna(v)]
        ordered = [r for _, r in sorted(comparable, key=lambda pair: pair[0])]
    else:
        invalid = []
        ordered = sorted(rows, key=lambda r: text_sort_key(r.get(column)))

    if direction == SortDirection.DESC:
        ordered.reverse()
    return ordered + invalid

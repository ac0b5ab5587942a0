"""
(labels, series) derivation for chart collaborators.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from dashboard.config import CHART_LABEL_MAX_LEN, LABEL_COLUMN_HINTS
from dashboard.data.normalize import numeric_values
from dashboard.data.schemas import Row


@dataclass
class ChartSeries:
    metric: str | None = None
    label_column: str | None = None
    labels: list[str] = field(default_factory=list)
    values: list[float | None] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "metric": self.metric,
            "label_column": self.label_column,
            "labels": list(self.labels),
            "values": list(self.values),
        }


def pick_label_column(visible_columns: list[str], numeric_columns: set[str]) -> str | None:
    """Prefer a page/path-like column, then the first dimensional column."""
    for col in visible_columns:
        lower = col.lower()
        if any(hint in lower for hint in LABEL_COLUMN_HINTS):
            return col
    return next((c for c in visible_columns if c not in numeric_columns), None)


def chart_series(
    rows: list[Row],
    visible_columns: list[str],
    numeric_columns: set[str],
    metric_column: str | None,
) -> ChartSeries:
    """Labels and metric values of the selected rows, in table order."""
    if not metric_column or metric_column not in numeric_columns:
        return ChartSeries()

    selected = [r for r in rows if r.selected]
    label_col = pick_label_column(visible_columns, numeric_columns)
    if label_col:
        labels = [r.get(label_col)[:CHART_LABEL_MAX_LEN] for r in selected]
    else:
        labels = [f"Row {i}" for i in range(1, len(selected) + 1)]

    values = numeric_values(r.get(metric_column) for r in selected)
    return ChartSeries(
        metric=metric_column,
        label_column=label_col,
        labels=labels,
        values=[None if pd.isna(v) else float(v) for v in values],
    )

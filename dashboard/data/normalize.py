"""
Cell normalization and numeric/dimensional column classification.

Cells are stored as text. Every consumer that needs a number (classifier,
totals, sorting, charts) goes through ``numeric_values`` so all of them share
one coercion rule.
"""
from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from dashboard.config import CLASSIFIER_SAMPLE_SIZE, NUMERIC_THRESHOLD
from dashboard.data.schemas import Record


# ---------------------------------------------------------------------------
# Cell normalization
# ---------------------------------------------------------------------------

def normalize_cell(value: str) -> str:
    """Strip percent signs and treat a comma as the decimal separator."""
    return str(value).replace("%", "").replace(",", ".").strip()


def _normalize_series(values: pd.Series) -> pd.Series:
    return (
        values.astype(str)
        .str.replace("%", "", regex=False)
        .str.replace(",", ".", regex=False)
        .str.strip()
    )


def numeric_values(values: Iterable[str]) -> pd.Series:
    """Vectorized cell → float conversion.

    Returns a float64 Series aligned with ``values``; cells that do not
    normalize to a finite number are NaN.
    """
    series = pd.Series(list(values), dtype="object").fillna("")
    nums = pd.to_numeric(_normalize_series(series), errors="coerce").astype("float64")
    return nums.where(np.isfinite(nums))


def to_number(value: str) -> float | None:
    """Scalar form of ``numeric_values``."""
    num = numeric_values([value]).iloc[0]
    return None if pd.isna(num) else float(num)


# ---------------------------------------------------------------------------
# Column classification
# ---------------------------------------------------------------------------

def numeric_ratio(cells: Iterable[str]) -> tuple[int, int]:
    """Return (numeric_count, non_empty_count) for a column sample.

    Cells that are empty after trimming count toward neither number.
    """
    series = pd.Series(list(cells), dtype="object").fillna("").astype(str)
    non_empty = series[series.str.strip() != ""]
    if non_empty.empty:
        return 0, 0
    numeric = int(numeric_values(non_empty).notna().sum())
    return numeric, len(non_empty)


def classify_columns(
    records: list[Record],
    sample_size: int = CLASSIFIER_SAMPLE_SIZE,
    threshold: float = NUMERIC_THRESHOLD,
) -> set[str]:
    """Return the set of metric-like columns.

    Only the first ``sample_size`` records are inspected; the columns are the
    keys of the first sampled record. A column is numeric when it has at least
    one numeric cell and strictly more than ``threshold`` of its non-empty
    cells are numeric.
    """
    sample = records[:sample_size]
    if not sample:
        return set()

    columns = list(sample[0].keys())
    df = pd.DataFrame.from_records(sample, columns=columns).fillna("")

    numeric: set[str] = set()
    for col in columns:
        n_numeric, n_cells = numeric_ratio(df[col])
        if n_numeric == 0:
            continue
        if n_numeric / n_cells > threshold:
            numeric.add(col)
    return numeric

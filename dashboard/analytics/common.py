"""
Safe math and JSON helpers used across the analytics modules.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd

from dashboard.config import AVERAGE_INDICATORS


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def is_average_column(column: str, indicators: list[str] = AVERAGE_INDICATORS) -> bool:
    """True when the column name marks a per-row rate that must be averaged."""
    lower = column.lower()
    return any(ind in lower for ind in indicators)


def format_number(value: float, max_decimals: int = 2) -> str:
    """Grouped display form with at most ``max_decimals`` fractional digits.

    1234.5 -> "1,234.5", 1234.567 -> "1,234.57", 12.0 -> "12".
    """
    if value is None or (isinstance(value, float) and not math.isfinite(value)):
        return ""
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python; NaN/Inf become None."""
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        v = float(obj)
        return None if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    return obj

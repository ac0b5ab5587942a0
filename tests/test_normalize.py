from __future__ import annotations

from dashboard.data.normalize import classify_columns, normalize_cell, numeric_ratio, to_number


def _records(column: str, values: list[str]) -> list[dict]:
    return [{column: v, "Label": f"row {i}"} for i, v in enumerate(values)]


def test_normalize_cell():
    assert normalize_cell(" 12,5% ") == "12.5"


def test_to_number():
    assert to_number("12,5") == 12.5
    assert to_number("30%") == 30.0
    assert to_number("-4") == -4.0
    assert to_number("abc") is None
    assert to_number("") is None
    assert to_number("inf") is None


def test_eight_of_ten_numeric_is_numeric():
    values = ["1", "2", "12,5", "30%", "5", "6", "7", "8", "n/a", "other"]
    assert "v" in classify_columns(_records("v", values))


def test_seven_of_ten_numeric_is_not_numeric():
    values = ["1", "2", "12,5", "30%", "5", "6", "7", "x", "n/a", "other"]
    assert "v" not in classify_columns(_records("v", values))


def test_empty_cells_count_toward_neither_side():
    values = ["1", "", "2", "  ", "3"]
    assert numeric_ratio(values) == (3, 3)
    assert "v" in classify_columns(_records("v", values))


def test_column_without_evidence_is_not_numeric():
    assert "v" not in classify_columns(_records("v", ["", " ", ""]))


def test_text_columns_are_dimensional():
    assert "Label" not in classify_columns(_records("v", ["1", "2"]))


def test_only_first_hundred_records_are_sampled():
    values = ["1"] * 100 + ["text"] * 400
    assert "v" in classify_columns(_records("v", values))


def test_classification_is_pure():
    records = _records("v", ["1", "2", "x"])
    assert classify_columns(records) == classify_columns(list(records))


def test_no_records():
    assert classify_columns([]) == set()

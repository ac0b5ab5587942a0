from __future__ import annotations

import math

from dashboard.analytics.common import format_number, is_average_column, safe_divide
from dashboard.analytics.totals import column_total, compute_totals, format_totals
from dashboard.data.schemas import Row


def make_rows(column, values, extra=None):
    rows = []
    for v in values:
        record = {column: v}
        record.update(extra or {})
        rows.append(Row(record=record))
    return rows


def test_sum_follows_selection():
    rows = make_rows("Sessions", ["10", "20", "30"])
    assert column_total(rows, "Sessions") == 60

    rows[1].selected = False
    assert column_total(rows, "Sessions") == 40

    rows[1].selected = True
    assert column_total(rows, "Sessions") == 60


def test_average_indicator_column_is_averaged():
    rows = make_rows("Average Session Duration", ["2", "4", "6"])
    assert column_total(rows, "Average Session Duration") == 4


def test_same_values_in_plain_column_are_summed():
    rows = make_rows("Sessions", ["2", "4", "6"])
    assert column_total(rows, "Sessions") == 12


def test_sum_counts_invalid_cells_as_zero():
    rows = make_rows("Sessions", ["5", "n/a", "1,5"])
    assert column_total(rows, "Sessions") == 6.5


def test_mean_skips_invalid_cells():
    rows = make_rows("Avg. Time", ["3", "", "5"])
    assert column_total(rows, "Avg. Time") == 4


def test_mean_of_nothing_selected_is_zero():
    rows = make_rows("Avg. Time", ["3", "5"])
    for r in rows:
        r.selected = False
    assert column_total(rows, "Avg. Time") == 0


def test_totals_label_goes_in_first_visible_dimension():
    rows = make_rows("Sessions", ["1", "2"], extra={"Source": "google", "Medium": "cpc"})
    totals = compute_totals(rows, ["Source", "Medium", "Sessions"], {"Sessions"})

    assert totals == {"Source": "Total", "Medium": "", "Sessions": 3.0}


def test_no_label_when_first_visible_column_is_numeric():
    rows = make_rows("Sessions", ["1", "2"], extra={"Source": "google"})
    totals = compute_totals(rows, ["Sessions", "Source"], {"Sessions"})

    assert totals == {"Sessions": 3.0, "Source": ""}


def test_is_average_column():
    assert is_average_column("Sessions per active user")
    assert is_average_column("Gemiddelde betrokkenheidstijd")
    assert is_average_column("AVG Order")
    assert not is_average_column("Sessions")


def test_format_number():
    assert format_number(1234.5) == "1,234.5"
    assert format_number(1234.567) == "1,234.57"
    assert format_number(12.0) == "12"
    assert format_number(-0.001) == "0"
    assert format_number(float("nan")) == ""


def test_format_totals_keeps_labels():
    assert format_totals({"A": "Total", "B": 1500.0}) == {"A": "Total", "B": "1,500"}


def test_safe_divide():
    assert safe_divide(1, 0) == 0.0
    assert safe_divide(1, 4) == 0.25
    assert safe_divide(1, math.nan, default=-1) == -1

from __future__ import annotations

from datetime import datetime

import pytest
from openpyxl import load_workbook

from dashboard.errors import NothingToExportError
from dashboard.reports.dashboard_report import (
    default_report_name,
    generate_excel,
    generate_json,
    totals_line,
)


def test_nothing_to_export_writes_nothing(state, tmp_path):
    out = tmp_path / "report.xlsx"
    with pytest.raises(NothingToExportError):
        generate_excel(state, out)
    assert not out.exists()


def test_excluded_categories_are_not_exported(loaded_state, tmp_path):
    loaded_state["ACQUISITION"].set_include_in_pdf(False)
    with pytest.raises(NothingToExportError):
        generate_excel(loaded_state, tmp_path / "report.xlsx")


def test_workbook_has_summary_and_category_sheets(loaded_state, tmp_path):
    cat = loaded_state["ACQUISITION"]
    cat.toggle_row(cat.rows[0].id)
    cat.set_notes("Paid search launched mid-month")

    path = generate_excel(loaded_state, tmp_path / "out" / "report.xlsx")
    wb = load_workbook(path)

    assert wb.sheetnames == ["Summary", "Acquisition"]
    ws = wb["Acquisition"]
    # title block, then header at row 4, three data rows, totals row
    assert [ws.cell(row=4, column=c).value for c in range(1, 5)] == [
        "Source", "Sessions", "Users", "Average Session Duration",
    ]
    assert ws["A5"].value == "google"
    assert ws["B5"].value == 100
    assert ws["A8"].value == "Total"
    assert ws["B8"].value == 1250
    assert ws["D8"].value == 75

    summary = wb["Summary"]
    assert summary["A5"].value == "ACQUISITION"
    assert summary["D5"].value == 2

    values = [c.value for row in ws.iter_rows() for c in row]
    assert "Paid search launched mid-month" in values


def test_hidden_columns_are_left_out(loaded_state, tmp_path):
    loaded_state["ACQUISITION"].set_column_visibility("Users", False)
    wb = load_workbook(generate_excel(loaded_state, tmp_path / "r.xlsx"))
    header = [c.value for c in wb["Acquisition"][4]]

    assert "Users" not in header


def test_json_report_sections(loaded_state):
    loaded_state.ingest("LOYALTY", [("loyal.csv", "Segment,Users\nnew,5\nreturning,7\n")])
    loaded_state["LOYALTY"].set_chart_kind("bar")

    report = generate_json(loaded_state)

    assert [s["category"] for s in report["sections"]] == ["ACQUISITION", "LOYALTY"]
    loyalty = report["sections"][1]
    assert loyalty["totals"] == {"Segment": "Total", "Users": "12"}
    assert loyalty["chart"]["labels"] == ["new", "returning"]
    assert loyalty["chart_kind"] == "bar"


def test_default_report_name():
    assert default_report_name(datetime(2024, 3, 5)) == "analytics-report-2024-03-05.xlsx"


def test_totals_line(loaded_state):
    line = totals_line(loaded_state.view("ACQUISITION"))
    assert line.startswith("Sessions: 1,350")

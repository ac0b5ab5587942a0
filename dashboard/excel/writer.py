"""
ExcelWriter — high-level helpers for building styled report workbooks.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable

from openpyxl import Workbook
from openpyxl.chart import BarChart, LineChart, Reference
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.pagebreak import Break
from openpyxl.worksheet.worksheet import Worksheet

from dashboard.excel.styles import (
    TITLE_FONT, SUBTITLE_FONT, SECTION_FONT,
    NOTES_LABEL_FONT, NOTES_BODY_FONT,
    SERIES_COLORS, WRAP,
)
from dashboard.excel.formatters import (
    format_header_row,
    format_data_cell,
    auto_column_width,
)


ColSpec = tuple[str, str, str]  # (key, col_type, label)

# Fixed page geometry for every sheet (inches)
PAGE_MARGIN = 0.4


class ExcelWriter:
    """Fluent builder for styled Excel workbooks."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._first_sheet = True

    # ------------------------------------------------------------------
    # Sheet management
    # ------------------------------------------------------------------

    def add_sheet(self, title: str) -> Worksheet:
        """Create a new A4 portrait worksheet (re-uses the default sheet first)."""
        # Sheet titles are capped at 31 chars and may not contain []:*?/\
        safe = "".join(ch for ch in title if ch not in "[]:*?/\\")[:31] or "Sheet"
        if self._first_sheet:
            ws = self.wb.active
            ws.title = safe
            self._first_sheet = False
        else:
            ws = self.wb.create_sheet(title=safe)
        ws.page_setup.paperSize = ws.PAPERSIZE_A4
        ws.page_setup.orientation = ws.ORIENTATION_PORTRAIT
        ws.page_setup.fitToWidth = 1
        ws.page_setup.fitToHeight = 0
        ws.sheet_properties.pageSetUpPr.fitToPage = True
        ws.page_margins = PageMargins(
            left=PAGE_MARGIN, right=PAGE_MARGIN, top=PAGE_MARGIN, bottom=PAGE_MARGIN
        )
        return ws

    # ------------------------------------------------------------------
    # Title block
    # ------------------------------------------------------------------

    def write_title(self, ws: Worksheet, title: str, subtitle: str, merge_cols: int = 6) -> int:
        """Write title + subtitle rows. Returns next available row."""
        merge_cols = max(merge_cols, 1)
        ws.cell(row=1, column=1).value = title
        ws.cell(row=1, column=1).font = TITLE_FONT
        ws.cell(row=2, column=1).value = subtitle
        ws.cell(row=2, column=1).font = SUBTITLE_FONT
        if merge_cols > 1:
            ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=merge_cols)
            ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=merge_cols)
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        """Write a section header. Returns next row."""
        ws.cell(row=row, column=1).value = title
        ws.cell(row=row, column=1).font = SECTION_FONT
        return row + 2

    # ------------------------------------------------------------------
    # Data tables
    # ------------------------------------------------------------------

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        rows: list[dict],
        highlight_fn: Callable[[int, dict], str | None] | None = None,
        totals: dict | None = None,
        start_col: int = 1,
    ) -> int:
        """Write headers, data rows and an optional precomputed totals row.

        highlight_fn(row_idx, row_data) -> str|None  e.g. 'muted'

        Returns the row number after the last written row.
        """
        for offset, (_, _, label) in enumerate(columns):
            ws.cell(row=start_row, column=start_col + offset).value = label
        format_header_row(ws, start_row, len(columns), start_col)

        row = start_row + 1
        for idx, row_data in enumerate(rows):
            hl = highlight_fn(idx, row_data) if highlight_fn else None
            for offset, (key, col_type, _) in enumerate(columns):
                format_data_cell(ws, row, start_col + offset, row_data.get(key, ""), col_type, highlight=hl)
            row += 1

        if totals is not None:
            for offset, (key, col_type, _) in enumerate(columns):
                format_data_cell(ws, row, start_col + offset, totals.get(key, ""), col_type, is_total=True)
            row += 1

        return row

    def paginate(self, ws: Worksheet, header_row: int, first_row: int, last_row: int, per_page: int) -> int:
        """Add page breaks every ``per_page`` table rows and repeat the header.

        Returns the number of pages the table spans.
        """
        ws.print_title_rows = f"{header_row}:{header_row}"
        pages = 1
        for brk in range(first_row + per_page - 1, last_row, per_page):
            ws.row_breaks.append(Break(id=brk))
            pages += 1
        return pages

    def finish_sheet(self, ws: Worksheet, freeze_row: int | None = None) -> None:
        auto_column_width(ws)
        if freeze_row:
            ws.freeze_panes = f"A{freeze_row}"

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def add_chart(
        self,
        ws: Worksheet,
        anchor_row: int,
        title: str,
        labels: list[str],
        values: list[float | None],
        series_name: str,
        kind: str = "line",
        data_col: int = 1,
    ) -> int:
        """Write a (label, value) block at ``data_col`` and chart it beside the sheet.

        Returns the row after the chart's data block.
        """
        ws.cell(row=anchor_row, column=data_col).value = "Label"
        ws.cell(row=anchor_row, column=data_col + 1).value = series_name
        format_header_row(ws, anchor_row, 2, data_col)
        for i, (label, value) in enumerate(zip(labels, values), 1):
            format_data_cell(ws, anchor_row + i, data_col, label, "text")
            format_data_cell(ws, anchor_row + i, data_col + 1, value, "number")
        last = anchor_row + len(labels)

        chart = BarChart() if kind == "bar" else LineChart()
        chart.title = title
        chart.height = 8
        chart.width = 18
        chart.y_axis.title = series_name
        data = Reference(ws, min_col=data_col + 1, min_row=anchor_row, max_row=last)
        cats = Reference(ws, min_col=data_col, min_row=anchor_row + 1, max_row=last)
        chart.add_data(data, titles_from_data=True)
        chart.set_categories(cats)
        for i, s in enumerate(chart.series):
            color = SERIES_COLORS[i % len(SERIES_COLORS)]
            s.graphicalProperties.line.solidFill = color
            if kind == "bar":
                s.graphicalProperties.solidFill = color
        ws.add_chart(chart, f"{get_column_letter(data_col + 3)}{anchor_row}")
        return last + 1

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def write_notes(self, ws: Worksheet, row: int, notes: str, merge_cols: int = 6) -> int:
        """Write a labelled free-text block. Returns next row."""
        merge_cols = max(merge_cols, 1)
        ws.cell(row=row, column=1).value = "Notes"
        ws.cell(row=row, column=1).font = NOTES_LABEL_FONT
        body = ws.cell(row=row + 1, column=1)
        body.value = notes
        body.font = NOTES_BODY_FONT
        body.alignment = WRAP
        if merge_cols > 1:
            ws.merge_cells(start_row=row + 1, start_column=1, end_row=row + 1, end_column=merge_cols)
        ws.row_dimensions[row + 1].height = max(15, 15 * (notes.count("\n") + 1 + len(notes) // 100))
        return row + 3

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> Path:
        """Save the workbook to disk."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path

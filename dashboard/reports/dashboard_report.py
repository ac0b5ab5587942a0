"""
Dashboard Report — one section per exported category: table with selected-row
totals, metric chart, and notes.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

from dashboard.analytics.common import format_number, sanitize_for_json
from dashboard.config import REPORT_ROWS_PER_PAGE, REPORT_TITLE
from dashboard.data.normalize import to_number
from dashboard.data.store import CategoryView, DashboardState
from dashboard.errors import NothingToExportError
from dashboard.excel.writer import ColSpec, ExcelWriter


SUMMARY_COLS: list[ColSpec] = [
    ("key", "text", "Category"),
    ("title", "text", "Dataset"),
    ("rows", "number", "Rows"),
    ("selected", "number", "Selected"),
    ("metric", "text", "Chart Metric"),
]


def _eligible_views(state: DashboardState) -> list[CategoryView]:
    views = [c.view() for c in state.exportable()]
    if not views:
        raise NothingToExportError("No category is marked for export and has data")
    return views


def _table_columns(view: CategoryView) -> list[ColSpec]:
    numeric = set(view.numeric_columns)
    return [(c, "number" if c in numeric else "text", c) for c in view.visible_columns]


def _table_rows(view: CategoryView) -> list[dict]:
    """Visible cells with numeric columns converted for spreadsheet arithmetic."""
    numeric = set(view.numeric_columns)
    out = []
    for row in view.rows:
        data = {"_selected": row.selected}
        for col in view.visible_columns:
            raw = row.get(col)
            num = to_number(raw) if col in numeric else None
            data[col] = num if num is not None else raw
        out.append(data)
    return out


def generate_json(state: DashboardState) -> dict:
    """Report content as plain data (the same sections the workbook renders)."""
    views = _eligible_views(state)
    return sanitize_for_json({
        "title": REPORT_TITLE,
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "sections": [
            {
                "category": v.key,
                "title": v.title or v.key,
                "columns": v.visible_columns,
                "rows": [{c: r.get(c) for c in v.visible_columns} for r in v.rows],
                "selected": [r.selected for r in v.rows],
                "totals": v.formatted_totals,
                "chart": v.chart.to_dict(),
                "chart_kind": v.chart_kind,
                "notes": v.notes,
            }
            for v in views
        ],
    })


def _write_category(ew: ExcelWriter, view: CategoryView) -> None:
    ws = ew.add_sheet(view.key.title())
    columns = _table_columns(view)
    width = max(len(columns), 2)
    subtitle = (
        f"{view.title or 'Untitled dataset'}  |  {len(view.rows):,} rows, "
        f"{view.selected_count:,} selected in totals"
    )
    row = ew.write_title(ws, view.key.title(), subtitle, merge_cols=width)

    header_row = row
    end = ew.write_table(
        ws, header_row, columns, _table_rows(view),
        highlight_fn=lambda _, r: None if r["_selected"] else "muted",
        totals=view.totals,
    )
    ew.paginate(ws, header_row, header_row + 1, end - 1, REPORT_ROWS_PER_PAGE)
    row = end + 1

    if view.chart.metric and view.chart.labels:
        row = ew.write_section(ws, row, f"Chart: {view.chart.metric}")
        row = ew.add_chart(
            ws, row,
            title=view.title or view.key.title(),
            labels=view.chart.labels,
            values=view.chart.values,
            series_name=view.chart.metric,
            kind=view.chart_kind,
        ) + 1

    if view.notes:
        ew.write_notes(ws, row, view.notes, merge_cols=width)

    ew.finish_sheet(ws, freeze_row=header_row + 1)


def generate_excel(state: DashboardState, output_path: str | Path) -> Path:
    """Write the report workbook.

    Raises NothingToExportError before touching the filesystem when no
    category qualifies.
    """
    views = _eligible_views(state)

    ew = ExcelWriter()
    ws = ew.add_sheet("Summary")
    row = ew.write_title(
        ws, REPORT_TITLE,
        f"Generated: {datetime.now():%Y-%m-%d %H:%M}",
        merge_cols=len(SUMMARY_COLS),
    )
    summary = [
        {
            "key": v.key,
            "title": v.title,
            "rows": len(v.rows),
            "selected": v.selected_count,
            "metric": v.metric_column or "",
        }
        for v in views
    ]
    ew.write_table(ws, row, SUMMARY_COLS, summary)
    ew.finish_sheet(ws)

    for view in views:
        _write_category(ew, view)

    return ew.save(output_path)


def default_report_name(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"analytics-report-{now:%Y-%m-%d}.xlsx"


def totals_line(view: CategoryView) -> str:
    """One-line totals summary printed by the CLI after selection changes."""
    parts = [
        f"{col}: {format_number(val)}"
        for col, val in view.totals.items()
        if not isinstance(val, str)
    ]
    return "  |  ".join(parts)

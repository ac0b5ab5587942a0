#!/usr/bin/env python3
"""
Analytics Dashboard CLI — ingest CSV exports, inspect categories, export reports.

USAGE:
  python -m dashboard.cli ingest ACQUISITION export.csv            # Replace category data
  python -m dashboard.cli ingest BEHAVIOR a.csv b.csv --append     # Append matching files
  python -m dashboard.cli show ACQUISITION                         # Table + totals
  python -m dashboard.cli show ACQUISITION --limit 20
  python -m dashboard.cli sort ACQUISITION "Sessions"              # Toggle sort on a column
  python -m dashboard.cli select ACQUISITION <row-id> --off        # Exclude a row from totals
  python -m dashboard.cli set ACQUISITION --metric Users --notes "Q3 campaign"
  python -m dashboard.cli clear ACQUISITION

  python -m dashboard.cli export                                   # Report workbook
  python -m dashboard.cli export --output ./report.xlsx
  python -m dashboard.cli dump --output state.json                 # JSON export
  python -m dashboard.cli load state.json                          # JSON import

  python -m dashboard.cli serve                                    # Start API server
  python -m dashboard.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dashboard.config import REPORTS_FOLDER
from dashboard.data.loader import read_upload_bytes
from dashboard.data.persist import StateStore, export_json, import_json, open_state
from dashboard.data.schemas import IngestMode
from dashboard.data.store import DashboardState
from dashboard.errors import NothingToExportError, UnknownCategoryError
from dashboard.logging_setup import setup_logging


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  ANALYTICS DASHBOARD — {title}")
    print("=" * 70)


def _open(args) -> DashboardState:
    folder = getattr(args, "state_dir", None)
    return open_state(StateStore(Path(folder)) if folder else StateStore())


def _cell(value: str, width: int) -> str:
    text = value if len(value) <= width else value[: width - 1] + "…"
    return f"{text:<{width}}"


def cmd_ingest(args):
    """Load CSV files into a category."""
    _banner("INGEST")
    state = _open(args)
    files = []
    for p in args.files:
        path = Path(p)
        if not path.exists():
            print(f"  File not found: {path}")
            continue
        files.append(read_upload_bytes(path.name, path.read_bytes()))

    mode = IngestMode.APPEND if args.append else IngestMode.REPLACE
    report = state.ingest(args.category, files, mode)

    print(f"\n  {report.category} ({mode.value}): +{report.rows_added:,} rows "
          f"from {len(report.accepted_files)} file(s)")
    for w in report.warnings:
        print(f"  Warning: {w}")
    cat = state.category(args.category)
    print(f"  Columns: {len(cat.columns)}  |  Numeric: {', '.join(cat.view().numeric_columns) or '-'}")
    print(f"  Chart metric: {cat.metric_column or '-'}\n")


def cmd_show(args):
    """Print a category's table and totals row."""
    state = _open(args)
    view = state.view(args.category)
    _banner(f"{view.key} — {view.title or 'no dataset'}")
    if not view.columns:
        print("\n  No data yet.\n")
        return

    width = args.width
    cols = view.visible_columns
    print("\n    " + " ".join(_cell(c, width) for c in cols))
    for row in view.rows[: args.limit] if args.limit else view.rows:
        mark = "x" if row.selected else " "
        print(f"  [{mark}] " + " ".join(_cell(row.get(c), width) for c in cols)
              + (f"  {row.id}" if args.ids else ""))
    if args.limit and len(view.rows) > args.limit:
        print(f"  ... {len(view.rows) - args.limit:,} more rows")
    print("  Σ  " + " ".join(_cell(view.formatted_totals.get(c, ""), width) for c in cols))

    sort = f"{view.sort_column} ({view.sort_direction.value})" if view.sort_column else "-"
    print(f"\n  Rows: {len(view.rows):,}  |  Selected: {view.selected_count:,}  |  Sort: {sort}")
    print(f"  Numeric columns: {', '.join(view.numeric_columns) or '-'}")
    print(f"  Chart metric: {view.metric_column or '-'}  |  In report: {'yes' if view.include_in_pdf else 'no'}")
    if view.notes:
        print(f"  Notes: {view.notes}")
    print()


def cmd_sort(args):
    state = _open(args)
    cat = state.category(args.category)
    direction = cat.toggle_sort(args.column)
    print(f"  {cat.key}: sorted by {args.column} ({direction.value})")


def cmd_select(args):
    from dashboard.reports.dashboard_report import totals_line

    state = _open(args)
    cat = state.category(args.category)
    if args.all or args.none:
        cat.select_all(bool(args.all))
        print(f"  {cat.key}: {'selected' if args.all else 'deselected'} {len(cat.rows):,} rows")
    elif not args.row_id:
        print("  Specify a row id, --all or --none")
        return
    else:
        selected = None if args.toggle else not args.off
        if not cat.toggle_row(args.row_id, selected):
            print(f"  Row not found: {args.row_id}")
            return
        row = cat.store.find(args.row_id)
        print(f"  {cat.key}: row {row.id} {'selected' if row.selected else 'excluded'}")
    print(f"  Totals: {totals_line(cat.view()) or '-'}")


def cmd_set(args):
    """Update category settings."""
    state = _open(args)
    cat = state.category(args.category)
    with state.batch_changes():
        if args.title is not None:
            cat.set_title(args.title)
        if args.notes is not None:
            cat.set_notes(args.notes)
        if args.metric is not None:
            cat.set_metric_column(args.metric or None)
        if args.chart is not None:
            cat.set_chart_kind(args.chart)
        if args.include:
            cat.set_include_in_pdf(True)
        if args.exclude:
            cat.set_include_in_pdf(False)
        for col in args.hide or []:
            cat.set_column_visibility(col, False)
        for col in args.show or []:
            cat.set_column_visibility(col, True)
    print(f"  {cat.key}: settings updated")


def cmd_clear(args):
    state = _open(args)
    cat = state.category(args.category)
    cat.clear()
    print(f"  {cat.key}: cleared")


def cmd_export(args):
    """Write the report workbook."""
    from dashboard.reports.dashboard_report import default_report_name, generate_excel

    _banner("REPORT EXPORT")
    state = _open(args)
    out = Path(args.output) if args.output else REPORTS_FOLDER / default_report_name()
    try:
        path = generate_excel(state, out)
    except NothingToExportError:
        print("\n  Nothing to export: no category is marked for the report and has data.\n")
        return
    included = [c.key for c in state.exportable()]
    print(f"\n  Sections: {', '.join(included)}")
    print(f"  Report saved to: {path}\n")


def cmd_dump(args):
    state = _open(args)
    text = export_json(state, args.categories or None)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"  State written to {args.output}")
    else:
        print(text)


def cmd_load(args):
    state = _open(args)
    restored = import_json(state, Path(args.file).read_text(encoding="utf-8-sig"))
    print(f"  Imported: {', '.join(restored) or 'nothing (no known categories in file)'}")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Analytics Dashboard API on port {args.port}...")
    uvicorn.run("dashboard.main:app", host=args.host, port=args.port, reload=args.reload)


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Analytics Dashboard — CSV analytics exports engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--state-dir", help="Folder holding the saved state (default: config)")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    ingest_parser = subparsers.add_parser("ingest", help="Load CSV files into a category")
    ingest_parser.add_argument("category", help="Category key, e.g. ACQUISITION")
    ingest_parser.add_argument("files", nargs="+", help="CSV file(s)")
    ingest_parser.add_argument("--append", action="store_true", help="Append instead of replace")
    ingest_parser.set_defaults(func=cmd_ingest)

    show_parser = subparsers.add_parser("show", help="Print table and totals")
    show_parser.add_argument("category")
    show_parser.add_argument("--limit", type=int, default=0, help="Max rows to print")
    show_parser.add_argument("--width", type=int, default=14, help="Column width")
    show_parser.add_argument("--ids", action="store_true", help="Print row ids")
    show_parser.set_defaults(func=cmd_show)

    sort_parser = subparsers.add_parser("sort", help="Sort by a column (repeat to reverse)")
    sort_parser.add_argument("category")
    sort_parser.add_argument("column")
    sort_parser.set_defaults(func=cmd_sort)

    select_parser = subparsers.add_parser("select", help="Include/exclude rows from totals")
    select_parser.add_argument("category")
    select_parser.add_argument("row_id", nargs="?")
    select_parser.add_argument("--off", action="store_true", help="Exclude the row")
    select_parser.add_argument("--toggle", action="store_true", help="Flip the row's selection")
    select_parser.add_argument("--all", action="store_true", help="Select every row")
    select_parser.add_argument("--none", action="store_true", help="Deselect every row")
    select_parser.set_defaults(func=cmd_select)

    set_parser = subparsers.add_parser("set", help="Update category settings")
    set_parser.add_argument("category")
    set_parser.add_argument("--title")
    set_parser.add_argument("--notes")
    set_parser.add_argument("--metric", help="Chart metric column ('' to unset)")
    set_parser.add_argument("--chart", choices=["line", "bar"])
    set_parser.add_argument("--include", action="store_true", help="Include in report")
    set_parser.add_argument("--exclude", action="store_true", help="Leave out of report")
    set_parser.add_argument("--hide", nargs="*", help="Columns to hide")
    set_parser.add_argument("--show", nargs="*", help="Columns to show")
    set_parser.set_defaults(func=cmd_set)

    clear_parser = subparsers.add_parser("clear", help="Remove all data of a category")
    clear_parser.add_argument("category")
    clear_parser.set_defaults(func=cmd_clear)

    export_parser = subparsers.add_parser("export", help="Export the report workbook")
    export_parser.add_argument("--output", help="Output .xlsx path")
    export_parser.set_defaults(func=cmd_export)

    dump_parser = subparsers.add_parser("dump", help="Export state as JSON")
    dump_parser.add_argument("categories", nargs="*", help="Restrict to these categories")
    dump_parser.add_argument("--output", help="Write to file instead of stdout")
    dump_parser.set_defaults(func=cmd_dump)

    load_parser = subparsers.add_parser("load", help="Import state JSON")
    load_parser.add_argument("file")
    load_parser.set_defaults(func=cmd_load)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    setup_logging("WARNING")
    try:
        args.func(args)
    except UnknownCategoryError as exc:
        print(f"  {exc}")
        return 2
    except ValueError as exc:
        print(f"  Error: {exc}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())

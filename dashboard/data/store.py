"""
DashboardState — explicit container for the four category datasets.

Every mutation goes through a Category (or the state itself) and ends in a
change notification, which the persistence layer hooks to save the blob.
Views are re-derived on every call: classification, totals, ordering and
chart series are never cached across mutations.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

from dashboard.analytics.charts import ChartSeries, chart_series
from dashboard.analytics.common import sanitize_for_json
from dashboard.analytics.sorting import next_sort_state, sort_rows
from dashboard.analytics.totals import compute_totals, format_totals
from dashboard.config import CATEGORIES, CHART_KINDS
from dashboard.data.loader import load_csv_files
from dashboard.data.normalize import classify_columns
from dashboard.data.rows import RowStore
from dashboard.data.schemas import IngestMode, IngestReport, Row, SortDirection
from dashboard.errors import HeaderMismatchError, IngestInProgressError, UnknownCategoryError

logger = logging.getLogger(__name__)


@dataclass
class CategoryView:
    """Read-only projection handed to the table, chart and report consumers."""
    key: str
    title: str
    columns: list[str]
    visible_columns: list[str]
    column_visibility: dict[str, bool]
    numeric_columns: list[str]
    rows: list[Row]
    totals: dict[str, float | str]
    formatted_totals: dict[str, str]
    chart: ChartSeries
    metric_column: str | None
    sort_column: str | None
    sort_direction: SortDirection
    include_in_pdf: bool
    notes: str
    chart_kind: str
    expanded: bool = False
    selected_count: int = 0

    def to_dict(self) -> dict:
        return sanitize_for_json({
            "key": self.key,
            "title": self.title,
            "columns": self.columns,
            "visible_columns": self.visible_columns,
            "column_visibility": self.column_visibility,
            "numeric_columns": self.numeric_columns,
            "rows": [
                {"id": r.id, "selected": r.selected, "cells": {c: r.get(c) for c in self.visible_columns}}
                for r in self.rows
            ],
            "row_count": len(self.rows),
            "selected_count": self.selected_count,
            "totals": self.totals,
            "formatted_totals": self.formatted_totals,
            "chart": self.chart.to_dict(),
            "metric_column": self.metric_column,
            "sort_column": self.sort_column,
            "sort_direction": self.sort_direction.value,
            "include_in_pdf": self.include_in_pdf,
            "notes": self.notes,
            "chart_kind": self.chart_kind,
            "expanded": self.expanded,
        })


class Category:
    """One taxonomy member: its rows plus the user's view preferences."""

    def __init__(self, key: str, on_change: Optional[Callable[[], None]] = None) -> None:
        self.key = key
        self._on_change = on_change
        self.store = RowStore(on_change=self._changed)
        self.metric_column: str | None = None
        self.sort_column: str | None = None
        self.sort_direction = SortDirection.ASC
        self.dataset_title = ""
        self.include_in_pdf = True
        self.notes = ""
        self.chart_kind = CHART_KINDS[0]
        self.expanded = False

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    # ------------------------------------------------------------------
    # Derived data
    # ------------------------------------------------------------------

    @property
    def rows(self) -> list[Row]:
        return self.store.rows

    @property
    def columns(self) -> list[str]:
        return self.store.columns

    @property
    def column_visibility(self) -> dict[str, bool]:
        return self.store.column_visibility

    @property
    def numeric_columns(self) -> set[str]:
        return classify_columns(self.store.records)

    def _first_numeric(self, numeric: set[str]) -> str | None:
        visible = [c for c in self.store.visible_columns if c in numeric]
        return visible[0] if visible else next((c for c in self.columns if c in numeric), None)

    def revalidate_metric(self) -> None:
        """Keep ``metric_column`` pointing at a column that is still numeric."""
        numeric = self.numeric_columns
        if self.metric_column is None or self.metric_column not in numeric:
            self.metric_column = self._first_numeric(numeric)

    def view(self) -> CategoryView:
        numeric = self.numeric_columns
        visible = self.store.visible_columns
        totals = compute_totals(self.rows, visible, numeric)
        return CategoryView(
            key=self.key,
            title=self.dataset_title,
            columns=list(self.columns),
            visible_columns=visible,
            column_visibility=dict(self.column_visibility),
            numeric_columns=[c for c in self.columns if c in numeric],
            rows=list(self.rows),
            totals=totals,
            formatted_totals=format_totals(totals),
            chart=chart_series(self.rows, visible, numeric, self.metric_column),
            metric_column=self.metric_column,
            sort_column=self.sort_column,
            sort_direction=self.sort_direction,
            include_in_pdf=self.include_in_pdf,
            notes=self.notes,
            chart_kind=self.chart_kind,
            expanded=self.expanded,
            selected_count=sum(1 for r in self.rows if r.selected),
        )

    @property
    def exportable(self) -> bool:
        return self.include_in_pdf and len(self.rows) > 0

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, files: list[tuple[str, str]], mode: IngestMode = IngestMode.REPLACE) -> IngestReport:
        """Parse and validate all files, then commit them in one step."""
        batch = load_csv_files(files)
        report = IngestReport(
            category=self.key,
            mode=mode,
            skipped_count=len(batch.skipped_files),
            rejected_files=list(batch.rejected_files),
            warnings=list(batch.warnings),
        )
        if not batch.header:
            report.warnings.append("No readable CSV data found")
            return report

        default_title = Path(batch.first_file or "").stem
        if mode == IngestMode.REPLACE:
            self.store.replace_all(batch.header, batch.records)
            self.metric_column = None
            self.sort_column = None
            self.sort_direction = SortDirection.ASC
            self.dataset_title = default_title
        else:
            try:
                self.store.append(batch.header, batch.records, source=batch.first_file)
            except HeaderMismatchError as exc:
                logger.warning("%s: append rejected: %s", self.key, exc)
                report.rejected_files.extend(batch.accepted_files)
                report.warnings.append(
                    f"{', '.join(batch.accepted_files)}: columns do not match the existing "
                    f"{self.key} data, file ignored"
                )
                return report
            if not self.dataset_title:
                self.dataset_title = default_title

        self.revalidate_metric()
        report.rows_added = len(batch.records)
        report.accepted_files = list(batch.accepted_files)
        logger.info("%s: %s %d rows from %d file(s)", self.key, mode.value, report.rows_added,
                    len(report.accepted_files))
        self._changed()
        return report

    # ------------------------------------------------------------------
    # Row operations
    # ------------------------------------------------------------------

    def delete_row(self, row_id: str) -> bool:
        removed = self.store.remove(row_id)
        if removed:
            self.revalidate_metric()
        return removed

    def toggle_row(self, row_id: str, selected: bool | None = None) -> bool:
        row = self.store.find(row_id)
        if row is None:
            return False
        return self.store.set_selected(row_id, (not row.selected) if selected is None else selected)

    def select_all(self, selected: bool = True) -> None:
        self.store.set_all_selected(selected)

    def toggle_sort(self, column: str) -> SortDirection:
        """Sort rows in place by ``column``; repeated calls flip the direction."""
        if column not in self.columns:
            raise ValueError(f"Unknown column: {column}")
        self.sort_column, self.sort_direction = next_sort_state(
            self.sort_column, self.sort_direction, column
        )
        self.store.reorder(sort_rows(self.rows, column, self.numeric_columns, self.sort_direction))
        return self.sort_direction

    def clear(self) -> None:
        self.metric_column = None
        self.sort_column = None
        self.sort_direction = SortDirection.ASC
        self.store.clear()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_metric_column(self, column: str | None) -> None:
        if column is not None and column not in self.numeric_columns:
            raise ValueError(f"{column!r} is not a numeric column")
        self.metric_column = column
        self._changed()

    def set_column_visibility(self, column: str, visible: bool) -> None:
        self.store.set_visibility(column, visible)

    def set_title(self, title: str) -> None:
        self.dataset_title = title.strip()
        self._changed()

    def set_notes(self, notes: str) -> None:
        self.notes = notes
        self._changed()

    def set_include_in_pdf(self, include: bool) -> None:
        self.include_in_pdf = bool(include)
        self._changed()

    def set_chart_kind(self, kind: str) -> None:
        if kind not in CHART_KINDS:
            raise ValueError(f"Unknown chart kind: {kind}. Valid: {list(CHART_KINDS)}")
        self.chart_kind = kind
        self._changed()

    def set_expanded(self, expanded: bool) -> None:
        self.expanded = bool(expanded)
        self._changed()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        data = self.store.to_dict()
        data.update({
            "dataset_title": self.dataset_title,
            "include_in_pdf": self.include_in_pdf,
            "notes": self.notes,
            "metric_column": self.metric_column,
            "sort_column": self.sort_column,
            "sort_direction": self.sort_direction.value,
            "chart_kind": self.chart_kind,
            "expanded": self.expanded,
        })
        return data

    def load_dict(self, data: dict) -> None:
        """Overwrite persisted fields from ``data``; missing fields keep defaults."""
        self.store.load_dict(data)
        self.dataset_title = str(data.get("dataset_title") or "")
        self.include_in_pdf = bool(data.get("include_in_pdf", True))
        self.notes = str(data.get("notes") or "")
        sort_column = data.get("sort_column")
        self.sort_column = sort_column if sort_column in self.columns else None
        try:
            self.sort_direction = SortDirection(data.get("sort_direction") or SortDirection.ASC.value)
        except ValueError:
            self.sort_direction = SortDirection.ASC
        kind = data.get("chart_kind")
        self.chart_kind = kind if kind in CHART_KINDS else CHART_KINDS[0]
        self.expanded = bool(data.get("expanded", False))
        self.metric_column = data.get("metric_column")
        if self.rows:
            self.revalidate_metric()
        elif self.metric_column not in self.columns:
            self.metric_column = None


class DashboardState:
    """All categories of one dashboard session."""

    def __init__(
        self,
        categories: list[str] | None = None,
        on_change: Optional[Callable[["DashboardState"], None]] = None,
    ) -> None:
        self.on_change = on_change
        self._ingesting: set[str] = set()
        self._suspended = 0
        self.categories: dict[str, Category] = {
            key: Category(key, on_change=self._changed) for key in (categories or CATEGORIES)
        }

    def _changed(self) -> None:
        if self.on_change is not None and not self._suspended:
            self.on_change(self)

    @contextmanager
    def batch_changes(self) -> Iterator["DashboardState"]:
        """Coalesce change notifications into one at the end of the block."""
        self._suspended += 1
        try:
            yield self
        finally:
            self._suspended -= 1
        self._changed()

    def __getitem__(self, key: str) -> Category:
        return self.category(key)

    def __iter__(self) -> Iterator[Category]:
        return iter(self.categories.values())

    def category(self, key: str) -> Category:
        cat = self.categories.get(key.upper())
        if cat is None:
            raise UnknownCategoryError(key)
        return cat

    @property
    def keys(self) -> list[str]:
        return list(self.categories)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    @contextmanager
    def ingest_guard(self, key: str) -> Iterator[Category]:
        """Reserve a category for one ingestion at a time.

        Held across the asynchronous file reads of an upload so two rapid
        uploads into the same category cannot interleave their commits.
        """
        cat = self.category(key)
        if cat.key in self._ingesting:
            raise IngestInProgressError(cat.key)
        self._ingesting.add(cat.key)
        try:
            yield cat
        finally:
            self._ingesting.discard(cat.key)

    def is_ingesting(self, key: str) -> bool:
        return self.category(key).key in self._ingesting

    def ingest(
        self,
        key: str,
        files: list[tuple[str, str]],
        mode: IngestMode = IngestMode.REPLACE,
    ) -> IngestReport:
        with self.ingest_guard(key) as cat, self.batch_changes():
            return cat.ingest(files, mode)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def view(self, key: str) -> CategoryView:
        return self.category(key).view()

    def exportable(self) -> list[Category]:
        return [c for c in self if c.exportable]

    def summary(self) -> list[dict]:
        return [
            {
                "key": c.key,
                "title": c.dataset_title,
                "rows": len(c.rows),
                "columns": len(c.columns),
                "include_in_pdf": c.include_in_pdf,
            }
            for c in self
        ]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {"categories": {c.key: c.to_dict() for c in self}}

    def load_dict(self, data: dict) -> list[str]:
        """Merge persisted categories by key; unknown keys are ignored.

        Every payload is loaded into a scratch category first, so a malformed
        one raises ValueError before any category is touched. Returns the
        keys that were restored.
        """
        cats = data.get("categories", data) if isinstance(data, dict) else {}
        if not isinstance(cats, dict):
            return []

        accepted: list[tuple[Category, dict]] = []
        for key, payload in cats.items():
            cat = self.categories.get(str(key).upper())
            if cat is None or not isinstance(payload, dict):
                continue
            try:
                Category(cat.key).load_dict(payload)
            except (KeyError, TypeError, AttributeError, ValueError) as exc:
                raise ValueError(f"Invalid {cat.key} payload: {exc}") from exc
            accepted.append((cat, payload))

        with self.batch_changes():
            for cat, payload in accepted:
                cat.load_dict(payload)
        return [cat.key for cat, _ in accepted]

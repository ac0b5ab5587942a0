"""
Category endpoints: derived view, sorting, row selection/deletion, settings.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from dashboard.api.dependencies import get_category, get_state
from dashboard.api.response_models import (
    SelectAllRequest, SelectRequest, SettingsUpdate, SortRequest, SortResponse,
)
from dashboard.data.store import Category, DashboardState

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("/{key}")
def category_view(cat: Category = Depends(get_category)):
    """Visible rows, totals row, numeric columns and chart series."""
    return cat.view().to_dict()


@router.post("/{key}/sort", response_model=SortResponse)
def sort_category(req: SortRequest, cat: Category = Depends(get_category)):
    """Sort by a column; sorting the active column again reverses it."""
    try:
        direction = cat.toggle_sort(req.column)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    return SortResponse(sort_column=req.column, sort_direction=direction.value)


@router.post("/{key}/rows/{row_id}/select")
def select_row(row_id: str, req: SelectRequest, cat: Category = Depends(get_category)):
    if not cat.toggle_row(row_id, req.selected):
        raise HTTPException(404, f"Row not found: {row_id}")
    row = cat.store.find(row_id)
    return {"id": row_id, "selected": row.selected}


@router.post("/{key}/select-all")
def select_all(req: SelectAllRequest, cat: Category = Depends(get_category)):
    cat.select_all(req.selected)
    return {"category": cat.key, "selected": req.selected, "rows": len(cat.rows)}


@router.delete("/{key}/rows/{row_id}")
def delete_row(row_id: str, cat: Category = Depends(get_category)):
    if not cat.delete_row(row_id):
        raise HTTPException(404, f"Row not found: {row_id}")
    return {"status": "deleted", "id": row_id}


@router.patch("/{key}/settings")
def update_settings(
    req: SettingsUpdate,
    cat: Category = Depends(get_category),
    state: DashboardState = Depends(get_state),
):
    """Apply the sent settings; an invalid column or chart kind is a 400."""
    fields = req.model_dump(exclude_unset=True)
    try:
        with state.batch_changes():
            if "title" in fields:
                cat.set_title(req.title or "")
            if "notes" in fields:
                cat.set_notes(req.notes or "")
            if req.include_in_pdf is not None:
                cat.set_include_in_pdf(req.include_in_pdf)
            if "metric_column" in fields:
                cat.set_metric_column(req.metric_column)
            if req.chart_kind is not None:
                cat.set_chart_kind(req.chart_kind)
            if req.expanded is not None:
                cat.set_expanded(req.expanded)
            for column, visible in (req.column_visibility or {}).items():
                cat.set_column_visibility(column, visible)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    return cat.view().to_dict()

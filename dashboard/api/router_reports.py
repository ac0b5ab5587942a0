"""
Report and state endpoints — workbook export, JSON export/import.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import FileResponse, Response

from dashboard.api.dependencies import get_state
from dashboard.api.response_models import ImportResponse
from dashboard.config import REPORTS_FOLDER
from dashboard.data.persist import export_json, import_json
from dashboard.data.store import DashboardState
from dashboard.errors import NothingToExportError
from dashboard.reports import dashboard_report

router = APIRouter(prefix="/api", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/report")
def download_report(state: DashboardState = Depends(get_state)):
    """Build the report workbook for every category marked for export."""
    name = dashboard_report.default_report_name()
    try:
        path = dashboard_report.generate_excel(state, REPORTS_FOLDER / name)
    except NothingToExportError as exc:
        raise HTTPException(404, str(exc))
    return FileResponse(path=str(path), filename=name, media_type=XLSX_MEDIA_TYPE)


@router.get("/report/json")
def report_json(state: DashboardState = Depends(get_state)):
    try:
        return dashboard_report.generate_json(state)
    except NothingToExportError as exc:
        raise HTTPException(404, str(exc))


@router.get("/state/export")
def state_export(
    categories: list[str] | None = Query(None, description="Restrict to these category keys"),
    state: DashboardState = Depends(get_state),
):
    """Pretty-printed JSON of the category mapping."""
    return Response(
        content=export_json(state, categories),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="dashboard-state.json"'},
    )


@router.post("/state/import", response_model=ImportResponse)
async def state_import(request: Request, state: DashboardState = Depends(get_state)):
    """Replace the categories present in the JSON body; unknown keys are ignored."""
    body = await request.body()
    try:
        restored = import_json(state, body.decode("utf-8-sig"))
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    return ImportResponse(restored=restored)

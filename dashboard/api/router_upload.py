"""
Upload endpoints: ingest CSV files into a category (replace or append), clear.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from dashboard.api.dependencies import get_state
from dashboard.api.response_models import IngestResponse
from dashboard.data.loader import read_upload_bytes
from dashboard.data.schemas import IngestMode
from dashboard.data.store import DashboardState
from dashboard.errors import IngestInProgressError, UnknownCategoryError

router = APIRouter(prefix="/api/categories", tags=["upload"])


@router.post("/{key}/upload", response_model=IngestResponse)
async def upload_csvs(
    key: str,
    files: list[UploadFile] = File(...),
    mode: str = Form(IngestMode.REPLACE.value),
    state: DashboardState = Depends(get_state),
):
    """Upload one or more CSV files into a category.

    All files are read and validated before anything is committed. A second
    upload into the same category while one is in flight gets 409.
    """
    try:
        ingest_mode = IngestMode(mode)
    except ValueError:
        raise HTTPException(400, f"Invalid mode: {mode}. Valid: {[m.value for m in IngestMode]}")

    try:
        with state.ingest_guard(key) as cat:
            decoded = []
            for f in files:
                if not f.filename:
                    raise HTTPException(400, "Missing filename")
                decoded.append(read_upload_bytes(f.filename, await f.read()))
            with state.batch_changes():
                report = cat.ingest(decoded, ingest_mode)
    except UnknownCategoryError:
        raise HTTPException(404, f"Unknown category: {key}")
    except IngestInProgressError as exc:
        raise HTTPException(409, str(exc))

    return IngestResponse(**report.to_dict())


@router.delete("/{key}")
def clear_category(key: str, state: DashboardState = Depends(get_state)):
    """Remove all rows and columns of a category."""
    try:
        cat = state.category(key)
    except UnknownCategoryError:
        raise HTTPException(404, f"Unknown category: {key}")
    if state.is_ingesting(cat.key):
        raise HTTPException(409, f"An upload into {cat.key} is still being processed")
    cat.clear()
    return {"status": "cleared", "category": cat.key}

"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    categories: int
    rows: int


class CategorySummary(BaseModel):
    key: str
    title: str
    rows: int
    columns: int
    include_in_pdf: bool


class CategoriesResponse(BaseModel):
    categories: list[CategorySummary]


class IngestResponse(BaseModel):
    category: str
    mode: str
    rows_added: int
    accepted_files: list[str]
    skipped_count: int
    rejected_files: list[str]
    warnings: list[str]


class SortRequest(BaseModel):
    column: str


class SortResponse(BaseModel):
    sort_column: str
    sort_direction: str


class SelectRequest(BaseModel):
    selected: Optional[bool] = None  # None toggles


class SelectAllRequest(BaseModel):
    selected: bool = True


class SettingsUpdate(BaseModel):
    """Partial update; only the fields that are sent are applied."""
    title: Optional[str] = None
    notes: Optional[str] = None
    include_in_pdf: Optional[bool] = None
    metric_column: Optional[str] = None
    chart_kind: Optional[str] = None
    expanded: Optional[bool] = None
    column_visibility: Optional[dict[str, bool]] = None


class ImportResponse(BaseModel):
    restored: list[str]

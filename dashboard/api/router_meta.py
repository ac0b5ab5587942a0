"""
Meta endpoints: health, category list.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from dashboard.data.store import DashboardState
from dashboard.api.dependencies import get_state
from dashboard.api.response_models import CategoriesResponse, CategorySummary, HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(state: DashboardState = Depends(get_state)):
    return HealthResponse(
        status="ok",
        categories=len(state.keys),
        rows=sum(len(c.rows) for c in state),
    )


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(state: DashboardState = Depends(get_state)):
    return CategoriesResponse(categories=[CategorySummary(**s) for s in state.summary()])

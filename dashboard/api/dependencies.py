"""
FastAPI dependencies — DashboardState holder, category lookup.
"""
from __future__ import annotations

from fastapi import Depends, HTTPException

from dashboard.data.store import Category, DashboardState
from dashboard.errors import UnknownCategoryError

# ---------------------------------------------------------------------------
# Session state (set during startup)
# ---------------------------------------------------------------------------
_state: DashboardState | None = None


def set_state(state: DashboardState | None) -> None:
    global _state
    _state = state


def get_state() -> DashboardState:
    if _state is None:
        raise HTTPException(503, "Server not initialized yet")
    return _state


def get_category(key: str, state: DashboardState = Depends(get_state)) -> Category:
    """Resolve the ``{key}`` path parameter to a category (case-insensitive)."""
    try:
        return state.category(key)
    except UnknownCategoryError:
        raise HTTPException(404, f"Unknown category: {key}. Valid: {state.keys}")

"""
Analytics Dashboard — FastAPI app factory with startup state hydration.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dashboard import __version__
from dashboard.api.dependencies import set_state
from dashboard.api.router_categories import router as categories_router
from dashboard.api.router_meta import router as meta_router
from dashboard.api.router_reports import router as reports_router
from dashboard.api.router_upload import router as upload_router
from dashboard.data.persist import StateStore, open_state
from dashboard.logging_setup import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Restore the saved dashboard state at startup."""
    from dashboard.config import REPORTS_FOLDER, STATE_FOLDER
    for d in [STATE_FOLDER, REPORTS_FOLDER]:
        d.mkdir(parents=True, exist_ok=True)

    setup_logging()
    store = StateStore(STATE_FOLDER)
    print(f"  State file = {store.path} (exists = {store.path.exists()})")

    state = open_state(store)
    set_state(state)

    total = sum(len(c.rows) for c in state)
    if total:
        print(f"\nAnalytics Dashboard ready — {total:,} rows across {len(state.keys)} categories\n")
    else:
        print("\nAnalytics Dashboard ready — no data yet. Upload CSVs per category.\n")
    yield
    set_state(None)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Analytics Dashboard API",
        description="CSV analytics exports — column inference, selection-aware totals, reports",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(upload_router)
    app.include_router(categories_router)
    app.include_router(reports_router)
    return app


app = create_app()

# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path

import pytest

from dashboard.data.persist import StateStore
from dashboard.data.store import DashboardState


ACQUISITION_CSV = """# ----------------------------------------
# Acquisition overview
# 20240101-20240131
# ----------------------------------------

Source,Sessions,Users,Average Session Duration
google,100,80,30
direct,50,40,60
"bing",1200,900,90

"""


@pytest.fixture()
def acquisition_csv() -> str:
    return ACQUISITION_CSV


@pytest.fixture()
def state() -> DashboardState:
    return DashboardState()


@pytest.fixture()
def loaded_state(state: DashboardState, acquisition_csv: str) -> DashboardState:
    state.ingest("ACQUISITION", [("acquisition.csv", acquisition_csv)])
    return state


@pytest.fixture()
def state_store(tmp_path: Path) -> StateStore:
    return StateStore(tmp_path / "state")

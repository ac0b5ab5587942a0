"""
Local persistence: the whole dashboard state as one JSON blob in a
key-value folder, plus JSON import/export of the category mapping.

Read and write failures are logged and swallowed here; a broken blob means
"no saved state", never a failed startup.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from dashboard.config import STATE_FOLDER, STATE_KEY
from dashboard.data.store import DashboardState

logger = logging.getLogger(__name__)

STATE_VERSION = 1


class StateStore:
    """Opaque string blobs keyed by name, one file per key."""

    def __init__(self, folder: Path = STATE_FOLDER, key: str = STATE_KEY) -> None:
        self.folder = Path(folder)
        self.key = key

    @property
    def path(self) -> Path:
        return self.folder / f"{self.key}.json"

    def read(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error("Could not read saved state %s: %s", self.path, exc)
            return None

    def write(self, blob: str) -> bool:
        """Write atomically via a temp file. Returns False on failure."""
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".tmp")
            tmp.write_text(blob, encoding="utf-8")
            tmp.replace(self.path)
            return True
        except OSError as exc:
            logger.error("Could not save state to %s: %s", self.path, exc)
            return False

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def save(self, state: DashboardState) -> bool:
        return self.write(serialize_state(state))

    def hydrate(self, state: DashboardState) -> list[str]:
        """Load the saved blob into ``state``. Returns restored category keys.

        A corrupt blob leaves every category empty.
        """
        blob = self.read()
        if not blob:
            return []
        try:
            return deserialize_into(state, blob)
        except ValueError as exc:
            logger.error("Saved state is corrupt, starting empty: %s", exc)
            with state.batch_changes():
                for cat in state:
                    cat.clear()
            return []


# ---------------------------------------------------------------------------
# Blob format
# ---------------------------------------------------------------------------

def serialize_state(state: DashboardState) -> str:
    payload = {
        "version": STATE_VERSION,
        "saved_at": datetime.now().isoformat(),
        **state.to_dict(),
    }
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def deserialize_into(state: DashboardState, blob: str) -> list[str]:
    """Merge a serialized blob into ``state`` category by category.

    Raises ValueError for malformed JSON or a non-object payload.
    """
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid state JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("State JSON must be an object")
    try:
        return state.load_dict(data.get("categories", {}))
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid state payload: {exc}") from exc


def open_state(store: StateStore | None = None) -> DashboardState:
    """Build a state hydrated from ``store`` that saves itself on every change."""
    store = store or StateStore()
    state = DashboardState()
    restored = store.hydrate(state)
    if restored:
        logger.info("Restored saved state for %s", ", ".join(restored))
    state.on_change = store.save
    return state


# ---------------------------------------------------------------------------
# JSON import / export
# ---------------------------------------------------------------------------

def export_json(state: DashboardState, keys: list[str] | None = None) -> str:
    """Pretty-printed category mapping, restricted to the taxonomy keys."""
    wanted = [k.upper() for k in keys] if keys else state.keys
    data = {c.key: c.to_dict() for c in state if c.key in wanted}
    return json.dumps(data, ensure_ascii=False, indent=2)


def import_json(state: DashboardState, text: str) -> list[str]:
    """Replace the categories present in ``text`` wholesale.

    Top-level keys outside the taxonomy are ignored. Raises ValueError for
    malformed JSON.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Imported JSON must be an object keyed by category")
    if "categories" in data and isinstance(data["categories"], dict):
        data = data["categories"]

    return state.load_dict(data)

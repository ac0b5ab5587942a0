"""
Row, parse-result and ingestion schemas shared by the engine.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum

# Column name -> trimmed raw cell text. Never pre-coerced to numbers.
Record = dict[str, str]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class IngestMode(str, Enum):
    REPLACE = "replace"
    APPEND = "append"


def new_row_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Row:
    """One ingested record plus identity and selection flag."""
    record: Record
    id: str = field(default_factory=new_row_id)
    selected: bool = True

    def get(self, column: str) -> str:
        return self.record.get(column, "")

    def to_dict(self) -> dict:
        return {"id": self.id, "selected": self.selected, "record": dict(self.record)}

    @classmethod
    def from_dict(cls, data: dict) -> "Row":
        """Rebuild a persisted row. Raises ValueError when the id or record is missing."""
        if not isinstance(data, dict) or not data.get("id"):
            raise ValueError(f"Persisted row without an id: {data!r}")
        raw = data.get("record") or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Persisted row {data['id']} has no record mapping")
        record = {str(k): "" if v is None else str(v) for k, v in raw.items()}
        return cls(record=record, id=str(data["id"]), selected=bool(data.get("selected", True)))


@dataclass
class ParsedCsv:
    """Result of parsing one CSV text. Empty header means no header line was found."""
    header: list[str] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)
    dropped_lines: int = 0

    @property
    def ok(self) -> bool:
        return bool(self.header)


@dataclass
class IngestBatch:
    """Several uploaded files parsed, header-validated and concatenated."""
    header: list[str] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)
    accepted_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    rejected_files: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def first_file(self) -> str | None:
        return self.accepted_files[0] if self.accepted_files else None


@dataclass
class IngestReport:
    """Outcome of committing an upload batch to a category."""
    category: str
    mode: IngestMode
    rows_added: int = 0
    accepted_files: list[str] = field(default_factory=list)
    skipped_count: int = 0
    rejected_files: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "mode": self.mode.value,
            "rows_added": self.rows_added,
            "accepted_files": list(self.accepted_files),
            "skipped_count": self.skipped_count,
            "rejected_files": list(self.rejected_files),
            "warnings": list(self.warnings),
        }

"""
Engine exceptions. All are recoverable; the API maps them to HTTP statuses.
"""
from __future__ import annotations


class DashboardError(Exception):
    """Base class for dashboard engine errors."""


class UnknownCategoryError(DashboardError, KeyError):
    def __init__(self, category: str) -> None:
        super().__init__(category)
        self.category = category

    def __str__(self) -> str:
        return f"Unknown category: {self.category}"


class HeaderMismatchError(DashboardError, ValueError):
    """Raised when appended records do not share the category's column layout."""

    def __init__(self, expected: list[str], got: list[str], source: str | None = None) -> None:
        self.expected = list(expected)
        self.got = list(got)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Header mismatch{where}: expected {self.expected}, got {self.got}")


class IngestInProgressError(DashboardError):
    def __init__(self, category: str) -> None:
        super().__init__(f"An upload into {category} is still being processed")
        self.category = category


class NothingToExportError(DashboardError):
    """No category is marked for export and holds rows."""

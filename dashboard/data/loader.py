"""
CSV ingestion: header discovery, tolerant row parsing, multi-file batches.
"""
from __future__ import annotations

import gzip
import io
import logging
from pathlib import Path

import pandas as pd

from dashboard.config import COMMENT_PREFIX, CSV_EXTENSIONS, DELIMITER
from dashboard.data.schemas import IngestBatch, ParsedCsv, Record

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Header discovery
# ---------------------------------------------------------------------------

def _is_header_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIX) and DELIMITER in stripped


def find_header_line(lines: list[str]) -> int | None:
    """Index of the first non-empty, non-comment line that contains a delimiter."""
    return next((i for i, line in enumerate(lines) if _is_header_line(line)), None)


def _clean_header_cell(cell: str) -> str:
    return str(cell).strip().strip('"').strip()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_csv_text(text: str) -> ParsedCsv:
    """Parse an analytics export into (header, records).

    Leading metadata lines (blank or ``#``-prefixed) are skipped. Data rows
    are dropped when their field count differs from the header's, when every
    field is blank, or when the first field is a ``#`` comment. Never raises
    for malformed input; an empty header signals that nothing was found.
    """
    text = text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    header_idx = find_header_line(lines)
    if header_idx is None:
        return ParsedCsv()

    too_long: list[list[str]] = []

    def _skip_bad_line(fields: list[str]) -> None:
        too_long.append(fields)
        return None

    block = "".join(lines[header_idx:])
    try:
        df = pd.read_csv(
            io.StringIO(block),
            sep=DELIMITER,
            header=None,
            dtype=object,
            keep_default_na=False,
            skip_blank_lines=True,
            quotechar='"',
            doublequote=True,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("CSV parse failed: %s", exc)
        return ParsedCsv()

    if df.empty:
        return ParsedCsv()

    header = [_clean_header_cell(c) for c in df.iloc[0].fillna("")]
    body = df.iloc[1:]
    if body.empty:
        return ParsedCsv(header=header, dropped_lines=len(too_long))

    # Short rows come back padded with missing values; a complete row has none
    complete = body.notna().all(axis=1)
    body = body[complete].apply(lambda col: col.astype(str).str.strip())
    if body.empty:
        return ParsedCsv(header=header, dropped_lines=len(too_long) + int((~complete).sum()))

    has_value = (body != "").any(axis=1)
    not_comment = ~body.iloc[:, 0].str.startswith(COMMENT_PREFIX)
    kept = body[has_value & not_comment]

    records: list[Record] = [
        {col: (val if val is not None else "") for col, val in zip(header, row)}
        for row in kept.itertuples(index=False, name=None)
    ]
    dropped = len(too_long) + int((~complete).sum()) + (len(body) - len(kept))
    return ParsedCsv(header=header, records=records, dropped_lines=dropped)


# ---------------------------------------------------------------------------
# Upload decoding
# ---------------------------------------------------------------------------

def read_upload_bytes(filename: str, content: bytes) -> tuple[str, str]:
    """Decode an uploaded file to text, gunzipping ``.csv.gz`` uploads."""
    if filename.lower().endswith(".csv.gz"):
        filename = filename[:-3]
        content = gzip.decompress(content)
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")
    return filename, text


def is_csv_name(filename: str) -> bool:
    return filename.lower().endswith(CSV_EXTENSIONS)


# ---------------------------------------------------------------------------
# Multi-file batches
# ---------------------------------------------------------------------------

def load_csv_files(files: list[tuple[str, str]]) -> IngestBatch:
    """Parse several ``(filename, text)`` uploads into one batch.

    The first file that parses becomes authoritative for the header. Files
    with a different header are rejected whole with a warning; unparseable
    or non-CSV files are skipped. Nothing here raises for bad input.
    """
    batch = IngestBatch()
    for name, text in files:
        if not is_csv_name(name):
            logger.warning("Skipping %s: not a .csv file", name)
            batch.skipped_files.append(name)
            continue

        parsed = parse_csv_text(text)
        if not parsed.ok:
            logger.warning("Skipping %s: no header row found", name)
            batch.skipped_files.append(name)
            continue

        if not batch.header:
            batch.header = list(parsed.header)
        elif parsed.header != batch.header:
            msg = f"{name}: columns do not match {batch.first_file}, file ignored"
            logger.warning(msg)
            batch.rejected_files.append(name)
            batch.warnings.append(msg)
            continue

        batch.records.extend(parsed.records)
        batch.accepted_files.append(name)
        logger.info("Parsed %s: %d rows (%d dropped)", name, len(parsed.records), parsed.dropped_lines)

    if batch.skipped_files:
        batch.warnings.append(f"{len(batch.skipped_files)} file(s) could not be read")
    return batch


def load_csv_paths(paths: list[Path]) -> IngestBatch:
    """Read CSV files from disk and parse them as one batch."""
    files = []
    for path in paths:
        name, text = read_upload_bytes(path.name, Path(path).read_bytes())
        files.append((name, text))
    return load_csv_files(files)

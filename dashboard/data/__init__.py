"""CSV ingestion, column classification and row storage."""
from .loader import parse_csv_text, load_csv_files, load_csv_paths, read_upload_bytes
from .normalize import classify_columns, numeric_values, normalize_cell
from .rows import RowStore
from .schemas import Row, Record, SortDirection, IngestMode, IngestReport

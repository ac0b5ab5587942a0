"""
Analytics Dashboard — Configuration: paths, taxonomy, heuristics constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths (override with DASHBOARD_DATA_DIR env var)
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("DASHBOARD_DATA_DIR", str(Path.home() / ".analytics-dashboard")))
BASE_FOLDER = _data_dir
STATE_FOLDER = _data_dir / "state"
REPORTS_FOLDER = _data_dir / "reports"

# Key under which the whole multi-category state is stored
STATE_KEY = "analyticsDashboardState"

# ---------------------------------------------------------------------------
# Category taxonomy (order is the display and report order)
# ---------------------------------------------------------------------------
CATEGORIES = ["ACQUISITION", "BEHAVIOR", "CONVERSION", "LOYALTY"]

# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------
CSV_EXTENSIONS = (".csv",)
COMMENT_PREFIX = "#"
DELIMITER = ","
# Placeholder columns in analytics exports; kept in the layout but hidden
HIDDEN_COLUMN_PREFIX = "<"

# ---------------------------------------------------------------------------
# Column classification
# ---------------------------------------------------------------------------
CLASSIFIER_SAMPLE_SIZE = 100
# Strictly greater than: 7/10 numeric cells is still a dimension
NUMERIC_THRESHOLD = 0.7

# ---------------------------------------------------------------------------
# Aggregation: columns whose name contains one of these are averaged, not summed
# ---------------------------------------------------------------------------
AVERAGE_INDICATORS = [
    "average",
    "avg",
    "per-active",
    "per active",
    "gemiddeld",
    "per actieve",
]
TOTAL_LABEL = "Total"

# ---------------------------------------------------------------------------
# Charts: preferred x-axis label columns (matched case-insensitively)
# ---------------------------------------------------------------------------
LABEL_COLUMN_HINTS = ["pad", "pagina", "page", "path"]
CHART_KINDS = ("line", "bar")
CHART_LABEL_MAX_LEN = 40

# ---------------------------------------------------------------------------
# Report export
# ---------------------------------------------------------------------------
REPORT_TITLE = "Analytics Dashboard Report"
REPORT_ROWS_PER_PAGE = 40

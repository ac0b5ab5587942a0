"""
Single source of truth for all report colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
BRAND_INDIGO = "667EEA"
DARK_INDIGO = "3C4A9E"
HEADER_BG = "3C4A9E"
ALTERNATE_ROW = "F5F5F5"
WHITE = "FFFFFF"
BLACK = "000000"
TOTAL_ROW_BG = "E3F2FD"
MUTED_BG = "EEEEEE"
GRAY_666 = "666666"
GRAY_999 = "999999"

# Chart series colors, cycled
SERIES_COLORS = [BRAND_INDIGO, "F39C12", "E74C3C", "2ECC71", "3498DB"]

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=20, bold=True, color=DARK_INDIGO)
SUBTITLE_FONT = Font(name="Calibri", size=10, italic=True, color=GRAY_666)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
MUTED_FONT = Font(name="Calibri", size=10, italic=True, color=GRAY_999)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=BLACK)
SECTION_FONT = Font(name="Calibri", size=14, bold=True, color=DARK_INDIGO)
NOTES_LABEL_FONT = Font(name="Calibri", size=9, bold=True, color=GRAY_666)
NOTES_BODY_FONT = Font(name="Calibri", size=10)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=HEADER_BG, end_color=HEADER_BG, fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color=ALTERNATE_ROW, end_color=ALTERNATE_ROW, fill_type="solid")
TOTAL_FILL = PatternFill(start_color=TOTAL_ROW_BG, end_color=TOTAL_ROW_BG, fill_type="solid")
MUTED_FILL = PatternFill(start_color=MUTED_BG, end_color=MUTED_BG, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)
HEADER_BORDER = Border(
    left=Side(style="thin", color=DARK_INDIGO),
    right=Side(style="thin", color=DARK_INDIGO),
    top=Side(style="thin", color=DARK_INDIGO),
    bottom=Side(style="medium", color=DARK_INDIGO),
)
TOTAL_BORDER = Border(
    left=Side(style="thin", color=GRAY_999),
    right=Side(style="thin", color=GRAY_999),
    top=Side(style="medium", color=GRAY_999),
    bottom=Side(style="medium", color=GRAY_999),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
WRAP = Alignment(horizontal="left", vertical="top", wrap_text=True)

# ---------------------------------------------------------------------------
# Highlight name → fill mapping
# ---------------------------------------------------------------------------
HIGHLIGHT_FILLS = {
    "muted": MUTED_FILL,
}

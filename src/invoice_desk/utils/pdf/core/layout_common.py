"""
Layout and style constants for the invoice PDF.
Coordinates are in points, measured from the top-left corner of the page.
"""

# Page geometry (A4, points)
PAGE_W, PAGE_H = 595.28, 841.89
MARGIN = 40
GUTTER = 24
CONTENT_W = PAGE_W - 2 * MARGIN

# Content never runs below this line; the footer lives underneath.
CONTENT_BOTTOM = PAGE_H - 60
# Where content resumes on continuation pages
CONTINUATION_TOP = 40

# Header band
BAND_H = 60
LOGO_X, LOGO_Y, LOGO_SIZE = MARGIN, 6, 48
DEFAULT_BRAND_COLOR = "#0F172A"

# Three-column block (From / Bill To / Invoice Details)
PARTIES_TOP = 90
PARTIES_BODY_OFFSET = 16
PARTIES_AFTER = 20
PARTIES_LEADING = 13
HEADING_SIZE = 11
BODY_SIZE = 10

FROM_DESIRED_W = 180
DETAILS_DESIRED_W = 200
MID_MIN_W = 160
DETAILS_FLOOR_W = 160
FROM_FLOOR_W = 140
MID_ABSOLUTE_MIN_W = 120

# Items table
TABLE_FONT_SIZE = 10
TABLE_PADDING = 6
TABLE_LEADING = 12
TABLE_NUMERIC_WIDTHS = (50, 70, 50, 80)  # Qty, Price, Tax, Total
TABLE_ITEM_SHARE = 0.4  # of the width left for Item + Description
TABLE_LINE_WIDTH = 0.4

# Totals card
CARD_W = 260
CARD_GAP = 18
CARD_RADIUS = 6
CARD_PAD_X = 14
CARD_FIRST_BASELINE = 16
CARD_LINE_STEP = 16
CARD_TOTAL_GAP = 18
CARD_PAD_BOTTOM = 14
# Subtotal + Tax + divider + Total with padding, before any conditional line
CARD_BASE_H = CARD_FIRST_BASELINE + 2 * CARD_LINE_STEP + CARD_TOTAL_GAP + CARD_PAD_BOTTOM

# Notes / Terms
NOTES_GAP = 28
NOTES_LABEL_STEP = 14
NOTES_LEADING = 13
NOTES_AFTER = 6

# Footer
FOOTER_RULE_Y = PAGE_H - 50
FOOTER_CAPTION_Y = PAGE_H - 35
FOOTER_PAGE_Y = PAGE_H - 24

# Colors (RGB components in 0-1 space)
COLORS = {
    "black": (0.0, 0.0, 0.0),
    "white": (1.0, 1.0, 1.0),
    "table_head": (15 / 255, 23 / 255, 42 / 255),
    "row_alt": (248 / 255, 250 / 255, 252 / 255),
    "grid": (230 / 255, 230 / 255, 230 / 255),
    "divider": (210 / 255, 210 / 255, 210 / 255),
    "card": (0xF1 / 255, 0xF5 / 255, 0xF9 / 255),
    "attention": (220 / 255, 38 / 255, 38 / 255),
    "caption": (100 / 255, 100 / 255, 100 / 255),
    "footer": (0x94 / 255, 0xA3 / 255, 0xB8 / 255),
    "page_no": (0x64 / 255, 0x74 / 255, 0x8B / 255),
}


def color(name: str) -> tuple[float, float, float]:
    return COLORS.get(name, COLORS["black"])

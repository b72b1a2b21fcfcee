from __future__ import annotations

from invoice_desk.utils.pdf.core.canvas import PdfCanvas
from invoice_desk.utils.pdf.core.layout_common import (
    FOOTER_CAPTION_Y,
    FOOTER_PAGE_Y,
    FOOTER_RULE_Y,
    MARGIN,
    TABLE_LINE_WIDTH,
    color,
)


def render_footer(canvas: PdfCanvas, page_number: int, caption: str) -> None:
    """Rule, centered caption and page number at the bottom of the current page."""
    canvas.set_stroke(color("grid"))
    canvas.set_line_width(TABLE_LINE_WIDTH)
    canvas.line(MARGIN, FOOTER_RULE_Y, canvas.width - MARGIN, FOOTER_RULE_Y)
    if caption:
        canvas.text(caption, canvas.width / 2, FOOTER_CAPTION_Y, size=8, align="center", color=color("footer"))
    canvas.text(f"Page {page_number}", canvas.width - MARGIN, FOOTER_PAGE_Y, size=9, align="right", color=color("page_no"))
    canvas.set_fill(color("black"))

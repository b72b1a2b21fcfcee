from __future__ import annotations

from invoice_desk.utils.pdf.core import fonts
from invoice_desk.utils.pdf.core.canvas import PdfCanvas
from invoice_desk.utils.pdf.core.layout_common import (
    BODY_SIZE,
    HEADING_SIZE,
    MARGIN,
    NOTES_AFTER,
    NOTES_LABEL_STEP,
    NOTES_LEADING,
)


def render_text_block(canvas: PdfCanvas, label: str, body: str, y: float) -> float:
    """Bold label with wrapped body text; skipped entirely when `body` is blank."""
    text = (body or "").strip()
    if not text:
        return y
    width = canvas.width - 2 * MARGIN
    lines = fonts.wrap_text(text, width, BODY_SIZE)

    # keep the label with at least its first line
    y = canvas.ensure_space(y, NOTES_LABEL_STEP + NOTES_LEADING)
    canvas.text(label, MARGIN, y, size=HEADING_SIZE, bold=True)
    y += NOTES_LABEL_STEP
    for line in lines:
        y = canvas.ensure_space(y, NOTES_LEADING)
        canvas.text(line, MARGIN, y, size=BODY_SIZE)
        y += NOTES_LEADING
    return y + NOTES_AFTER


def render_notes_and_terms(canvas: PdfCanvas, notes: str, terms: str, y: float) -> float:
    y = render_text_block(canvas, "Notes", notes, y)
    return render_text_block(canvas, "Terms & Conditions", terms, y)

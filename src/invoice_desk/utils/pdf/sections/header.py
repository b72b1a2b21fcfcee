from __future__ import annotations

from invoice_desk.core.models.party import parse_hex_color
from invoice_desk.utils.pdf.core.canvas import PdfCanvas
from invoice_desk.utils.pdf.core.images import PdfImage
from invoice_desk.utils.pdf.core.layout_common import (
    BAND_H,
    DEFAULT_BRAND_COLOR,
    LOGO_SIZE,
    LOGO_X,
    LOGO_Y,
    MARGIN,
    color,
)

NAME_X = MARGIN + 60


def band_color(brand_color: str | None) -> tuple[float, float, float]:
    return parse_hex_color(brand_color or "") or parse_hex_color(DEFAULT_BRAND_COLOR)


def render_header(
    canvas: PdfCanvas,
    sender_name: str,
    sender_email: str,
    number: str,
    brand_color: str | None = None,
    logo: PdfImage | None = None,
) -> None:
    """Full-width colored band with logo, sender identity and the invoice title."""
    canvas.set_fill(band_color(brand_color))
    canvas.rect(0, 0, canvas.width, BAND_H, stroke=False, fill=True)

    if logo is not None:
        canvas.image(logo, LOGO_X, LOGO_Y, LOGO_SIZE, LOGO_SIZE)

    white = color("white")
    canvas.text(sender_name, NAME_X, 28, size=16, bold=True, color=white)
    if sender_email:
        canvas.text(sender_email, NAME_X, 44, size=10)

    right = canvas.width - MARGIN
    canvas.text("INVOICE", right, 30, size=24, bold=True, align="right")
    if number:
        canvas.text(number, right, 48, size=10, align="right")
    canvas.set_fill(color("black"))

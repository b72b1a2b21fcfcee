from __future__ import annotations

from dataclasses import dataclass

from invoice_desk.core.calculations.totals_engine import Totals
from invoice_desk.core.models.invoice import InvoiceDocument, PaymentMethod
from invoice_desk.utils.formatting import format_money
from invoice_desk.utils.pdf.core.canvas import PdfCanvas
from invoice_desk.utils.pdf.core.layout_common import (
    CARD_BASE_H,
    CARD_FIRST_BASELINE,
    CARD_GAP,
    CARD_LINE_STEP,
    CARD_PAD_X,
    CARD_RADIUS,
    CARD_TOTAL_GAP,
    CARD_W,
    MARGIN,
    color,
)


@dataclass(frozen=True)
class CardLines:
    """The optional card lines; drawing and height are both derived from this."""

    discount: float | None = None
    amount_paid: float | None = None
    amount_due: float | None = None
    payment_method: PaymentMethod | None = None

    @property
    def conditional_count(self) -> int:
        return sum(
            value is not None
            for value in (self.discount, self.amount_paid, self.amount_due, self.payment_method)
        )


def card_lines_for(totals: Totals, doc: InvoiceDocument, include_payment: bool = True) -> CardLines:
    if not include_payment:
        return CardLines(discount=totals.discount_amount if totals.discount_amount > 0 else None)
    return CardLines(
        discount=totals.discount_amount if totals.discount_amount > 0 else None,
        amount_paid=doc.amount_paid if doc.amount_paid > 0 else None,
        amount_due=doc.amount_due if doc.amount_due > 0 else None,
        payment_method=doc.payment_method,
    )


def card_height(lines: CardLines) -> float:
    return CARD_BASE_H + CARD_LINE_STEP * lines.conditional_count


def render_totals_card(
    canvas: PdfCanvas,
    totals: Totals,
    lines: CardLines,
    currency: str,
    table_end: float,
) -> float:
    """Draw the card right-aligned below the table; returns the card's bottom edge."""
    height = card_height(lines)
    card_x = canvas.width - MARGIN - CARD_W
    card_y = canvas.ensure_space(table_end + CARD_GAP, height)

    canvas.set_fill(color("card"))
    canvas.set_stroke(color("grid"))
    canvas.rounded_rect(card_x, card_y, CARD_W, height, CARD_RADIUS, stroke=True, fill=True)

    label_x = card_x + CARD_PAD_X
    value_x = card_x + CARD_W - CARD_PAD_X
    black = color("black")

    def row(label: str, value: str, size: float = 10, bold: bool = False, fill=black) -> None:
        canvas.text(label, label_x, ty, size=size, bold=bold, color=fill)
        canvas.text(value, value_x, ty, size=size, bold=bold, align="right")

    ty = card_y + CARD_FIRST_BASELINE
    row("Subtotal", format_money(totals.subtotal, currency))
    ty += CARD_LINE_STEP
    row("Tax", format_money(totals.tax_total, currency))
    ty += CARD_LINE_STEP
    if lines.discount is not None:
        row("Discount", "-" + format_money(lines.discount, currency))
        ty += CARD_LINE_STEP

    canvas.set_stroke(color("divider"))
    canvas.line(label_x, ty, value_x, ty)
    ty += CARD_TOTAL_GAP
    row("Total", format_money(totals.total, currency), size=12, bold=True)

    if lines.amount_paid is not None:
        ty += CARD_LINE_STEP
        row("Amount Paid", format_money(lines.amount_paid, currency))
    if lines.amount_due is not None:
        ty += CARD_LINE_STEP
        row("Amount Due", format_money(lines.amount_due, currency), bold=True, fill=color("attention"))
    if lines.payment_method is not None:
        ty += CARD_LINE_STEP
        canvas.text(f"Payment Method: {lines.payment_method.value}", label_x, ty, size=9, color=color("caption"))

    canvas.set_fill(black)
    return card_y + height

"""
The three-column block under the header band: From / Bill To / Invoice Details.

Sender fields are merged from branding, the invoice's from-snapshot and the
account profile. The order is fixed per field and kept as data below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from invoice_desk.core.models.invoice import InvoiceDocument
from invoice_desk.core.models.party import Branding, PartyKind, PartySnapshot
from invoice_desk.utils.formatting import format_date, format_money
from invoice_desk.utils.pdf.core import fonts
from invoice_desk.utils.pdf.core.canvas import PdfCanvas
from invoice_desk.utils.pdf.core.layout_common import (
    BODY_SIZE,
    DETAILS_DESIRED_W,
    DETAILS_FLOOR_W,
    FROM_DESIRED_W,
    FROM_FLOOR_W,
    GUTTER,
    HEADING_SIZE,
    MID_ABSOLUTE_MIN_W,
    MID_MIN_W,
    PARTIES_AFTER,
    PARTIES_BODY_OFFSET,
    PARTIES_LEADING,
)

PLACEHOLDER = "—"
DEFAULT_SENDER_NAME = "Your Company"


@dataclass(frozen=True)
class SenderSources:
    branding: Branding
    snapshot: PartySnapshot
    profile: PartySnapshot


Source = Callable[[SenderSources], str]


def _profile_name(src: SenderSources) -> str:
    prof = src.profile
    return prof.company_name if prof.kind is PartyKind.COMPANY else prof.full_name


# First non-empty source wins.
SENDER_PRECEDENCE: dict[str, tuple[Source, ...]] = {
    "name": (
        lambda s: s.branding.company_name,
        lambda s: s.snapshot.display_name,
        _profile_name,
    ),
    "email": (
        lambda s: s.snapshot.email,
        lambda s: s.profile.email,
        lambda s: s.branding.email,
    ),
    "address1": (
        lambda s: s.branding.address1,
        lambda s: s.snapshot.address_line_1,
        lambda s: s.profile.address_line_1,
    ),
    "address2": (
        lambda s: s.branding.address2,
        lambda s: s.snapshot.address_line_2,
        lambda s: s.profile.address_line_2,
    ),
    "phone": (
        lambda s: s.branding.phone,
        lambda s: s.snapshot.phone,
        lambda s: s.profile.phone,
    ),
    "registration_id": (
        lambda s: s.snapshot.registration_id,
        lambda s: s.profile.registration_id,
    ),
    "vat_number": (
        lambda s: s.snapshot.vat_number,
        lambda s: s.profile.vat_number,
    ),
    "bank_name": (lambda s: s.profile.bank_name,),
    "bank_account": (lambda s: s.profile.bank_account,),
    "website": (
        lambda s: s.branding.website,
        lambda s: s.profile.website,
    ),
}

# (field, label prefix) in drawing order
FROM_LINE_ORDER: tuple[tuple[str, str], ...] = (
    ("name", ""),
    ("email", ""),
    ("registration_id", "Reg: "),
    ("vat_number", "VAT: "),
    ("address1", ""),
    ("address2", ""),
    ("phone", ""),
    ("bank_name", "Bank: "),
    ("bank_account", "Account: "),
    ("website", ""),
)


def make_sources(doc: InvoiceDocument, profile: PartySnapshot | None, branding: Branding | None) -> SenderSources:
    return SenderSources(
        branding=branding or Branding(),
        snapshot=doc.sender or PartySnapshot(),
        profile=profile or PartySnapshot(),
    )


def resolve_sender_field(name: str, sources: SenderSources) -> str:
    for source in SENDER_PRECEDENCE[name]:
        value = (source(sources) or "").strip()
        if value:
            return value
    return ""


def sender_name(sources: SenderSources) -> str:
    return resolve_sender_field("name", sources) or DEFAULT_SENDER_NAME


def build_from_lines(sources: SenderSources) -> List[str]:
    lines: List[str] = []
    for field, label in FROM_LINE_ORDER:
        value = resolve_sender_field(field, sources)
        if value:
            lines.append(f"{label}{value}")
    return lines or [PLACEHOLDER]


def build_bill_to_lines(bill_to: PartySnapshot) -> List[str]:
    lines = [bill_to.display_name or PLACEHOLDER, bill_to.email, bill_to.phone, bill_to.composed_address()]
    return [line for line in lines if line]


def build_details_lines(doc: InvoiceDocument, include_payment: bool = True) -> List[str]:
    lines = [
        f"Issue Date: {format_date(doc.issue_date)}",
        f"Due Date: {format_date(doc.due_date)}",
        f"Status: {doc.status.label}",
    ]
    if include_payment:
        if doc.payment_method is not None:
            lines.append(f"Payment: {doc.payment_method.value}")
        if doc.amount_paid > 0:
            lines.append(f"Paid: {format_money(doc.amount_paid, doc.currency)}")
        if doc.amount_due > 0:
            lines.append(f"Due: {format_money(doc.amount_due, doc.currency)}")
    return lines


@dataclass(frozen=True)
class ColumnWidths:
    from_w: float
    mid_w: float
    details_w: float

    def total(self, gutter: float = GUTTER) -> float:
        return self.from_w + self.mid_w + self.details_w + 2 * gutter


def negotiate_column_widths(available: float, gutter: float = GUTTER) -> ColumnWidths:
    """
    Give "Bill To" at least MID_MIN_W by shrinking "Invoice Details" to its
    floor first, then "From" to its floor; if it is still short, accept the
    middle width but never below MID_ABSOLUTE_MIN_W.
    """
    from_w = float(FROM_DESIRED_W)
    details_w = float(DETAILS_DESIRED_W)
    mid_w = available - from_w - details_w - 2 * gutter

    if mid_w < MID_MIN_W:
        deficit = MID_MIN_W - mid_w
        details_w -= min(deficit, max(0.0, details_w - DETAILS_FLOOR_W))
        mid_w = available - from_w - details_w - 2 * gutter

        if mid_w < MID_MIN_W:
            remaining = MID_MIN_W - mid_w
            from_w -= min(remaining, max(0.0, from_w - FROM_FLOOR_W))
            mid_w = available - from_w - details_w - 2 * gutter

            if mid_w < MID_MIN_W:
                mid_w = max(float(MID_ABSOLUTE_MIN_W), mid_w)

    return ColumnWidths(from_w=from_w, mid_w=mid_w, details_w=details_w)


def _wrap_all(lines: Sequence[str], width: float) -> List[str]:
    wrapped: List[str] = []
    for line in lines:
        wrapped.extend(fonts.wrap_text(line, width, BODY_SIZE))
    return wrapped


@dataclass(frozen=True)
class PartyColumns:
    from_lines: List[str]
    bill_lines: List[str]
    details_lines: List[str]
    widths: ColumnWidths

    @property
    def height(self) -> float:
        """Height of the tallest wrapped column body."""
        return max(len(self.from_lines), len(self.bill_lines), len(self.details_lines)) * PARTIES_LEADING


def layout_party_columns(
    from_lines: Sequence[str],
    bill_lines: Sequence[str],
    details_lines: Sequence[str],
    available: float,
) -> PartyColumns:
    widths = negotiate_column_widths(available)
    return PartyColumns(
        from_lines=_wrap_all(from_lines, widths.from_w),
        bill_lines=_wrap_all(bill_lines, widths.mid_w),
        details_lines=_wrap_all(details_lines, widths.details_w),
        widths=widths,
    )


def render_party_columns(canvas: PdfCanvas, columns: PartyColumns, x: float, y: float, color: Optional[tuple] = None) -> float:
    """Draw the block with headings at baseline `y`; returns the y where the next block starts."""
    widths = columns.widths
    from_x = x
    mid_x = from_x + widths.from_w + GUTTER
    details_x = mid_x + widths.mid_w + GUTTER
    body_y = y + PARTIES_BODY_OFFSET

    if color is not None:
        canvas.set_fill(color)
    for heading, col_x, lines in (
        ("From", from_x, columns.from_lines),
        ("Bill To", mid_x, columns.bill_lines),
        ("Invoice Details", details_x, columns.details_lines),
    ):
        canvas.text(heading, col_x, y, size=HEADING_SIZE, bold=True)
        canvas.text_lines(lines, col_x, body_y, size=BODY_SIZE, leading=PARTIES_LEADING)

    return body_y + columns.height + PARTIES_AFTER

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import List

from invoice_desk import config
from invoice_desk.core.calculations.totals_engine import compute_totals
from invoice_desk.core.models.invoice import InvoiceDocument
from invoice_desk.core.models.party import Branding, PartySnapshot
from invoice_desk.exceptions import InvoiceDeskError, InvoiceNotFoundError, RenderError
from invoice_desk.utils.pdf.core.builder import build_pdf_bytes
from invoice_desk.utils.pdf.core.canvas import PdfCanvas
from invoice_desk.utils.pdf.core.images import ImageLoadError, PdfImage, load_logo
from invoice_desk.utils.pdf.core.layout_common import CONTENT_W, MARGIN, NOTES_GAP, PAGE_H, PAGE_W, PARTIES_TOP
from invoice_desk.utils.pdf.sections import parties
from invoice_desk.utils.pdf.sections.footer import render_footer
from invoice_desk.utils.pdf.sections.header import render_header
from invoice_desk.utils.pdf.sections.items_table import render_items_table
from invoice_desk.utils.pdf.sections.notes import render_notes_and_terms
from invoice_desk.utils.pdf.sections.totals_card import card_lines_for, render_totals_card

logger = logging.getLogger(__name__)


@dataclass
class RenderOptions:
    include_payment_section: bool = True
    logo_fallback_path: str | None = None
    footer_caption: str = field(default_factory=lambda: config.FOOTER_CAPTION)
    logo_timeout: float = field(default_factory=lambda: config.LOGO_TIMEOUT)


@dataclass(frozen=True)
class RenderedInvoice:
    data: bytes
    filename: str
    page_count: int
    warnings: tuple[str, ...] = ()

    def stream(self) -> io.BytesIO:
        return io.BytesIO(self.data)


def invoice_filename(doc: InvoiceDocument) -> str:
    return f"Invoice-{doc.number or doc.id}.pdf"


def _logo_candidates(branding: Branding, profile: PartySnapshot, options: RenderOptions) -> List[str]:
    sources = [branding.logo_url, profile.logo_url, options.logo_fallback_path or ""]
    return [src.strip() for src in sources if src and src.strip()]


def _resolve_logo(candidates: List[str], timeout: float, warnings: List[str]) -> PdfImage | None:
    """First candidate that loads wins; every failure is recorded, none is raised."""
    for source in candidates:
        try:
            return load_logo(source, timeout=timeout)
        except ImageLoadError as exc:
            message = f"Logo could not be loaded ({source[:60]}): {exc}"
            logger.warning(message)
            warnings.append(message)
    return None


def render_invoice(
    doc: InvoiceDocument | None,
    profile_fallback: PartySnapshot | None = None,
    branding: Branding | None = None,
    options: RenderOptions | None = None,
) -> RenderedInvoice:
    """
    Lay out one invoice as an A4 PDF.

    Header band, the From / Bill To / Invoice Details block, the items table,
    the totals card and optional notes/terms; the footer is drawn on every
    page. Logo problems only produce warnings.
    """
    if doc is None:
        raise InvoiceNotFoundError(message="Invoice not found.")
    options = options or RenderOptions()
    try:
        return _render(doc, profile_fallback or PartySnapshot(), branding or Branding(), options)
    except InvoiceDeskError:
        raise
    except Exception as exc:
        logger.exception("Rendering invoice %s failed", doc.id or doc.number)
        raise RenderError(cause=exc) from exc


def _render(doc: InvoiceDocument, profile: PartySnapshot, branding: Branding, options: RenderOptions) -> RenderedInvoice:
    warnings: List[str] = []
    sources = parties.make_sources(doc, profile, branding)
    logo = _resolve_logo(_logo_candidates(branding, profile, options), options.logo_timeout, warnings)

    canvas = PdfCanvas(
        (PAGE_W, PAGE_H),
        on_page=lambda cv, number: render_footer(cv, number, options.footer_caption),
    )

    render_header(
        canvas,
        sender_name=parties.sender_name(sources),
        sender_email=parties.resolve_sender_field("email", sources),
        number=doc.number,
        brand_color=branding.brand_color,
        logo=logo,
    )

    columns = parties.layout_party_columns(
        parties.build_from_lines(sources),
        parties.build_bill_to_lines(doc.bill_to),
        parties.build_details_lines(doc, options.include_payment_section),
        CONTENT_W,
    )
    y = parties.render_party_columns(canvas, columns, MARGIN, PARTIES_TOP)

    table_end = render_items_table(canvas, doc.items, doc.currency, MARGIN, y, CONTENT_W)
    table_page = canvas.page_count

    totals = compute_totals(doc.items, doc.discount)
    lines = card_lines_for(totals, doc, options.include_payment_section)
    card_end = render_totals_card(canvas, totals, lines, doc.currency, table_end)

    # the card may have moved to a fresh page, leaving the table end behind
    notes_top = card_end if canvas.page_count != table_page else max(card_end, table_end)
    render_notes_and_terms(canvas, doc.notes, doc.terms, notes_top + NOTES_GAP)

    data = build_pdf_bytes(
        canvas.content_streams(),
        images=canvas.images,
        page_size=(PAGE_W, PAGE_H),
        title=f"Invoice {doc.number}".strip(),
    )
    logger.info("Rendered invoice %s (%d pages, %d bytes)", doc.number or doc.id, canvas.page_count, len(data))
    return RenderedInvoice(
        data=data,
        filename=invoice_filename(doc),
        page_count=canvas.page_count,
        warnings=tuple(warnings),
    )

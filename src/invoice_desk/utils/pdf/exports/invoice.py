from __future__ import annotations

import logging
import os
import sys
import tempfile
import webbrowser
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from invoice_desk.exceptions import InvoiceNotFoundError, RenderError
from invoice_desk.utils.pdf.renderers.pdf_renderer import RenderedInvoice, RenderOptions, render_invoice

if TYPE_CHECKING:
    from invoice_desk.core.services.invoices import InvoiceRepository
    from invoice_desk.core.services.settings import SettingsRepository

logger = logging.getLogger(__name__)


class OutputAction(str, Enum):
    DOWNLOAD = "download"
    PRINT = "print"


def save_invoice_pdf(rendered: RenderedInvoice, target: Path) -> Path:
    """
    Write the PDF. `target` may be a directory (the invoice filename is used)
    or a full file path.
    """
    target = Path(target)
    path = target / rendered.filename if target.is_dir() else target
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(rendered.data)
    except OSError as exc:
        raise RenderError(f"Could not save {path.name}: {exc}", cause=exc) from exc
    logger.info("Saved %s", path)
    return path


def open_for_print(rendered: RenderedInvoice) -> Path:
    """Hand a temp copy to the OS print verb; elsewhere open it in the default viewer."""
    fd, name = tempfile.mkstemp(prefix="invoice-", suffix=".pdf")
    with os.fdopen(fd, "wb") as handle:
        handle.write(rendered.data)
    path = Path(name)
    if sys.platform.startswith("win"):
        try:
            os.startfile(str(path), "print")  # type: ignore[attr-defined]
            return path
        except OSError as exc:
            logger.warning("Print verb failed for %s, opening viewer instead: %s", path, exc)
    webbrowser.open(path.as_uri())
    return path


def deliver_invoice(rendered: RenderedInvoice, action: OutputAction, target: Path | None = None) -> Path:
    if action is OutputAction.PRINT:
        return open_for_print(rendered)
    return save_invoice_pdf(rendered, target or Path.cwd())


def export_invoice(
    invoice_id: str,
    invoices: "InvoiceRepository",
    settings: "SettingsRepository",
    action: OutputAction = OutputAction.DOWNLOAD,
    target: Path | None = None,
    options: RenderOptions | None = None,
) -> tuple[Path, RenderedInvoice]:
    """Fetch the invoice and sender details, render once, then save or print."""
    doc = invoices.get_invoice(invoice_id)
    if doc is None:
        raise InvoiceNotFoundError(invoice_id)
    rendered = render_invoice(
        doc,
        profile_fallback=settings.fetch_profile(),
        branding=settings.fetch_branding(),
        options=options,
    )
    return deliver_invoice(rendered, action, target), rendered

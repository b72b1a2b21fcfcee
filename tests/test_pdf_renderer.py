import re

import httpx
import pytest
from PIL import Image

from invoice_desk.core.models.line_item import LineItem
from invoice_desk.core.models.party import Branding
from invoice_desk.exceptions import InvoiceNotFoundError, RenderError
from invoice_desk.utils.pdf.core import images
from invoice_desk.utils.pdf.exports import OutputAction, deliver_invoice, export_invoice, save_invoice_pdf
from invoice_desk.utils.pdf.exports import invoice as invoice_export
from invoice_desk.utils.pdf.renderers import pdf_renderer
from invoice_desk.utils.pdf.renderers.pdf_renderer import RenderOptions, invoice_filename, render_invoice


def _assert_valid_pdf(data: bytes) -> None:
    assert data.startswith(b"%PDF-1.4")
    assert data.rstrip().endswith(b"%%EOF")
    startxref = int(re.search(rb"startxref\n(\d+)\n", data).group(1))
    assert data[startxref : startxref + 4] == b"xref"

    count = int(re.match(rb"xref\n0 (\d+)\n", data[startxref:]).group(1))
    table_start = data.index(b"\n", data.index(b"\n", startxref) + 1) + 1
    for obj_id in range(1, count):
        entry = data[table_start + 20 * obj_id : table_start + 20 * obj_id + 10]
        offset = int(entry)
        assert data[offset:].startswith(f"{obj_id} 0 obj".encode("ascii"))


def test_render_produces_valid_pdf(sample_invoice, company_profile):
    rendered = render_invoice(sample_invoice, company_profile)

    _assert_valid_pdf(rendered.data)
    assert rendered.page_count == 1
    assert rendered.filename == "Invoice-INV-0007.pdf"
    assert rendered.warnings == ()
    assert rendered.stream().read() == rendered.data


def test_document_contains_header_blocks_and_totals(sample_invoice, company_profile):
    data = render_invoice(sample_invoice, company_profile).data

    for text in (b"(INVOICE)", b"(INV-0007)", b"(From)", b"(Bill To)", b"(Invoice Details)", b"(Acme Ltd)"):
        assert text in data
    assert b"(Subtotal)" in data
    assert b"(Discount)" in data
    assert b"(-$23.00)" in data
    assert b"($213.00)" in data
    assert b"(Amount Due)" in data
    assert b"(Payment Method: Card Payment)" in data
    assert b"(Page 1)" in data


def test_amount_due_is_drawn_in_red(sample_invoice, company_profile):
    assert b"0.86 0.15 0.15 rg" in render_invoice(sample_invoice, company_profile).data

    settled = sample_invoice.updated(amount_due=0)
    assert b"0.86 0.15 0.15 rg" not in render_invoice(settled, company_profile).data


def test_payment_section_can_be_left_out(sample_invoice, company_profile):
    data = render_invoice(sample_invoice, company_profile, options=RenderOptions(include_payment_section=False)).data

    assert b"(Amount Paid)" not in data
    assert b"(Payment Method: Card Payment)" not in data
    assert b"(Payment: Card Payment)" not in data


def test_notes_and_terms_are_drawn_when_present(sample_invoice, company_profile):
    data = render_invoice(sample_invoice, company_profile).data

    assert b"(Notes)" in data
    assert b"(Thanks for your business.)" in data
    assert b"(Terms & Conditions)" in data


def test_empty_notes_and_terms_leave_no_section(sample_invoice, company_profile):
    doc = sample_invoice.updated(notes="", terms="   ")
    data = render_invoice(doc, company_profile).data

    assert b"(Notes)" not in data
    assert b"(Terms & Conditions)" not in data


def test_missing_invoice_raises_not_found(company_profile):
    with pytest.raises(InvoiceNotFoundError):
        render_invoice(None, company_profile)


def test_unexpected_failure_is_wrapped(sample_invoice, company_profile, monkeypatch):
    def broken(*_args, **_kwargs):
        raise ZeroDivisionError("boom")

    monkeypatch.setattr(pdf_renderer, "compute_totals", broken)

    with pytest.raises(RenderError) as excinfo:
        render_invoice(sample_invoice, company_profile)
    assert excinfo.value.message == "Could not generate document"
    assert isinstance(excinfo.value.cause, ZeroDivisionError)


def test_unreachable_logo_still_renders(sample_invoice, company_profile, monkeypatch):
    def unreachable(url, **_kwargs):
        raise httpx.ConnectError("connection refused", request=httpx.Request("GET", url))

    monkeypatch.setattr(images.httpx, "get", unreachable)
    branding = Branding(logo_url="https://logo.invalid/logo.png")

    rendered = render_invoice(sample_invoice, company_profile, branding)

    _assert_valid_pdf(rendered.data)
    assert len(rendered.warnings) == 1
    assert "logo.invalid" in rendered.warnings[0]
    assert b"/Subtype /Image" not in rendered.data
    assert b"(Subtotal)" in rendered.data


def test_undecodable_logo_is_a_warning(sample_invoice, company_profile, tmp_path):
    bogus = tmp_path / "logo.png"
    bogus.write_bytes(b"not an image")
    options = RenderOptions(logo_fallback_path=str(bogus))

    rendered = render_invoice(sample_invoice, company_profile, options=options)

    assert len(rendered.warnings) == 1
    assert b"/Subtype /Image" not in rendered.data


@pytest.mark.parametrize("pixel_limit", [100, 600])
def test_oversized_logo_is_a_warning(sample_invoice, company_profile, png_logo, monkeypatch, pixel_limit):
    # 32x32 logo: above twice the limit Pillow refuses, above the limit it only warns
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", pixel_limit)

    rendered = render_invoice(sample_invoice, company_profile, Branding(logo_url=str(png_logo)))

    _assert_valid_pdf(rendered.data)
    assert len(rendered.warnings) == 1
    assert "cannot decode image" in rendered.warnings[0]
    assert b"/Subtype /Image" not in rendered.data


def test_logo_is_embedded_with_soft_mask(sample_invoice, company_profile, png_logo):
    options = RenderOptions(logo_fallback_path=str(png_logo))

    rendered = render_invoice(sample_invoice, company_profile, options=options)

    _assert_valid_pdf(rendered.data)
    assert rendered.warnings == ()
    assert b"/Subtype /Image" in rendered.data
    assert b"/SMask" in rendered.data
    assert b"/Im1 Do" in rendered.data


def test_failed_logo_falls_through_to_next_source(sample_invoice, company_profile, png_logo, tmp_path):
    branding = Branding(logo_url=str(tmp_path / "missing.png"))
    options = RenderOptions(logo_fallback_path=str(png_logo))

    rendered = render_invoice(sample_invoice, company_profile, branding, options)

    assert len(rendered.warnings) == 1
    assert b"/Im1 Do" in rendered.data


def test_brand_color_fills_header_band(sample_invoice, company_profile):
    data = render_invoice(sample_invoice, company_profile, Branding(brand_color="#FF0000")).data
    assert b"1 0 0 rg" in data

    default = render_invoice(sample_invoice, company_profile, Branding(brand_color="nonsense")).data
    assert b"0.06 0.09 0.16 rg" in default


def test_long_invoice_spans_pages_with_repeated_header(sample_invoice, company_profile):
    items = tuple(LineItem(f"Item {n}", "Longer description text for the row", 1, 10, 0) for n in range(80))
    rendered = render_invoice(sample_invoice.updated(items=items), company_profile)

    _assert_valid_pdf(rendered.data)
    assert rendered.page_count >= 2
    assert b"(Page 2)" in rendered.data
    assert rendered.data.count(b"(Description)") >= 2
    assert f"/Count {rendered.page_count}".encode() in rendered.data


def test_footer_caption_is_configurable(sample_invoice, company_profile):
    data = render_invoice(sample_invoice, company_profile, options=RenderOptions(footer_caption="Made in Port Louis")).data
    assert b"(Made in Port Louis)" in data


def test_non_ascii_text_uses_winansi(sample_invoice, company_profile):
    doc = sample_invoice.updated(bill_to=sample_invoice.bill_to.updated(full_name="Zoë Café"))
    data = render_invoice(doc, company_profile).data

    assert b"(Zo\\353 Caf\\351)" in data


def test_sender_falls_back_to_profile_when_snapshot_missing(sample_invoice, company_profile):
    data = render_invoice(sample_invoice.updated(sender=None), company_profile).data
    assert b"(Acme Ltd)" in data


def test_filename_falls_back_to_id(sample_invoice):
    assert invoice_filename(sample_invoice) == "Invoice-INV-0007.pdf"
    assert invoice_filename(sample_invoice.updated(number="")) == "Invoice-abc123.pdf"


def test_save_into_directory_uses_invoice_filename(sample_invoice, company_profile, tmp_path):
    rendered = render_invoice(sample_invoice, company_profile)

    path = save_invoice_pdf(rendered, tmp_path)

    assert path == tmp_path / "Invoice-INV-0007.pdf"
    assert path.read_bytes() == rendered.data


def test_print_opens_a_temp_copy(sample_invoice, company_profile, monkeypatch):
    opened = []
    monkeypatch.setattr(invoice_export.sys, "platform", "linux")
    monkeypatch.setattr(invoice_export.webbrowser, "open", lambda uri: opened.append(uri) or True)
    rendered = render_invoice(sample_invoice, company_profile)

    path = deliver_invoice(rendered, OutputAction.PRINT)

    try:
        assert path.read_bytes() == rendered.data
        assert opened == [path.as_uri()]
    finally:
        path.unlink()


def test_export_invoice_fetches_renders_and_saves(repos, make_draft, tmp_path):
    invoices, _customers, settings = repos
    invoice_id = invoices.create_invoice(make_draft())
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    path, rendered = export_invoice(invoice_id, invoices, settings, OutputAction.DOWNLOAD, out_dir)

    assert path.name == "Invoice-INV-0001.pdf"
    assert path.read_bytes() == rendered.data
    assert b"(Acme Ltd)" in rendered.data


def test_export_unknown_invoice_raises(repos, tmp_path):
    invoices, _customers, settings = repos
    with pytest.raises(InvoiceNotFoundError):
        export_invoice("nope", invoices, settings, OutputAction.DOWNLOAD, tmp_path)

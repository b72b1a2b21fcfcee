"""
PDF object builder: assembles page content streams, the two base fonts and
image XObjects into PDF 1.4 bytes.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

from invoice_desk.utils.pdf.core import fonts
from invoice_desk.utils.pdf.core.drawing import _encode_pdf_text
from invoice_desk.utils.pdf.core.images import PdfImage
from invoice_desk.utils.pdf.core.layout_common import PAGE_H, PAGE_W


def _stream_obj(obj_id: int, data: bytes, extra: str = "") -> bytes:
    head = f"{obj_id} 0 obj << {extra}/Length {len(data)} >> stream\n".encode("ascii")
    return head + data + b"\nendstream endobj\n"


def _image_objs(obj_id: int, img: PdfImage) -> tuple[list[bytes], int]:
    """Returns ([image obj, optional smask obj], next free id)."""
    objs: list[bytes] = []
    smask_ref = ""
    next_id = obj_id + 1
    if img.alpha is not None:
        smask_id = next_id
        next_id += 1
        smask_ref = f"/SMask {smask_id} 0 R "
    objs.append(
        _stream_obj(
            obj_id,
            img.rgb,
            f"/Type /XObject /Subtype /Image /Width {img.width} /Height {img.height} "
            f"/ColorSpace /DeviceRGB /BitsPerComponent 8 /Filter /FlateDecode {smask_ref}",
        )
    )
    if img.alpha is not None:
        objs.append(
            _stream_obj(
                obj_id + 1,
                img.alpha,
                f"/Type /XObject /Subtype /Image /Width {img.width} /Height {img.height} "
                "/ColorSpace /DeviceGray /BitsPerComponent 8 /Filter /FlateDecode ",
            )
        )
    return objs, next_id


def build_pdf_bytes(
    content_streams: List[str],
    images: Mapping[str, PdfImage] | None = None,
    page_size=(PAGE_W, PAGE_H),
    title: str = "",
) -> bytes:
    """
    Given the page content streams and the images they reference by name,
    return ready-to-write PDF bytes.
    """
    streams_bytes = [s.encode("latin-1", "replace") for s in content_streams]

    font_objs = [
        f"3 0 obj << /Type /Font /Subtype /Type1 /BaseFont /{fonts.BASE_FONTS[fonts.REGULAR]} /Encoding /WinAnsiEncoding >> endobj\n".encode("ascii"),
        f"4 0 obj << /Type /Font /Subtype /Type1 /BaseFont /{fonts.BASE_FONTS[fonts.BOLD]} /Encoding /WinAnsiEncoding >> endobj\n".encode("ascii"),
    ]
    info_id = 5
    info_obj = f"{info_id} 0 obj << /Producer (invoice-desk) /Title ({_encode_pdf_text(title)}) >> endobj\n".encode("ascii")
    next_obj_id = 6

    image_objs: list[bytes] = []
    image_refs: Dict[str, int] = {}
    for name, img in (images or {}).items():
        image_refs[name] = next_obj_id
        objs, next_obj_id = _image_objs(next_obj_id, img)
        image_objs.extend(objs)

    xobjects = ""
    if image_refs:
        xobjects = " /XObject << " + " ".join(f"/{name} {obj_id} 0 R" for name, obj_id in image_refs.items()) + " >>"

    page_objs: list[bytes] = []
    pages_kids: list[int] = []
    width, height = page_size
    for stream in streams_bytes:
        content_id = next_obj_id
        page_id = next_obj_id + 1
        pages_kids.append(page_id)
        page_objs.append(_stream_obj(content_id, stream))
        page_objs.append(
            f"{page_id} 0 obj << /Type /Page /Parent 2 0 R /MediaBox [0 0 {width} {height}] /Contents {content_id} 0 R "
            f"/Resources << /Font << /F1 3 0 R /F2 4 0 R >>{xobjects} >> >> endobj\n".encode("ascii")
        )
        next_obj_id += 2

    kids_ref = " ".join(f"{kid} 0 R" for kid in pages_kids)
    pages_obj = f"2 0 obj << /Type /Pages /Count {len(pages_kids)} /Kids [{kids_ref}] >> endobj\n".encode("ascii")
    catalog_obj = b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"

    # Objects must be written in id order for the xref table.
    objs = [catalog_obj, pages_obj] + font_objs + [info_obj] + image_objs + page_objs

    header = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"
    offsets = [0]
    pdf_body = bytearray()
    current_offset = len(header)
    for obj in objs:
        offsets.append(current_offset)
        pdf_body += obj
        current_offset += len(obj)

    xref_entries = ["0000000000 65535 f \n"] + [_format_xref_entry(off) for off in offsets[1:]]
    xref = ("xref\n0 %d\n" % len(offsets)).encode("ascii") + "".join(xref_entries).encode("ascii")
    startxref = len(header) + len(pdf_body)
    trailer = f"trailer << /Size {len(offsets)} /Root 1 0 R /Info {info_id} 0 R >>\nstartxref\n{startxref}\n%%EOF\n".encode("ascii")

    return header + bytes(pdf_body) + xref + trailer


def _format_xref_entry(offset: int) -> str:
    return f"{offset:010d} 00000 n \n"

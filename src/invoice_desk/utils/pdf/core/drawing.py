"""
PDF content-stream operators. Coordinates here are native PDF space (origin
bottom-left); `canvas.PdfCanvas` converts from top-down layout coordinates.
"""

from __future__ import annotations

import unicodedata

# Bezier control-point factor for quarter circles
_KAPPA = 0.5523


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def _normalize_ascii(text: str) -> str:
    """Remove diacritics for characters outside WinAnsi."""
    normalized = unicodedata.normalize("NFKD", str(text))
    return normalized.encode("ascii", "ignore").decode("ascii")


def _encode_pdf_text(text: str) -> str:
    """
    Encode a string as the body of a PDF literal string in WinAnsiEncoding.
    Bytes above 0x7F are written as octal escapes so the stream stays ASCII.
    """
    out = []
    for ch in str(text):
        try:
            raw = ch.encode("cp1252")
        except UnicodeEncodeError:
            raw = _normalize_ascii(ch).encode("ascii")
        for byte in raw:
            if byte in (0x5C, 0x28, 0x29):  # \ ( )
                out.append("\\" + chr(byte))
            elif byte < 0x20 or byte > 0x7E:
                out.append(f"\\{byte:03o}")
            else:
                out.append(chr(byte))
    return "".join(out)


def _set_fill(rgb: tuple[float, float, float]) -> str:
    return f"{_fmt(rgb[0])} {_fmt(rgb[1])} {_fmt(rgb[2])} rg\n"


def _set_stroke(rgb: tuple[float, float, float]) -> str:
    return f"{_fmt(rgb[0])} {_fmt(rgb[1])} {_fmt(rgb[2])} RG\n"


def _set_line_width(width: float) -> str:
    return f"{_fmt(width)} w\n"


def _paint_op(stroke: bool, fill: bool) -> str:
    if fill and stroke:
        return "B"
    if fill:
        return "f"
    return "S"


def _draw_text(text: str, x: float, y: float, font: str, size: float) -> str:
    return f"BT {font} {_fmt(size)} Tf {_fmt(x)} {_fmt(y)} Td ({_encode_pdf_text(text)}) Tj ET\n"


def _draw_rect(x: float, y: float, w: float, h: float, stroke: bool = True, fill: bool = False) -> str:
    return f"{_fmt(x)} {_fmt(y)} {_fmt(w)} {_fmt(h)} re {_paint_op(stroke, fill)}\n"


def _draw_rounded_rect(x: float, y: float, w: float, h: float, r: float, stroke: bool = True, fill: bool = False) -> str:
    r = max(0.0, min(r, w / 2, h / 2))
    k = r * _KAPPA
    x1, y1, x2, y2 = x, y, x + w, y + h
    path = [
        f"{_fmt(x1 + r)} {_fmt(y1)} m",
        f"{_fmt(x2 - r)} {_fmt(y1)} l",
        f"{_fmt(x2 - r + k)} {_fmt(y1)} {_fmt(x2)} {_fmt(y1 + r - k)} {_fmt(x2)} {_fmt(y1 + r)} c",
        f"{_fmt(x2)} {_fmt(y2 - r)} l",
        f"{_fmt(x2)} {_fmt(y2 - r + k)} {_fmt(x2 - r + k)} {_fmt(y2)} {_fmt(x2 - r)} {_fmt(y2)} c",
        f"{_fmt(x1 + r)} {_fmt(y2)} l",
        f"{_fmt(x1 + r - k)} {_fmt(y2)} {_fmt(x1)} {_fmt(y2 - r + k)} {_fmt(x1)} {_fmt(y2 - r)} c",
        f"{_fmt(x1)} {_fmt(y1 + r)} l",
        f"{_fmt(x1)} {_fmt(y1 + r - k)} {_fmt(x1 + r - k)} {_fmt(y1)} {_fmt(x1 + r)} {_fmt(y1)} c",
        "h",
    ]
    return " ".join(path) + f" {_paint_op(stroke, fill)}\n"


def _draw_line(x1: float, y1: float, x2: float, y2: float) -> str:
    return f"{_fmt(x1)} {_fmt(y1)} m {_fmt(x2)} {_fmt(y2)} l S\n"


def _draw_image(name: str, x: float, y: float, w: float, h: float) -> str:
    return f"q {_fmt(w)} 0 0 {_fmt(h)} {_fmt(x)} {_fmt(y)} cm /{name} Do Q\n"

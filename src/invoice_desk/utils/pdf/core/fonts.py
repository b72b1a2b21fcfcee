"""
Built-in Helvetica metrics (Type1, WinAnsiEncoding) for measuring and wrapping text.
Widths are in 1/1000 em, taken from the standard Adobe AFM files.
"""

from __future__ import annotations

import unicodedata
from typing import List

REGULAR = "/F1"
BOLD = "/F2"

BASE_FONTS = {
    REGULAR: "Helvetica",
    BOLD: "Helvetica-Bold",
}

_ASCII = " !\"#$%&'()*+,-./0123456789:;<=>?@ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_`abcdefghijklmnopqrstuvwxyz{|}~"

_HELVETICA = [
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 278, 278, 584, 584, 584, 556,
    1015, 667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 278, 278, 278, 469, 556,
    333, 556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833, 556, 556,
    556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500, 334, 260, 334, 584,
]

_HELVETICA_BOLD = [
    278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 333, 333, 584, 584, 584, 611,
    975, 722, 722, 722, 722, 667, 611, 778, 722, 278, 556, 722, 611, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 333, 278, 333, 584, 556,
    333, 556, 611, 556, 611, 556, 333, 611, 611, 278, 278, 556, 278, 889, 611, 611,
    611, 611, 389, 556, 333, 611, 556, 778, 556, 556, 500, 389, 280, 389, 584,
]

# Non-ASCII WinAnsi glyphs used by the layout (bullets, dashes, currency signs).
_EXTRA = {
    "•": (350, 350),
    "—": (1000, 1000),
    "–": (556, 556),
    "€": (556, 556),
    "£": (556, 556),
    "¥": (556, 556),
    " ": (278, 278),
}

_WIDTHS = {
    REGULAR: dict(zip(_ASCII, _HELVETICA)),
    BOLD: dict(zip(_ASCII, _HELVETICA_BOLD)),
}

_DEFAULT_WIDTH = 556


def _char_width(ch: str, font: str) -> int:
    table = _WIDTHS.get(font, _WIDTHS[REGULAR])
    width = table.get(ch)
    if width is not None:
        return width
    extra = _EXTRA.get(ch)
    if extra is not None:
        return extra[1] if font == BOLD else extra[0]
    # Accented letters: measure the base glyph.
    base = unicodedata.normalize("NFKD", ch)[:1]
    return table.get(base, _DEFAULT_WIDTH)


def text_width(text: str, size: float, font: str = REGULAR) -> float:
    return sum(_char_width(ch, font) for ch in str(text)) * size / 1000.0


def _split_long_word(word: str, width: float, size: float, font: str) -> List[str]:
    pieces: List[str] = []
    current = ""
    for ch in word:
        if current and text_width(current + ch, size, font) > width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, width: float, size: float, font: str = REGULAR) -> List[str]:
    """
    Greedy word wrap against real glyph widths. Explicit newlines are kept;
    a word wider than the column is broken between characters.
    """
    lines: List[str] = []
    for paragraph in str(text).split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if text_width(candidate, size, font) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            if text_width(word, size, font) > width:
                *full, current = _split_long_word(word, width, size, font)
                lines.extend(full)
            else:
                current = word
        lines.append(current)
    return lines

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from invoice_desk.utils.pdf.core import drawing, fonts
from invoice_desk.utils.pdf.core.images import PdfImage
from invoice_desk.utils.pdf.core.layout_common import CONTENT_BOTTOM, CONTINUATION_TOP, PAGE_H, PAGE_W

RGB = tuple[float, float, float]


class PdfCanvas:
    """
    Collects content streams page by page using top-down coordinates
    (y grows downwards, like the layout constants).

    `on_page(canvas, page_number)` runs whenever a page is opened, with the
    running page count at that moment; the footer is drawn from there.
    """

    def __init__(
        self,
        page_size: tuple[float, float] = (PAGE_W, PAGE_H),
        on_page: Optional[Callable[["PdfCanvas", int], None]] = None,
    ):
        self.width, self.height = page_size
        self._pages: List[List[str]] = []
        self._images: dict[str, PdfImage] = {}
        self._on_page = on_page
        self.add_page()

    # --- pages ---
    @property
    def page_count(self) -> int:
        return len(self._pages)

    def add_page(self) -> int:
        self._pages.append([])
        if self._on_page:
            self._on_page(self, self.page_count)
        return self.page_count

    def ensure_space(self, y: float, needed: float, bottom: float = CONTENT_BOTTOM) -> float:
        """Return `y` if `needed` points fit above `bottom`, else open a page and return its top."""
        if y + needed <= bottom:
            return y
        self.add_page()
        return CONTINUATION_TOP

    def content_streams(self) -> List[str]:
        return ["".join(parts) for parts in self._pages]

    @property
    def images(self) -> dict[str, PdfImage]:
        return dict(self._images)

    def _emit(self, op: str) -> None:
        self._pages[-1].append(op)

    def _py(self, y: float) -> float:
        return self.height - y

    # --- state ---
    def set_fill(self, rgb: RGB) -> None:
        self._emit(drawing._set_fill(rgb))

    def set_stroke(self, rgb: RGB) -> None:
        self._emit(drawing._set_stroke(rgb))

    def set_line_width(self, width: float) -> None:
        self._emit(drawing._set_line_width(width))

    # --- shapes ---
    def rect(self, x: float, y: float, w: float, h: float, stroke: bool = True, fill: bool = False) -> None:
        self._emit(drawing._draw_rect(x, self._py(y + h), w, h, stroke=stroke, fill=fill))

    def rounded_rect(self, x: float, y: float, w: float, h: float, r: float, stroke: bool = True, fill: bool = False) -> None:
        self._emit(drawing._draw_rounded_rect(x, self._py(y + h), w, h, r, stroke=stroke, fill=fill))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._emit(drawing._draw_line(x1, self._py(y1), x2, self._py(y2)))

    # --- text ---
    def text(
        self,
        text: str,
        x: float,
        y: float,
        size: float = 10,
        bold: bool = False,
        align: str = "left",
        color: RGB | None = None,
    ) -> None:
        """Draw one line with its baseline at `y`; `align` is left, right or center around `x`."""
        font = fonts.BOLD if bold else fonts.REGULAR
        width = fonts.text_width(text, size, font)
        if align == "right":
            x -= width
        elif align == "center":
            x -= width / 2
        if color is not None:
            self.set_fill(color)
        self._emit(drawing._draw_text(text, x, self._py(y), font, size))

    def text_lines(self, lines: Iterable[str], x: float, y: float, size: float = 10, leading: float = 13, bold: bool = False) -> float:
        """Draw lines downwards from baseline `y`; returns the baseline after the last line."""
        for line in lines:
            self.text(line, x, y, size=size, bold=bold)
            y += leading
        return y

    # --- images ---
    def image(self, img: PdfImage, x: float, y: float, w: float, h: float) -> None:
        name = f"Im{len(self._images) + 1}"
        self._images[name] = img
        self._emit(drawing._draw_image(name, x, self._py(y + h), w, h))

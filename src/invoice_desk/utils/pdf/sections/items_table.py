from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from invoice_desk.core.calculations.totals_engine import line_total
from invoice_desk.core.models.line_item import LineItem
from invoice_desk.utils.formatting import format_money, format_qty
from invoice_desk.utils.pdf.core import fonts
from invoice_desk.utils.pdf.core.canvas import PdfCanvas
from invoice_desk.utils.pdf.core.layout_common import (
    TABLE_FONT_SIZE,
    TABLE_ITEM_SHARE,
    TABLE_LEADING,
    TABLE_LINE_WIDTH,
    TABLE_NUMERIC_WIDTHS,
    TABLE_PADDING,
    color,
)

HEADERS = ("Item", "Description", "Qty", "Price", "Tax", "Total")
# Qty, Price, Tax and Total are right-aligned
RIGHT_ALIGNED = (False, False, True, True, True, True)

# Distance from the top of a text line to its baseline at TABLE_FONT_SIZE
_ASCENT = TABLE_FONT_SIZE * 0.8


@dataclass(frozen=True)
class TableRow:
    cells: List[List[str]]

    @property
    def line_count(self) -> int:
        return max(1, *(len(cell) for cell in self.cells))

    @property
    def height(self) -> float:
        return row_height(self.line_count)


def row_height(line_count: int) -> float:
    return 2 * TABLE_PADDING + TABLE_FONT_SIZE + (line_count - 1) * TABLE_LEADING


def column_widths(table_w: float) -> List[float]:
    flexible = max(0.0, table_w - sum(TABLE_NUMERIC_WIDTHS))
    item_w = flexible * TABLE_ITEM_SHARE
    return [item_w, flexible - item_w, *(float(w) for w in TABLE_NUMERIC_WIDTHS)]


def item_cells(item: LineItem, currency: str) -> List[str]:
    return [
        item.description_primary,
        item.description_secondary,
        format_qty(item.quantity),
        format_money(item.unit_price, currency),
        f"{format_qty(item.tax_percent)}%",
        format_money(line_total(item), currency),
    ]


def layout_rows(rows: Iterable[Sequence[str]], widths: Sequence[float], bold: bool = False) -> List[TableRow]:
    font = fonts.BOLD if bold else fonts.REGULAR
    laid_out: List[TableRow] = []
    for row in rows:
        cells = []
        for text, width in zip(row, widths):
            inner = max(1.0, width - 2 * TABLE_PADDING)
            cells.append(fonts.wrap_text(text, inner, TABLE_FONT_SIZE, font) if text else [])
        laid_out.append(TableRow(cells=cells))
    return laid_out


def _draw_row(canvas: PdfCanvas, row: TableRow, x: float, y: float, widths: Sequence[float], bold: bool = False) -> None:
    baseline = y + TABLE_PADDING + _ASCENT
    cell_x = x
    for lines, width, right in zip(row.cells, widths, RIGHT_ALIGNED):
        line_y = baseline
        for line in lines:
            if right:
                canvas.text(line, cell_x + width - TABLE_PADDING, line_y, size=TABLE_FONT_SIZE, bold=bold, align="right")
            else:
                canvas.text(line, cell_x + TABLE_PADDING, line_y, size=TABLE_FONT_SIZE, bold=bold)
            line_y += TABLE_LEADING
        cell_x += width


def _draw_grid(canvas: PdfCanvas, x: float, y: float, height: float, widths: Sequence[float]) -> None:
    canvas.set_stroke(color("grid"))
    canvas.set_line_width(TABLE_LINE_WIDTH)
    cell_x = x
    for width in widths:
        canvas.rect(cell_x, y, width, height, stroke=True, fill=False)
        cell_x += width


def _draw_head(canvas: PdfCanvas, head: TableRow, x: float, y: float, widths: Sequence[float]) -> float:
    canvas.set_fill(color("table_head"))
    canvas.rect(x, y, sum(widths), head.height, stroke=False, fill=True)
    _draw_grid(canvas, x, y, head.height, widths)
    canvas.set_fill(color("white"))
    _draw_row(canvas, head, x, y, widths, bold=True)
    canvas.set_fill(color("black"))
    return y + head.height


def render_items_table(
    canvas: PdfCanvas,
    items: Iterable[LineItem],
    currency: str,
    x: float,
    y: float,
    table_w: float,
) -> float:
    """
    Draw the line-item table starting at `y` (top edge).
    Rows that do not fit go to a new page, where the header is drawn again.
    Returns the y of the table's bottom edge on the last page used.
    """
    widths = column_widths(table_w)
    head = layout_rows([HEADERS], widths, bold=True)[0]
    body = layout_rows((item_cells(item, currency) for item in items), widths)

    y = canvas.ensure_space(y, head.height + (body[0].height if body else 0))
    y = _draw_head(canvas, head, x, y, widths)

    for idx, row in enumerate(body):
        page = canvas.page_count
        top = canvas.ensure_space(y, row.height)
        if canvas.page_count != page:
            y = _draw_head(canvas, head, x, top, widths)
        if idx % 2 == 1:
            canvas.set_fill(color("row_alt"))
            canvas.rect(x, y, table_w, row.height, stroke=False, fill=True)
            canvas.set_fill(color("black"))
        _draw_grid(canvas, x, y, row.height, widths)
        _draw_row(canvas, row, x, y, widths)
        y += row.height
    return y

import tkinter as tk
from tkinter import ttk
from typing import Callable, Iterable, List

from invoice_desk.core.models.invoice import InvoiceListRow, InvoiceStatus
from invoice_desk.utils.formatting import format_date, format_money

# column id -> (heading, width, anchor, sort key or None)
COLUMNS = {
    "number": ("Number", 110, "w", "number"),
    "client": ("Client", 240, "w", None),
    "issue_date": ("Issued", 100, "center", "issue_date"),
    "due_date": ("Due", 100, "center", "due_date"),
    "status": ("Status", 80, "center", None),
    "total": ("Total", 120, "e", None),
}


class InvoiceTable(ttk.Frame):
    """
    Invoice list; clicking a sortable heading asks for a re-query,
    selecting a row reports its invoice id.
    """

    def __init__(
        self,
        master: tk.Misc,
        on_select: Callable[[str | None], None],
        on_sort: Callable[[str], None],
        on_open: Callable[[str], None] | None = None,
    ):
        super().__init__(master, padding=8)
        self._on_select = on_select
        self._on_open = on_open
        self._rows: List[InvoiceListRow] = []

        tree = ttk.Treeview(self, columns=tuple(COLUMNS), show="headings", selectmode="browse", height=16)
        for col, (heading, width, anchor, sort_key) in COLUMNS.items():
            if sort_key:
                tree.heading(col, text=heading, command=lambda key=sort_key: on_sort(key))
            else:
                tree.heading(col, text=heading)
            tree.column(col, width=width, anchor=anchor)
        tree.tag_configure(InvoiceStatus.PAID.value, foreground="#16a34a")
        tree.tag_configure(InvoiceStatus.UNPAID.value, foreground="#dc2626")
        tree.pack(side="left", fill="both", expand=True)

        scrollbar = ttk.Scrollbar(self, orient="vertical", command=tree.yview)
        scrollbar.pack(side="right", fill="y")
        tree.configure(yscrollcommand=scrollbar.set)

        tree.bind("<<TreeviewSelect>>", self._handle_select)
        tree.bind("<Double-1>", self._handle_open)
        self._tree = tree

    def set_rows(self, rows: Iterable[InvoiceListRow]) -> None:
        selected = self.selected_id()
        self._rows = list(rows)
        self._tree.delete(*self._tree.get_children())
        for row in self._rows:
            self._tree.insert(
                "",
                tk.END,
                iid=row.id,
                values=(
                    row.number,
                    row.client_name or "—",
                    format_date(row.issue_date),
                    format_date(row.due_date),
                    row.status.label,
                    format_money(row.total, row.currency),
                ),
                tags=(row.status.value,),
            )
        if selected and self._tree.exists(selected):
            self._tree.selection_set(selected)

    def selected_id(self) -> str | None:
        selection = self._tree.selection()
        return selection[0] if selection else None

    def _handle_select(self, _event: tk.Event) -> None:
        self._on_select(self.selected_id())

    def _handle_open(self, event: tk.Event) -> None:
        row_id = self._tree.identify_row(event.y)
        if row_id and self._on_open:
            self._on_open(row_id)

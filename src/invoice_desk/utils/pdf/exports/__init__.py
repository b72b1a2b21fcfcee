from invoice_desk.utils.pdf.exports.invoice import (
    OutputAction,
    deliver_invoice,
    export_invoice,
    open_for_print,
    save_invoice_pdf,
)

__all__ = ["OutputAction", "deliver_invoice", "export_invoice", "open_for_print", "save_invoice_pdf"]

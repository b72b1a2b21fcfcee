from invoice_desk.core.calculations.totals_engine import Totals, compute_totals, items_gross_total, line_total

__all__ = ["Totals", "compute_totals", "items_gross_total", "line_total"]

from invoice_desk.core.models.customer import Customer
from invoice_desk.core.models.invoice import InvoiceDocument, InvoiceListRow, InvoiceStatus, PaymentMethod
from invoice_desk.core.models.line_item import NO_DISCOUNT, DiscountKind, DiscountPolicy, LineItem
from invoice_desk.core.models.party import Branding, PartyKind, PartySnapshot
from invoice_desk.core.models.preferences import Preferences

__all__ = [
    "Branding",
    "Customer",
    "DiscountKind",
    "DiscountPolicy",
    "InvoiceDocument",
    "InvoiceListRow",
    "InvoiceStatus",
    "LineItem",
    "NO_DISCOUNT",
    "PartyKind",
    "PartySnapshot",
    "PaymentMethod",
    "Preferences",
]

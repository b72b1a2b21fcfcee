from invoice_desk.core.services.customers import CustomerRepository
from invoice_desk.core.services.invoices import InvoiceDraft, InvoiceRepository
from invoice_desk.core.services.settings import SettingsRepository
from invoice_desk.core.services.storage import JsonStore

__all__ = ["CustomerRepository", "InvoiceDraft", "InvoiceRepository", "JsonStore", "SettingsRepository"]

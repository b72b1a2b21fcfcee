"""Exception classes for invoice-desk"""

from __future__ import annotations

from typing import Any, Dict, Optional


class InvoiceDeskError(Exception):
    """
    Base exception for invoice-desk errors.

    Carries a short machine-readable code and optional details so the UI layer
    can decide what to show without parsing messages.
    """

    default_code = "ERR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class InvoiceNotFoundError(InvoiceDeskError):
    """Invoice id does not resolve (or no invoice data was given to render)."""

    default_code = "NF_INVOICE"

    def __init__(self, invoice_id: Optional[str] = None, message: Optional[str] = None) -> None:
        super().__init__(
            message or (f"Invoice not found: {invoice_id}" if invoice_id else "Invoice not found."),
            details={"invoice_id": invoice_id} if invoice_id else None,
        )
        self.invoice_id = invoice_id


class CustomerNotFoundError(InvoiceDeskError):
    default_code = "NF_CUSTOMER"

    def __init__(self, customer_id: str) -> None:
        super().__init__(f"Customer not found: {customer_id}", details={"customer_id": customer_id})
        self.customer_id = customer_id


class ValidationError(InvoiceDeskError):
    """
    Raised by the form layer and by payment updates.

    `field_errors` maps a field key (e.g. "email", "item_2") to a human message.
    """

    default_code = "VAL"

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message, details={"field_errors": dict(field_errors or {})})
        self.field_errors: Dict[str, str] = dict(field_errors or {})


class RenderError(InvoiceDeskError):
    default_code = "RENDER"

    def __init__(self, message: str = "Could not generate document", cause: Optional[BaseException] = None) -> None:
        super().__init__(message, cause=cause)


class StorageError(InvoiceDeskError):
    default_code = "STORE"

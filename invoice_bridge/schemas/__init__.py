"""Public schema exports."""

from .freshbooks import (
    Amount,
    Attachment,
    Callback,
    Invoice,
    InvoiceLine,
    InvoiceListFilter,
    WebhookEvent,
    WebhookEventData,
)
from .kforce import ProcessingResult, VendorProfile

__all__ = [
    "Amount",
    "Attachment",
    "Callback",
    "Invoice",
    "InvoiceLine",
    "InvoiceListFilter",
    "ProcessingResult",
    "VendorProfile",
    "WebhookEvent",
    "WebhookEventData",
]

"""Service layer exports."""

from .email import EmailNotifier
from .invoice_csv import InvoiceConversionError, generate_kforce_csv
from .invoice_processor import InvoiceProcessor
from .token_cipher import TokenCipherService
from .token_store import TokenNotAvailableError, TokenStore
from .webhook_verifier import verify_webhook_signature

__all__ = [
    "EmailNotifier",
    "InvoiceConversionError",
    "InvoiceProcessor",
    "TokenCipherService",
    "TokenNotAvailableError",
    "TokenStore",
    "generate_kforce_csv",
    "verify_webhook_signature",
]

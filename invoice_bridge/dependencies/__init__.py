"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_email_notifier,
    get_freshbooks_oauth_client,
    get_invoice_processor,
    get_kv_store,
    get_token_cipher_service,
    get_token_store,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_email_notifier",
    "get_freshbooks_oauth_client",
    "get_invoice_processor",
    "get_kv_store",
    "get_token_cipher_service",
    "get_token_store",
]

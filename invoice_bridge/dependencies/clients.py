"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Each provider is cached so one instance lives per process; tests swap them via
``app.dependency_overrides``.
"""

from functools import lru_cache

from invoice_bridge.clients import FreshBooksOAuthClient, SQLiteKVStore
from invoice_bridge.core.config import get_settings
from invoice_bridge.dependencies.config import vendor_profile_from_settings
from invoice_bridge.services import (
    EmailNotifier,
    InvoiceProcessor,
    TokenCipherService,
    TokenStore,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_freshbooks_oauth_client() -> FreshBooksOAuthClient:
    """Create the OAuth client; raises when the redirect URI is not HTTPS."""
    settings = _settings().freshbooks
    return FreshBooksOAuthClient(
        settings.client_id, settings.client_secret, settings.redirect_uri
    )


@lru_cache()
def get_kv_store() -> SQLiteKVStore:
    """Provide the durable credentials store."""
    return SQLiteKVStore(_settings().token_store_db_path)


@lru_cache()
def get_token_cipher_service() -> TokenCipherService | None:
    """Provide token encryption when a secret is configured."""
    secret = _settings().security.token_encryption_secret
    if not secret:
        return None
    return TokenCipherService(secret=secret)


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide the process-wide token store."""
    return TokenStore(get_kv_store(), token_cipher=get_token_cipher_service())


@lru_cache()
def get_email_notifier() -> EmailNotifier:
    settings = _settings().email
    return EmailNotifier(recipient=settings.client_email, sender=settings.sender_email)


def get_invoice_processor() -> InvoiceProcessor:
    """Build the invoice processor from vendor and Kforce settings."""
    settings = _settings()
    return InvoiceProcessor(
        vendor=vendor_profile_from_settings(settings),
        notifier=get_email_notifier(),
        customer_id=settings.kforce.customer_id,
    )


__all__ = [
    "get_email_notifier",
    "get_freshbooks_oauth_client",
    "get_invoice_processor",
    "get_kv_store",
    "get_token_cipher_service",
    "get_token_store",
]

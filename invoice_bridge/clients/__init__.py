"""Expose constructed client wrappers."""

from .freshbooks import (
    FailureKind,
    FreshBooksApiError,
    FreshBooksAuthError,
    FreshBooksClient,
    FreshBooksError,
    FreshBooksRateLimitError,
)
from .freshbooks_auth import FreshBooksOAuthClient, OAuthTokenExchangeError, RedirectURIError
from .kv_store import SQLiteKVStore

__all__ = [
    "FailureKind",
    "FreshBooksApiError",
    "FreshBooksAuthError",
    "FreshBooksClient",
    "FreshBooksError",
    "FreshBooksOAuthClient",
    "FreshBooksRateLimitError",
    "OAuthTokenExchangeError",
    "RedirectURIError",
    "SQLiteKVStore",
]

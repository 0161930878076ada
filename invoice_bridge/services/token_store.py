"""
Single-slot cache of the FreshBooks token pair.

The pair is loaded from the credentials store at most once per instance and
kept in memory afterwards. Expired access tokens are not refreshed here; they
surface as ``FreshBooksAuthError`` from the API and refreshing is an explicit
call to ``refresh_tokens``.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Optional, TYPE_CHECKING

from pydantic import ValidationError

from invoice_bridge.clients.freshbooks import FreshBooksClient
from invoice_bridge.models.oauth import TokenPair
from invoice_bridge.services.token_cipher import TokenCipherService

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from invoice_bridge.clients.freshbooks_auth import FreshBooksOAuthClient
    from invoice_bridge.clients.kv_store import SQLiteKVStore

logger = logging.getLogger(__name__)

TOKENS_KEY = "oauth_tokens"

ClientFactory = Callable[[str, str], FreshBooksClient]


class TokenNotAvailableError(Exception):
    """Raised when no usable token pair has been stored yet."""


class TokenStore:
    """Owns the account's ``TokenPair`` and hands out authenticated clients."""

    def __init__(
        self,
        kv_store: "SQLiteKVStore",
        *,
        token_cipher: Optional[TokenCipherService] = None,
        client_factory: ClientFactory = FreshBooksClient,
    ) -> None:
        self._kv = kv_store
        self._cipher = token_cipher
        self._client_factory = client_factory
        self._tokens: Optional[TokenPair] = None

    def _load(self) -> TokenPair:
        stored = self._kv.get(TOKENS_KEY)
        if not stored:
            raise TokenNotAvailableError("No tokens available")
        try:
            serialized = self._cipher.decrypt(stored) if self._cipher else stored
            return TokenPair.model_validate(json.loads(serialized))
        except (ValueError, ValidationError) as exc:
            logger.error("Stored FreshBooks tokens could not be parsed: %s", exc)
            raise TokenNotAvailableError("No tokens available") from exc

    def current_tokens(self) -> TokenPair:
        """Return the cached pair, loading it from storage on first use."""
        if self._tokens is None:
            self._tokens = self._load()
        return self._tokens

    async def get_client(self, account_id: str) -> FreshBooksClient:
        tokens = self.current_tokens()
        if tokens.is_expired():
            logger.warning("Using an expired FreshBooks access token; refresh required.")
        return self._client_factory(tokens.access_token, account_id)

    async def update_tokens(self, tokens: TokenPair) -> None:
        self._tokens = tokens
        serialized = tokens.model_dump_json()
        if self._cipher:
            serialized = self._cipher.encrypt(serialized)
        self._kv.put(TOKENS_KEY, serialized)

    async def clear_tokens(self) -> None:
        self._tokens = None
        self._kv.delete(TOKENS_KEY)

    async def refresh_tokens(self, oauth_client: "FreshBooksOAuthClient") -> TokenPair:
        """Exchange the stored refresh token for a new pair and persist it."""
        current = self.current_tokens()
        refreshed = await oauth_client.refresh_access_token(current.refresh_token)
        await self.update_tokens(refreshed)
        logger.info("FreshBooks tokens refreshed; expires at %s", refreshed.expires_at)
        return refreshed


__all__ = ["TOKENS_KEY", "TokenNotAvailableError", "TokenStore"]

"""Symmetric encryption for the persisted token value."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

_ENCRYPTED_PREFIX = "fernet:"


class TokenCipherService:
    """Wrap serialized tokens in a Fernet envelope derived from a shared secret."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())
        self._fernet = Fernet(key)

    @staticmethod
    def is_encrypted(value: str) -> bool:
        return value.startswith(_ENCRYPTED_PREFIX)

    def encrypt(self, plaintext: str) -> str:
        token = self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")
        return f"{_ENCRYPTED_PREFIX}{token}"

    def decrypt(self, stored: str) -> str:
        """Return the plaintext; values written before encryption pass through."""
        if not self.is_encrypted(stored):
            return stored
        try:
            plaintext = self._fernet.decrypt(stored[len(_ENCRYPTED_PREFIX):].encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError("Failed to decrypt stored tokens; wrong secret?") from exc
        return plaintext.decode("utf-8")


__all__ = ["TokenCipherService"]

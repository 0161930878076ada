"""Signature verification for FreshBooks webhook deliveries."""

from __future__ import annotations

import base64
import hmac
import logging
from hashlib import sha256
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-FreshBooks-Hmac-SHA256"


def compute_webhook_signature(secret: str, body: bytes) -> str:
    """Return base64(HMAC-SHA256(secret, body))."""
    digest = hmac.new(secret.encode("utf-8"), body, sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_webhook_signature(
    headers: Mapping[str, str], body: bytes, secret: Optional[str]
) -> bool:
    """
    Check the signature header against the raw request body.

    ``body`` must be the bytes exactly as received; re-serialized JSON will not
    match. Never raises: every failure is logged and reported as ``False``.
    """
    try:
        signature = headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.error("No signature found in webhook request")
            return False
        if not secret:
            logger.error("No webhook secret configured")
            return False
        expected = compute_webhook_signature(secret, body)
        return hmac.compare_digest(signature.encode("utf-8"), expected.encode("ascii"))
    except Exception:  # pylint: disable=broad-except
        logger.exception("Error verifying webhook signature")
        return False


__all__ = ["SIGNATURE_HEADER", "compute_webhook_signature", "verify_webhook_signature"]

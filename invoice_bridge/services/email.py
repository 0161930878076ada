"""Delivery of the generated CSV to the client (logging stub)."""

from __future__ import annotations

import logging
from typing import Optional

from invoice_bridge.schemas import Invoice

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Records the email that would carry the CSV; no mail provider is wired."""

    def __init__(self, *, recipient: Optional[str], sender: Optional[str] = None) -> None:
        self._recipient = recipient
        self._sender = sender

    async def send_invoice_csv(self, invoice: Invoice, *, filename: str, content: bytes) -> None:
        logger.info(
            "Would send email to %s with attachment %s (%d bytes) for invoice %s",
            self._recipient,
            filename,
            len(content),
            invoice.id,
        )


__all__ = ["EmailNotifier"]

"""
Invoice conversion pipeline triggered by ``invoice.create`` webhooks.
"""

from __future__ import annotations

import logging
from typing import Optional

from invoice_bridge.clients.freshbooks import FreshBooksClient
from invoice_bridge.schemas import ProcessingResult, VendorProfile
from invoice_bridge.services.email import EmailNotifier
from invoice_bridge.services.invoice_csv import generate_kforce_csv

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"


class InvoiceProcessor:
    """Fetch an invoice, convert it to Kforce CSV, attach it and email it."""

    def __init__(
        self,
        *,
        vendor: VendorProfile,
        notifier: EmailNotifier,
        customer_id: Optional[str] = None,
    ) -> None:
        self._vendor = vendor
        self._notifier = notifier
        self._customer_id = customer_id

    async def process(self, invoice_id: str, client: FreshBooksClient) -> ProcessingResult:
        """Run the pipeline; failures are reported in the result, not raised."""
        try:
            invoice = await client.get_invoice(invoice_id)

            if not self._customer_id or invoice.customerid != self._customer_id:
                if not self._customer_id:
                    logger.warning(
                        "KFORCE_CUSTOMER_ID is not configured; skipping invoice %s", invoice_id
                    )
                else:
                    logger.info(
                        "Skipping invoice %s for customer %s", invoice_id, invoice.customerid
                    )
                return ProcessingResult(
                    status="ignored",
                    invoice_id=invoice_id,
                    message="Not for Kforce client",
                )

            filename = f"kforce-invoice-{invoice_id}.csv"
            content = generate_kforce_csv(invoice, self._vendor).encode("utf-8")

            attachment = await client.upload_attachment(
                filename=filename, content=content, media_type=CSV_MEDIA_TYPE
            )
            await client.update_invoice(
                invoice_id,
                {
                    "attachments": [
                        {"jwt": attachment.jwt, "media_type": attachment.media_type}
                    ]
                },
            )

            await self._notifier.send_invoice_csv(invoice, filename=filename, content=content)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Error processing invoice %s", invoice_id)
            return ProcessingResult(status="error", invoice_id=invoice_id, message=str(exc))

        logger.info("Invoice %s converted and attached as %s", invoice_id, filename)
        return ProcessingResult(
            status="processed", invoice_id=invoice_id, attachment=attachment
        )


__all__ = ["CSV_MEDIA_TYPE", "InvoiceProcessor"]

"""Models describing the Kforce CSV export and its processing outcome."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from invoice_bridge.schemas.freshbooks import Attachment


class VendorProfile(BaseModel):
    """Static vendor and consultant identity injected into each CSV row."""

    vendor_id: str
    vendor_name: str
    address: str
    city: str
    state: str
    zip: str
    consultant_id: str
    consultant_name: str
    contact_name: str
    phone: str
    email: str


class ProcessingResult(BaseModel):
    """Outcome of converting a single invoice."""

    status: Literal["processed", "ignored", "error"]
    invoice_id: str
    message: Optional[str] = Field(
        None, description="Reason an invoice was skipped or failed."
    )
    attachment: Optional[Attachment] = None


__all__ = ["ProcessingResult", "VendorProfile"]

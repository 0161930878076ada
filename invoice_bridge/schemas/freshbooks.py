"""
Pydantic models mirroring the FreshBooks accounting and events JSON payloads.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _coerce_money(value: Any) -> Any:
    """FreshBooks sends money either as a number or as ``{"amount", "code"}``."""
    if isinstance(value, dict):
        value = value.get("amount")
    if value is None or value == "":
        return None
    if isinstance(value, float):
        return Decimal(str(value))
    return value


class Amount(BaseModel):
    """Money value with its ISO currency code."""

    amount: Decimal
    code: str = "USD"


class InvoiceLine(BaseModel):
    """A single billable line on an invoice."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    description: Optional[str] = None
    quantity: Decimal = Decimal("0")
    rate: Optional[Decimal] = None
    amount: Decimal = Decimal("0")
    type: Optional[int] = None

    @field_validator("rate", "amount", "quantity", mode="before")
    @classmethod
    def _normalize_money(cls, value: Any) -> Any:
        coerced = _coerce_money(value)
        return Decimal("0") if coerced is None else coerced


class Attachment(BaseModel):
    """Attachment reference as returned by the uploads API."""

    model_config = ConfigDict(extra="allow")

    jwt: str
    media_type: str
    id: Optional[int | str] = None
    name: Optional[str] = None


class Invoice(BaseModel):
    """Upstream invoice record; unknown fields are preserved untouched."""

    model_config = ConfigDict(extra="allow")

    id: str
    invoiceid: Optional[str] = None
    invoice_number: Optional[str] = None
    customerid: Optional[str] = None
    create_date: date
    due_date: Optional[date] = None
    amount: Optional[Amount] = None
    total_amount: Optional[Decimal] = None
    outstanding: Optional[Amount] = None
    status: Optional[int] = None
    v3_status: Optional[str] = None
    payment_status: Optional[str] = None
    currency_code: Optional[str] = None
    lines: List[InvoiceLine] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)

    @field_validator("id", "invoiceid", "customerid", mode="before")
    @classmethod
    def _stringify_identifiers(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("create_date", "due_date", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    @field_validator("total_amount", mode="before")
    @classmethod
    def _normalize_total(cls, value: Any) -> Any:
        return _coerce_money(value)

    @field_validator("attachments", mode="before")
    @classmethod
    def _default_attachments(cls, value: Any) -> Any:
        return value or []

    @model_validator(mode="after")
    def _fallback_total(self) -> "Invoice":
        if self.total_amount is None and self.amount is not None:
            self.total_amount = self.amount.amount
        return self


class Callback(BaseModel):
    """Webhook subscription registered with the events API."""

    model_config = ConfigDict(extra="allow")

    callbackid: Optional[int | str] = None
    event: Optional[str] = None
    uri: Optional[str] = None
    verified: Optional[bool] = None


class WebhookEventData(BaseModel):
    """Identifiers carried by a webhook event."""

    model_config = ConfigDict(extra="allow")

    invoice_id: str
    account_id: Optional[str] = None
    business_id: Optional[str] = None

    @field_validator("invoice_id", "account_id", "business_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class WebhookEvent(BaseModel):
    """Envelope FreshBooks posts to the webhook endpoint."""

    event_type: str
    event_source: Optional[str] = None
    event_time: Optional[str] = None
    data: WebhookEventData


class InvoiceListFilter(BaseModel):
    """Query options accepted by ``FreshBooksClient.list_invoices``."""

    page: Optional[int] = Field(None, ge=1)
    per_page: Optional[int] = Field(None, ge=1, le=100)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    status: Optional[Literal["draft", "sent", "viewed", "paid", "late", "partial"]] = None
    customer_id: Optional[str] = None

    def to_query_params(self) -> Dict[str, str]:
        """Translate the filter into FreshBooks ``search[...]`` parameters."""
        params: Dict[str, str] = {}
        if self.page is not None:
            params["page"] = str(self.page)
        if self.per_page is not None:
            params["per_page"] = str(self.per_page)
        if self.date_from is not None:
            params["search[date_min]"] = self.date_from.isoformat()
        if self.date_to is not None:
            params["search[date_max]"] = self.date_to.isoformat()
        if self.status is not None:
            params["search[v3_status]"] = self.status
        if self.customer_id is not None:
            params["search[customerid]"] = self.customer_id
        return params


__all__ = [
    "Amount",
    "Attachment",
    "Callback",
    "Invoice",
    "InvoiceLine",
    "InvoiceListFilter",
    "WebhookEvent",
    "WebhookEventData",
]

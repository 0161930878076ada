"""
FreshBooks REST client.

Thin wrapper over the accounting, uploads and events endpoints. Every call is a
single authenticated request; failures are classified into typed exceptions and
retrying is left to the caller.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, List, Optional

import httpx

from invoice_bridge.schemas import Attachment, Callback, Invoice, InvoiceListFilter

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.freshbooks.com"
API_VERSION = "2023-11-01"
DEFAULT_RETRY_AFTER_SECONDS = 60


class FailureKind(str, enum.Enum):
    """Classification of a failed FreshBooks call."""

    RATE_LIMIT = "rate_limit"
    AUTH = "auth"
    API = "api"
    GENERIC = "generic"


class FreshBooksError(Exception):
    """Base error for FreshBooks calls (network, parse or envelope problems)."""

    kind = FailureKind.GENERIC


class FreshBooksApiError(FreshBooksError):
    """Raised for any non-2xx response that is not a 401 or 429."""

    kind = FailureKind.API

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class FreshBooksAuthError(FreshBooksError):
    """Raised when FreshBooks rejects the bearer token."""

    kind = FailureKind.AUTH


class FreshBooksRateLimitError(FreshBooksError):
    """Raised on HTTP 429; ``retry_after`` is in seconds."""

    kind = FailureKind.RATE_LIMIT

    def __init__(self, retry_after: int) -> None:
        super().__init__(f"Rate limit exceeded. Retry after {retry_after} seconds")
        self.retry_after = retry_after


def _parse_retry_after(raw: Optional[str]) -> int:
    try:
        return int(raw) if raw is not None else DEFAULT_RETRY_AFTER_SECONDS
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


class FreshBooksClient:
    """Authenticated client bound to one access token and account."""

    def __init__(
        self,
        access_token: str,
        account_id: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._access_token = access_token
        self._account_id = account_id
        self._transport = transport
        self._timeout = timeout

    @property
    def account_id(self) -> str:
        return self._account_id

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Api-Version": API_VERSION,
        }
        if files is None:
            headers["Content-Type"] = "application/json"

        try:
            async with httpx.AsyncClient(
                base_url=API_BASE_URL, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method, path, params=params, json=json, files=files, headers=headers
                )
        except httpx.HTTPError as exc:
            raise FreshBooksError(f"FreshBooks request failed: {exc}") from exc

        if response.status_code == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            logger.warning("FreshBooks rate limit hit on %s %s", method, path)
            raise FreshBooksRateLimitError(retry_after)

        if response.status_code == 401:
            raise FreshBooksAuthError("Authentication failed")

        if not response.is_success:
            raise FreshBooksApiError(
                f"FreshBooks API error: {response.status_code}", response.status_code
            )

        try:
            return response.json()
        except ValueError as exc:
            raise FreshBooksError("FreshBooks returned a non-JSON response") from exc

    @staticmethod
    def _unwrap(payload: Dict[str, Any], key: str) -> Any:
        try:
            return payload["response"]["result"][key]
        except (KeyError, TypeError) as exc:
            raise FreshBooksError(
                f"Unexpected FreshBooks response: missing result.{key}"
            ) from exc

    def _invoices_path(self, invoice_id: str | None = None) -> str:
        path = f"/accounting/account/{self._account_id}/invoices/invoices"
        return f"{path}/{invoice_id}" if invoice_id else path

    def _callbacks_path(self, callback_id: str | None = None) -> str:
        path = f"/events/account/{self._account_id}/events/callbacks"
        return f"{path}/{callback_id}" if callback_id else path

    async def list_invoices(
        self, invoice_filter: InvoiceListFilter | None = None
    ) -> List[Invoice]:
        params = invoice_filter.to_query_params() if invoice_filter else None
        payload = await self._request("GET", self._invoices_path(), params=params)
        return [Invoice.model_validate(item) for item in self._unwrap(payload, "invoices")]

    async def get_invoice(self, invoice_id: str) -> Invoice:
        payload = await self._request("GET", self._invoices_path(invoice_id))
        return Invoice.model_validate(self._unwrap(payload, "invoice"))

    async def create_invoice(self, data: Dict[str, Any]) -> Invoice:
        payload = await self._request("POST", self._invoices_path(), json={"invoice": data})
        return Invoice.model_validate(self._unwrap(payload, "invoice"))

    async def update_invoice(self, invoice_id: str, patch: Dict[str, Any]) -> Invoice:
        payload = await self._request(
            "PUT", self._invoices_path(invoice_id), json={"invoice": patch}
        )
        return Invoice.model_validate(self._unwrap(payload, "invoice"))

    async def upload_attachment(
        self, *, filename: str, content: bytes, media_type: str
    ) -> Attachment:
        """Upload a file; the uploads API answers outside the usual envelope."""
        payload = await self._request(
            "POST",
            f"/uploads/account/{self._account_id}/attachments",
            files={"content": (filename, content, media_type)},
        )
        attachment = payload.get("attachment") if isinstance(payload, dict) else None
        if not attachment:
            raise FreshBooksError("Unexpected FreshBooks response: missing attachment")
        return Attachment.model_validate(attachment)

    async def list_webhook_callbacks(self) -> List[Callback]:
        payload = await self._request("GET", self._callbacks_path())
        return [Callback.model_validate(item) for item in self._unwrap(payload, "callbacks")]

    async def register_webhook_callback(self, url: str, event_name: str) -> Callback:
        payload = await self._request(
            "POST",
            self._callbacks_path(),
            json={"callback": {"event": event_name, "uri": url}},
        )
        return Callback.model_validate(self._unwrap(payload, "callback"))

    async def verify_webhook_callback(self, callback_id: str, verifier_code: str) -> Callback:
        payload = await self._request(
            "PUT",
            self._callbacks_path(callback_id),
            json={"callback": {"verifier": verifier_code}},
        )
        return Callback.model_validate(self._unwrap(payload, "callback"))

    async def resend_webhook_verification(self, callback_id: str) -> Callback:
        payload = await self._request(
            "PUT",
            self._callbacks_path(callback_id),
            json={"callback": {"resend": True}},
        )
        return Callback.model_validate(self._unwrap(payload, "callback"))


__all__ = [
    "API_BASE_URL",
    "API_VERSION",
    "FailureKind",
    "FreshBooksApiError",
    "FreshBooksAuthError",
    "FreshBooksClient",
    "FreshBooksError",
    "FreshBooksRateLimitError",
]

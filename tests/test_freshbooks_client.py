from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from invoice_bridge.clients.freshbooks import (
    FailureKind,
    FreshBooksApiError,
    FreshBooksAuthError,
    FreshBooksClient,
    FreshBooksError,
    FreshBooksRateLimitError,
)
from invoice_bridge.schemas import InvoiceListFilter

INVOICE = {
    "id": 1,
    "invoice_number": "INV-001",
    "customerid": 42,
    "create_date": "2024-01-10",
    "amount": {"amount": "750.00", "code": "USD"},
    "lines": [{"quantity": "10", "amount": {"amount": "500.00", "code": "USD"}}],
}


class RecordingTransport(httpx.MockTransport):
    def __init__(self, status_code: int = 200, payload=None, headers=None) -> None:
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status_code, json=payload, headers=headers)

        super().__init__(handler)


def _client(transport: httpx.MockTransport) -> FreshBooksClient:
    return FreshBooksClient("test-access-token", "test-account-id", transport=transport)


def _envelope(**result) -> dict:
    return {"response": {"result": result}}


@pytest.mark.asyncio
async def test_list_invoices_unwraps_envelope_and_sends_auth_headers() -> None:
    transport = RecordingTransport(
        payload=_envelope(invoices=[INVOICE, {**INVOICE, "id": 2, "invoice_number": "INV-002"}])
    )

    invoices = await _client(transport).list_invoices()

    assert [invoice.invoice_number for invoice in invoices] == ["INV-001", "INV-002"]
    request = transport.requests[0]
    assert str(request.url) == (
        "https://api.freshbooks.com/accounting/account/test-account-id/invoices/invoices"
    )
    assert request.headers["Authorization"] == "Bearer test-access-token"
    assert request.headers["Api-Version"] == "2023-11-01"
    assert request.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_list_invoices_translates_filter_to_search_params() -> None:
    transport = RecordingTransport(payload=_envelope(invoices=[]))

    await _client(transport).list_invoices(
        InvoiceListFilter(
            date_from=date(2024, 1, 1), date_to=date(2024, 1, 31), per_page=25, status="paid"
        )
    )

    params = transport.requests[0].url.params
    assert params["search[date_min]"] == "2024-01-01"
    assert params["search[date_max]"] == "2024-01-31"
    assert params["search[v3_status]"] == "paid"
    assert params["per_page"] == "25"


@pytest.mark.asyncio
async def test_get_invoice_normalizes_money_fields() -> None:
    transport = RecordingTransport(payload=_envelope(invoice=INVOICE))

    invoice = await _client(transport).get_invoice("1")

    assert transport.requests[0].url.path.endswith("/invoices/invoices/1")
    assert invoice.id == "1"
    assert invoice.customerid == "42"
    assert str(invoice.total_amount) == "750.00"
    assert str(invoice.lines[0].amount) == "500.00"


@pytest.mark.asyncio
async def test_create_and_update_wrap_body_in_invoice_key() -> None:
    transport = RecordingTransport(payload=_envelope(invoice=INVOICE))
    client = _client(transport)

    await client.create_invoice({"customerid": 42})
    await client.update_invoice("1", {"attachments": [{"jwt": "j", "media_type": "text/csv"}]})

    create_request, update_request = transport.requests
    assert create_request.method == "POST"
    assert json.loads(create_request.content) == {"invoice": {"customerid": 42}}
    assert update_request.method == "PUT"
    assert update_request.url.path.endswith("/invoices/invoices/1")
    assert json.loads(update_request.content)["invoice"]["attachments"][0]["jwt"] == "j"


@pytest.mark.asyncio
async def test_upload_attachment_sends_multipart_content() -> None:
    transport = RecordingTransport(
        payload={"attachment": {"jwt": "jwt-token", "media_type": "text/csv"}}
    )

    attachment = await _client(transport).upload_attachment(
        filename="kforce-invoice-1.csv", content=b"a,b\n1,2", media_type="text/csv"
    )

    request = transport.requests[0]
    assert request.url.path == "/uploads/account/test-account-id/attachments"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="content"; filename="kforce-invoice-1.csv"' in request.content
    assert attachment.jwt == "jwt-token"


@pytest.mark.asyncio
async def test_webhook_callback_operations() -> None:
    transport = RecordingTransport(
        payload=_envelope(callback={"callbackid": 827106, "event": "invoice.create"})
    )
    client = _client(transport)

    registered = await client.register_webhook_callback(
        "https://hooks.example.com/webhooks/ready", "invoice.create"
    )
    await client.verify_webhook_callback("827106", "verifier-code")
    await client.resend_webhook_verification("827106")

    register_request, verify_request, resend_request = transport.requests
    assert registered.callbackid == 827106
    assert register_request.url.path == "/events/account/test-account-id/events/callbacks"
    assert json.loads(register_request.content) == {
        "callback": {
            "event": "invoice.create",
            "uri": "https://hooks.example.com/webhooks/ready",
        }
    }
    assert verify_request.url.path.endswith("/events/callbacks/827106")
    assert json.loads(verify_request.content) == {"callback": {"verifier": "verifier-code"}}
    assert json.loads(resend_request.content) == {"callback": {"resend": True}}


@pytest.mark.asyncio
async def test_list_webhook_callbacks_unwraps_callbacks() -> None:
    transport = RecordingTransport(
        payload=_envelope(
            callbacks=[
                {"callbackid": 827106, "event": "invoice.create", "verified": True},
                {"callbackid": 827107, "event": "invoice.update", "verified": False},
            ]
        )
    )

    callbacks = await _client(transport).list_webhook_callbacks()

    assert [callback.callbackid for callback in callbacks] == [827106, 827107]
    assert callbacks[0].verified is True
    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/events/account/test-account-id/events/callbacks"


@pytest.mark.asyncio
async def test_rate_limit_carries_retry_after_header() -> None:
    transport = RecordingTransport(
        status_code=429, payload={"error": "rate_limited"}, headers={"Retry-After": "30"}
    )

    with pytest.raises(FreshBooksRateLimitError) as exc_info:
        await _client(transport).list_invoices()

    assert exc_info.value.retry_after == 30
    assert exc_info.value.kind is FailureKind.RATE_LIMIT


@pytest.mark.asyncio
async def test_rate_limit_defaults_to_sixty_seconds() -> None:
    transport = RecordingTransport(status_code=429, payload={})

    with pytest.raises(FreshBooksRateLimitError) as exc_info:
        await _client(transport).get_invoice("1")

    assert exc_info.value.retry_after == 60


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"error": "unauthorized"}, {}, None])
async def test_unauthorized_always_raises_auth_error(payload) -> None:
    transport = RecordingTransport(status_code=401, payload=payload)

    with pytest.raises(FreshBooksAuthError) as exc_info:
        await _client(transport).list_invoices()

    assert exc_info.value.kind is FailureKind.AUTH


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
async def test_other_failures_carry_status_code(status_code: int) -> None:
    transport = RecordingTransport(status_code=status_code, payload={})

    with pytest.raises(FreshBooksApiError) as exc_info:
        await _client(transport).get_invoice("1")

    assert exc_info.value.status_code == status_code
    assert exc_info.value.kind is FailureKind.API


@pytest.mark.asyncio
async def test_missing_envelope_key_is_a_generic_error() -> None:
    transport = RecordingTransport(payload={"response": {"errors": []}})

    with pytest.raises(FreshBooksError) as exc_info:
        await _client(transport).get_invoice("1")

    assert exc_info.value.kind is FailureKind.GENERIC


@pytest.mark.asyncio
async def test_network_failure_is_a_generic_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = FreshBooksClient("token", "acct", transport=httpx.MockTransport(handler))

    with pytest.raises(FreshBooksError) as exc_info:
        await client.list_invoices()

    assert exc_info.value.kind is FailureKind.GENERIC

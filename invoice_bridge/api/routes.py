"""
FastAPI routes for the FreshBooks to Kforce invoice bridge.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Annotated, Any
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError

from invoice_bridge.clients import FreshBooksOAuthClient
from invoice_bridge.core.config import AppSettings
from invoice_bridge.dependencies import (
    get_app_settings,
    get_freshbooks_oauth_client,
    get_invoice_processor,
    get_token_store,
)
from invoice_bridge.schemas import InvoiceListFilter, WebhookEvent
from invoice_bridge.services import InvoiceProcessor, TokenStore, verify_webhook_signature

router = APIRouter()
logger = logging.getLogger(__name__)

INVOICE_CREATE_EVENT = "invoice.create"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
LIST_WINDOW_DAYS = 30


def _error_json(message: str, status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"status": "error", "message": message}
    )


@router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    return "FreshBooks to Kforce Invoice Converter Webhook Service is running"


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/oauth/init")
async def start_oauth_flow(
    oauth_client: Annotated[FreshBooksOAuthClient, Depends(get_freshbooks_oauth_client)],
) -> RedirectResponse:
    """Send the browser to the FreshBooks consent screen."""
    return RedirectResponse(
        url=oauth_client.get_authorization_url(), status_code=HTTPStatus.FOUND
    )


@router.get("/oauth/callback", response_class=PlainTextResponse)
async def handle_oauth_callback(
    oauth_client: Annotated[FreshBooksOAuthClient, Depends(get_freshbooks_oauth_client)],
    token_store: Annotated[TokenStore, Depends(get_token_store)],
    code: str | None = Query(None, description="Authorization code from FreshBooks."),
) -> PlainTextResponse:
    """Exchange the authorization code and persist the resulting tokens."""
    if not code:
        return PlainTextResponse("No code provided", status_code=HTTPStatus.BAD_REQUEST)

    try:
        tokens = await oauth_client.exchange_code_for_token(code)
        await token_store.update_tokens(tokens)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Error in OAuth callback")
        return PlainTextResponse(
            f"Error: {exc}", status_code=HTTPStatus.INTERNAL_SERVER_ERROR
        )

    return PlainTextResponse("Successfully connected to FreshBooks!")


@router.post("/oauth/refresh", response_class=PlainTextResponse)
async def refresh_oauth_tokens(
    oauth_client: Annotated[FreshBooksOAuthClient, Depends(get_freshbooks_oauth_client)],
    token_store: Annotated[TokenStore, Depends(get_token_store)],
) -> PlainTextResponse:
    """Trade the stored refresh token for a fresh access token."""
    try:
        tokens = await token_store.refresh_tokens(oauth_client)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Error refreshing FreshBooks tokens")
        return PlainTextResponse(
            f"Error: {exc}", status_code=HTTPStatus.INTERNAL_SERVER_ERROR
        )
    return PlainTextResponse(f"Tokens refreshed; expires at {tokens.expires_at.isoformat()}")


@router.post("/oauth/revoke", response_class=PlainTextResponse)
async def revoke_oauth_tokens(
    token_store: Annotated[TokenStore, Depends(get_token_store)],
) -> PlainTextResponse:
    """Forget the stored tokens; a new OAuth handshake is needed afterwards."""
    await token_store.clear_tokens()
    return PlainTextResponse("FreshBooks tokens cleared")


async def _confirm_webhook_subscription(
    body: bytes, token_store: TokenStore, settings: AppSettings
) -> JSONResponse:
    form = parse_qs(body.decode("utf-8"))
    verifier = (form.get("verifier") or [None])[0]
    if not verifier:
        return _error_json("Missing verifier", HTTPStatus.BAD_REQUEST)

    callback_id = settings.freshbooks.webhook_callback_id
    if not callback_id:
        return _error_json("Webhook callback id is not configured")

    client = await token_store.get_client(settings.freshbooks.account_id)
    await client.verify_webhook_callback(callback_id, verifier)
    logger.info("Webhook callback %s verified", callback_id)
    return JSONResponse(
        content={
            "status": "success",
            "message": "Verification successful",
            "verifier": verifier,
        }
    )


@router.post("/webhooks/ready")
async def handle_webhook(
    request: Request,
    token_store: Annotated[TokenStore, Depends(get_token_store)],
    processor: Annotated[InvoiceProcessor, Depends(get_invoice_processor)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> JSONResponse:
    """Confirm webhook subscriptions and convert newly created invoices."""
    try:
        body = await request.body()

        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPE):
            return await _confirm_webhook_subscription(body, token_store, settings)

        if not verify_webhook_signature(
            request.headers, body, settings.freshbooks.webhook_secret
        ):
            logger.error("Invalid webhook signature")
            return _error_json("Invalid signature", HTTPStatus.UNAUTHORIZED)

        try:
            event = WebhookEvent.model_validate_json(body)
        except ValidationError as exc:
            raise ValueError(f"Malformed webhook payload: {exc.error_count()} error(s)") from exc

        if event.event_type != INVOICE_CREATE_EVENT:
            return JSONResponse(
                content={"status": "ignored", "reason": "Not an invoice.create event"}
            )

        invoice_id = event.data.invoice_id
        logger.info("Processing invoice.create webhook for invoice %s", invoice_id)

        client = await token_store.get_client(settings.freshbooks.account_id)
        result = await processor.process(invoice_id, client)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Webhook processing error")
        return _error_json(str(exc) or "Unknown error")

    return JSONResponse(
        content={"status": "success", "result": result.model_dump(mode="json")}
    )


@router.get("/webhooks/register", response_class=PlainTextResponse)
async def register_webhook(
    token_store: Annotated[TokenStore, Depends(get_token_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> PlainTextResponse:
    """Subscribe the service to FreshBooks ``invoice.create`` events."""
    try:
        if not settings.freshbooks.webhook_url:
            raise ValueError("FRESHBOOKS_WEBHOOK_URL is not configured")
        client = await token_store.get_client(settings.freshbooks.account_id)
        callback = await client.register_webhook_callback(
            f"{settings.freshbooks.webhook_url}/webhooks/ready", INVOICE_CREATE_EVENT
        )
    except Exception:  # pylint: disable=broad-except
        logger.exception("Error registering webhook")
        return PlainTextResponse(
            "Failed to register webhook", status_code=HTTPStatus.INTERNAL_SERVER_ERROR
        )

    logger.info("Webhook registered as callback %s", callback.callbackid)
    return PlainTextResponse("Webhook registered successfully")


@router.get("/webhooks/resend-code")
async def resend_webhook_code(
    token_store: Annotated[TokenStore, Depends(get_token_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> JSONResponse:
    """Ask FreshBooks to send the subscription verifier again."""
    try:
        callback_id = settings.freshbooks.webhook_callback_id
        if not callback_id:
            raise ValueError("FRESHBOOKS_WEBHOOK_CALLBACK_ID is not configured")
        client = await token_store.get_client(settings.freshbooks.account_id)
        callback = await client.resend_webhook_verification(callback_id)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Error resending verification code")
        return _error_json(str(exc) or "Unknown error")

    return JSONResponse(
        content={
            "status": "success",
            "message": "Verification code resent",
            "code": callback.model_dump(mode="json"),
        }
    )


@router.get("/list-invoices")
async def list_invoices(
    token_store: Annotated[TokenStore, Depends(get_token_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> JSONResponse:
    """Debug listing of invoices created during the last 30 days."""
    end_date = datetime.now(timezone.utc).date()
    start_date = end_date - timedelta(days=LIST_WINDOW_DAYS)
    try:
        client = await token_store.get_client(settings.freshbooks.account_id)
        invoices = await client.list_invoices(
            InvoiceListFilter(date_from=start_date, date_to=end_date, per_page=25)
        )
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Error fetching invoices")
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc) or "Unknown error occurred"},
        )

    payload: dict[str, Any] = {
        "success": True,
        "invoices": [invoice.model_dump(mode="json") for invoice in invoices],
        "dateRange": {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
        },
    }
    return JSONResponse(content=payload)


__all__ = ["router"]

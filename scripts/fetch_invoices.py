"""List recent FreshBooks invoices from the command line.

Uses the stored OAuth tokens and retries when FreshBooks rate-limits the call.

Example::

    python -m scripts.fetch_invoices --days 30 --status paid --per-page 25
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta, timezone

from invoice_bridge.clients import FreshBooksError
from invoice_bridge.core.config import get_settings
from invoice_bridge.core.logging import configure_logging
from invoice_bridge.dependencies import get_token_store
from invoice_bridge.schemas import InvoiceListFilter
from invoice_bridge.services import TokenNotAvailableError
from invoice_bridge.utils.http import RetryConfig, call_with_rate_limit_retry

EXIT_OK = 0
EXIT_NO_TOKENS = 2
EXIT_API_ERROR = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="List recent FreshBooks invoices.")
    parser.add_argument("--days", type=int, default=30, help="Trailing window in days.")
    parser.add_argument(
        "--status",
        choices=["draft", "sent", "viewed", "paid", "late", "partial"],
        default=None,
    )
    parser.add_argument("--per-page", type=int, default=25)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument(
        "--attempts", type=int, default=3, help="Attempts when rate limited."
    )
    return parser


def build_filter(args: argparse.Namespace, *, today=None) -> InvoiceListFilter:
    end_date = today or datetime.now(timezone.utc).date()
    return InvoiceListFilter(
        date_from=end_date - timedelta(days=args.days),
        date_to=end_date,
        status=args.status,
        per_page=args.per_page,
        page=args.page,
    )


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    invoice_filter = build_filter(args)
    try:
        client = await get_token_store().get_client(settings.freshbooks.account_id)
        invoices = await call_with_rate_limit_retry(
            lambda: client.list_invoices(invoice_filter),
            retry_config=RetryConfig(attempts=args.attempts),
        )
    except TokenNotAvailableError as exc:
        print(f"{exc}; complete /oauth/init first.", file=sys.stderr)
        return EXIT_NO_TOKENS
    except FreshBooksError as exc:
        print(f"FreshBooks error ({exc.kind.value}): {exc}", file=sys.stderr)
        return EXIT_API_ERROR

    print(
        f"Found {len(invoices)} invoices from {invoice_filter.date_from} "
        f"to {invoice_filter.date_to}"
    )
    for invoice in invoices:
        print(json.dumps(invoice.model_dump(mode="json")))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    return asyncio.run(_run(args))


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())

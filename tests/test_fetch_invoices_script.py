"""Tests for the invoice listing script."""

from __future__ import annotations

from datetime import date

import pytest

from invoice_bridge.clients.freshbooks import FreshBooksApiError
from scripts import fetch_invoices


def test_build_filter_covers_trailing_window() -> None:
    args = fetch_invoices._build_parser().parse_args(["--days", "7", "--status", "paid"])

    invoice_filter = fetch_invoices.build_filter(args, today=date(2024, 1, 10))

    assert invoice_filter.date_from == date(2024, 1, 3)
    assert invoice_filter.date_to == date(2024, 1, 10)
    assert invoice_filter.status == "paid"
    assert invoice_filter.per_page == 25


class _EmptyTokenStore:
    async def get_client(self, account_id: str):
        from invoice_bridge.services import TokenNotAvailableError

        raise TokenNotAvailableError("No tokens available")


class _FailingClient:
    async def list_invoices(self, invoice_filter):
        raise FreshBooksApiError("FreshBooks API error: 500", 500)


class _FailingTokenStore:
    async def get_client(self, account_id: str):
        return _FailingClient()


@pytest.mark.parametrize(
    ("store", "expected"),
    [
        (_EmptyTokenStore(), fetch_invoices.EXIT_NO_TOKENS),
        (_FailingTokenStore(), fetch_invoices.EXIT_API_ERROR),
    ],
)
def test_main_reports_failures(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], store, expected
) -> None:
    monkeypatch.setattr(fetch_invoices, "get_token_store", lambda: store)

    exit_code = fetch_invoices.main(["--attempts", "1"])

    assert exit_code == expected
    assert capsys.readouterr().err

"""
Kforce timesheet CSV generation.

One invoice becomes one data row: the invoice's week (Monday to Sunday), total
hours and blended hourly rate, plus the vendor's identity fields.
"""

from __future__ import annotations

import csv
import io
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Sequence

from invoice_bridge.schemas import Invoice, InvoiceLine, VendorProfile

CENTS = Decimal("0.01")

KFORCE_CSV_HEADER: Sequence[str] = (
    "Vendor ID",
    "Vendor Name",
    "Vendor Address 1",
    "Vendor City",
    "Vendor State",
    "Vendor Zip",
    "Invoice ID",
    "Consultant ID",
    "Consultant Name",
    "W/E Start Date",
    "W/E EndDate",
    "Hours",
    "Rate",
    "Total Due",
    "Vendor Contact Name",
    "Vendor Phone",
    "Vendor Email",
)


class InvoiceConversionError(ValueError):
    """Raised when an invoice cannot be expressed as a Kforce row."""


def week_start(day: date) -> date:
    """Monday on or before ``day``; Sundays belong to the preceding week."""
    return day - timedelta(days=day.weekday())


def week_end(day: date) -> date:
    return week_start(day) + timedelta(days=6)


def total_hours(lines: Iterable[InvoiceLine]) -> Decimal:
    return sum((line.quantity for line in lines), Decimal("0"))


def blended_rate(lines: Sequence[InvoiceLine]) -> Decimal:
    """Total line amount divided by total hours."""
    hours = total_hours(lines)
    if hours == 0:
        raise InvoiceConversionError("Invoice has no billable hours; rate is undefined.")
    amount = sum((line.amount for line in lines), Decimal("0"))
    return amount / hours


def format_kforce_date(day: date) -> str:
    """``M/D/YYYY`` without zero padding."""
    return f"{day.month}/{day.day}/{day.year}"


def _two_places(value: Decimal) -> str:
    """Half-up to cents; ties round away from zero."""
    return f"{value.quantize(CENTS, rounding=ROUND_HALF_UP)}"


def _render(rows: List[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def generate_kforce_csv(invoice: Invoice, vendor: VendorProfile) -> str:
    """Render the header and the single data row for ``invoice``."""
    if invoice.total_amount is None:
        raise InvoiceConversionError(f"Invoice {invoice.id} has no total amount.")

    hours = total_hours(invoice.lines)
    rate = blended_rate(invoice.lines)

    row = [
        vendor.vendor_id,
        vendor.vendor_name,
        vendor.address,
        vendor.city,
        vendor.state,
        vendor.zip,
        invoice.id,
        vendor.consultant_id,
        vendor.consultant_name,
        format_kforce_date(week_start(invoice.create_date)),
        format_kforce_date(week_end(invoice.create_date)),
        _two_places(hours),
        _two_places(rate),
        _two_places(invoice.total_amount),
        vendor.contact_name,
        vendor.phone,
        vendor.email,
    ]
    return _render([list(KFORCE_CSV_HEADER), row])


__all__ = [
    "InvoiceConversionError",
    "KFORCE_CSV_HEADER",
    "blended_rate",
    "format_kforce_date",
    "generate_kforce_csv",
    "total_hours",
    "week_end",
    "week_start",
]

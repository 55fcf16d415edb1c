"""
Sequential document numbering per Indian financial year (April to March).

Export invoices:  EXP/HEM/<nnn>/<FY>    e.g. EXP/HEM/004/24-25
Purchase orders:  HEM/PO/<FY>/<nnn>     e.g. HEM/PO/25-26/001

The next number is one more than the highest number already used in the
same financial year.  Numbering is gap tolerant (deleted documents leave
holes that are not refilled) and not collision checked: callers are the
single writer for a series.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from typing import Any

from tradedoc_kernel.exceptions import InvalidFinancialYearError
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("engines.numbering")

EXPORT_INVOICE_PREFIX = "EXP/HEM"
PURCHASE_ORDER_PREFIX = "HEM/PO"
PAD_WIDTH = 3
FISCAL_YEAR_START_MONTH = 4  # April

_FY_PATTERN = re.compile(r"^(\d{2})-(\d{2})$")


def indian_financial_year(as_of: date, start_month: int = FISCAL_YEAR_START_MONTH) -> str:
    """
    Financial year label ``"YY-YY"`` containing ``as_of``.

    2024-04-01 -> "24-25"; 2025-03-31 -> "24-25".
    """
    start_year = as_of.year if as_of.month >= start_month else as_of.year - 1
    return f"{start_year % 100:02d}-{(start_year + 1) % 100:02d}"


def validate_financial_year(financial_year: str) -> str:
    """
    Return ``financial_year`` if it is two consecutive two-digit years.

    Raises:
        InvalidFinancialYearError: label is malformed ("2024-25", "24-26").
    """
    match = _FY_PATTERN.match(financial_year or "")
    if match is None:
        raise InvalidFinancialYearError(financial_year)
    first, second = (int(g) for g in match.groups())
    if (first + 1) % 100 != second:
        raise InvalidFinancialYearError(financial_year)
    return financial_year


def _live_numbers(existing: Iterable[Any], attribute: str) -> list[str]:
    """Number strings from plain strings or from non-deleted records."""
    numbers = []
    for entry in existing:
        if isinstance(entry, str):
            numbers.append(entry)
        elif not getattr(entry, "is_deleted", False):
            numbers.append(getattr(entry, attribute) or "")
    return numbers


def _max_sequence(numbers: Iterable[str], pattern: re.Pattern[str]) -> int:
    highest = 0
    for number in numbers:
        match = pattern.match(number.strip())
        if match is not None:
            highest = max(highest, int(match.group("seq")))
    return highest


def next_export_invoice_number(
    existing: Iterable[Any],
    financial_year: str,
    prefix: str = EXPORT_INVOICE_PREFIX,
    pad_width: int = PAD_WIDTH,
) -> str:
    """
    Next export invoice number for ``financial_year``.

    ``existing`` holds invoice number strings or export documents
    (soft-deleted documents are ignored).  Numbers from other financial
    years or in another format do not count.

    >>> next_export_invoice_number(["EXP/HEM/001/24-25", "EXP/HEM/003/24-25"], "24-25")
    'EXP/HEM/004/24-25'
    """
    validate_financial_year(financial_year)
    pattern = re.compile(
        rf"^{re.escape(prefix)}/(?P<seq>\d+)/{re.escape(financial_year)}$"
    )
    numbers = _live_numbers(existing, "export_invoice_number")
    next_seq = _max_sequence(numbers, pattern) + 1
    result = f"{prefix}/{next_seq:0{pad_width}d}/{financial_year}"
    logger.debug(
        "export_invoice_number_allocated",
        extra={"financial_year": financial_year, "number": result},
    )
    return result


def next_purchase_order_number(
    existing: Iterable[Any],
    financial_year: str,
    prefix: str = PURCHASE_ORDER_PREFIX,
    pad_width: int = PAD_WIDTH,
) -> str:
    """
    Next purchase order number for ``financial_year``.

    ``existing`` holds PO number strings or purchase orders.

    >>> next_purchase_order_number(["HEM/PO/25-26/009"], "25-26")
    'HEM/PO/25-26/010'
    """
    validate_financial_year(financial_year)
    pattern = re.compile(
        rf"^{re.escape(prefix)}/{re.escape(financial_year)}/(?P<seq>\d+)"
    )
    numbers = _live_numbers(existing, "po_number")
    next_seq = _max_sequence(numbers, pattern) + 1
    result = f"{prefix}/{financial_year}/{next_seq:0{pad_width}d}"
    logger.debug(
        "purchase_order_number_allocated",
        extra={"financial_year": financial_year, "number": result},
    )
    return result

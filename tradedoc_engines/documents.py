"""
Printed document rows - customs invoice and packing list.

Pure functions with no I/O.  The PDF renderer receives these rows verbatim,
so the numbers here are the numbers on paper: quantities and money are
rounded half-up to 2 places at this boundary and nowhere earlier.

Customs invoice:
    one row per (product, product/sample, rate), numbered from 1; sample
    rows are marked "FREE OF COST SAMPLE" and carry no value.  The INR
    value uses the document's conversion rate (1 when not entered).

Packing list:
    one row per size, product rows first, then the "Free Of Cost Samples"
    rows; numbering runs on across both sections.  Each container gets a
    manifest row with boxes, pallet range and weights.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tradedoc_kernel.domain.entities import ExportDocument, Product, Size
from tradedoc_kernel.domain.values import ZERO, format_rate_key, round_money
from tradedoc_kernel.logging_config import get_logger
from tradedoc_engines.containers import (
    ContainerManifest,
    PackingGroup,
    container_manifest,
    group_by_size,
)
from tradedoc_engines.line_items import (
    PGVT_HSN_CODE,
    compute_sqm_and_amount,
    flatten_items,
    index_by_id,
)

logger = get_logger("engines.documents")

SAMPLE_MARKER = "FREE OF COST SAMPLE"
SAMPLE_SECTION_TITLE = "Free Of Cost Samples"


@dataclass(frozen=True)
class CustomsInvoiceRow:
    sr_no: int
    hsn_code: str
    description: str
    boxes: Decimal
    sqm: Decimal
    rate: Decimal
    total: Decimal
    is_sample: bool


@dataclass(frozen=True)
class CustomsInvoice:
    rows: tuple[CustomsInvoiceRow, ...]
    total_boxes: Decimal
    total_sqm: Decimal
    total_amount: Decimal
    exchange_rate: Decimal
    total_in_inr: Decimal
    amount_in_words: str


@dataclass(frozen=True)
class PackingListRow:
    sr_no: int
    hsn_code: str
    description: str
    boxes: Decimal
    sqm: Decimal
    net_weight: Decimal
    gross_weight: Decimal
    is_sample: bool


@dataclass(frozen=True)
class PackingList:
    product_rows: tuple[PackingListRow, ...]
    sample_rows: tuple[PackingListRow, ...]
    containers: tuple[ContainerManifest, ...]
    total_boxes: Decimal
    total_sqm: Decimal
    total_net_weight: Decimal
    total_gross_weight: Decimal
    sample_section_title: str = SAMPLE_SECTION_TITLE


# ---------------------------------------------------------------------------
# Customs invoice
# ---------------------------------------------------------------------------


def customs_invoice_rows(
    document: ExportDocument,
    products: Iterable[Product] | Mapping[str, Product],
    sizes: Iterable[Size] | Mapping[str, Size],
) -> CustomsInvoice:
    """Rows and totals of the customs invoice for ``document``."""
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)
    product_items, sample_items = flatten_items(document)

    acc: dict[str, dict[str, Any]] = {}
    lines = [(i, False) for i in product_items] + [(i, True) for i in sample_items]
    for item, is_sample in lines:
        product = product_index.get(str(item.product_id))
        size = size_index.get(str(product.size_id)) if product is not None else None
        line = compute_sqm_and_amount(item, product, size)
        if line is None:
            continue
        rate = ZERO if is_sample or item.rate is None else item.rate
        key = f"{product.id}-{'sample' if is_sample else 'product'}-{format_rate_key(rate)}"
        group = acc.setdefault(
            key,
            {
                "hsn_code": size.hsn_code or "N/A",
                "description": f"{product.design_name} ({size.label})",
                "is_sample": is_sample,
                "rate": rate,
                "boxes": ZERO,
                "sqm": ZERO,
                "total": ZERO,
            },
        )
        group["boxes"] += item.boxes
        group["sqm"] += line.sqm
        if not is_sample:
            group["total"] += line.amount

    rows = tuple(
        CustomsInvoiceRow(
            sr_no=index,
            hsn_code=g["hsn_code"],
            description=(
                f"{g['description']}\n{SAMPLE_MARKER}" if g["is_sample"] else g["description"]
            ),
            boxes=g["boxes"],
            sqm=round_money(g["sqm"]),
            rate=round_money(g["rate"]),
            total=round_money(g["total"]),
            is_sample=g["is_sample"],
        )
        for index, g in enumerate(acc.values(), start=1)
    )

    total_amount = round_money(sum((g["total"] for g in acc.values()), ZERO))
    exchange_rate = document.conversation_rate or Decimal("1")
    return CustomsInvoice(
        rows=rows,
        total_boxes=sum((g["boxes"] for g in acc.values()), ZERO),
        total_sqm=round_money(sum((g["sqm"] for g in acc.values()), ZERO)),
        total_amount=total_amount,
        exchange_rate=exchange_rate,
        total_in_inr=round_money(total_amount * exchange_rate),
        amount_in_words=amount_to_words_usd(total_amount),
    )


# ---------------------------------------------------------------------------
# Packing list
# ---------------------------------------------------------------------------


def _packing_rows(
    groups: tuple[PackingGroup, ...], first_sr_no: int, is_sample: bool,
) -> tuple[PackingListRow, ...]:
    return tuple(
        PackingListRow(
            sr_no=first_sr_no + offset,
            hsn_code=g.hsn_code or "N/A",
            description=g.description,
            boxes=g.boxes,
            sqm=round_money(g.sqm),
            net_weight=round_money(g.net_weight),
            gross_weight=round_money(g.gross_weight),
            is_sample=is_sample,
        )
        for offset, g in enumerate(groups)
    )


def packing_list_rows(
    document: ExportDocument,
    products: Iterable[Product] | Mapping[str, Product],
    sizes: Iterable[Size] | Mapping[str, Size],
    *,
    pgvt_hsn_code: str = PGVT_HSN_CODE,
) -> PackingList:
    """Rows, container manifests and grand totals of the packing list."""
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)
    product_items, sample_items = flatten_items(document)

    product_groups = group_by_size(
        product_items, product_index, size_index, pgvt_hsn_code=pgvt_hsn_code,
    )
    sample_groups = group_by_size(
        sample_items, product_index, size_index, pgvt_hsn_code=pgvt_hsn_code,
    )
    product_rows = _packing_rows(product_groups, 1, False)
    sample_rows = _packing_rows(sample_groups, len(product_rows) + 1, True)

    groups = product_groups + sample_groups
    return PackingList(
        product_rows=product_rows,
        sample_rows=sample_rows,
        containers=tuple(
            container_manifest(c, product_index, size_index)
            for c in document.container_items
        ),
        total_boxes=sum((g.boxes for g in groups), ZERO),
        total_sqm=round_money(sum((g.sqm for g in groups), ZERO)),
        total_net_weight=round_money(sum((g.net_weight for g in groups), ZERO)),
        total_gross_weight=round_money(sum((g.gross_weight for g in groups), ZERO)),
    )


# ---------------------------------------------------------------------------
# Amount in words
# ---------------------------------------------------------------------------

_ONES = (
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
)
_TENS = ("", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety")
_SCALES = ("", "Thousand", "Million", "Billion", "Trillion")


def _below_thousand(n: int) -> str:
    if n == 0:
        return ""
    if n < 20:
        return _ONES[n] + " "
    if n < 100:
        return _TENS[n // 10] + " " + _below_thousand(n % 10)
    return _ONES[n // 100] + " Hundred " + _below_thousand(n % 100)


def amount_to_words_usd(amount: Decimal) -> str:
    """
    Dollar amount in words, as printed on the customs invoice.

    >>> amount_to_words_usd(Decimal("1440"))
    'One Thousand Four Hundred Forty Dollars only'
    >>> amount_to_words_usd(Decimal("12.05"))
    'Twelve Dollars and Five Cents only'
    """
    amount = round_money(amount)
    sign = "Minus " if amount < 0 else ""
    amount = abs(amount)
    if amount == 0:
        return "Zero Dollars only"

    dollars = int(amount)
    cents = int((amount - dollars) * 100)

    words = ""
    scale = 0
    num = dollars
    while num > 0:
        if num % 1000:
            words = _below_thousand(num % 1000) + _SCALES[scale] + " " + words
        num //= 1000
        scale += 1

    result = f"{words.strip() or 'Zero'} Dollars"
    if cents:
        result += f" and {_below_thousand(cents).strip()} Cents"
    return sign + " ".join(result.split()) + " only"

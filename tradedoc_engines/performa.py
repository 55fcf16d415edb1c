"""
Performa invoice totals.

Each line quotes a size and a rate per square metre:

    quantity_sqm = boxes * size.sqm_per_box
    amount       = quantity_sqm * rate_per_sqm
    sub_total    = sum of amount
    grand_total  = sub_total - discount + freight

A line whose size cannot be resolved is valued at zero but still listed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from tradedoc_kernel.domain.entities import PerformaInvoice, Size
from tradedoc_kernel.domain.values import ZERO
from tradedoc_engines.line_items import index_by_id


@dataclass(frozen=True)
class PerformaLine:
    item_id: str
    size_id: str
    product_id: str
    boxes: Decimal
    quantity_sqm: Decimal
    rate_per_sqm: Decimal
    commission: Decimal
    amount: Decimal


@dataclass(frozen=True)
class PerformaTotals:
    lines: tuple[PerformaLine, ...]
    sub_total: Decimal
    discount: Decimal
    freight: Decimal
    grand_total: Decimal


def compute_performa_totals(
    invoice: PerformaInvoice,
    sizes: Iterable[Size] | Mapping[str, Size],
) -> PerformaTotals:
    size_index = index_by_id(sizes)
    lines = []
    for item in invoice.items:
        size = size_index.get(str(item.size_id))
        sqm = item.boxes * size.sqm_per_box if size is not None else ZERO
        lines.append(
            PerformaLine(
                item_id=item.id,
                size_id=item.size_id,
                product_id=item.product_id,
                boxes=item.boxes,
                quantity_sqm=sqm,
                rate_per_sqm=item.rate_per_sqm,
                commission=item.commission,
                amount=sqm * item.rate_per_sqm,
            )
        )
    sub_total = sum((line.amount for line in lines), ZERO)
    return PerformaTotals(
        lines=tuple(lines),
        sub_total=sub_total,
        discount=invoice.discount,
        freight=invoice.freight,
        grand_total=sub_total - invoice.discount + invoice.freight,
    )

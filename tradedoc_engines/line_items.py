"""
Line-Item Aggregator - SQM, amounts and size/rate grouping for export documents.

Pure functions with no I/O.  Reference data (products, sizes) is passed in
and indexed once per call.

Rules:
    - sqm = boxes * size.sqm_per_box
    - amount = sqm * rate (absent rate counts as 0)
    - net weight = entered net weight, else boxes * box weight
      (product box weight, falling back to the size's)
    - groups are keyed by size id and rate: two lines of the same size at
      different negotiated rates are never merged
    - sample lines count towards boxes, sqm and weight but are valued at 0
    - a line whose product or size cannot be resolved contributes nothing

Usage:
    from tradedoc_engines.line_items import aggregate_container_items, document_total

    aggregation = aggregate_container_items(document, products, sizes)
    print(aggregation.grand_totals.sqm)

    totals = document_total(document, products, sizes)
    print(totals.total_amount)  # amount + GST, 2 places
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tradedoc_kernel.domain.entities import (
    ExportDocument,
    Product,
    ProductItem,
    Size,
    resolve_box_weight,
)
from tradedoc_kernel.domain.values import (
    MONEY_PLACES,
    ZERO,
    format_rate_key,
    parse_percent,
    round_money,
)
from tradedoc_kernel.logging_config import get_logger
from tradedoc_engines.tracer import traced_engine

logger = get_logger("engines.line_items")

PGVT_HSN_CODE = "69072100"
PGVT_DESCRIPTION = "Polished Glazed Vitrified Tiles (PGVT)"
GENERIC_DESCRIPTION = "Vitrified Tiles"


def index_by_id(records: Iterable[Any] | Mapping[str, Any]) -> Mapping[str, Any]:
    """Id -> record map.  A mapping is returned unchanged."""
    if isinstance(records, Mapping):
        return records
    return {str(r.id): r for r in records}


def describe_goods(hsn_code: str, pgvt_hsn_code: str = PGVT_HSN_CODE) -> str:
    """Description of goods printed for an HSN code."""
    return PGVT_DESCRIPTION if hsn_code == pgvt_hsn_code else GENERIC_DESCRIPTION


@dataclass(frozen=True)
class LineAmount:
    """Derived quantities for one product or sample line."""

    sqm: Decimal
    amount: Decimal
    net_weight: Decimal
    gross_weight: Decimal


@dataclass(frozen=True)
class LineGroup:
    """
    Accumulated lines sharing a size and rate.

    For sample groups ``rate`` and ``total`` are always zero.
    """

    key: str
    size_id: str
    size_label: str
    hsn_code: str
    description: str
    rate: Decimal
    boxes: Decimal
    sqm: Decimal
    total: Decimal
    net_weight: Decimal
    gross_weight: Decimal
    is_sample: bool = False


@dataclass(frozen=True)
class GrandTotals:
    boxes: Decimal
    sqm: Decimal
    net_weight: Decimal
    gross_weight: Decimal
    amount: Decimal


@dataclass(frozen=True)
class ContainerAggregation:
    """Grouped rows and grand totals across every container of a document."""

    grouped_products: tuple[LineGroup, ...]
    grouped_samples: tuple[LineGroup, ...]
    grand_totals: GrandTotals


@dataclass(frozen=True)
class DocumentTotal:
    """
    Invoice value of an export document, rounded to 2 places.

    ``total_amount == amount + gst_amount`` holds exactly.
    """

    amount: Decimal
    gst_rate: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    amount_in_local_currency: Decimal


def compute_sqm_and_amount(
    item: ProductItem,
    product: Product | None,
    size: Size | None,
) -> LineAmount | None:
    """
    Quantities for one line, or None when product or size is unresolved.

    Never raises: missing numbers were already coerced to zero when the
    item was built.
    """
    if product is None or size is None:
        return None
    sqm = item.boxes * size.sqm_per_box
    amount = sqm * (item.rate if item.rate is not None else ZERO)
    if item.net_weight is not None:
        net_weight = item.net_weight
    else:
        net_weight = item.boxes * resolve_box_weight(product, size)
    gross_weight = item.gross_weight if item.gross_weight is not None else ZERO
    return LineAmount(
        sqm=sqm,
        amount=amount,
        net_weight=net_weight,
        gross_weight=gross_weight,
    )


def _resolve(
    item: ProductItem,
    products: Mapping[str, Product],
    sizes: Mapping[str, Size],
) -> tuple[Product | None, Size | None]:
    product = products.get(str(item.product_id))
    size = sizes.get(str(product.size_id)) if product is not None else None
    return product, size


def group_by_size_and_rate(
    items: Iterable[ProductItem],
    products: Iterable[Product] | Mapping[str, Product],
    sizes: Iterable[Size] | Mapping[str, Size],
    *,
    is_sample: bool = False,
    pgvt_hsn_code: str = PGVT_HSN_CODE,
) -> tuple[LineGroup, ...]:
    """
    Partition lines into groups keyed ``"<size_id>-<rate>"``.

    Groups come out in first-seen order.  Unresolvable lines are skipped.
    When ``is_sample`` is set, rate and total are forced to zero on output.
    """
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)

    acc: dict[str, dict[str, Any]] = {}
    for item in items:
        product, size = _resolve(item, product_index, size_index)
        line = compute_sqm_and_amount(item, product, size)
        if line is None:
            logger.debug(
                "line_item_unresolved",
                extra={"item_id": item.id, "product_id": item.product_id},
            )
            continue
        rate = item.rate if item.rate is not None else ZERO
        key = f"{size.id}-{format_rate_key(rate)}"
        group = acc.get(key)
        if group is None:
            group = acc[key] = {
                "size": size,
                "rate": rate,
                "boxes": ZERO,
                "sqm": ZERO,
                "total": ZERO,
                "net_weight": ZERO,
                "gross_weight": ZERO,
            }
        group["boxes"] += item.boxes
        group["sqm"] += line.sqm
        group["total"] += line.amount
        group["net_weight"] += line.net_weight
        group["gross_weight"] += line.gross_weight

    return tuple(
        LineGroup(
            key=key,
            size_id=str(g["size"].id),
            size_label=g["size"].label,
            hsn_code=g["size"].hsn_code,
            description=describe_goods(g["size"].hsn_code, pgvt_hsn_code),
            rate=ZERO if is_sample else g["rate"],
            boxes=g["boxes"],
            sqm=g["sqm"],
            total=ZERO if is_sample else g["total"],
            net_weight=g["net_weight"],
            gross_weight=g["gross_weight"],
            is_sample=is_sample,
        )
        for key, g in acc.items()
    )


def flatten_items(document: ExportDocument) -> tuple[tuple[ProductItem, ...], tuple[ProductItem, ...]]:
    """(product lines, sample lines) across every container, in container order."""
    product_items: list[ProductItem] = []
    sample_items: list[ProductItem] = []
    for container in document.container_items:
        product_items.extend(container.product_items)
        sample_items.extend(container.sample_items)
    return tuple(product_items), tuple(sample_items)


@traced_engine("line_items", "1.0", fingerprint_fields=("document",))
def aggregate_container_items(
    document: ExportDocument,
    products: Iterable[Product] | Mapping[str, Product],
    sizes: Iterable[Size] | Mapping[str, Size],
    *,
    pgvt_hsn_code: str = PGVT_HSN_CODE,
) -> ContainerAggregation:
    """
    Group every product and sample line of ``document`` and total them.

    Samples add to boxes, sqm and weights; only product lines add to amount.
    """
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)
    product_items, sample_items = flatten_items(document)

    grouped_products = group_by_size_and_rate(
        product_items, product_index, size_index, pgvt_hsn_code=pgvt_hsn_code,
    )
    grouped_samples = group_by_size_and_rate(
        sample_items, product_index, size_index,
        is_sample=True, pgvt_hsn_code=pgvt_hsn_code,
    )

    groups = grouped_products + grouped_samples
    grand_totals = GrandTotals(
        boxes=sum((g.boxes for g in groups), ZERO),
        sqm=sum((g.sqm for g in groups), ZERO),
        net_weight=sum((g.net_weight for g in groups), ZERO),
        gross_weight=sum((g.gross_weight for g in groups), ZERO),
        amount=sum((g.total for g in grouped_products), ZERO),
    )

    logger.info(
        "container_items_aggregated",
        extra={
            "document_id": document.id,
            "product_groups": len(grouped_products),
            "sample_groups": len(grouped_samples),
            "total_amount": grand_totals.amount,
        },
    )
    return ContainerAggregation(
        grouped_products=grouped_products,
        grouped_samples=grouped_samples,
        grand_totals=grand_totals,
    )


def document_total(
    document: ExportDocument,
    products: Iterable[Product] | Mapping[str, Product],
    sizes: Iterable[Size] | Mapping[str, Size],
    *,
    places: int = MONEY_PLACES,
) -> DocumentTotal:
    """
    Pre-tax amount, GST and converted value of an export document.

    GST is parsed from the document's percentage string ("18%"); malformed
    text counts as 0%.  Samples are excluded from the amount.  The GST
    amount is computed on the rounded amount so the total adds up exactly.
    """
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)
    product_items, _ = flatten_items(document)

    raw_amount = ZERO
    for item in product_items:
        product, size = _resolve(item, product_index, size_index)
        line = compute_sqm_and_amount(item, product, size)
        if line is not None:
            raw_amount += line.amount

    amount = round_money(raw_amount, places)
    gst_rate = parse_percent(document.gst)
    gst_amount = round_money(amount * gst_rate, places)
    return DocumentTotal(
        amount=amount,
        gst_rate=gst_rate,
        gst_amount=gst_amount,
        total_amount=amount + gst_amount,
        amount_in_local_currency=round_money(amount * document.conversation_rate, places),
    )

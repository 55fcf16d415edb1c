"""
Container manifest - pallet counts, weights, VGM and packing-list grouping.

Pure functions with no I/O.

Rules:
    - total pallets = end - start + 1 when both are integers and
      end >= start > 0, else ""
    - VGM (verified gross mass) = cargo net weight + container tare
    - line net/gross weight above the warning threshold (27000 kg) is
      reported as advisory, never rejected
    - the packing list groups by size only (rates are irrelevant to weight)

Usage:
    from tradedoc_engines.containers import container_manifest, weight_warnings

    for container in document.container_items:
        manifest = container_manifest(container, products, sizes)
        print(manifest.container_no, manifest.vgm)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tradedoc_kernel.domain.entities import (
    ContainerItem,
    ExportDocument,
    Product,
    ProductItem,
    Size,
    compute_total_pallets,
)
from tradedoc_kernel.domain.values import ZERO
from tradedoc_kernel.logging_config import get_logger
from tradedoc_engines.line_items import (
    PGVT_HSN_CODE,
    compute_sqm_and_amount,
    describe_goods,
    index_by_id,
)

logger = get_logger("engines.containers")

WEIGHT_WARNING_KG = Decimal("27000")

__all__ = [
    "WEIGHT_WARNING_KG",
    "ContainerManifest",
    "PackingGroup",
    "WeightWarning",
    "compute_total_pallets",
    "container_manifest",
    "group_by_size",
    "weight_warnings",
]


@dataclass(frozen=True)
class ContainerManifest:
    """Per-container totals as printed on the packing list and VGM sheet."""

    container_id: str
    container_no: str
    booking_no: str
    line_seal: str
    rfid_seal: str
    description: str
    start_pallet_no: str
    end_pallet_no: str
    total_pallets: str
    boxes: Decimal
    net_weight: Decimal
    gross_weight: Decimal
    tare_weight: Decimal
    vgm: Decimal


@dataclass(frozen=True)
class WeightWarning:
    """A line whose entered weight exceeds the advisory threshold."""

    container_id: str
    item_id: str
    field: str
    value: Decimal
    is_sample: bool


@dataclass(frozen=True)
class PackingGroup:
    """Packing-list row: all lines of one size."""

    size_id: str
    hsn_code: str
    description: str
    boxes: Decimal
    sqm: Decimal
    net_weight: Decimal
    gross_weight: Decimal


def _line_weights(
    item: ProductItem,
    products: Mapping[str, Product],
    sizes: Mapping[str, Size],
) -> tuple[Decimal, Decimal]:
    product = products.get(str(item.product_id))
    size = sizes.get(str(product.size_id)) if product is not None else None
    line = compute_sqm_and_amount(item, product, size)
    if line is not None:
        return line.net_weight, line.gross_weight
    # Unresolved lines still weigh what was entered.
    return item.net_weight or ZERO, item.gross_weight or ZERO


def container_manifest(
    container: ContainerItem,
    products: Iterable[Product] | Mapping[str, Product] = (),
    sizes: Iterable[Size] | Mapping[str, Size] = (),
) -> ContainerManifest:
    """
    Boxes, weights and VGM of one container, samples included.

    Net weight follows the line rule (entered, else boxes * box weight)
    for lines whose product resolves; other lines count as entered.
    """
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)

    boxes = net_weight = gross_weight = ZERO
    for item in container.product_items + container.sample_items:
        net, gross = _line_weights(item, product_index, size_index)
        boxes += item.boxes
        net_weight += net
        gross_weight += gross

    return ContainerManifest(
        container_id=container.id,
        container_no=container.container_no,
        booking_no=container.booking_no,
        line_seal=container.line_seal,
        rfid_seal=container.rfid_seal,
        description=container.description,
        start_pallet_no=container.start_pallet_no,
        end_pallet_no=container.end_pallet_no,
        total_pallets=compute_total_pallets(
            container.start_pallet_no, container.end_pallet_no,
        ),
        boxes=boxes,
        net_weight=net_weight,
        gross_weight=gross_weight,
        tare_weight=container.tare_weight,
        vgm=net_weight + container.tare_weight,
    )


def weight_warnings(
    document: ExportDocument,
    threshold: Decimal = WEIGHT_WARNING_KG,
) -> tuple[WeightWarning, ...]:
    """Every entered net or gross weight strictly above ``threshold``."""
    warnings: list[WeightWarning] = []
    for container in document.container_items:
        lines = [(i, False) for i in container.product_items]
        lines += [(i, True) for i in container.sample_items]
        for item, is_sample in lines:
            for field in ("net_weight", "gross_weight"):
                value = getattr(item, field)
                if value is not None and value > threshold:
                    warnings.append(
                        WeightWarning(
                            container_id=container.id,
                            item_id=item.id,
                            field=field,
                            value=value,
                            is_sample=is_sample,
                        )
                    )
    if warnings:
        logger.warning(
            "line_weight_above_threshold",
            extra={
                "document_id": document.id,
                "threshold": threshold,
                "count": len(warnings),
            },
        )
    return tuple(warnings)


def group_by_size(
    items: Iterable[ProductItem],
    products: Iterable[Product] | Mapping[str, Product],
    sizes: Iterable[Size] | Mapping[str, Size],
    *,
    pgvt_hsn_code: str = PGVT_HSN_CODE,
) -> tuple[PackingGroup, ...]:
    """
    Packing-list grouping: one row per size in first-seen order.

    Lines without a resolvable size are skipped.
    """
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)

    acc: dict[str, dict[str, Any]] = {}
    for item in items:
        product = product_index.get(str(item.product_id))
        size = size_index.get(str(product.size_id)) if product is not None else None
        line = compute_sqm_and_amount(item, product, size)
        if line is None:
            continue
        group = acc.setdefault(
            str(size.id),
            {"size": size, "boxes": ZERO, "sqm": ZERO, "net": ZERO, "gross": ZERO},
        )
        group["boxes"] += item.boxes
        group["sqm"] += line.sqm
        group["net"] += line.net_weight
        group["gross"] += line.gross_weight

    return tuple(
        PackingGroup(
            size_id=size_id,
            hsn_code=g["size"].hsn_code,
            description=f"{describe_goods(g['size'].hsn_code, pgvt_hsn_code)} ({g['size'].label})",
            boxes=g["boxes"],
            sqm=g["sqm"],
            net_weight=g["net"],
            gross_weight=g["gross"],
        )
        for size_id, g in acc.items()
    )

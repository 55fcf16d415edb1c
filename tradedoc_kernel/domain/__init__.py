"""
Pure domain layer.

Immutable records and numeric helpers with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

Everything here is deterministic.
"""

from tradedoc_kernel.domain.bills import (
    BILL_KIND_FOR_PARTY,
    BILL_TYPE_LABELS,
    party_id,
    payable_amount,
    tax_amount,
)
from tradedoc_kernel.domain.entities import (
    VENDOR_PARTY_TYPES,
    Bill,
    BillKind,
    ContainerItem,
    EntitySnapshot,
    ExportDocument,
    GoodsBillItem,
    ManuBill,
    ManufacturerDetail,
    Party,
    PartyType,
    PerformaInvoice,
    PerformaInvoiceItem,
    Product,
    ProductItem,
    PurchaseOrder,
    PurchaseOrderItem,
    RelatedInvoice,
    Size,
    SupplyBill,
    Transaction,
    TransactionType,
    TransBill,
    TransBillItem,
    compute_total_pallets,
    resolve_box_weight,
    resolve_sales_price,
    to_record,
    with_recomputed_pallets,
)
from tradedoc_kernel.domain.values import (
    ZERO,
    coerce_decimal,
    coerce_optional_decimal,
    parse_percent,
    round_money,
)

__all__ = [
    # Values
    "ZERO",
    "coerce_decimal",
    "coerce_optional_decimal",
    "parse_percent",
    "round_money",
    # Enums
    "BillKind",
    "PartyType",
    "TransactionType",
    "VENDOR_PARTY_TYPES",
    # Reference data
    "Size",
    "Product",
    "resolve_box_weight",
    "resolve_sales_price",
    # Parties
    "Party",
    # Documents
    "PerformaInvoice",
    "PerformaInvoiceItem",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "ExportDocument",
    "ContainerItem",
    "ProductItem",
    "ManufacturerDetail",
    "compute_total_pallets",
    "with_recomputed_pallets",
    # Bills
    "Bill",
    "ManuBill",
    "SupplyBill",
    "TransBill",
    "GoodsBillItem",
    "TransBillItem",
    "BILL_KIND_FOR_PARTY",
    "BILL_TYPE_LABELS",
    "payable_amount",
    "tax_amount",
    "party_id",
    # Payments
    "Transaction",
    "RelatedInvoice",
    # Snapshot
    "EntitySnapshot",
    "to_record",
]

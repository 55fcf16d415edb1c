"""
Module: tradedoc_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the import surface for
    ``tradedoc_services`` and for callers that already hold a snapshot.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import tradedoc_kernel.domain, tradedoc_kernel.exceptions,
    tradedoc_kernel.logging_config and sibling engine modules.
    MUST NOT import tradedoc_services, tradedoc_config or the store.

Invariants enforced:
    - Purity: engines never call ``date.today()``; the financial year and
      any "as of" date are passed in by the caller.
    - Decimal-only arithmetic; rounding happens at documented boundaries
      (document totals, printed rows) and nowhere else.
    - Determinism: identical inputs always produce identical outputs
      (stable sorts, insertion-ordered grouping).

Failure modes:
    - Unresolved references are skipped, never raised.
    - ``UnknownPartyTypeError`` from ``build_party_ledger`` and
      ``InvalidFinancialYearError`` from the numbering functions are the
      only errors raised on caller input.

Usage:
    from tradedoc_engines import aggregate_container_items, build_gst_summary
    from tradedoc_engines.ledger import build_party_ledger
    from tradedoc_engines.numbering import next_export_invoice_number
"""

from tradedoc_kernel.logging_config import get_logger

logger = get_logger("engines")

from tradedoc_engines.bills import (
    GoodsBillTotals,
    TransportBillTotals,
    compute_goods_bill_totals,
    compute_transport_bill_totals,
    taxable_amount,
    with_computed_totals,
)
from tradedoc_engines.containers import (
    WEIGHT_WARNING_KG,
    ContainerManifest,
    PackingGroup,
    WeightWarning,
    compute_total_pallets,
    container_manifest,
    group_by_size,
    weight_warnings,
)
from tradedoc_engines.documents import (
    CustomsInvoice,
    CustomsInvoiceRow,
    PackingList,
    PackingListRow,
    amount_to_words_usd,
    customs_invoice_rows,
    packing_list_rows,
)
from tradedoc_engines.gst import (
    GstPaidItem,
    GstPaidPage,
    GstSummary,
    build_gst_summary,
    gst_paid_items,
)
from tradedoc_engines.ledger import (
    ClientLedger,
    LedgerItem,
    LedgerPage,
    PartyLedger,
    build_client_ledger,
    build_party_ledger,
    ledger_page,
    paginate,
    related_invoice_numbers,
    selected_invoice_total,
    vendor_party_type,
)
from tradedoc_engines.line_items import (
    ContainerAggregation,
    DocumentTotal,
    GrandTotals,
    LineAmount,
    LineGroup,
    aggregate_container_items,
    compute_sqm_and_amount,
    describe_goods,
    document_total,
    group_by_size_and_rate,
)
from tradedoc_engines.numbering import (
    indian_financial_year,
    next_export_invoice_number,
    next_purchase_order_number,
    validate_financial_year,
)
from tradedoc_engines.performa import (
    PerformaLine,
    PerformaTotals,
    compute_performa_totals,
)
from tradedoc_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Bills
    "GoodsBillTotals",
    "TransportBillTotals",
    "compute_goods_bill_totals",
    "compute_transport_bill_totals",
    "taxable_amount",
    "with_computed_totals",
    # Containers
    "WEIGHT_WARNING_KG",
    "ContainerManifest",
    "PackingGroup",
    "WeightWarning",
    "compute_total_pallets",
    "container_manifest",
    "group_by_size",
    "weight_warnings",
    # Printed documents
    "CustomsInvoice",
    "CustomsInvoiceRow",
    "PackingList",
    "PackingListRow",
    "amount_to_words_usd",
    "customs_invoice_rows",
    "packing_list_rows",
    # GST
    "GstPaidItem",
    "GstPaidPage",
    "GstSummary",
    "build_gst_summary",
    "gst_paid_items",
    # Ledger
    "ClientLedger",
    "LedgerItem",
    "LedgerPage",
    "PartyLedger",
    "build_client_ledger",
    "build_party_ledger",
    "ledger_page",
    "paginate",
    "related_invoice_numbers",
    "selected_invoice_total",
    "vendor_party_type",
    # Line items
    "ContainerAggregation",
    "DocumentTotal",
    "GrandTotals",
    "LineAmount",
    "LineGroup",
    "aggregate_container_items",
    "compute_sqm_and_amount",
    "describe_goods",
    "document_total",
    "group_by_size_and_rate",
    # Numbering
    "indian_financial_year",
    "next_export_invoice_number",
    "next_purchase_order_number",
    "validate_financial_year",
    # Performa
    "PerformaLine",
    "PerformaTotals",
    "compute_performa_totals",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
]

logger.debug("engines_package_loaded", extra={
    "modules": [
        "bills", "containers", "documents", "gst", "ledger",
        "line_items", "numbering", "performa",
    ],
})

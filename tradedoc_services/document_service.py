"""
tradedoc_services.document_service -- export documents, bills and numbering.

Responsibility:
    Allocate export invoice and purchase order numbers, save export
    documents and bills with their derived fields recomputed, and produce
    the aggregated rows printed on the customs invoice and packing list.

Architecture position:
    Services -- imperative shell over ``tradedoc_engines.line_items``,
    ``containers``, ``documents``, ``bills``, ``performa`` and ``numbering``.
    This is the only place that reads the wall clock (through the injected
    ``today`` callable) to pick the current financial year.

Invariants enforced:
    - A saved export document always carries recomputed pallet totals.
    - A saved bill always carries totals recomputed from its lines.
    - Weight warnings are logged on save, never raised.

Failure modes:
    - ``ExportDocumentNotFoundError`` for an unknown or deleted document.
    - ``EntityNotFoundError`` for an unknown or deleted performa invoice.
    - ``InvalidFinancialYearError`` for a malformed financial year label.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from tradedoc_config import TradeDocConfig
from tradedoc_kernel.domain.entities import Bill, EntitySnapshot, ExportDocument, PerformaInvoice
from tradedoc_kernel.exceptions import EntityNotFoundError
from tradedoc_kernel.logging_config import LogContext, get_logger
from tradedoc_kernel.store.base import EntityStore
from tradedoc_engines.bills import with_computed_totals
from tradedoc_engines.containers import (
    ContainerManifest,
    WeightWarning,
    container_manifest,
    weight_warnings,
)
from tradedoc_engines.documents import (
    CustomsInvoice,
    PackingList,
    customs_invoice_rows,
    packing_list_rows,
)
from tradedoc_engines.line_items import (
    ContainerAggregation,
    DocumentTotal,
    aggregate_container_items,
    document_total,
)
from tradedoc_engines.numbering import (
    indian_financial_year,
    next_export_invoice_number,
    next_purchase_order_number,
)
from tradedoc_engines.performa import PerformaTotals, compute_performa_totals
from tradedoc_services._base import SnapshotService

logger = get_logger("services.documents")


class DocumentService(SnapshotService):
    """Export document lifecycle and the computed views printed from it."""

    def __init__(
        self,
        store: EntityStore,
        config: TradeDocConfig,
        today: Callable[[], date] = date.today,
    ):
        super().__init__(store, config)
        self._today = today

    # -- numbering -----------------------------------------------------------

    def current_financial_year(self) -> str:
        return indian_financial_year(
            self._today(), self._config.numbering.fiscal_year_start_month,
        )

    def next_export_invoice_number(self, financial_year: str | None = None) -> str:
        """Next export invoice number; the current financial year by default."""
        fy = financial_year or self.current_financial_year()
        numbering = self._config.numbering
        return next_export_invoice_number(
            self._snapshot().export_documents,
            fy,
            prefix=numbering.export_invoice_prefix,
            pad_width=numbering.pad_width,
        )

    def next_purchase_order_number(self, financial_year: str | None = None) -> str:
        fy = financial_year or self.current_financial_year()
        numbering = self._config.numbering
        return next_purchase_order_number(
            self._snapshot().purchase_orders,
            fy,
            prefix=numbering.purchase_order_prefix,
            pad_width=numbering.pad_width,
        )

    # -- writes --------------------------------------------------------------

    def save_export_document(self, document: ExportDocument) -> ExportDocument:
        """
        Store ``document``; pallet totals are recomputed by the store.

        Lines above the weight threshold are logged as warnings and saved
        unchanged.
        """
        with LogContext.bind(document_id=str(document.id)):
            weight_warnings(document, self._config.aggregation.weight_warning_kg)
            stored = self._store.save_export_document(document)
            logger.info(
                "export_document_saved",
                extra={
                    "export_invoice_number": stored.export_invoice_number,
                    "container_count": len(stored.container_items),
                },
            )
        return stored

    def save_bill(self, bill: Bill) -> Bill:
        """Store ``bill`` with line and document totals recomputed."""
        stored = self._store.save_bill(with_computed_totals(bill))
        logger.info(
            "bill_saved",
            extra={
                "bill_kind": stored.kind.value,
                "bill_id": stored.id,
                "invoice_number": stored.invoice_number,
            },
        )
        return stored

    # -- computed views ------------------------------------------------------

    def _document_and_snapshot(self, document_id: str) -> tuple[ExportDocument, EntitySnapshot]:
        document = self._store.get_export_document(document_id)
        return document, self._snapshot()

    def aggregate(self, document_id: str) -> ContainerAggregation:
        document, snapshot = self._document_and_snapshot(document_id)
        return aggregate_container_items(
            document,
            snapshot.products,
            snapshot.sizes,
            pgvt_hsn_code=self._config.aggregation.pgvt_hsn_code,
        )

    def totals(self, document_id: str) -> DocumentTotal:
        document, snapshot = self._document_and_snapshot(document_id)
        return document_total(
            document,
            snapshot.products,
            snapshot.sizes,
            places=self._config.aggregation.money_places,
        )

    def customs_invoice(self, document_id: str) -> CustomsInvoice:
        document, snapshot = self._document_and_snapshot(document_id)
        return customs_invoice_rows(document, snapshot.products, snapshot.sizes)

    def packing_list(self, document_id: str) -> PackingList:
        document, snapshot = self._document_and_snapshot(document_id)
        return packing_list_rows(
            document,
            snapshot.products,
            snapshot.sizes,
            pgvt_hsn_code=self._config.aggregation.pgvt_hsn_code,
        )

    def container_manifests(self, document_id: str) -> tuple[ContainerManifest, ...]:
        document, snapshot = self._document_and_snapshot(document_id)
        return tuple(
            container_manifest(c, snapshot.products, snapshot.sizes)
            for c in document.container_items
        )

    def weight_warnings(self, document_id: str) -> tuple[WeightWarning, ...]:
        document = self._store.get_export_document(document_id)
        return weight_warnings(document, self._config.aggregation.weight_warning_kg)

    def performa_totals(self, invoice_id: str) -> PerformaTotals:
        snapshot = self._snapshot()
        invoice: PerformaInvoice | None = next(
            (pi for pi in snapshot.performa_invoices if str(pi.id) == str(invoice_id)),
            None,
        )
        if invoice is None or invoice.is_deleted:
            raise EntityNotFoundError("performa_invoice", str(invoice_id))
        return compute_performa_totals(invoice, snapshot.sizes)

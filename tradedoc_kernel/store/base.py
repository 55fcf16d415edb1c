"""
EntityStore -- repository interface between the engines and persistence.

Responsibility:
    Defines the operations every store implementation offers: fetch a full
    ``EntitySnapshot`` for a computation, fetch and save individual records,
    and soft-delete by record kind.

Architecture position:
    Kernel > Store.  Services depend on this Protocol, never on a concrete
    backend.  Engines never see a store; they receive snapshots.

Invariants enforced:
    - ``save_export_document`` recomputes ``total_pallets`` for every
      container before storing; a caller-supplied value is discarded.
    - Deletion is soft: ``soft_delete`` sets ``is_deleted`` and the record
      stays in the snapshot for consumers to filter.
    - Parties are identified by ``(party_type, id)``: every party type has
      its own id space, so a manufacturer and a client may share an id.

Failure modes:
    - ``ExportDocumentNotFoundError`` from ``get_export_document`` for an
      unknown or soft-deleted id.
    - ``EntityNotFoundError`` from ``soft_delete`` for an unknown id.
    - ``AmbiguousPartyError`` from ``soft_delete`` of a party id held by
      several party types when no ``party_type`` is given.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from tradedoc_kernel.domain.entities import (
    Bill,
    EntitySnapshot,
    ExportDocument,
    Party,
    PartyType,
    PerformaInvoice,
    Product,
    PurchaseOrder,
    Size,
    Transaction,
)


class RecordKind(str, Enum):
    """Every persisted table, addressed by ``soft_delete``."""

    SIZE = "size"
    PRODUCT = "product"
    PARTY = "party"
    PERFORMA_INVOICE = "performa_invoice"
    PURCHASE_ORDER = "purchase_order"
    EXPORT_DOCUMENT = "export_document"
    MANU_BILL = "manu_bill"
    TRANS_BILL = "trans_bill"
    SUPPLY_BILL = "supply_bill"
    TRANSACTION = "transaction"


@runtime_checkable
class EntityStore(Protocol):
    """Protocol implemented by ``InMemoryEntityStore`` and ``SqlEntityStore``."""

    def load_snapshot(self) -> EntitySnapshot:
        """Every table, including soft-deleted rows, as one immutable snapshot."""
        ...

    def get_export_document(self, document_id: str) -> ExportDocument: ...

    def save_export_document(self, document: ExportDocument) -> ExportDocument:
        """Store ``document`` with recomputed pallet totals and return what was stored."""
        ...

    def soft_delete(
        self,
        kind: RecordKind | str,
        record_id: str,
        *,
        party_type: PartyType | str | None = None,
    ) -> None:
        """Flag a record deleted; parties may be narrowed by ``party_type``."""
        ...

    def save_bill(self, bill: Bill) -> Bill: ...

    def save_transaction(self, transaction: Transaction) -> Transaction: ...

    def save_party(self, party: Party) -> Party: ...

    def save_size(self, size: Size) -> Size: ...

    def save_product(self, product: Product) -> Product: ...

    def save_performa_invoice(self, invoice: PerformaInvoice) -> PerformaInvoice: ...

    def save_purchase_order(self, order: PurchaseOrder) -> PurchaseOrder: ...

"""Dict-backed entity store for tests and callers without a database."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from tradedoc_kernel.domain.entities import (
    Bill,
    EntitySnapshot,
    ExportDocument,
    ManuBill,
    Party,
    PartyType,
    PerformaInvoice,
    Product,
    PurchaseOrder,
    Size,
    SupplyBill,
    Transaction,
    TransBill,
    with_recomputed_pallets,
)
from tradedoc_kernel.exceptions import (
    AmbiguousPartyError,
    EntityNotFoundError,
    ExportDocumentNotFoundError,
)
from tradedoc_kernel.logging_config import get_logger
from tradedoc_kernel.store.base import RecordKind

logger = get_logger("store.memory")

_BILL_KINDS: dict[type, RecordKind] = {
    ManuBill: RecordKind.MANU_BILL,
    TransBill: RecordKind.TRANS_BILL,
    SupplyBill: RecordKind.SUPPLY_BILL,
}


def _key(kind: RecordKind, record: Any) -> Any:
    """Parties are keyed by (party_type, id); every other table by id."""
    if kind is RecordKind.PARTY:
        return (record.party_type.value, str(record.id))
    return str(record.id)


class InMemoryEntityStore:
    """
    Entity store holding every table in insertion-ordered dicts.

    Saving a record with an existing key (id, or party type and id for
    parties) replaces it in place, keeping its original position.
    """

    def __init__(self, snapshot: EntitySnapshot | None = None) -> None:
        self._tables: dict[RecordKind, dict[Any, Any]] = {kind: {} for kind in RecordKind}
        if snapshot is not None:
            self._seed(snapshot)

    def _seed(self, snapshot: EntitySnapshot) -> None:
        for size in snapshot.sizes:
            self._put(RecordKind.SIZE, size)
        for product in snapshot.products:
            self._put(RecordKind.PRODUCT, product)
        for party in snapshot.parties:
            self._put(RecordKind.PARTY, party)
        for invoice in snapshot.performa_invoices:
            self._put(RecordKind.PERFORMA_INVOICE, invoice)
        for order in snapshot.purchase_orders:
            self._put(RecordKind.PURCHASE_ORDER, order)
        for document in snapshot.export_documents:
            self._put(RecordKind.EXPORT_DOCUMENT, with_recomputed_pallets(document))
        for bill in snapshot.bills():
            self._put(_BILL_KINDS[type(bill)], bill)
        for transaction in snapshot.transactions:
            self._put(RecordKind.TRANSACTION, transaction)

    def _put(self, kind: RecordKind, record: Any) -> Any:
        self._tables[kind][_key(kind, record)] = record
        logger.debug("record_saved", extra={"kind": kind.value, "record_id": record.id})
        return record

    def _values(self, kind: RecordKind) -> tuple[Any, ...]:
        return tuple(self._tables[kind].values())

    # -- reads ---------------------------------------------------------------

    def load_snapshot(self) -> EntitySnapshot:
        return EntitySnapshot(
            sizes=self._values(RecordKind.SIZE),
            products=self._values(RecordKind.PRODUCT),
            parties=self._values(RecordKind.PARTY),
            performa_invoices=self._values(RecordKind.PERFORMA_INVOICE),
            purchase_orders=self._values(RecordKind.PURCHASE_ORDER),
            export_documents=self._values(RecordKind.EXPORT_DOCUMENT),
            manu_bills=self._values(RecordKind.MANU_BILL),
            trans_bills=self._values(RecordKind.TRANS_BILL),
            supply_bills=self._values(RecordKind.SUPPLY_BILL),
            transactions=self._values(RecordKind.TRANSACTION),
        )

    def get_export_document(self, document_id: str) -> ExportDocument:
        document = self._tables[RecordKind.EXPORT_DOCUMENT].get(str(document_id))
        if document is None or document.is_deleted:
            raise ExportDocumentNotFoundError(str(document_id))
        return document

    # -- writes --------------------------------------------------------------

    def save_export_document(self, document: ExportDocument) -> ExportDocument:
        return self._put(RecordKind.EXPORT_DOCUMENT, with_recomputed_pallets(document))

    def soft_delete(
        self,
        kind: RecordKind | str,
        record_id: str,
        *,
        party_type: PartyType | str | None = None,
    ) -> None:
        kind = RecordKind(kind)
        table = self._tables[kind]
        record_id = str(record_id)
        if kind is RecordKind.PARTY:
            types = (
                [PartyType(party_type).value] if party_type is not None
                else [ptype for ptype, pid in table if pid == record_id]
            )
            if len(types) > 1:
                raise AmbiguousPartyError(record_id, tuple(types))
            key: Any = (types[0] if types else None, record_id)
        else:
            key = record_id
        record = table.get(key)
        if record is None:
            raise EntityNotFoundError(kind.value, record_id)
        table[key] = replace(record, is_deleted=True)
        logger.info("record_soft_deleted", extra={"kind": kind.value, "record_id": record_id})

    def save_bill(self, bill: Bill) -> Bill:
        return self._put(_BILL_KINDS[type(bill)], bill)

    def save_transaction(self, transaction: Transaction) -> Transaction:
        return self._put(RecordKind.TRANSACTION, transaction)

    def save_party(self, party: Party) -> Party:
        return self._put(RecordKind.PARTY, party)

    def save_size(self, size: Size) -> Size:
        return self._put(RecordKind.SIZE, size)

    def save_product(self, product: Product) -> Product:
        return self._put(RecordKind.PRODUCT, product)

    def save_performa_invoice(self, invoice: PerformaInvoice) -> PerformaInvoice:
        return self._put(RecordKind.PERFORMA_INVOICE, invoice)

    def save_purchase_order(self, order: PurchaseOrder) -> PurchaseOrder:
        return self._put(RecordKind.PURCHASE_ORDER, order)

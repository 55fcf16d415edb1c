"""
SqlEntityStore -- SQLAlchemy-backed entity store.

Responsibility:
    Maps every ``EntityStore`` operation onto the ORM models in
    ``tradedoc_kernel.models``, converting with ``to_dto()`` / ``from_dto()``.

Architecture position:
    Kernel > Store.  Accepts a Session from the caller.

Invariants enforced:
    - Transaction boundaries: the store flushes within the caller's
      transaction and never commits or rolls back.  Wrap calls in
      ``session_scope()`` (or commit the session yourself).
    - Saves are upserts by primary key (``Session.merge``); parties are
      keyed by ``(id, party_type)``.
    - Snapshot rows are ordered by creation time, then id, so repeated
      loads of the same data produce the same snapshot.

Failure modes:
    - ``ExportDocumentNotFoundError`` / ``EntityNotFoundError`` as per the
      ``EntityStore`` contract.
    - SQLAlchemy errors propagate unchanged.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

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
from tradedoc_kernel.models import (
    ExportDocumentModel,
    ManuBillModel,
    PartyModel,
    PerformaInvoiceModel,
    ProductModel,
    PurchaseOrderModel,
    SizeModel,
    SupplyBillModel,
    TransactionModel,
    TransBillModel,
)
from tradedoc_kernel.store.base import RecordKind

logger = get_logger("store.sql")

_MODELS: dict[RecordKind, type] = {
    RecordKind.SIZE: SizeModel,
    RecordKind.PRODUCT: ProductModel,
    RecordKind.PARTY: PartyModel,
    RecordKind.PERFORMA_INVOICE: PerformaInvoiceModel,
    RecordKind.PURCHASE_ORDER: PurchaseOrderModel,
    RecordKind.EXPORT_DOCUMENT: ExportDocumentModel,
    RecordKind.MANU_BILL: ManuBillModel,
    RecordKind.TRANS_BILL: TransBillModel,
    RecordKind.SUPPLY_BILL: SupplyBillModel,
    RecordKind.TRANSACTION: TransactionModel,
}

_BILL_MODELS: dict[type, type] = {
    ManuBill: ManuBillModel,
    TransBill: TransBillModel,
    SupplyBill: SupplyBillModel,
}


class SqlEntityStore:
    """Entity store over a caller-owned SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session

    def _all(self, kind: RecordKind) -> tuple[Any, ...]:
        model = _MODELS[kind]
        rows = self.session.scalars(select(model).order_by(model.created_at, model.id))
        return tuple(row.to_dto() for row in rows)

    def _merge(self, model: type, dto: Any) -> Any:
        self.session.merge(model.from_dto(dto))
        self.session.flush()
        logger.debug(
            "record_saved",
            extra={"table": model.__tablename__, "record_id": dto.id},
        )
        return dto

    # -- reads ---------------------------------------------------------------

    def load_snapshot(self) -> EntitySnapshot:
        snapshot = EntitySnapshot(
            sizes=self._all(RecordKind.SIZE),
            products=self._all(RecordKind.PRODUCT),
            parties=self._all(RecordKind.PARTY),
            performa_invoices=self._all(RecordKind.PERFORMA_INVOICE),
            purchase_orders=self._all(RecordKind.PURCHASE_ORDER),
            export_documents=self._all(RecordKind.EXPORT_DOCUMENT),
            manu_bills=self._all(RecordKind.MANU_BILL),
            trans_bills=self._all(RecordKind.TRANS_BILL),
            supply_bills=self._all(RecordKind.SUPPLY_BILL),
            transactions=self._all(RecordKind.TRANSACTION),
        )
        logger.debug(
            "snapshot_loaded",
            extra={
                "export_documents": len(snapshot.export_documents),
                "transactions": len(snapshot.transactions),
            },
        )
        return snapshot

    def get_export_document(self, document_id: str) -> ExportDocument:
        row = self.session.get(ExportDocumentModel, str(document_id))
        if row is None or row.is_deleted:
            raise ExportDocumentNotFoundError(str(document_id))
        return row.to_dto()

    # -- writes --------------------------------------------------------------

    def save_export_document(self, document: ExportDocument) -> ExportDocument:
        return self._merge(ExportDocumentModel, with_recomputed_pallets(document))

    def _party_row(self, party_id: str, party_type: PartyType | str | None) -> PartyModel | None:
        stmt = select(PartyModel).where(PartyModel.id == party_id)
        if party_type is not None:
            stmt = stmt.where(PartyModel.party_type == PartyType(party_type).value)
        rows = self.session.scalars(stmt.order_by(PartyModel.party_type)).all()
        if len(rows) > 1:
            raise AmbiguousPartyError(party_id, tuple(r.party_type for r in rows))
        return rows[0] if rows else None

    def soft_delete(
        self,
        kind: RecordKind | str,
        record_id: str,
        *,
        party_type: PartyType | str | None = None,
    ) -> None:
        kind = RecordKind(kind)
        if kind is RecordKind.PARTY:
            row = self._party_row(str(record_id), party_type)
        else:
            row = self.session.get(_MODELS[kind], str(record_id))
        if row is None:
            raise EntityNotFoundError(kind.value, str(record_id))
        row.is_deleted = True
        self.session.flush()
        logger.info("record_soft_deleted", extra={"kind": kind.value, "record_id": record_id})

    def save_bill(self, bill: Bill) -> Bill:
        return self._merge(_BILL_MODELS[type(bill)], bill)

    def save_transaction(self, transaction: Transaction) -> Transaction:
        return self._merge(TransactionModel, transaction)

    def save_party(self, party: Party) -> Party:
        return self._merge(PartyModel, party)

    def save_size(self, size: Size) -> Size:
        return self._merge(SizeModel, size)

    def save_product(self, product: Product) -> Product:
        return self._merge(ProductModel, product)

    def save_performa_invoice(self, invoice: PerformaInvoice) -> PerformaInvoice:
        return self._merge(PerformaInvoiceModel, invoice)

    def save_purchase_order(self, order: PurchaseOrder) -> PurchaseOrder:
        return self._merge(PurchaseOrderModel, order)

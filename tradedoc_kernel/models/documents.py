"""
Module: tradedoc_kernel.models.documents
Responsibility: ORM persistence for performa invoices, purchase orders and
    export documents.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ only.

Invariants enforced:
    - Line items, containers and manufacturer details are owned by their
      parent document and are stored as JSON arrays on the parent row; they
      are never shared across documents.
    - Decimal values inside JSON are stored as strings, never floats.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Date, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import TrackedBase
from tradedoc_kernel.domain.entities import (
    ExportDocument,
    PerformaInvoice,
    PurchaseOrder,
    to_record,
)

# ---------------------------------------------------------------------------
# PerformaInvoiceModel
# ---------------------------------------------------------------------------


class PerformaInvoiceModel(TrackedBase):
    """ORM model for ``PerformaInvoice``."""

    __tablename__ = "performa_invoices"

    __table_args__ = (Index("idx_performa_client", "client_id"),)

    exporter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    currency_type: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    final_destination: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    total_container: Mapped[int] = mapped_column(nullable=False, default=0)
    container_size: Mapped[str] = mapped_column(String(20), nullable=False, default="20 ft")
    freight: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    terms_and_conditions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def to_dto(self) -> PerformaInvoice:
        return PerformaInvoice(
            id=self.id,
            exporter_id=self.exporter_id,
            client_id=self.client_id,
            invoice_number=self.invoice_number,
            invoice_date=self.invoice_date,
            currency_type=self.currency_type,
            final_destination=self.final_destination,
            total_container=self.total_container,
            container_size=self.container_size,
            freight=self.freight,
            discount=self.discount,
            terms_and_conditions=self.terms_and_conditions,
            note=self.note,
            items=self.items or (),
            is_deleted=self.is_deleted,
        )

    @classmethod
    def from_dto(cls, dto: PerformaInvoice) -> "PerformaInvoiceModel":
        return cls(
            id=dto.id,
            exporter_id=dto.exporter_id,
            client_id=dto.client_id,
            invoice_number=dto.invoice_number,
            invoice_date=dto.invoice_date,
            currency_type=dto.currency_type,
            final_destination=dto.final_destination,
            total_container=dto.total_container,
            container_size=dto.container_size,
            freight=dto.freight,
            discount=dto.discount,
            terms_and_conditions=dto.terms_and_conditions,
            note=dto.note,
            items=to_record(dto.items),
            is_deleted=dto.is_deleted,
        )

    def __repr__(self) -> str:
        return f"<PerformaInvoiceModel {self.invoice_number} ({self.client_id})>"


# ---------------------------------------------------------------------------
# PurchaseOrderModel
# ---------------------------------------------------------------------------


class PurchaseOrderModel(TrackedBase):
    """ORM model for ``PurchaseOrder``."""

    __tablename__ = "purchase_orders"

    __table_args__ = (Index("idx_purchase_order_source_pi", "source_pi_id"),)

    source_pi_id: Mapped[str] = mapped_column(String(64), nullable=False)
    exporter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    manufacturer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    po_number: Mapped[str] = mapped_column(String(64), nullable=False)
    po_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    size_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    number_of_containers: Mapped[int] = mapped_column(nullable=False, default=0)
    terms_and_conditions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def to_dto(self) -> PurchaseOrder:
        return PurchaseOrder(
            id=self.id,
            source_pi_id=self.source_pi_id,
            exporter_id=self.exporter_id,
            manufacturer_id=self.manufacturer_id,
            po_number=self.po_number,
            po_date=self.po_date,
            size_id=self.size_id,
            number_of_containers=self.number_of_containers,
            terms_and_conditions=self.terms_and_conditions,
            items=self.items or (),
            is_deleted=self.is_deleted,
        )

    @classmethod
    def from_dto(cls, dto: PurchaseOrder) -> "PurchaseOrderModel":
        return cls(
            id=dto.id,
            source_pi_id=dto.source_pi_id,
            exporter_id=dto.exporter_id,
            manufacturer_id=dto.manufacturer_id,
            po_number=dto.po_number,
            po_date=dto.po_date,
            size_id=dto.size_id,
            number_of_containers=dto.number_of_containers,
            terms_and_conditions=dto.terms_and_conditions,
            items=to_record(dto.items),
            is_deleted=dto.is_deleted,
        )

    def __repr__(self) -> str:
        return f"<PurchaseOrderModel {self.po_number}>"


# ---------------------------------------------------------------------------
# ExportDocumentModel
# ---------------------------------------------------------------------------

# Scalar columns that map one-to-one onto ExportDocument fields.
_EXPORT_SCALARS = (
    "exporter_id",
    "client_id",
    "transporter_id",
    "export_invoice_number",
    "export_invoice_date",
    "performa_invoice_id",
    "purchase_order_id",
    "conversation_rate",
    "gst",
    "freight",
    "discount",
    "country_of_origin",
    "country_of_final_destination",
    "vessel_flight_no",
    "port_of_loading",
    "port_of_discharge",
    "final_destination",
    "terms_of_delivery_and_payment",
    "exchange_notification",
    "exchange_date",
    "eway_bill_number",
    "eway_bill_date",
    "eway_bill_document",
    "shipping_bill_number",
    "shipping_bill_date",
    "shipping_bill_document",
    "bl_number",
    "bl_date",
    "bl_document",
    "is_deleted",
)


class ExportDocumentModel(TrackedBase):
    """
    ORM model for ``ExportDocument``.

    Contract:
        Containers (with their product and sample lines) and manufacturer
        details are persisted as JSON on the document row.  Callers go
        through the entity store, which recomputes container pallet totals
        before the row is written.
    """

    __tablename__ = "export_documents"

    __table_args__ = (
        Index("idx_export_document_client", "client_id"),
        Index("idx_export_document_number", "export_invoice_number"),
    )

    exporter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    transporter_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    export_invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    export_invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    performa_invoice_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    purchase_order_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    manufacturer_details: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    container_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    conversation_rate: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    gst: Mapped[str] = mapped_column(String(10), nullable=False, default="0%")
    freight: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    country_of_origin: Mapped[str] = mapped_column(String(100), nullable=False, default="INDIA")
    country_of_final_destination: Mapped[str] = mapped_column(default="")
    vessel_flight_no: Mapped[str] = mapped_column(default="")
    port_of_loading: Mapped[str] = mapped_column(default="")
    port_of_discharge: Mapped[str] = mapped_column(default="")
    final_destination: Mapped[str] = mapped_column(default="")
    terms_of_delivery_and_payment: Mapped[str] = mapped_column(Text, default="")
    exchange_notification: Mapped[str] = mapped_column(default="")
    exchange_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    eway_bill_number: Mapped[str | None] = mapped_column(nullable=True)
    eway_bill_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    eway_bill_document: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    shipping_bill_number: Mapped[str | None] = mapped_column(nullable=True)
    shipping_bill_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    shipping_bill_document: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    bl_number: Mapped[str | None] = mapped_column(nullable=True)
    bl_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    bl_document: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    def to_dto(self) -> ExportDocument:
        return ExportDocument(
            id=self.id,
            manufacturer_details=self.manufacturer_details or (),
            container_items=self.container_items or (),
            **{name: getattr(self, name) for name in _EXPORT_SCALARS},
        )

    @classmethod
    def from_dto(cls, dto: ExportDocument) -> "ExportDocumentModel":
        return cls(
            id=dto.id,
            manufacturer_details=to_record(dto.manufacturer_details),
            container_items=to_record(dto.container_items),
            **{name: getattr(dto, name) for name in _EXPORT_SCALARS},
        )

    def __repr__(self) -> str:
        return f"<ExportDocumentModel {self.export_invoice_number} ({self.client_id})>"

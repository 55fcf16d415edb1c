"""
Module: tradedoc_kernel.models.bills
Responsibility: ORM persistence for the three bill kinds raised against an
    export document: manufacturer bills, supply bills and transporter bills.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ only.

Invariants enforced:
    - Each bill kind has its own table; the kind is the table.
    - ``grand_total`` / ``total_payable`` are nullable: NULL means the bill
      was saved before its totals were computed and is payable as zero.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Date, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import TrackedBase
from tradedoc_kernel.domain.entities import ManuBill, SupplyBill, TransBill, to_record

_GOODS_BILL_SCALARS = (
    "export_document_id",
    "invoice_number",
    "invoice_date",
    "sub_total",
    "discount_amount",
    "insurance_amount",
    "freight_amount",
    "final_sub_total",
    "central_tax_rate",
    "central_tax_amount",
    "state_tax_rate",
    "state_tax_amount",
    "round_off",
    "grand_total",
    "remarks",
    "is_deleted",
)


class _GoodsBillColumns:
    """Columns shared by manufacturer and supply bills."""

    export_document_id: Mapped[str] = mapped_column(String(64), nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    sub_total: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    discount_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    insurance_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    freight_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    final_sub_total: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    central_tax_rate: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    central_tax_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    state_tax_rate: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    state_tax_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    round_off: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    grand_total: Mapped[Decimal | None] = mapped_column(nullable=True)
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")


# ---------------------------------------------------------------------------
# ManuBillModel
# ---------------------------------------------------------------------------


class ManuBillModel(_GoodsBillColumns, TrackedBase):
    """ORM model for ``ManuBill``."""

    __tablename__ = "manu_bills"

    __table_args__ = (Index("idx_manu_bill_manufacturer", "manufacturer_id"),)

    manufacturer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    transporter_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    def to_dto(self) -> ManuBill:
        return ManuBill(
            id=self.id,
            manufacturer_id=self.manufacturer_id,
            transporter_id=self.transporter_id,
            items=self.items or (),
            **{name: getattr(self, name) for name in _GOODS_BILL_SCALARS},
        )

    @classmethod
    def from_dto(cls, dto: ManuBill) -> "ManuBillModel":
        return cls(
            id=dto.id,
            manufacturer_id=dto.manufacturer_id,
            transporter_id=dto.transporter_id,
            items=to_record(dto.items),
            **{name: getattr(dto, name) for name in _GOODS_BILL_SCALARS},
        )

    def __repr__(self) -> str:
        return f"<ManuBillModel {self.invoice_number} ({self.manufacturer_id})>"


# ---------------------------------------------------------------------------
# SupplyBillModel
# ---------------------------------------------------------------------------


class SupplyBillModel(_GoodsBillColumns, TrackedBase):
    """ORM model for ``SupplyBill``.  ``supplier_id`` may be a pallet vendor."""

    __tablename__ = "supply_bills"

    __table_args__ = (Index("idx_supply_bill_supplier", "supplier_id"),)

    supplier_id: Mapped[str] = mapped_column(String(64), nullable=False)

    def to_dto(self) -> SupplyBill:
        return SupplyBill(
            id=self.id,
            supplier_id=self.supplier_id,
            items=self.items or (),
            **{name: getattr(self, name) for name in _GOODS_BILL_SCALARS},
        )

    @classmethod
    def from_dto(cls, dto: SupplyBill) -> "SupplyBillModel":
        return cls(
            id=dto.id,
            supplier_id=dto.supplier_id,
            items=to_record(dto.items),
            **{name: getattr(dto, name) for name in _GOODS_BILL_SCALARS},
        )

    def __repr__(self) -> str:
        return f"<SupplyBillModel {self.invoice_number} ({self.supplier_id})>"


# ---------------------------------------------------------------------------
# TransBillModel
# ---------------------------------------------------------------------------

_TRANS_BILL_SCALARS = (
    "export_document_id",
    "transporter_id",
    "invoice_number",
    "invoice_date",
    "job_no",
    "shipping_line",
    "container_no",
    "sub_total",
    "cgst_rate",
    "cgst_amount",
    "sgst_rate",
    "sgst_amount",
    "total_tax",
    "total_after_tax",
    "round_off",
    "total_payable",
    "remarks",
    "is_deleted",
)


class TransBillModel(TrackedBase):
    """ORM model for ``TransBill``."""

    __tablename__ = "trans_bills"

    __table_args__ = (Index("idx_trans_bill_transporter", "transporter_id"),)

    export_document_id: Mapped[str] = mapped_column(String(64), nullable=False)
    transporter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    job_no: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    shipping_line: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    container_no: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    sub_total: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    cgst_rate: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    cgst_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    sgst_rate: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    sgst_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_tax: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_after_tax: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    round_off: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_payable: Mapped[Decimal | None] = mapped_column(nullable=True)
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def to_dto(self) -> TransBill:
        return TransBill(
            id=self.id,
            items=self.items or (),
            **{name: getattr(self, name) for name in _TRANS_BILL_SCALARS},
        )

    @classmethod
    def from_dto(cls, dto: TransBill) -> "TransBillModel":
        return cls(
            id=dto.id,
            items=to_record(dto.items),
            **{name: getattr(dto, name) for name in _TRANS_BILL_SCALARS},
        )

    def __repr__(self) -> str:
        return f"<TransBillModel {self.invoice_number} ({self.transporter_id})>"

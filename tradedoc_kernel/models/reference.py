"""
Module: tradedoc_kernel.models.reference
Responsibility: ORM persistence for tile reference data -- sizes and the
    product designs made in each size.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ (for DTO conversion) only.

Invariants enforced:
    - Product price and box weight are nullable: NULL means "fall back to
      the size value", which is different from an explicit zero.
"""

from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import TrackedBase
from tradedoc_kernel.domain.entities import Product, Size


class SizeModel(TrackedBase):
    """ORM model for ``Size``."""

    __tablename__ = "sizes"

    label: Mapped[str] = mapped_column(String(100), nullable=False)
    sqm_per_box: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    box_weight: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    purchase_price: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    sales_price: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    hsn_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    pallet_details: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    def to_dto(self) -> Size:
        return Size(
            id=self.id,
            label=self.label,
            sqm_per_box=self.sqm_per_box,
            box_weight=self.box_weight,
            purchase_price=self.purchase_price,
            sales_price=self.sales_price,
            hsn_code=self.hsn_code,
            pallet_details=self.pallet_details,
            is_deleted=self.is_deleted,
        )

    @classmethod
    def from_dto(cls, dto: Size) -> "SizeModel":
        return cls(
            id=dto.id,
            label=dto.label,
            sqm_per_box=dto.sqm_per_box,
            box_weight=dto.box_weight,
            purchase_price=dto.purchase_price,
            sales_price=dto.sales_price,
            hsn_code=dto.hsn_code,
            pallet_details=dto.pallet_details,
            is_deleted=dto.is_deleted,
        )

    def __repr__(self) -> str:
        return f"<SizeModel {self.id}: {self.label}>"


class ProductModel(TrackedBase):
    """ORM model for ``Product``."""

    __tablename__ = "products"

    __table_args__ = (Index("idx_product_size", "size_id"),)

    size_id: Mapped[str] = mapped_column(String(64), nullable=False)
    design_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sales_price: Mapped[Decimal | None] = mapped_column(nullable=True)
    box_weight: Mapped[Decimal | None] = mapped_column(nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    def to_dto(self) -> Product:
        return Product(
            id=self.id,
            size_id=self.size_id,
            design_name=self.design_name,
            sales_price=self.sales_price,
            box_weight=self.box_weight,
            image_url=self.image_url,
            is_deleted=self.is_deleted,
        )

    @classmethod
    def from_dto(cls, dto: Product) -> "ProductModel":
        return cls(
            id=dto.id,
            size_id=dto.size_id,
            design_name=dto.design_name,
            sales_price=dto.sales_price,
            box_weight=dto.box_weight,
            image_url=dto.image_url,
            is_deleted=dto.is_deleted,
        )

    def __repr__(self) -> str:
        return f"<ProductModel {self.id}: {self.design_name}>"

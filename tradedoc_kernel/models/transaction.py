"""
Module: tradedoc_kernel.models.transaction
Responsibility: ORM persistence for payments made and received.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ only.

Invariants enforced:
    - ``transaction_type`` is 'credit' (paid by the business) or 'debit'
      (received by the business).
    - ``related_invoices`` is a JSON list of ``{"type", "id"}`` references.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import TrackedBase
from tradedoc_kernel.domain.entities import Transaction, to_record


class TransactionModel(TrackedBase):
    """ORM model for ``Transaction``."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transaction_party", "party_type", "party_id"),
        Index("idx_transaction_type", "transaction_type"),
    )

    transaction_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    transaction_type: Mapped[str] = mapped_column(String(10), nullable=False)
    party_type: Mapped[str] = mapped_column(String(20), nullable=False)
    party_id: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    description: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    related_invoices: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def to_dto(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=self.transaction_date,
            type=self.transaction_type,
            party_type=self.party_type,
            party_id=self.party_id,
            amount=self.amount,
            currency=self.currency,
            description=self.description,
            related_invoices=self.related_invoices or (),
            is_deleted=self.is_deleted,
        )

    @classmethod
    def from_dto(cls, dto: Transaction) -> "TransactionModel":
        return cls(
            id=dto.id,
            transaction_date=dto.date,
            transaction_type=dto.type.value,
            party_type=dto.party_type.value,
            party_id=dto.party_id,
            amount=dto.amount,
            currency=dto.currency,
            description=dto.description,
            related_invoices=to_record(dto.related_invoices),
            is_deleted=dto.is_deleted,
        )

    def __repr__(self) -> str:
        return (
            f"<TransactionModel {self.id}: {self.transaction_type} "
            f"{self.amount} {self.currency} ({self.party_type}/{self.party_id})>"
        )

"""
Module: tradedoc_kernel.models.party
Responsibility: ORM persistence for every counterparty -- the exporter
    company, clients, manufacturers, transporters, suppliers and pallet
    vendors share one table keyed by ``(id, party_type)``.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ only.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import TrackedBase
from tradedoc_kernel.domain.entities import Party, PartyType


class PartyModel(TrackedBase):
    """
    ORM model for ``Party``.

    Guarantees:
        - party_type stores the PartyType enum .value string.
        - (id, party_type) is the primary key: each party type numbers its
          own records, so manufacturer "1" and client "1" are distinct rows.
    """

    __tablename__ = "parties"

    __table_args__ = (Index("idx_party_type", "party_type"),)

    party_type: Mapped[str] = mapped_column(String(20), primary_key=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    gst_number: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    address: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    contact_person: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    iec_number: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    stuffing_permission_number: Mapped[str] = mapped_column(
        String(100), nullable=False, default="",
    )

    def to_dto(self) -> Party:
        return Party(
            id=self.id,
            party_type=PartyType(self.party_type),
            company_name=self.company_name,
            gst_number=self.gst_number,
            address=self.address,
            contact_person=self.contact_person,
            iec_number=self.iec_number,
            stuffing_permission_number=self.stuffing_permission_number,
            is_deleted=self.is_deleted,
        )

    @classmethod
    def from_dto(cls, dto: Party) -> "PartyModel":
        return cls(
            id=dto.id,
            party_type=dto.party_type.value,
            company_name=dto.company_name,
            gst_number=dto.gst_number,
            address=dto.address,
            contact_person=dto.contact_person,
            iec_number=dto.iec_number,
            stuffing_permission_number=dto.stuffing_permission_number,
            is_deleted=dto.is_deleted,
        )

    def __repr__(self) -> str:
        return f"<PartyModel {self.id}: {self.company_name} ({self.party_type})>"

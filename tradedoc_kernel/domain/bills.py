"""
Uniform accessors over the ``Bill`` union.

Manufacturer and supply bills store their payable as ``grand_total`` and
their tax as central + state; transporter bills store ``total_payable`` and
``total_tax``.  Engines go through these helpers instead of branching on
field names.
"""

from __future__ import annotations

from decimal import Decimal

from tradedoc_kernel.domain.entities import (
    Bill,
    BillKind,
    ManuBill,
    PartyType,
    SupplyBill,
    TransBill,
)

BILL_KIND_FOR_PARTY: dict[PartyType, BillKind] = {
    PartyType.MANUFACTURER: BillKind.MANUFACTURER,
    PartyType.TRANSPORTER: BillKind.TRANSPORT,
    PartyType.SUPPLIER: BillKind.SUPPLY,
    # Pallet vendors raise supply bills.
    PartyType.PALLET: BillKind.SUPPLY,
}

BILL_CLASSES: dict[BillKind, type] = {
    BillKind.MANUFACTURER: ManuBill,
    BillKind.TRANSPORT: TransBill,
    BillKind.SUPPLY: SupplyBill,
}

BILL_TYPE_LABELS: dict[BillKind, str] = {
    BillKind.MANUFACTURER: "Manufacturer",
    BillKind.TRANSPORT: "Transport",
    BillKind.SUPPLY: "Supply",
}


def payable_amount(bill: Bill) -> Decimal:
    """Total payable on the bill; 0 when never computed."""
    if isinstance(bill, TransBill):
        total = bill.total_payable
    else:
        total = bill.grand_total
    return total if total is not None else Decimal("0")


def tax_amount(bill: Bill) -> Decimal:
    """GST charged on the bill."""
    if isinstance(bill, TransBill):
        return bill.total_tax
    return bill.central_tax_amount + bill.state_tax_amount


def party_id(bill: Bill) -> str:
    """Id of the vendor that raised the bill."""
    return str(getattr(bill, bill.party_field))

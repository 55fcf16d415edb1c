"""
GST Summary Builder - input tax paid on bills against refunds received.

Pure functions with no I/O.

Rules:
    - GST paid on a manufacturer or supply bill = central + state tax;
      on a transporter bill = total tax
    - a bill is listed only when its GST is strictly above the noise
      threshold (1 rupee); deleted bills are never listed
    - GST received = payments from the government with party type GST
      and type CREDIT
    - remaining GST = total paid - total received
    - paid rows are searched on party name or invoice number, received
      rows on description; both are paged like ledger sides

Usage:
    from tradedoc_engines.gst import build_gst_summary

    summary = build_gst_summary(
        snapshot.manu_bills, snapshot.trans_bills, snapshot.supply_bills,
        snapshot.transactions, snapshot.parties,
    )
    print(summary.remaining_gst)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from tradedoc_kernel.domain.bills import BILL_TYPE_LABELS, party_id, tax_amount
from tradedoc_kernel.domain.entities import (
    Bill,
    BillKind,
    ManuBill,
    Party,
    PartyType,
    SupplyBill,
    Transaction,
    TransactionType,
    TransBill,
)
from tradedoc_kernel.domain.values import ZERO
from tradedoc_kernel.logging_config import get_logger
from tradedoc_engines.ledger import (
    DEFAULT_PAGE_SIZE,
    LedgerItem,
    LedgerPage,
    ledger_page,
    matches_search,
    paginate,
    payment_ledger_item,
    sort_newest_first,
)
from tradedoc_engines.tracer import traced_engine

logger = get_logger("engines.gst")

PAID_NOISE_THRESHOLD = Decimal("1")
UNKNOWN_PARTY = "Unknown"

# Party tables searched for each bill kind, in order.
_PARTY_TYPES_FOR_BILL: dict[BillKind, tuple[PartyType, ...]] = {
    BillKind.MANUFACTURER: (PartyType.MANUFACTURER,),
    BillKind.TRANSPORT: (PartyType.TRANSPORTER,),
    BillKind.SUPPLY: (PartyType.SUPPLIER, PartyType.PALLET),
}


@dataclass(frozen=True)
class GstPaidItem:
    """GST charged on one bill."""

    id: str
    date: date | None
    invoice_number: str
    party_name: str
    gst_amount: Decimal
    type: str
    bill_kind: BillKind


@dataclass(frozen=True)
class GstPaidPage:
    items: tuple[GstPaidItem, ...]
    page: int
    total_pages: int
    total_items: int


@dataclass(frozen=True)
class GstSummary:
    gst_paid_items: tuple[GstPaidItem, ...]
    gst_received_items: tuple[LedgerItem, ...]
    total_gst_paid: Decimal
    total_gst_received: Decimal
    remaining_gst: Decimal
    paid_page: GstPaidPage
    received_page: LedgerPage


def _party_names(parties: Iterable[Party]) -> dict[tuple[PartyType, str], str]:
    return {(p.party_type, str(p.id)): p.company_name for p in parties}


def resolve_party_name(bill: Bill, names: dict[tuple[PartyType, str], str]) -> str:
    """Company name of the vendor on ``bill``; ``"Unknown"`` when not found."""
    pid = party_id(bill)
    for ptype in _PARTY_TYPES_FOR_BILL[bill.kind]:
        name = names.get((ptype, pid))
        if name is not None:
            return name
    return UNKNOWN_PARTY


def gst_paid_items(
    bills: Iterable[Bill],
    parties: Iterable[Party],
    threshold: Decimal = PAID_NOISE_THRESHOLD,
) -> tuple[GstPaidItem, ...]:
    """Listed GST-paid rows, newest first."""
    names = _party_names(parties)
    items = []
    for bill in bills:
        if bill.is_deleted:
            continue
        gst_amount = tax_amount(bill)
        if not gst_amount > threshold:
            continue
        items.append(
            GstPaidItem(
                id=str(bill.id),
                date=bill.invoice_date,
                invoice_number=bill.invoice_number,
                party_name=resolve_party_name(bill, names),
                gst_amount=gst_amount,
                type=BILL_TYPE_LABELS[bill.kind],
                bill_kind=bill.kind,
            )
        )
    return tuple(sorted(items, key=lambda i: i.date or date.min, reverse=True))


@traced_engine(
    "gst_summary", "1.0",
    fingerprint_fields=("paid_search", "received_search", "paid_page",
                        "received_page", "page_size", "threshold"),
)
def build_gst_summary(
    manu_bills: Iterable[ManuBill],
    trans_bills: Iterable[TransBill],
    supply_bills: Iterable[SupplyBill],
    transactions: Iterable[Transaction],
    parties: Iterable[Party],
    *,
    paid_search: str = "",
    received_search: str = "",
    paid_page: int = 1,
    received_page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    threshold: Decimal = PAID_NOISE_THRESHOLD,
) -> GstSummary:
    """
    GST paid, GST received and what is still to be refunded.

    Totals cover every listed row regardless of search and page.
    """
    bills: list[Bill] = [*manu_bills, *trans_bills, *supply_bills]
    paid_items = gst_paid_items(bills, parties, threshold)
    received_items = sort_newest_first(
        payment_ledger_item(t, "GST Refund")
        for t in transactions
        if not t.is_deleted
        and t.type == TransactionType.CREDIT
        and t.party_type == PartyType.GST
    )

    total_paid = sum((i.gst_amount for i in paid_items), ZERO)
    total_received = sum((i.amount for i in received_items), ZERO)

    filtered_paid = [
        i for i in paid_items
        if matches_search(paid_search, i.party_name, i.invoice_number)
    ]
    page_items, total_pages = paginate(filtered_paid, paid_page, page_size)

    logger.info(
        "gst_summary_built",
        extra={
            "paid_count": len(paid_items),
            "received_count": len(received_items),
            "remaining_gst": total_paid - total_received,
        },
    )
    return GstSummary(
        gst_paid_items=paid_items,
        gst_received_items=received_items,
        total_gst_paid=total_paid,
        total_gst_received=total_received,
        remaining_gst=total_paid - total_received,
        paid_page=GstPaidPage(
            items=page_items,
            page=paid_page,
            total_pages=total_pages,
            total_items=len(filtered_paid),
        ),
        received_page=ledger_page(received_items, received_search, received_page, page_size),
    )

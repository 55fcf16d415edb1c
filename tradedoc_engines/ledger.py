"""
Ledger Builder - debit/credit history for one counterparty.

Pure functions with no I/O.  Two ledgers share one shape:

    vendor ledger (manufacturer, transporter, supplier, pallet)
        debit  = bills raised by the vendor             ("Bill - <number>")
        credit = payments made to the vendor            (type CREDIT)

    client ledger
        debit  = export documents invoiced to the client (goods + freight)
        credit = payments received from the client      (type DEBIT)

Rules:
    - soft-deleted bills, documents and transactions are left out
    - both sides are sorted by date, newest first (stable; undated last)
    - balance = total debit - total credit, for every party type
    - totals cover the full lists; search and paging only shape the
      displayed pages, and each side is searched and paged independently

Usage:
    from tradedoc_engines.ledger import build_party_ledger

    ledger = build_party_ledger(
        PartyType.MANUFACTURER, "m1", snapshot.bills(), snapshot.transactions,
        debit_search="INV-7", debit_page=1,
    )
    print(ledger.balance, ledger.debit_page.items)
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from tradedoc_kernel.domain.bills import BILL_KIND_FOR_PARTY, payable_amount
from tradedoc_kernel.domain.bills import party_id as bill_party_id
from tradedoc_kernel.domain.entities import (
    Bill,
    BillKind,
    ExportDocument,
    PartyType,
    PerformaInvoice,
    Product,
    PurchaseOrder,
    RelatedInvoice,
    Size,
    Transaction,
    TransactionType,
)
from tradedoc_kernel.domain.values import ZERO
from tradedoc_kernel.exceptions import UnknownPartyTypeError
from tradedoc_kernel.logging_config import get_logger
from tradedoc_engines.line_items import document_total, index_by_id
from tradedoc_engines.tracer import traced_engine

logger = get_logger("engines.ledger")

DEFAULT_PAGE_SIZE = 5
BILL_CURRENCY = "INR"
DOCUMENT_CURRENCY = "USD"


@dataclass(frozen=True)
class LedgerItem:
    """One row of a ledger side."""

    id: str
    date: date | None
    description: str
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class LedgerPage:
    """
    One page of a filtered ledger side.

    ``total_items`` counts the filtered rows; ``total_pages`` is
    ``ceil(total_items / page_size)``.  A page outside ``1..total_pages``
    has no items.
    """

    items: tuple[LedgerItem, ...]
    page: int
    total_pages: int
    total_items: int


@dataclass(frozen=True)
class PartyLedger:
    party_type: PartyType
    party_id: str
    debit_items: tuple[LedgerItem, ...]
    credit_items: tuple[LedgerItem, ...]
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal
    debit_page: LedgerPage
    credit_page: LedgerPage


@dataclass(frozen=True)
class ClientLedger:
    client_id: str
    invoiced_items: tuple[LedgerItem, ...]
    payment_items: tuple[LedgerItem, ...]
    total_invoiced: Decimal
    total_received: Decimal
    balance: Decimal
    currency: str
    invoice_page: LedgerPage
    payment_page: LedgerPage


# ---------------------------------------------------------------------------
# Sorting, filtering, paging
# ---------------------------------------------------------------------------


def vendor_party_type(party_type: PartyType | str) -> PartyType:
    """
    Coerce ``party_type`` to a vendor ``PartyType``.

    Raises:
        UnknownPartyTypeError: not one of manufacturer, transporter,
            supplier or pallet.
    """
    try:
        ptype = PartyType(party_type)
    except ValueError:
        ptype = None
    if ptype not in BILL_KIND_FOR_PARTY:
        raise UnknownPartyTypeError(
            str(getattr(party_type, "value", party_type)),
            tuple(t.value for t in BILL_KIND_FOR_PARTY),
        )
    return ptype


def sort_newest_first(items: Iterable[LedgerItem]) -> tuple[LedgerItem, ...]:
    """Stable date-descending sort; undated rows go last."""
    return tuple(sorted(items, key=lambda i: i.date or date.min, reverse=True))


def matches_search(search: str, *values: str | None) -> bool:
    """Case-insensitive substring match against any of ``values``."""
    needle = (search or "").lower()
    return any(needle in (v or "").lower() for v in values)


def paginate(items: Sequence, page: int, page_size: int) -> tuple[tuple, int]:
    """(items on ``page``, total pages).  Pages are 1-based."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    total_pages = math.ceil(len(items) / page_size)
    if page < 1 or page > total_pages:
        return (), total_pages
    start = (page - 1) * page_size
    return tuple(items[start:start + page_size]), total_pages


def ledger_page(
    items: Sequence[LedgerItem],
    search: str = "",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    matcher: Callable[[LedgerItem, str], bool] | None = None,
) -> LedgerPage:
    """Filter ``items`` by ``search`` (description by default), then page."""
    match = matcher or (lambda item, s: matches_search(s, item.description))
    filtered = [item for item in items if match(item, search)]
    page_items, total_pages = paginate(filtered, page, page_size)
    return LedgerPage(
        items=page_items,
        page=page,
        total_pages=total_pages,
        total_items=len(filtered),
    )


def _total(items: Iterable[LedgerItem]) -> Decimal:
    return sum((i.amount for i in items), ZERO)


# ---------------------------------------------------------------------------
# Vendor ledger
# ---------------------------------------------------------------------------


def bill_ledger_item(bill: Bill, currency: str = BILL_CURRENCY) -> LedgerItem:
    return LedgerItem(
        id=f"bill_{bill.id}",
        date=bill.invoice_date,
        description=f"Bill - {bill.invoice_number}",
        amount=payable_amount(bill),
        currency=currency,
    )


def payment_ledger_item(transaction: Transaction, default_description: str) -> LedgerItem:
    return LedgerItem(
        id=str(transaction.id),
        date=transaction.date,
        description=transaction.description or default_description,
        amount=transaction.amount,
        currency=transaction.currency,
    )


def _party_payments(
    transactions: Iterable[Transaction],
    party_type: PartyType,
    pid: str,
    transaction_type: TransactionType,
    default_description: str,
) -> tuple[LedgerItem, ...]:
    return sort_newest_first(
        payment_ledger_item(t, default_description)
        for t in transactions
        if not t.is_deleted
        and t.party_type == party_type
        and str(t.party_id) == pid
        and t.type == transaction_type
    )


@traced_engine(
    "party_ledger", "1.0",
    fingerprint_fields=("party_type", "party_id", "debit_search", "credit_search",
                        "debit_page", "credit_page", "page_size"),
)
def build_party_ledger(
    party_type: PartyType | str,
    party_id: str,
    bills: Iterable[Bill],
    transactions: Iterable[Transaction],
    *,
    debit_search: str = "",
    credit_search: str = "",
    debit_page: int = 1,
    credit_page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    bill_currency: str = BILL_CURRENCY,
) -> PartyLedger:
    """
    Ledger of a manufacturer, transporter, supplier or pallet vendor.

    Pallet vendors bill through supply bills, so their debit side is the
    supply bills whose supplier is the pallet vendor.

    Raises:
        UnknownPartyTypeError: ``party_type`` is not a vendor type.
    """
    ptype = vendor_party_type(party_type)
    kind = BILL_KIND_FOR_PARTY[ptype]
    pid = str(party_id)

    debit_items = sort_newest_first(
        bill_ledger_item(b, bill_currency)
        for b in bills
        if b.kind == kind and not b.is_deleted and bill_party_id(b) == pid
    )
    credit_items = _party_payments(
        transactions, ptype, pid, TransactionType.CREDIT, "Payment",
    )

    total_debit = _total(debit_items)
    total_credit = _total(credit_items)

    logger.info(
        "party_ledger_built",
        extra={
            "party_type": ptype.value,
            "party_id": pid,
            "debit_count": len(debit_items),
            "credit_count": len(credit_items),
            "balance": total_debit - total_credit,
        },
    )
    return PartyLedger(
        party_type=ptype,
        party_id=pid,
        debit_items=debit_items,
        credit_items=credit_items,
        total_debit=total_debit,
        total_credit=total_credit,
        balance=total_debit - total_credit,
        debit_page=ledger_page(debit_items, debit_search, debit_page, page_size),
        credit_page=ledger_page(credit_items, credit_search, credit_page, page_size),
    )


# ---------------------------------------------------------------------------
# Client ledger
# ---------------------------------------------------------------------------


def _linked_performa_invoice(
    document: ExportDocument,
    purchase_orders: Mapping[str, PurchaseOrder],
    performa_invoices: Mapping[str, PerformaInvoice],
) -> PerformaInvoice | None:
    """PI behind a document: its own PI link, else purchase order -> source PI."""
    pi_id = document.performa_invoice_id
    if not pi_id and document.purchase_order_id:
        order = purchase_orders.get(str(document.purchase_order_id))
        if order is not None and not order.is_deleted:
            pi_id = order.source_pi_id
    if not pi_id:
        return None
    invoice = performa_invoices.get(str(pi_id))
    if invoice is None or invoice.is_deleted:
        return None
    return invoice


@traced_engine(
    "client_ledger", "1.0",
    fingerprint_fields=("client_id", "invoice_search", "payment_search",
                        "invoice_page", "payment_page", "page_size"),
)
def build_client_ledger(
    client_id: str,
    export_documents: Iterable[ExportDocument],
    purchase_orders: Iterable[PurchaseOrder] | Mapping[str, PurchaseOrder],
    performa_invoices: Iterable[PerformaInvoice] | Mapping[str, PerformaInvoice],
    products: Iterable[Product] | Mapping[str, Product],
    sizes: Iterable[Size] | Mapping[str, Size],
    transactions: Iterable[Transaction],
    *,
    invoice_search: str = "",
    payment_search: str = "",
    invoice_page: int = 1,
    payment_page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    default_currency: str = DOCUMENT_CURRENCY,
) -> ClientLedger:
    """
    Ledger of a client: export invoices against payments received.

    A document belongs to exactly one client: its own ``client_id`` when
    set, otherwise the client of the performa invoice it was raised from
    (directly or through its purchase order).  Invoice amount is the
    document's goods value (samples at zero) plus freight; currency comes
    from the linked performa invoice, else ``default_currency``.
    """
    cid = str(client_id)
    order_index = index_by_id(purchase_orders)
    invoice_index = index_by_id(performa_invoices)
    product_index = index_by_id(products)
    size_index = index_by_id(sizes)

    invoiced: list[LedgerItem] = []
    for document in export_documents:
        if document.is_deleted:
            continue
        performa = _linked_performa_invoice(document, order_index, invoice_index)
        if document.client_id:
            owner = str(document.client_id)
        else:
            owner = str(performa.client_id) if performa is not None else ""
        if owner != cid:
            continue
        totals = document_total(document, product_index, size_index)
        invoiced.append(
            LedgerItem(
                id=str(document.id),
                date=document.export_invoice_date,
                description=document.export_invoice_number,
                amount=totals.amount + document.freight,
                currency=(performa.currency_type if performa else "") or default_currency,
            )
        )
    invoiced_items = sort_newest_first(invoiced)
    payment_items = _party_payments(
        transactions, PartyType.CLIENT, cid, TransactionType.DEBIT, "Payment Received",
    )

    total_invoiced = _total(invoiced_items)
    total_received = _total(payment_items)
    # Single-currency summary: the newest invoice sets the display currency.
    currency = invoiced_items[0].currency if invoiced_items else default_currency

    logger.info(
        "client_ledger_built",
        extra={
            "client_id": cid,
            "invoice_count": len(invoiced_items),
            "payment_count": len(payment_items),
            "balance": total_invoiced - total_received,
        },
    )
    return ClientLedger(
        client_id=cid,
        invoiced_items=invoiced_items,
        payment_items=payment_items,
        total_invoiced=total_invoiced,
        total_received=total_received,
        balance=total_invoiced - total_received,
        currency=currency,
        invoice_page=ledger_page(invoiced_items, invoice_search, invoice_page, page_size),
        payment_page=ledger_page(payment_items, payment_search, payment_page, page_size),
    )


# ---------------------------------------------------------------------------
# Payment selection
# ---------------------------------------------------------------------------

_RELATED_KIND = {
    "manu": BillKind.MANUFACTURER,
    "trans": BillKind.TRANSPORT,
    "supply": BillKind.SUPPLY,
    BillKind.MANUFACTURER.value: BillKind.MANUFACTURER,
    BillKind.TRANSPORT.value: BillKind.TRANSPORT,
    BillKind.SUPPLY.value: BillKind.SUPPLY,
}


def _referenced_bills(
    related: Iterable[RelatedInvoice],
    bills: Iterable[Bill],
) -> list[Bill | None]:
    by_key = {(b.kind, str(b.id)): b for b in bills if not b.is_deleted}
    return [by_key.get((_RELATED_KIND.get(r.type), str(r.id))) for r in related]


def selected_invoice_total(
    related: Iterable[RelatedInvoice],
    bills: Iterable[Bill],
) -> Decimal:
    """
    Sum of the payable amounts of the bills a payment references.

    References to unknown or deleted bills add nothing.
    """
    return sum(
        (payable_amount(b) for b in _referenced_bills(related, bills) if b is not None),
        ZERO,
    )


def related_invoice_numbers(
    related: Iterable[RelatedInvoice],
    bills: Iterable[Bill],
) -> tuple[str, ...]:
    """Invoice numbers of referenced bills; ``"Unknown Bill"`` when unresolved."""
    return tuple(
        b.invoice_number if b is not None else "Unknown Bill"
        for b in _referenced_bills(related, bills)
    )

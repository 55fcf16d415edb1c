"""
tradedoc_services.ledger_service -- party and client ledgers over the store.

Responsibility:
    Resolve the party a ledger is requested for, load a snapshot and hand
    it to the ledger engine with the configured page size and currencies.

Architecture position:
    Services -- imperative shell over ``tradedoc_engines.ledger``.

Failure modes:
    - ``UnknownPartyTypeError`` when the party type has no ledger.
    - ``PartyNotFoundError`` when the party id is unknown or deleted.
      Missing data inside the ledger (a bill whose product is gone, an
      unlinked document) never raises.

Usage:
    service = LedgerService(store, get_active_config())
    report = service.party_ledger("manufacturer", "m1", debit_search="INV")
    print(report.party.company_name, report.ledger.balance)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from tradedoc_kernel.domain.entities import Party, PartyType, RelatedInvoice
from tradedoc_kernel.logging_config import LogContext
from tradedoc_engines.ledger import (
    ClientLedger,
    PartyLedger,
    build_client_ledger,
    build_party_ledger,
    related_invoice_numbers,
    selected_invoice_total,
    vendor_party_type,
)
from tradedoc_services._base import SnapshotService


@dataclass(frozen=True)
class PartyLedgerReport:
    party: Party
    ledger: PartyLedger


@dataclass(frozen=True)
class ClientLedgerReport:
    client: Party
    ledger: ClientLedger


class LedgerService(SnapshotService):
    """Ledgers for vendors (manufacturer, transporter, supplier, pallet) and clients."""

    def party_ledger(
        self,
        party_type: PartyType | str,
        party_id: str,
        *,
        debit_search: str = "",
        credit_search: str = "",
        debit_page: int = 1,
        credit_page: int = 1,
    ) -> PartyLedgerReport:
        ptype = vendor_party_type(party_type)
        with LogContext.bind(party_id=str(party_id)):
            snapshot = self._snapshot()
            party = self._require_party(snapshot, ptype, party_id)
            ledger = build_party_ledger(
                ptype,
                party_id,
                snapshot.bills(),
                snapshot.transactions,
                debit_search=debit_search,
                credit_search=credit_search,
                debit_page=debit_page,
                credit_page=credit_page,
                page_size=self._config.ledger.page_size,
                bill_currency=self._config.currency.bill_default,
            )
        return PartyLedgerReport(party=party, ledger=ledger)

    def client_ledger(
        self,
        client_id: str,
        *,
        invoice_search: str = "",
        payment_search: str = "",
        invoice_page: int = 1,
        payment_page: int = 1,
    ) -> ClientLedgerReport:
        with LogContext.bind(party_id=str(client_id)):
            snapshot = self._snapshot()
            client = self._require_party(snapshot, PartyType.CLIENT, client_id)
            ledger = build_client_ledger(
                client_id,
                snapshot.export_documents,
                snapshot.purchase_orders,
                snapshot.performa_invoices,
                snapshot.products,
                snapshot.sizes,
                snapshot.transactions,
                invoice_search=invoice_search,
                payment_search=payment_search,
                invoice_page=invoice_page,
                payment_page=payment_page,
                page_size=self._config.ledger.page_size,
                default_currency=self._config.currency.document_default,
            )
        return ClientLedgerReport(client=client, ledger=ledger)

    def selected_invoice_total(self, related: Iterable[RelatedInvoice]) -> Decimal:
        """Payable total of the bills a payment is being recorded against."""
        return selected_invoice_total(related, self._snapshot().bills())

    def related_invoice_numbers(self, related: Iterable[RelatedInvoice]) -> tuple[str, ...]:
        return related_invoice_numbers(related, self._snapshot().bills())

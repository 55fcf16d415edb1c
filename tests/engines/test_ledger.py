"""
Tests for the Ledger Builder.

Covers:
- Vendor ledgers (manufacturer, transporter, supplier, pallet)
- Client ledgers linked directly and through PO -> PI
- Sorting, search filtering and independent pagination
- Totals and balance independent of search and page
- Payment selection against referenced bills
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from tradedoc_kernel.domain.entities import (
    ExportDocument,
    ManuBill,
    PartyType,
    RelatedInvoice,
    SupplyBill,
    Transaction,
    TransactionType,
    TransBill,
)
from tradedoc_kernel.exceptions import UnknownPartyTypeError
from tradedoc_engines.ledger import (
    LedgerItem,
    build_client_ledger,
    build_party_ledger,
    ledger_page,
    matches_search,
    paginate,
    related_invoice_numbers,
    selected_invoice_total,
    sort_newest_first,
    vendor_party_type,
)


def _manu_bill(bill_id, number, day, total, manufacturer_id="m-1", **kwargs):
    return ManuBill(
        id=bill_id,
        export_document_id="doc-1",
        manufacturer_id=manufacturer_id,
        invoice_number=number,
        invoice_date=day,
        grand_total=Decimal(total),
        **kwargs,
    )


def _payment(tx_id, day, amount, party_type, party_id, tx_type, description="", **kwargs):
    return Transaction(
        id=tx_id,
        date=day,
        type=tx_type,
        party_type=party_type,
        party_id=party_id,
        amount=Decimal(amount),
        description=description,
        **kwargs,
    )


class TestPaginate:

    def test_pages_are_one_based(self):
        items, total_pages = paginate(list(range(12)), 2, 5)
        assert items == (5, 6, 7, 8, 9)
        assert total_pages == 3

    def test_last_partial_page(self):
        items, _ = paginate(list(range(12)), 3, 5)
        assert items == (10, 11)

    @pytest.mark.parametrize("page", [0, -1, 4, 100])
    def test_out_of_range_page_is_empty(self, page):
        items, total_pages = paginate(list(range(12)), page, 5)
        assert items == ()
        assert total_pages == 3

    def test_empty_list_has_zero_pages(self):
        assert paginate([], 1, 5) == ((), 0)

    def test_invalid_page_size_raises(self):
        with pytest.raises(ValueError, match="page_size"):
            paginate([1], 1, 0)


class TestSortingAndSearch:

    def test_newest_first_undated_last(self):
        items = [
            LedgerItem("a", date(2024, 1, 1), "A", Decimal("1"), "INR"),
            LedgerItem("b", None, "B", Decimal("1"), "INR"),
            LedgerItem("c", date(2024, 3, 1), "C", Decimal("1"), "INR"),
        ]
        assert [i.id for i in sort_newest_first(items)] == ["c", "a", "b"]

    def test_sort_is_stable_for_equal_dates(self):
        day = date(2024, 1, 1)
        items = [LedgerItem(str(n), day, "x", Decimal("1"), "INR") for n in range(4)]
        assert [i.id for i in sort_newest_first(items)] == ["0", "1", "2", "3"]

    def test_matches_search_case_insensitive(self):
        assert matches_search("inv", "Bill - INV-7")
        assert matches_search("", "anything")
        assert not matches_search("xyz", "Bill - INV-7", None)

    def test_ledger_page_filters_then_pages(self):
        items = [
            LedgerItem(str(n), None, f"Bill - {'A' if n % 2 else 'B'}{n}", Decimal("1"), "INR")
            for n in range(10)
        ]
        page = ledger_page(items, search="a", page=1, page_size=3)

        assert page.total_items == 5
        assert page.total_pages == 2
        assert [i.id for i in page.items] == ["1", "3", "5"]


class TestPartyLedger:
    """Tests for vendor ledgers."""

    def setup_method(self):
        self.bills = [
            _manu_bill("b1", "INV-1", date(2024, 4, 5), "1000"),
            _manu_bill("b2", "INV-2", date(2024, 6, 5), "2500.50"),
            _manu_bill("b3", "INV-3", date(2024, 5, 5), "700", is_deleted=True),
            _manu_bill("b4", "INV-4", date(2024, 5, 5), "900", manufacturer_id="m-2"),
            TransBill(
                id="tb1", export_document_id="doc-1", transporter_id="t-1",
                invoice_number="TR-1", invoice_date=date(2024, 6, 1),
                total_payable=Decimal("5900"),
            ),
        ]
        self.transactions = [
            _payment("tx1", date(2024, 5, 1), "800", PartyType.MANUFACTURER, "m-1", TransactionType.CREDIT),
            _payment("tx2", date(2024, 7, 1), "1000", PartyType.MANUFACTURER, "m-1",
                     TransactionType.CREDIT, description="NEFT July"),
            _payment("tx3", date(2024, 7, 2), "50", PartyType.MANUFACTURER, "m-1",
                     TransactionType.CREDIT, is_deleted=True),
            _payment("tx4", date(2024, 7, 3), "75", PartyType.MANUFACTURER, "m-1", TransactionType.DEBIT),
        ]

    def test_debit_side_is_live_bills_of_party(self):
        ledger = build_party_ledger("manufacturer", "m-1", self.bills, self.transactions)

        assert [i.id for i in ledger.debit_items] == ["bill_b2", "bill_b1"]
        assert ledger.debit_items[0].description == "Bill - INV-2"
        assert ledger.debit_items[0].currency == "INR"
        assert ledger.total_debit == Decimal("3500.50")

    def test_credit_side_is_live_credit_payments(self):
        ledger = build_party_ledger(PartyType.MANUFACTURER, "m-1", self.bills, self.transactions)

        assert [i.id for i in ledger.credit_items] == ["tx2", "tx1"]
        assert ledger.credit_items[0].description == "NEFT July"
        assert ledger.credit_items[1].description == "Payment"
        assert ledger.total_credit == Decimal("1800")

    def test_balance_is_debit_minus_credit(self):
        ledger = build_party_ledger("manufacturer", "m-1", self.bills, self.transactions)
        assert ledger.balance == Decimal("1700.50")

    def test_search_and_paging_never_change_totals(self):
        full = build_party_ledger("manufacturer", "m-1", self.bills, self.transactions)
        filtered = build_party_ledger(
            "manufacturer", "m-1", self.bills, self.transactions,
            debit_search="INV-1", credit_search="neft", debit_page=1, credit_page=3,
            page_size=1,
        )

        assert filtered.total_debit == full.total_debit
        assert filtered.balance == full.balance
        assert [i.id for i in filtered.debit_page.items] == ["bill_b1"]
        assert filtered.debit_page.total_items == 1
        assert filtered.credit_page.items == ()
        assert filtered.credit_page.total_pages == 1

    def test_transporter_ledger(self):
        ledger = build_party_ledger("transporter", "t-1", self.bills, [])

        assert ledger.total_debit == Decimal("5900")
        assert ledger.debit_items[0].description == "Bill - TR-1"

    def test_pallet_vendor_uses_supply_bills(self):
        bills = [
            SupplyBill(
                id="sb1", export_document_id="doc-1", supplier_id="pal-1",
                invoice_number="PAL-9", grand_total=Decimal("1200"),
            ),
        ]
        ledger = build_party_ledger("pallet", "pal-1", bills, [])

        assert ledger.total_debit == Decimal("1200")

    def test_bill_without_total_counts_as_zero(self):
        bills = [ManuBill(id="b", export_document_id="d", manufacturer_id="m-1", invoice_number="X")]
        ledger = build_party_ledger("manufacturer", "m-1", bills, [])

        assert ledger.debit_items[0].amount == Decimal("0")

    @pytest.mark.parametrize("party_type", ["client", "gst", "exporter", "nonsense"])
    def test_non_vendor_party_type_raises(self, party_type):
        with pytest.raises(UnknownPartyTypeError) as exc_info:
            build_party_ledger(party_type, "x", self.bills, self.transactions)

        assert exc_info.value.party_type == party_type
        assert "manufacturer" in exc_info.value.allowed

    @pytest.mark.parametrize(
        "party_type, expected",
        [("pallet", PartyType.PALLET), (PartyType.SUPPLIER, PartyType.SUPPLIER)],
    )
    def test_vendor_party_type(self, party_type, expected):
        assert vendor_party_type(party_type) is expected

    def test_vendor_party_type_rejects_client(self):
        with pytest.raises(UnknownPartyTypeError):
            vendor_party_type(PartyType.CLIENT)


class TestClientLedger:
    """Tests for client ledgers."""

    def test_direct_client_link(self, export_document, products, sizes):
        payments = [
            _payment("r1", date(2024, 7, 1), "1000", PartyType.CLIENT, "c-1", TransactionType.DEBIT),
        ]
        ledger = build_client_ledger(
            "c-1", [export_document], [], [], products, sizes, payments,
        )

        assert len(ledger.invoiced_items) == 1
        item = ledger.invoiced_items[0]
        # 1440 goods (samples at zero) + 250 freight
        assert item.amount == Decimal("1690.00")
        assert item.description == "EXP/HEM/001/24-25"
        assert item.currency == "USD"
        assert ledger.payment_items[0].description == "Payment Received"
        assert ledger.balance == Decimal("690.00")

    def test_link_through_purchase_order(
        self, export_document, purchase_order, performa_invoice, products, sizes,
    ):
        """A document with no client of its own belongs to its PO's PI client."""
        document = ExportDocument(
            id="doc-2",
            exporter_id="exp-1",
            client_id="",
            transporter_id="t-1",
            export_invoice_number="EXP/HEM/002/24-25",
            purchase_order_id="po-1",
            container_items=export_document.container_items,
        )
        ledger = build_client_ledger(
            "c-2", [export_document, document], [purchase_order], [performa_invoice],
            products, sizes, [],
        )

        assert [i.id for i in ledger.invoiced_items] == ["doc-2"]
        assert ledger.invoiced_items[0].currency == "EUR"
        assert ledger.currency == "EUR"

    def test_own_client_wins_over_performa_client(
        self, export_document, performa_invoice, products, sizes,
    ):
        """Document for c-1 raised from c-2's PI is invoiced to c-1 only."""
        document = replace(export_document, performa_invoice_id="pi-1")
        args = ([document], [], [performa_invoice], products, sizes, [])

        own = build_client_ledger("c-1", *args)
        other = build_client_ledger("c-2", *args)

        assert [i.id for i in own.invoiced_items] == ["doc-1"]
        assert own.total_invoiced == Decimal("1690.00")
        assert own.invoiced_items[0].currency == "EUR"
        assert other.invoiced_items == ()
        assert other.total_invoiced == Decimal("0")

    def test_deleted_purchase_order_breaks_link(
        self, export_document, purchase_order, performa_invoice, products, sizes,
    ):
        document = replace(export_document, id="doc-2", client_id="", purchase_order_id="po-1")
        ledger = build_client_ledger(
            "c-2", [document], [replace(purchase_order, is_deleted=True)], [performa_invoice],
            products, sizes, [],
        )

        assert ledger.invoiced_items == ()

    def test_deleted_documents_and_payments_excluded(self, export_document, products, sizes):
        payments = [
            _payment("r1", date(2024, 7, 1), "10", PartyType.CLIENT, "c-1",
                     TransactionType.DEBIT, is_deleted=True),
            _payment("r2", date(2024, 7, 1), "10", PartyType.CLIENT, "c-1", TransactionType.CREDIT),
        ]
        ledger = build_client_ledger(
            "c-1", [replace(export_document, is_deleted=True)], [], [], products, sizes, payments,
        )

        assert ledger.invoiced_items == ()
        assert ledger.payment_items == ()
        assert ledger.balance == Decimal("0")

    def test_invoice_search_on_number(self, export_document, products, sizes):
        ledger = build_client_ledger(
            "c-1", [export_document], [], [], products, sizes, [], invoice_search="hem/001",
        )
        assert ledger.invoice_page.total_items == 1

        ledger = build_client_ledger(
            "c-1", [export_document], [], [], products, sizes, [], invoice_search="002",
        )
        assert ledger.invoice_page.total_items == 0
        assert ledger.total_invoiced == Decimal("1690.00")


class TestPaymentSelection:

    def setup_method(self):
        self.bills = [
            _manu_bill("b1", "INV-1", date(2024, 4, 5), "1000"),
            _manu_bill("b2", "INV-2", date(2024, 6, 5), "250"),
            TransBill(
                id="b1", export_document_id="d", transporter_id="t-1",
                invoice_number="TR-1", total_payable=Decimal("40"),
            ),
        ]

    def test_sum_of_referenced_bills(self):
        related = [RelatedInvoice("manu", "b1"), RelatedInvoice("trans_bill", "b1")]
        assert selected_invoice_total(related, self.bills) == Decimal("1040")

    def test_unknown_reference_adds_nothing(self):
        related = [RelatedInvoice("manu", "zzz"), RelatedInvoice("weird", "b2")]
        assert selected_invoice_total(related, self.bills) == Decimal("0")

    def test_invoice_numbers(self):
        related = [RelatedInvoice("manu", "b2"), RelatedInvoice("supply", "b2")]
        assert related_invoice_numbers(related, self.bills) == ("INV-2", "Unknown Bill")

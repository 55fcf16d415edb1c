"""
Tests for the GST Summary Builder.

Covers:
- GST paid per bill kind and the noise threshold
- Party name resolution (supply bills fall back to pallet vendors)
- GST received from government refunds
- Remaining GST, search and pagination
"""

from datetime import date
from decimal import Decimal

import pytest

from tradedoc_kernel.domain.entities import (
    BillKind,
    ManuBill,
    PartyType,
    SupplyBill,
    Transaction,
    TransactionType,
    TransBill,
)
from tradedoc_engines.gst import build_gst_summary, gst_paid_items


def _manu(bill_id, central, state, day=date(2024, 5, 1), **kwargs):
    return ManuBill(
        id=bill_id,
        export_document_id="doc-1",
        manufacturer_id=kwargs.pop("manufacturer_id", "m-1"),
        invoice_number=kwargs.pop("invoice_number", f"INV-{bill_id}"),
        invoice_date=day,
        central_tax_amount=Decimal(central),
        state_tax_amount=Decimal(state),
        **kwargs,
    )


def _refund(tx_id, amount, day, description="", **kwargs):
    return Transaction(
        id=tx_id,
        date=day,
        type=kwargs.pop("type", TransactionType.CREDIT),
        party_type=kwargs.pop("party_type", PartyType.GST),
        party_id="gov",
        amount=Decimal(amount),
        description=description,
        **kwargs,
    )


class TestGstPaidItems:
    """Tests for which bills are listed and how."""

    def test_manu_bill_tax_is_central_plus_state(self, parties):
        items = gst_paid_items([_manu("b1", "90", "90")], parties)

        assert len(items) == 1
        assert items[0].gst_amount == Decimal("180")
        assert items[0].type == "Manufacturer"
        assert items[0].party_name == "Morbi Ceramics"
        assert items[0].bill_kind == BillKind.MANUFACTURER

    def test_trans_bill_tax_is_total_tax(self, parties):
        bill = TransBill(
            id="t1", export_document_id="doc-1", transporter_id="t-1",
            invoice_number="TR-1", total_tax=Decimal("54"),
        )
        items = gst_paid_items([bill], parties)

        assert items[0].gst_amount == Decimal("54")
        assert items[0].type == "Transport"
        assert items[0].party_name == "Kandla Logistics"

    @pytest.mark.parametrize(
        "central,state,listed",
        [("0.5", "0.5", False), ("0.5", "0.50", False), ("0.5", "0.51", True), ("0", "0", False)],
    )
    def test_threshold_is_strictly_above_one(self, parties, central, state, listed):
        items = gst_paid_items([_manu("b1", central, state)], parties)
        assert bool(items) is listed

    def test_custom_threshold(self, parties):
        items = gst_paid_items([_manu("b1", "5", "5")], parties, threshold=Decimal("10"))
        assert items == ()

    def test_deleted_bills_excluded(self, parties):
        items = gst_paid_items([_manu("b1", "90", "90", is_deleted=True)], parties)
        assert items == ()

    def test_supply_bill_resolves_pallet_vendor(self, parties):
        bill = SupplyBill(
            id="s1", export_document_id="doc-1", supplier_id="pal-1", invoice_number="PAL-1",
            central_tax_amount=Decimal("6"), state_tax_amount=Decimal("6"),
        )
        items = gst_paid_items([bill], parties)

        assert items[0].party_name == "Wood Pallet Co"
        assert items[0].type == "Supply"

    def test_unknown_party_name(self, parties):
        items = gst_paid_items([_manu("b1", "90", "90", manufacturer_id="ghost")], parties)
        assert items[0].party_name == "Unknown"

    def test_party_of_wrong_type_not_used(self, parties):
        """A transporter id on a manufacturer bill does not resolve."""
        items = gst_paid_items([_manu("b1", "90", "90", manufacturer_id="t-1")], parties)
        assert items[0].party_name == "Unknown"

    def test_sorted_newest_first(self, parties):
        items = gst_paid_items(
            [
                _manu("old", "9", "9", day=date(2024, 4, 1)),
                _manu("new", "9", "9", day=date(2024, 9, 1)),
                _manu("undated", "9", "9", day=None),
            ],
            parties,
        )
        assert [i.id for i in items] == ["new", "old", "undated"]


class TestBuildGstSummary:
    """Tests for totals, remaining GST and paging."""

    def setup_method(self):
        self.manu_bills = [
            _manu("b1", "90", "90", invoice_number="MC-001"),
            _manu("b2", "45", "45", day=date(2024, 6, 1), invoice_number="MC-002"),
        ]
        self.trans_bills = [
            TransBill(
                id="t1", export_document_id="doc-1", transporter_id="t-1",
                invoice_number="TR-1", invoice_date=date(2024, 7, 1), total_tax=Decimal("36"),
            ),
        ]
        self.transactions = [
            _refund("r1", "100", date(2024, 8, 1), description="Refund Q1"),
            _refund("r2", "50", date(2024, 9, 1)),
            _refund("r3", "999", date(2024, 9, 1), is_deleted=True),
            _refund("r4", "999", date(2024, 9, 1), type=TransactionType.DEBIT),
            _refund("r5", "999", date(2024, 9, 1), party_type=PartyType.DUTY_DRAWBACK),
        ]

    def _summary(self, parties, **kwargs):
        return build_gst_summary(
            self.manu_bills, self.trans_bills, [], self.transactions, parties, **kwargs,
        )

    def test_totals(self, parties):
        summary = self._summary(parties)

        assert summary.total_gst_paid == Decimal("306")
        assert summary.total_gst_received == Decimal("150")
        assert summary.remaining_gst == Decimal("156")

    def test_received_items(self, parties):
        summary = self._summary(parties)

        assert [i.id for i in summary.gst_received_items] == ["r2", "r1"]
        assert summary.gst_received_items[0].description == "GST Refund"
        assert summary.gst_received_items[1].description == "Refund Q1"

    def test_paid_search_matches_party_or_invoice(self, parties):
        by_invoice = self._summary(parties, paid_search="mc-00")
        by_party = self._summary(parties, paid_search="kandla")

        assert by_invoice.paid_page.total_items == 2
        assert [i.id for i in by_party.paid_page.items] == ["t1"]
        assert by_party.total_gst_paid == Decimal("306")

    def test_received_search_on_description(self, parties):
        summary = self._summary(parties, received_search="q1")

        assert [i.id for i in summary.received_page.items] == ["r1"]
        assert summary.total_gst_received == Decimal("150")

    def test_pagination(self, parties):
        summary = self._summary(parties, page_size=2, paid_page=2)

        assert summary.paid_page.total_pages == 2
        assert [i.id for i in summary.paid_page.items] == ["b1"]

    def test_logs_summary(self, parties, captured_logs):
        self._summary(parties)

        records = [r for r in captured_logs() if r["message"] == "gst_summary_built"]
        assert records[0]["remaining_gst"] == "156"

"""
Tests for printed document rows: customs invoice, packing list and
amounts in words.
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from tradedoc_kernel.domain.entities import ContainerItem, ProductItem
from tradedoc_engines.documents import (
    SAMPLE_MARKER,
    SAMPLE_SECTION_TITLE,
    amount_to_words_usd,
    customs_invoice_rows,
    packing_list_rows,
)
from tradedoc_engines.line_items import PGVT_DESCRIPTION


def _with_containers(document, *containers):
    return replace(document, container_items=containers)


class TestCustomsInvoice:
    """Customs invoice rows and totals."""

    def test_canonical_rows(self, export_document, products, sizes):
        invoice = customs_invoice_rows(export_document, products, sizes)

        assert len(invoice.rows) == 2
        product_row, sample_row = invoice.rows
        assert product_row.sr_no == 1
        assert product_row.hsn_code == "69072100"
        assert product_row.description == "Carrara White (600x1200)"
        assert product_row.boxes == Decimal("100")
        assert product_row.sqm == Decimal("144.00")
        assert product_row.rate == Decimal("10.00")
        assert product_row.total == Decimal("1440.00")
        assert not product_row.is_sample

        assert sample_row.sr_no == 2
        assert sample_row.description == f"Carrara White (600x1200)\n{SAMPLE_MARKER}"
        assert sample_row.total == Decimal("0.00")
        assert sample_row.rate == Decimal("0.00")
        assert sample_row.sqm == Decimal("2.88")
        assert sample_row.is_sample

    def test_canonical_totals(self, export_document, products, sizes):
        invoice = customs_invoice_rows(export_document, products, sizes)

        assert invoice.total_boxes == Decimal("102")
        assert invoice.total_sqm == Decimal("146.88")
        assert invoice.total_amount == Decimal("1440.00")
        assert invoice.exchange_rate == Decimal("83.5")
        assert invoice.total_in_inr == Decimal("120240.00")
        assert invoice.amount_in_words == "One Thousand Four Hundred Forty Dollars only"

    def test_grouped_per_product_not_per_size(self, export_document, products, sizes):
        """Two designs of the same size at the same rate stay separate rows."""
        container = ContainerItem(
            id="c1",
            product_items=(
                ProductItem(id="a", product_id="p-carrara", boxes=Decimal("10"), rate=Decimal("10")),
                ProductItem(id="b", product_id="p-statuario", boxes=Decimal("10"), rate=Decimal("10")),
                ProductItem(id="c", product_id="p-carrara", boxes=Decimal("5"), rate=Decimal("10.0")),
                ProductItem(id="d", product_id="p-carrara", boxes=Decimal("5"), rate=Decimal("11")),
            ),
        )
        invoice = customs_invoice_rows(_with_containers(export_document, container), products, sizes)

        assert [(r.description, r.boxes) for r in invoice.rows] == [
            ("Carrara White (600x1200)", Decimal("15")),
            ("Statuario (600x1200)", Decimal("10")),
            ("Carrara White (600x1200)", Decimal("5")),
        ]
        assert [r.sr_no for r in invoice.rows] == [1, 2, 3]

    def test_missing_hsn_code_prints_na(self, export_document, products, sizes):
        sizes = (replace(sizes[0], hsn_code=""), sizes[1])
        invoice = customs_invoice_rows(export_document, products, sizes)

        assert invoice.rows[0].hsn_code == "N/A"

    def test_missing_conversion_rate_uses_one(self, export_document, products, sizes):
        document = replace(export_document, conversation_rate=Decimal("0"))
        invoice = customs_invoice_rows(document, products, sizes)

        assert invoice.exchange_rate == Decimal("1")
        assert invoice.total_in_inr == Decimal("1440.00")

    def test_unresolved_lines_skipped(self, export_document, products, sizes):
        container = ContainerItem(
            id="c1",
            product_items=(ProductItem(id="a", product_id="ghost", boxes=Decimal("10"), rate=Decimal("10")),),
        )
        invoice = customs_invoice_rows(_with_containers(export_document, container), products, sizes)

        assert invoice.rows == ()
        assert invoice.total_amount == Decimal("0.00")
        assert invoice.amount_in_words == "Zero Dollars only"


class TestPackingList:
    """Packing list rows, sample section and container manifests."""

    def test_canonical_packing_list(self, export_document, products, sizes):
        packing = packing_list_rows(export_document, products, sizes)

        assert len(packing.product_rows) == 1
        row = packing.product_rows[0]
        assert row.sr_no == 1
        assert row.description == f"{PGVT_DESCRIPTION} (600x1200)"
        assert row.boxes == Decimal("100")
        assert row.net_weight == Decimal("2800.00")

        assert packing.sample_section_title == SAMPLE_SECTION_TITLE
        assert len(packing.sample_rows) == 1
        assert packing.sample_rows[0].sr_no == 2
        assert packing.sample_rows[0].is_sample
        assert packing.sample_rows[0].net_weight == Decimal("56.00")

        assert packing.total_boxes == Decimal("102")
        assert packing.total_sqm == Decimal("146.88")
        assert packing.total_net_weight == Decimal("2856.00")
        assert packing.total_gross_weight == Decimal("0.00")

    def test_container_manifests(self, export_document, products, sizes):
        packing = packing_list_rows(export_document, products, sizes)

        assert len(packing.containers) == 1
        assert packing.containers[0].total_pallets == "20"
        assert packing.containers[0].vgm == Decimal("5056")

    def test_sample_numbering_continues(self, export_document, products, sizes):
        container = ContainerItem(
            id="c1",
            product_items=(
                ProductItem(id="a", product_id="p-carrara", boxes=Decimal("10")),
                ProductItem(id="b", product_id="p-onyx", boxes=Decimal("10")),
            ),
            sample_items=(ProductItem(id="s", product_id="p-onyx", boxes=Decimal("1")),),
        )
        packing = packing_list_rows(_with_containers(export_document, container), products, sizes)

        assert [r.sr_no for r in packing.product_rows] == [1, 2]
        assert [r.sr_no for r in packing.sample_rows] == [3]

    def test_no_samples(self, export_document, products, sizes):
        container = replace(export_document.container_items[0], sample_items=())
        packing = packing_list_rows(_with_containers(export_document, container), products, sizes)

        assert packing.sample_rows == ()
        assert packing.total_boxes == Decimal("100")


class TestAmountToWordsUsd:

    @pytest.mark.parametrize(
        "amount,expected",
        [
            ("1440", "One Thousand Four Hundred Forty Dollars only"),
            ("12.05", "Twelve Dollars and Five Cents only"),
            ("0", "Zero Dollars only"),
            ("0.50", "Zero Dollars and Fifty Cents only"),
            ("1000000", "One Million Dollars only"),
            ("2001019.99", "Two Million One Thousand Nineteen Dollars and Ninety Nine Cents only"),
            ("115", "One Hundred Fifteen Dollars only"),
            ("-20", "Minus Twenty Dollars only"),
        ],
    )
    def test_words(self, amount, expected):
        assert amount_to_words_usd(Decimal(amount)) == expected

    def test_rounds_to_cents_first(self):
        assert amount_to_words_usd(Decimal("9.999")) == "Ten Dollars only"

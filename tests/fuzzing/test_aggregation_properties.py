"""
Property-based tests for aggregation, ledgers and numbering.

Properties:
- Grouping conserves boxes and sqm; samples add quantity but never amount
- Document total is exactly amount + GST
- Aggregation is deterministic and independent of container split
- Ledger balance = debit - credit, unaffected by search and page
- Paging partitions the filtered rows
- Next export invoice number is strictly above every live number
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from tradedoc_kernel.domain.entities import (
    ContainerItem,
    ExportDocument,
    ManuBill,
    PartyType,
    Product,
    ProductItem,
    Size,
    Transaction,
    TransactionType,
)
from tradedoc_engines.ledger import build_party_ledger, paginate
from tradedoc_engines.line_items import (
    aggregate_container_items,
    compute_sqm_and_amount,
    document_total,
    group_by_size_and_rate,
)
from tradedoc_engines.numbering import next_export_invoice_number

SIZES = (
    Size(id="s1", label="600x1200", sqm_per_box=Decimal("1.44"), box_weight=Decimal("28"), hsn_code="69072100"),
    Size(id="s2", label="800x800", sqm_per_box=Decimal("1.28"), box_weight=Decimal("25"), hsn_code="69089090"),
    Size(id="s3", label="300x600", sqm_per_box=Decimal("1.08"), box_weight=Decimal("17.5")),
)
PRODUCTS = (
    Product(id="p1", size_id="s1", design_name="Carrara"),
    Product(id="p2", size_id="s1", design_name="Statuario"),
    Product(id="p3", size_id="s2", design_name="Onyx"),
    Product(id="p4", size_id="s3", design_name="Wood"),
)
PROPERTY_SETTINGS = settings(
    max_examples=75,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)

amounts = st.decimals(
    min_value=Decimal("0"), max_value=Decimal("99999.99"), places=2,
    allow_nan=False, allow_infinity=False,
)


@composite
def product_items(draw, prefix="i"):
    return ProductItem(
        id=f"{prefix}{draw(st.integers(0, 10**6))}",
        product_id=draw(st.sampled_from([p.id for p in PRODUCTS])),
        boxes=Decimal(draw(st.integers(min_value=0, max_value=2000))),
        rate=draw(st.one_of(st.none(), st.sampled_from([Decimal(r) for r in ("8", "9.5", "10", "10.00", "12.25")]))),
    )


@composite
def containers(draw):
    return ContainerItem(
        id=f"c{draw(st.integers(0, 10**6))}",
        product_items=tuple(draw(st.lists(product_items("p"), max_size=6))),
        sample_items=tuple(draw(st.lists(product_items("s"), max_size=2))),
    )


@composite
def documents(draw):
    return ExportDocument(
        id="doc",
        exporter_id="e",
        client_id="c",
        transporter_id="t",
        export_invoice_number="EXP/HEM/001/24-25",
        container_items=tuple(draw(st.lists(containers(), max_size=3))),
        gst=draw(st.sampled_from(["0%", "5%", "12%", "18%", "", "bad"])),
        conversation_rate=draw(st.sampled_from([Decimal("0"), Decimal("83.5"), Decimal("1")])),
    )


@composite
def dated_bills(draw):
    n = draw(st.integers(0, 10**6))
    return ManuBill(
        id=f"b{n}",
        export_document_id="doc",
        manufacturer_id=draw(st.sampled_from(["m1", "m2"])),
        invoice_number=f"INV-{n}",
        invoice_date=date(2024, 4, 1) + timedelta(days=draw(st.integers(0, 365))),
        grand_total=draw(amounts),
        is_deleted=draw(st.booleans()),
    )


@composite
def payments(draw):
    n = draw(st.integers(0, 10**6))
    return Transaction(
        id=f"tx{n}",
        date=draw(st.one_of(st.none(), st.dates(date(2024, 1, 1), date(2025, 12, 31)))),
        type=draw(st.sampled_from(list(TransactionType))),
        party_type=PartyType.MANUFACTURER,
        party_id=draw(st.sampled_from(["m1", "m2"])),
        amount=draw(amounts),
        description=draw(st.sampled_from(["", "NEFT", "cheque 77"])),
    )


def _all_items(document):
    products, samples = [], []
    for c in document.container_items:
        products.extend(c.product_items)
        samples.extend(c.sample_items)
    return products, samples


class TestAggregationProperties:

    @PROPERTY_SETTINGS
    @given(items=st.lists(product_items(), max_size=12))
    def test_grouping_conserves_boxes_and_sqm(self, items):
        groups = group_by_size_and_rate(items, PRODUCTS, SIZES)

        assert sum((g.boxes for g in groups), Decimal("0")) == sum((i.boxes for i in items), Decimal("0"))
        expected_sqm = sum(
            (compute_sqm_and_amount(i, p, s).sqm
             for i in items
             for p in PRODUCTS if p.id == i.product_id
             for s in SIZES if s.id == p.size_id),
            Decimal("0"),
        )
        assert sum((g.sqm for g in groups), Decimal("0")) == expected_sqm

    @PROPERTY_SETTINGS
    @given(items=st.lists(product_items(), max_size=12))
    def test_group_keys_unique(self, items):
        groups = group_by_size_and_rate(items, PRODUCTS, SIZES)
        keys = [g.key for g in groups]

        assert len(keys) == len(set(keys))

    @PROPERTY_SETTINGS
    @given(document=documents())
    def test_samples_never_add_amount(self, document):
        result = aggregate_container_items(document, PRODUCTS, SIZES)
        product_groups = group_by_size_and_rate(_all_items(document)[0], PRODUCTS, SIZES)

        assert result.grand_totals.amount == sum((g.total for g in product_groups), Decimal("0"))
        assert all(g.total == 0 for g in result.grouped_samples)

    @PROPERTY_SETTINGS
    @given(document=documents())
    def test_total_is_amount_plus_gst(self, document):
        totals = document_total(document, PRODUCTS, SIZES)

        assert totals.total_amount == totals.amount + totals.gst_amount
        assert totals.gst_amount >= 0

    @PROPERTY_SETTINGS
    @given(document=documents())
    def test_deterministic(self, document):
        assert aggregate_container_items(document, PRODUCTS, SIZES) == aggregate_container_items(
            document, PRODUCTS, SIZES,
        )

    @PROPERTY_SETTINGS
    @given(document=documents())
    def test_container_split_irrelevant(self, document):
        """Moving every line into one container changes no grand total."""
        products, samples = _all_items(document)
        merged = ExportDocument(
            id=document.id,
            exporter_id=document.exporter_id,
            client_id=document.client_id,
            transporter_id=document.transporter_id,
            export_invoice_number=document.export_invoice_number,
            container_items=(ContainerItem(id="all", product_items=products, sample_items=samples),),
            gst=document.gst,
        )

        assert (
            aggregate_container_items(merged, PRODUCTS, SIZES).grand_totals
            == aggregate_container_items(document, PRODUCTS, SIZES).grand_totals
        )


class TestLedgerProperties:

    @settings(max_examples=60, deadline=None)
    @given(
        bills=st.lists(dated_bills(), max_size=15),
        transactions=st.lists(payments(), max_size=15),
        search=st.sampled_from(["", "inv-1", "neft", "zzz"]),
        page=st.integers(min_value=-1, max_value=5),
    )
    def test_balance_independent_of_view(self, bills, transactions, search, page):
        full = build_party_ledger("manufacturer", "m1", bills, transactions)
        viewed = build_party_ledger(
            "manufacturer", "m1", bills, transactions,
            debit_search=search, credit_search=search,
            debit_page=page, credit_page=page, page_size=3,
        )

        assert full.balance == full.total_debit - full.total_credit
        assert viewed.balance == full.balance
        assert viewed.total_debit == full.total_debit
        assert viewed.total_credit == full.total_credit

    @settings(max_examples=100, deadline=None)
    @given(
        rows=st.lists(st.integers(), max_size=40),
        page_size=st.integers(min_value=1, max_value=7),
    )
    def test_pages_partition_rows(self, rows, page_size):
        _, total_pages = paginate(rows, 1, page_size)
        collected = []
        for page in range(1, total_pages + 1):
            items, _ = paginate(rows, page, page_size)
            assert 0 < len(items) <= page_size
            collected.extend(items)

        assert collected == rows


class TestNumberingProperties:

    @settings(max_examples=100, deadline=None)
    @given(sequence=st.lists(st.integers(min_value=1, max_value=5000), max_size=20))
    def test_next_number_above_every_existing(self, sequence):
        existing = [f"EXP/HEM/{n:03d}/24-25" for n in sequence]
        result = next_export_invoice_number(existing, "24-25")
        next_seq = int(result.split("/")[2])

        assert next_seq == max(sequence, default=0) + 1
        assert result not in existing

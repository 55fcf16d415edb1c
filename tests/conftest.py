"""
Pytest fixtures for the trade documentation test suite.

Provides:
- Structured logging configuration and log capture
- A small tile catalog (sizes, products) and parties
- A canonical export document: 100 boxes of 1.44 sqm at 10/sqm, GST 18%
- In-memory and SQLite-backed entity stores
- The default configuration
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from tradedoc_config import get_active_config
from tradedoc_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from tradedoc_kernel.domain.entities import (
    ContainerItem,
    EntitySnapshot,
    ExportDocument,
    Party,
    PartyType,
    PerformaInvoice,
    PerformaInvoiceItem,
    Product,
    ProductItem,
    PurchaseOrder,
    Size,
)
from tradedoc_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from tradedoc_kernel.store import InMemoryEntityStore, SqlEntityStore


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture tradedoc_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            build_gst_summary(...)
            logs = captured_logs()
            assert any(r["message"] == "gst_summary_built" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("tradedoc_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Reference data
# =============================================================================


@pytest.fixture
def sizes():
    return (
        Size(
            id="s-600x1200",
            label="600x1200",
            sqm_per_box=Decimal("1.44"),
            box_weight=Decimal("28"),
            sales_price=Decimal("9.5"),
            hsn_code="69072100",
        ),
        Size(
            id="s-800x800",
            label="800x800",
            sqm_per_box=Decimal("1.28"),
            box_weight=Decimal("25"),
            sales_price=Decimal("8"),
            hsn_code="69089090",
        ),
    )


@pytest.fixture
def products():
    return (
        Product(id="p-carrara", size_id="s-600x1200", design_name="Carrara White"),
        Product(
            id="p-statuario",
            size_id="s-600x1200",
            design_name="Statuario",
            sales_price=Decimal("11"),
            box_weight=Decimal("30"),
        ),
        Product(id="p-onyx", size_id="s-800x800", design_name="Onyx Blue"),
    )


@pytest.fixture
def parties():
    return (
        Party(id="exp-1", party_type=PartyType.EXPORTER, company_name="Hem Exports"),
        Party(id="c-1", party_type=PartyType.CLIENT, company_name="Gulf Tiles LLC"),
        Party(id="c-2", party_type=PartyType.CLIENT, company_name="Nordic Stone AB"),
        Party(id="m-1", party_type=PartyType.MANUFACTURER, company_name="Morbi Ceramics"),
        Party(id="t-1", party_type=PartyType.TRANSPORTER, company_name="Kandla Logistics"),
        Party(id="sup-1", party_type=PartyType.SUPPLIER, company_name="Box Packers"),
        Party(id="pal-1", party_type=PartyType.PALLET, company_name="Wood Pallet Co"),
    )


@pytest.fixture
def container():
    """One container: 100 boxes of Carrara at 10/sqm plus a 2-box sample."""
    return ContainerItem(
        id="cont-1",
        container_no="MSKU1234567",
        booking_no="BK-001",
        line_seal="LS-9",
        rfid_seal="RF-9",
        tare_weight=Decimal("2200"),
        start_pallet_no="1",
        end_pallet_no="20",
        product_items=(
            ProductItem(id="li-1", product_id="p-carrara", boxes=Decimal("100"), rate=Decimal("10")),
        ),
        sample_items=(
            ProductItem(id="si-1", product_id="p-carrara", boxes=Decimal("2")),
        ),
    )


@pytest.fixture
def export_document(container):
    return ExportDocument(
        id="doc-1",
        exporter_id="exp-1",
        client_id="c-1",
        transporter_id="t-1",
        export_invoice_number="EXP/HEM/001/24-25",
        export_invoice_date=date(2024, 6, 10),
        container_items=(container,),
        conversation_rate=Decimal("83.5"),
        gst="18%",
        freight=Decimal("250"),
    )


@pytest.fixture
def performa_invoice():
    return PerformaInvoice(
        id="pi-1",
        exporter_id="exp-1",
        client_id="c-2",
        invoice_number="PI-001",
        invoice_date=date(2024, 5, 1),
        currency_type="EUR",
        items=(
            PerformaInvoiceItem(
                id="pii-1",
                size_id="s-600x1200",
                product_id="p-carrara",
                boxes=Decimal("100"),
                rate_per_sqm=Decimal("10"),
            ),
        ),
    )


@pytest.fixture
def purchase_order():
    return PurchaseOrder(
        id="po-1",
        source_pi_id="pi-1",
        exporter_id="exp-1",
        manufacturer_id="m-1",
        po_number="HEM/PO/24-25/001",
        po_date=date(2024, 5, 3),
        size_id="s-600x1200",
    )


@pytest.fixture
def snapshot(sizes, products, parties, export_document, performa_invoice, purchase_order):
    return EntitySnapshot(
        sizes=sizes,
        products=products,
        parties=parties,
        performa_invoices=(performa_invoice,),
        purchase_orders=(purchase_order,),
        export_documents=(export_document,),
    )


# =============================================================================
# Stores and configuration
# =============================================================================


@pytest.fixture
def memory_store(snapshot):
    return InMemoryEntityStore(snapshot)


@pytest.fixture
def sqlite_session():
    """Session on a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite://")
    create_tables()
    session = get_session()
    yield session
    session.close()
    drop_tables()
    reset_engine()


@pytest.fixture
def sql_store(sqlite_session):
    return SqlEntityStore(sqlite_session)


@pytest.fixture
def config():
    return get_active_config()

"""
Entities -- immutable records of the trade documentation domain.

Responsibility:
    Frozen dataclasses for every stored record: reference data (Size,
    Product), parties, performa invoices, purchase orders, export documents
    with their containers and line items, the three bill kinds, and
    payment transactions.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Engines read these; stores build them; nothing here touches storage.

Invariants enforced:
    - Numeric fields are coerced to ``Decimal`` on construction (malformed
      input becomes zero, optional fields stay ``None`` when not supplied).
    - Collections are stored as tuples so a snapshot cannot be mutated
      while an aggregation is running.
    - ``is_deleted`` is carried on every persisted record; deletion is soft.
    - Transaction polarity: CREDIT is a payment made by the business to a
      vendor, DEBIT is a payment received from a client or the government.

Failure modes:
    - ``ValueError`` from the Enum constructors for an unknown party type or
      transaction type.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from tradedoc_kernel.domain.values import coerce_decimal, coerce_optional_decimal


class PartyType(str, Enum):
    """Counterparty classification used by parties and transactions."""

    CLIENT = "client"
    MANUFACTURER = "manufacturer"
    TRANSPORTER = "transporter"
    SUPPLIER = "supplier"
    PALLET = "pallet"
    GST = "gst"
    DUTY_DRAWBACK = "duty_drawback"
    ROAD_TP = "road_tp"
    EXPORTER = "exporter"  # the business itself; never on a transaction


VENDOR_PARTY_TYPES: tuple[PartyType, ...] = (
    PartyType.MANUFACTURER,
    PartyType.TRANSPORTER,
    PartyType.SUPPLIER,
    PartyType.PALLET,
)


class TransactionType(str, Enum):
    """Payment direction."""

    CREDIT = "credit"  # paid by the business
    DEBIT = "debit"  # received by the business


class BillKind(str, Enum):
    """Tag for the ``Bill`` union."""

    MANUFACTURER = "manu_bill"
    TRANSPORT = "trans_bill"
    SUPPLY = "supply_bill"


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def parse_date(value: Any) -> date | None:
    """Parse an ISO date/datetime string (or pass through a date)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _set(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


def _coerce(
    obj: Any,
    decimals: tuple[str, ...] = (),
    optional_decimals: tuple[str, ...] = (),
    dates: tuple[str, ...] = (),
    tuples: tuple[str, ...] = (),
) -> None:
    for name in decimals:
        _set(obj, name, coerce_decimal(getattr(obj, name)))
    for name in optional_decimals:
        _set(obj, name, coerce_optional_decimal(getattr(obj, name)))
    for name in dates:
        _set(obj, name, parse_date(getattr(obj, name)))
    for name in tuples:
        _set(obj, name, tuple(getattr(obj, name) or ()))


def _known(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls) if f.init}
    return {k: v for k, v in data.items() if k in names}


def to_record(entity: Any) -> Any:
    """
    Convert an entity (or nested value) to JSON-safe primitives.

    Decimal -> str, date -> ISO string, Enum -> value, tuple -> list.
    """
    if isinstance(entity, Enum):
        return entity.value
    if isinstance(entity, Decimal):
        return str(entity)
    if isinstance(entity, (date, datetime)):
        return entity.isoformat()
    if isinstance(entity, (list, tuple)):
        return [to_record(v) for v in entity]
    if isinstance(entity, dict):
        return {k: to_record(v) for k, v in entity.items()}
    if hasattr(entity, "__dataclass_fields__"):
        return {f.name: to_record(getattr(entity, f.name)) for f in fields(entity)}
    return entity


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Size:
    """Tile size reference data; shared by many products."""

    id: str
    label: str
    sqm_per_box: Decimal = Decimal("0")
    box_weight: Decimal = Decimal("0")
    purchase_price: Decimal = Decimal("0")
    sales_price: Decimal = Decimal("0")
    hsn_code: str = ""
    pallet_details: str = ""
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=("sqm_per_box", "box_weight", "purchase_price", "sales_price"),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Size:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class Product:
    """A tile design in one size.  Price and box weight may override the size."""

    id: str
    size_id: str
    design_name: str
    sales_price: Decimal | None = None
    box_weight: Decimal | None = None
    image_url: str | None = None
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(self, optional_decimals=("sales_price", "box_weight"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        return cls(**_known(cls, data))


def resolve_sales_price(product: Product | None, size: Size | None) -> Decimal:
    """Sales price fallback: product value, else size value, else 0."""
    if product is not None and product.sales_price is not None:
        return product.sales_price
    if size is not None:
        return size.sales_price
    return Decimal("0")


def resolve_box_weight(product: Product | None, size: Size | None) -> Decimal:
    """Box weight fallback: product value, else size value, else 0."""
    if product is not None and product.box_weight is not None:
        return product.box_weight
    if size is not None:
        return size.box_weight
    return Decimal("0")


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Party:
    """
    Any counterparty record: exporter company, client, manufacturer,
    transporter, supplier or pallet vendor.
    """

    id: str
    party_type: PartyType
    company_name: str
    gst_number: str = ""
    address: str = ""
    contact_person: str = ""
    iec_number: str = ""
    stuffing_permission_number: str = ""
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _set(self, "party_type", PartyType(self.party_type))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Party:
        return cls(**_known(cls, data))


# ---------------------------------------------------------------------------
# Performa invoices and purchase orders
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PerformaInvoiceItem:
    id: str
    size_id: str
    product_id: str
    boxes: Decimal = Decimal("0")
    rate_per_sqm: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        _coerce(self, decimals=("boxes", "rate_per_sqm", "commission"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PerformaInvoiceItem:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class PerformaInvoice:
    id: str
    exporter_id: str
    client_id: str
    invoice_number: str
    invoice_date: date | None = None
    currency_type: str = "USD"
    final_destination: str = ""
    total_container: int = 0
    container_size: str = "20 ft"
    freight: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    terms_and_conditions: str = ""
    note: str = ""
    items: tuple[PerformaInvoiceItem, ...] = ()
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=("freight", "discount"),
            dates=("invoice_date",),
            tuples=("items",),
        )
        _set(
            self,
            "items",
            tuple(
                i if isinstance(i, PerformaInvoiceItem) else PerformaInvoiceItem.from_dict(i)
                for i in self.items
            ),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PerformaInvoice:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class PurchaseOrderItem:
    id: str
    product_id: str
    boxes: Decimal = Decimal("0")
    weight_per_box: Decimal = Decimal("0")
    thickness: str = "8.5 MM to 9.0 MM"
    design_image: str = "AS PER SAMPLE"

    def __post_init__(self) -> None:
        _coerce(self, decimals=("boxes", "weight_per_box"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PurchaseOrderItem:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class PurchaseOrder:
    id: str
    source_pi_id: str
    exporter_id: str
    manufacturer_id: str
    po_number: str
    po_date: date | None = None
    size_id: str = ""
    number_of_containers: int = 0
    terms_and_conditions: str = ""
    items: tuple[PurchaseOrderItem, ...] = ()
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(self, dates=("po_date",), tuples=("items",))
        _set(
            self,
            "items",
            tuple(
                i if isinstance(i, PurchaseOrderItem) else PurchaseOrderItem.from_dict(i)
                for i in self.items
            ),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PurchaseOrder:
        return cls(**_known(cls, data))


# ---------------------------------------------------------------------------
# Export documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductItem:
    """
    One line in a container (``product_items`` or ``sample_items``).

    ``net_weight``/``gross_weight``/``rate`` are None when not entered.
    """

    id: str
    product_id: str
    boxes: Decimal = Decimal("0")
    net_weight: Decimal | None = None
    gross_weight: Decimal | None = None
    rate: Decimal | None = None

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=("boxes",),
            optional_decimals=("net_weight", "gross_weight", "rate"),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProductItem:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class ContainerItem:
    """A physical container; owned by exactly one export document."""

    id: str
    container_no: str = ""
    booking_no: str = ""
    truck_number: str = ""
    builty_no: str = ""
    rfid_seal: str = ""
    line_seal: str = ""
    tare_weight: Decimal = Decimal("0")
    start_pallet_no: str = ""
    end_pallet_no: str = ""
    total_pallets: str = ""
    weighing_slip_no: str = ""
    weighing_date_time: date | None = None
    description: str = ""
    product_items: tuple[ProductItem, ...] = ()
    sample_items: tuple[ProductItem, ...] = ()

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=("tare_weight",),
            dates=("weighing_date_time",),
            tuples=("product_items", "sample_items"),
        )
        for name in ("product_items", "sample_items"):
            _set(
                self,
                name,
                tuple(
                    i if isinstance(i, ProductItem) else ProductItem.from_dict(i)
                    for i in getattr(self, name)
                ),
            )
        for name in ("start_pallet_no", "end_pallet_no", "total_pallets"):
            value = getattr(self, name)
            _set(self, name, "" if value is None else str(value))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContainerItem:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class ManufacturerDetail:
    id: str
    manufacturer_id: str
    invoice_number: str = ""
    invoice_date: date | None = None
    permission_number: str = ""

    def __post_init__(self) -> None:
        _coerce(self, dates=("invoice_date",))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManufacturerDetail:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class ExportDocument:
    """Root aggregate: one export invoice and its shipment packet."""

    id: str
    exporter_id: str
    client_id: str
    transporter_id: str
    export_invoice_number: str
    export_invoice_date: date | None = None
    performa_invoice_id: str | None = None
    purchase_order_id: str | None = None
    manufacturer_details: tuple[ManufacturerDetail, ...] = ()
    container_items: tuple[ContainerItem, ...] = ()
    conversation_rate: Decimal = Decimal("0")
    gst: str = "0%"
    freight: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    country_of_origin: str = "INDIA"
    country_of_final_destination: str = ""
    vessel_flight_no: str = ""
    port_of_loading: str = ""
    port_of_discharge: str = ""
    final_destination: str = ""
    terms_of_delivery_and_payment: str = ""
    exchange_notification: str = ""
    exchange_date: date | None = None
    eway_bill_number: str | None = None
    eway_bill_date: date | None = None
    eway_bill_document: str | None = None
    shipping_bill_number: str | None = None
    shipping_bill_date: date | None = None
    shipping_bill_document: str | None = None
    bl_number: str | None = None
    bl_date: date | None = None
    bl_document: str | None = None
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=("conversation_rate", "freight", "discount"),
            dates=(
                "export_invoice_date",
                "exchange_date",
                "eway_bill_date",
                "shipping_bill_date",
                "bl_date",
            ),
            tuples=("manufacturer_details", "container_items"),
        )
        _set(
            self,
            "manufacturer_details",
            tuple(
                m if isinstance(m, ManufacturerDetail) else ManufacturerDetail.from_dict(m)
                for m in self.manufacturer_details
            ),
        )
        _set(
            self,
            "container_items",
            tuple(
                c if isinstance(c, ContainerItem) else ContainerItem.from_dict(c)
                for c in self.container_items
            ),
        )
        _set(self, "gst", "" if self.gst is None else str(self.gst))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExportDocument:
        return cls(**_known(cls, data))


# ---------------------------------------------------------------------------
# Bills
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GoodsBillItem:
    """Line on a manufacturer or supply bill."""

    id: str
    description: str = ""
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    discount_percentage: Decimal = Decimal("0")
    unit: str = ""
    grade: str = ""
    hsn_code: str = ""
    taxable_amount: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=("quantity", "rate", "discount_percentage", "taxable_amount"),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GoodsBillItem:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class TransBillItem:
    """Line on a transporter bill."""

    id: str
    description: str = ""
    hsn_sac: str = ""
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    gst_rate: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        _coerce(self, decimals=("quantity", "rate", "gst_rate", "amount"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransBillItem:
        return cls(**_known(cls, data))


def _goods_items(items: Any) -> tuple[GoodsBillItem, ...]:
    return tuple(
        i if isinstance(i, GoodsBillItem) else GoodsBillItem.from_dict(i)
        for i in (items or ())
    )


@dataclass(frozen=True)
class ManuBill:
    """Tax invoice raised by a manufacturer against an export document."""

    kind: ClassVar[BillKind] = BillKind.MANUFACTURER
    party_field: ClassVar[str] = "manufacturer_id"

    id: str
    export_document_id: str
    manufacturer_id: str
    invoice_number: str
    invoice_date: date | None = None
    transporter_id: str = ""
    items: tuple[GoodsBillItem, ...] = ()
    sub_total: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    insurance_amount: Decimal = Decimal("0")
    freight_amount: Decimal = Decimal("0")
    final_sub_total: Decimal = Decimal("0")
    central_tax_rate: Decimal = Decimal("0")
    central_tax_amount: Decimal = Decimal("0")
    state_tax_rate: Decimal = Decimal("0")
    state_tax_amount: Decimal = Decimal("0")
    round_off: Decimal = Decimal("0")
    grand_total: Decimal | None = None
    remarks: str = ""
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=(
                "sub_total",
                "discount_amount",
                "insurance_amount",
                "freight_amount",
                "final_sub_total",
                "central_tax_rate",
                "central_tax_amount",
                "state_tax_rate",
                "state_tax_amount",
                "round_off",
            ),
            optional_decimals=("grand_total",),
            dates=("invoice_date",),
        )
        _set(self, "items", _goods_items(self.items))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManuBill:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class SupplyBill:
    """
    Tax invoice from a supplier.  ``supplier_id`` may reference either a
    supplier or a pallet vendor.
    """

    kind: ClassVar[BillKind] = BillKind.SUPPLY
    party_field: ClassVar[str] = "supplier_id"

    id: str
    export_document_id: str
    supplier_id: str
    invoice_number: str
    invoice_date: date | None = None
    items: tuple[GoodsBillItem, ...] = ()
    sub_total: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    insurance_amount: Decimal = Decimal("0")
    freight_amount: Decimal = Decimal("0")
    final_sub_total: Decimal = Decimal("0")
    central_tax_rate: Decimal = Decimal("0")
    central_tax_amount: Decimal = Decimal("0")
    state_tax_rate: Decimal = Decimal("0")
    state_tax_amount: Decimal = Decimal("0")
    round_off: Decimal = Decimal("0")
    grand_total: Decimal | None = None
    remarks: str = ""
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=(
                "sub_total",
                "discount_amount",
                "insurance_amount",
                "freight_amount",
                "final_sub_total",
                "central_tax_rate",
                "central_tax_amount",
                "state_tax_rate",
                "state_tax_amount",
                "round_off",
            ),
            optional_decimals=("grand_total",),
            dates=("invoice_date",),
        )
        _set(self, "items", _goods_items(self.items))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SupplyBill:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class TransBill:
    """Freight/handling invoice from a transporter."""

    kind: ClassVar[BillKind] = BillKind.TRANSPORT
    party_field: ClassVar[str] = "transporter_id"

    id: str
    export_document_id: str
    transporter_id: str
    invoice_number: str
    invoice_date: date | None = None
    job_no: str = ""
    shipping_line: str = ""
    container_no: str = ""
    items: tuple[TransBillItem, ...] = ()
    sub_total: Decimal = Decimal("0")
    cgst_rate: Decimal = Decimal("0")
    cgst_amount: Decimal = Decimal("0")
    sgst_rate: Decimal = Decimal("0")
    sgst_amount: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    total_after_tax: Decimal = Decimal("0")
    round_off: Decimal = Decimal("0")
    total_payable: Decimal | None = None
    remarks: str = ""
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(
            self,
            decimals=(
                "sub_total",
                "cgst_rate",
                "cgst_amount",
                "sgst_rate",
                "sgst_amount",
                "total_tax",
                "total_after_tax",
                "round_off",
            ),
            optional_decimals=("total_payable",),
            dates=("invoice_date",),
        )
        _set(
            self,
            "items",
            tuple(
                i if isinstance(i, TransBillItem) else TransBillItem.from_dict(i)
                for i in (self.items or ())
            ),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransBill:
        return cls(**_known(cls, data))


Bill = ManuBill | TransBill | SupplyBill


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RelatedInvoice:
    """Reference from a payment to the invoice or bill it settles."""

    type: str
    id: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelatedInvoice:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class Transaction:
    """A payment made (CREDIT) or received (DEBIT) by the business."""

    id: str
    date: date | None
    type: TransactionType
    party_type: PartyType
    party_id: str
    amount: Decimal = Decimal("0")
    currency: str = "INR"
    description: str = ""
    related_invoices: tuple[RelatedInvoice, ...] = ()
    is_deleted: bool = False

    def __post_init__(self) -> None:
        _coerce(self, decimals=("amount",), dates=("date",), tuples=("related_invoices",))
        _set(self, "type", TransactionType(self.type))
        _set(self, "party_type", PartyType(self.party_type))
        _set(self, "party_id", str(self.party_id))
        _set(
            self,
            "related_invoices",
            tuple(
                r if isinstance(r, RelatedInvoice) else RelatedInvoice.from_dict(r)
                for r in self.related_invoices
            ),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls(**_known(cls, data))


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


def _index(records: tuple[Any, ...]) -> dict[str, Any]:
    return {str(r.id): r for r in records}


@dataclass(frozen=True)
class EntitySnapshot:
    """
    Read-only view of every table, fetched once per computation.

    Id-indexed lookups are built on construction; engines use them instead
    of scanning tuples.  Records are kept including soft-deleted ones; each
    consumer applies the ``is_deleted`` filter that fits its listing.
    """

    sizes: tuple[Size, ...] = ()
    products: tuple[Product, ...] = ()
    parties: tuple[Party, ...] = ()
    performa_invoices: tuple[PerformaInvoice, ...] = ()
    purchase_orders: tuple[PurchaseOrder, ...] = ()
    export_documents: tuple[ExportDocument, ...] = ()
    manu_bills: tuple[ManuBill, ...] = ()
    trans_bills: tuple[TransBill, ...] = ()
    supply_bills: tuple[SupplyBill, ...] = ()
    transactions: tuple[Transaction, ...] = ()

    _size_index: dict[str, Size] = field(init=False, repr=False, compare=False)
    _product_index: dict[str, Product] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.init:
                _set(self, f.name, tuple(getattr(self, f.name) or ()))
        _set(self, "_size_index", _index(self.sizes))
        _set(self, "_product_index", _index(self.products))

    def size(self, size_id: str | None) -> Size | None:
        return self._size_index.get(str(size_id)) if size_id is not None else None

    def product(self, product_id: str | None) -> Product | None:
        return self._product_index.get(str(product_id)) if product_id is not None else None

    def parties_of(self, *party_types: PartyType) -> tuple[Party, ...]:
        return tuple(p for p in self.parties if p.party_type in party_types)

    def party(self, party_type: PartyType, party_id: str) -> Party | None:
        for p in self.parties:
            if p.party_type == party_type and str(p.id) == str(party_id):
                return p
        return None

    def bills(self) -> tuple[Bill, ...]:
        return self.manu_bills + self.trans_bills + self.supply_bills


# ---------------------------------------------------------------------------
# Pallet totals
# ---------------------------------------------------------------------------

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(value: str | None) -> int | None:
    match = _LEADING_INT.match(value or "0")
    return int(match.group(1)) if match else None


def compute_total_pallets(start_pallet_no: str | None, end_pallet_no: str | None) -> str:
    """
    Pallet count for a container's pallet number range.

    ``end - start + 1`` as text when both ends parse as integers and
    ``end >= start > 0``; otherwise the empty string.  Blank input counts
    as 0.
    """
    start = _leading_int(start_pallet_no)
    end = _leading_int(end_pallet_no)
    if start is None or end is None or not (end >= start > 0):
        return ""
    return str(end - start + 1)


def with_recomputed_pallets(document: ExportDocument) -> ExportDocument:
    """Return ``document`` with ``total_pallets`` derived for every container."""
    containers = tuple(
        replace(
            c,
            total_pallets=compute_total_pallets(c.start_pallet_no, c.end_pallet_no),
        )
        for c in document.container_items
    )
    return replace(document, container_items=containers)

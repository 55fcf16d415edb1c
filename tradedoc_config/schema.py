"""
TradeDocConfig schema.

The frozen runtime artifact produced from a YAML configuration set.  Every
section has defaults so a set only needs to name what it changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class LedgerSettings:
    page_size: int = 5


@dataclass(frozen=True)
class GstSettings:
    # Bills whose GST is not strictly above this are left off the summary.
    paid_noise_threshold: Decimal = Decimal("1")


@dataclass(frozen=True)
class NumberingSettings:
    export_invoice_prefix: str = "EXP/HEM"
    purchase_order_prefix: str = "HEM/PO"
    pad_width: int = 3
    fiscal_year_start_month: int = 4


@dataclass(frozen=True)
class AggregationSettings:
    weight_warning_kg: Decimal = Decimal("27000")
    pgvt_hsn_code: str = "69072100"
    money_places: int = 2


@dataclass(frozen=True)
class CurrencySettings:
    document_default: str = "USD"
    bill_default: str = "INR"


@dataclass(frozen=True)
class TradeDocConfig:
    """
    Compiled configuration.

    ``checksum`` is the SHA-256 of the source YAML contents and identifies
    the exact settings a computation ran with.
    """

    config_id: str = "default"
    version: int = 1
    ledger: LedgerSettings = field(default_factory=LedgerSettings)
    gst: GstSettings = field(default_factory=GstSettings)
    numbering: NumberingSettings = field(default_factory=NumberingSettings)
    aggregation: AggregationSettings = field(default_factory=AggregationSettings)
    currency: CurrencySettings = field(default_factory=CurrencySettings)
    checksum: str = ""

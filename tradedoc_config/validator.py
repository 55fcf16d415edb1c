"""
Configuration Validator (``tradedoc_config.validator``).

Range checks on a parsed ``TradeDocConfig``.  Type checks already happened
in the loader; this module decides whether well-typed values make sense.
A configuration with errors is never handed out by ``get_active_config``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from tradedoc_config.schema import TradeDocConfig

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")
_HSN_CODE = re.compile(r"^\d{4,8}$")


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    Each error is a ``(key, reason)`` pair naming the dotted setting path.
    """

    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, key: str, reason: str) -> None:
        self.errors.append((key, reason))


def validate_configuration(config: TradeDocConfig) -> ConfigValidationResult:
    result = ConfigValidationResult()
    _validate_ledger(config, result)
    _validate_gst(config, result)
    _validate_numbering(config, result)
    _validate_aggregation(config, result)
    _validate_currency(config, result)
    return result


def _validate_ledger(config: TradeDocConfig, result: ConfigValidationResult) -> None:
    if config.ledger.page_size < 1:
        result.add_error("ledger.page_size", "must be at least 1")


def _validate_gst(config: TradeDocConfig, result: ConfigValidationResult) -> None:
    if config.gst.paid_noise_threshold < 0:
        result.add_error("gst.paid_noise_threshold", "must not be negative")


def _validate_numbering(config: TradeDocConfig, result: ConfigValidationResult) -> None:
    numbering = config.numbering
    for key in ("export_invoice_prefix", "purchase_order_prefix"):
        prefix = getattr(numbering, key)
        if not prefix.strip():
            result.add_error(f"numbering.{key}", "must not be empty")
        elif prefix.endswith("/"):
            result.add_error(f"numbering.{key}", "must not end with '/'")
    if numbering.pad_width < 1:
        result.add_error("numbering.pad_width", "must be at least 1")
    if not 1 <= numbering.fiscal_year_start_month <= 12:
        result.add_error("numbering.fiscal_year_start_month", "must be a month number 1-12")


def _validate_aggregation(config: TradeDocConfig, result: ConfigValidationResult) -> None:
    aggregation = config.aggregation
    if aggregation.weight_warning_kg <= 0:
        result.add_error("aggregation.weight_warning_kg", "must be positive")
    if not _HSN_CODE.match(aggregation.pgvt_hsn_code):
        result.add_error("aggregation.pgvt_hsn_code", "must be 4 to 8 digits")
    if aggregation.money_places < 0:
        result.add_error("aggregation.money_places", "must not be negative")


def _validate_currency(config: TradeDocConfig, result: ConfigValidationResult) -> None:
    for key in ("document_default", "bill_default"):
        if not _CURRENCY_CODE.match(getattr(config.currency, key)):
            result.add_error(f"currency.{key}", "must be a 3-letter ISO code")

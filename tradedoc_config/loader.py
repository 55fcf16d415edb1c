"""
Configuration Loader (``tradedoc_config.loader``).

Responsibility
--------------
Loads a YAML configuration set and parses it into the frozen
``TradeDocConfig``.  Runtime callers go through
``tradedoc_config.get_active_config()``; this module is the parsing step
behind it and is used directly only by tests.

Invariants enforced
-------------------
* Unknown sections and unknown keys are rejected, so a misspelt key
  never silently falls back to its default.
* Numeric settings are parsed exactly: decimals through ``Decimal(str(v))``
  and integers only from YAML integers.
* ``compute_checksum`` is deterministic for identical YAML data.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong types or unknown keys  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from tradedoc_config.schema import (
    AggregationSettings,
    CurrencySettings,
    GstSettings,
    LedgerSettings,
    NumberingSettings,
    TradeDocConfig,
)
from tradedoc_kernel.exceptions import ConfigurationError

_SECTIONS: dict[str, type] = {
    "ledger": LedgerSettings,
    "gst": GstSettings,
    "numbering": NumberingSettings,
    "aggregation": AggregationSettings,
    "currency": CurrencySettings,
}
_TOP_LEVEL_KEYS = {"config_id", "version", *_SECTIONS}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _parse_decimal(key: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(key, f"expected a decimal, got {value!r}")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(key, f"expected a decimal, got {value!r}") from None
    if not result.is_finite():
        raise ConfigurationError(key, f"expected a finite decimal, got {value!r}")
    return result


def _parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(key, f"expected an integer, got {value!r}")
    return value


def _parse_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(key, f"expected a string, got {value!r}")
    return value


# Keyed by annotation text: schema.py uses postponed annotations.
_PARSERS = {"Decimal": _parse_decimal, "int": _parse_int, "str": _parse_str}


def parse_section(name: str, data: Any) -> Any:
    """Parse one settings section into its dataclass."""
    cls = _SECTIONS[name]
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigurationError(name, "section must be a mapping")

    declared = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(declared))
    if unknown:
        raise ConfigurationError(f"{name}.{unknown[0]}", "unknown setting")

    values = {}
    for key, value in data.items():
        parser = _PARSERS[str(declared[key].type)]
        values[key] = parser(f"{name}.{key}", value)
    return cls(**values)


def parse_config(data: dict[str, Any], checksum: str = "") -> TradeDocConfig:
    """Build a ``TradeDocConfig`` from parsed YAML data."""
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigurationError(unknown[0], "unknown section")
    return TradeDocConfig(
        config_id=_parse_str("config_id", data.get("config_id", "default")),
        version=_parse_int("version", data.get("version", 1)),
        checksum=checksum,
        **{name: parse_section(name, data.get(name)) for name in _SECTIONS},
    )


def load_config_file(path: Path) -> TradeDocConfig:
    """Load, checksum and parse one configuration set file."""
    data = load_yaml_file(path)
    return parse_config(data, checksum=compute_checksum(data))

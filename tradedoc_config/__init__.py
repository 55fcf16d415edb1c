"""
tradedoc_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or environment variables directly.  Returns a frozen ``TradeDocConfig``.

Architecture position:
    Configuration -- YAML-driven settings, validated on load.
    Sits above ``tradedoc_kernel`` and beside ``tradedoc_services``, which
    receives the config by constructor injection.  Engines never import
    this package; services pass individual settings in as arguments.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Validation before use: a set with any range error is rejected.
    - Deterministic checksum: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- no set named ``set_name`` in the directory.
    - ``ConfigurationError`` -- wrong types, unknown keys or out-of-range values.

Audit relevance:
    Every successful call emits a ``TRADEDOC_CONFIG_TRACE`` log entry with
    the config id, version and checksum, tying each computed document back
    to the settings it was produced under.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tradedoc_config.loader import load_config_file
from tradedoc_config.schema import TradeDocConfig
from tradedoc_config.validator import validate_configuration
from tradedoc_kernel.exceptions import ConfigurationError

_logger = logging.getLogger("tradedoc_kernel.config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

__all__ = ["TradeDocConfig", "get_active_config"]


def get_active_config(
    config_dir: Path | None = None,
    set_name: str = "default",
) -> TradeDocConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_dir: Override path to the configuration sets directory.
            Defaults to tradedoc_config/sets/.
        set_name: File stem of the set to load (``<set_name>.yaml``).

    Raises:
        FileNotFoundError: If the set file does not exist.
        ConfigurationError: If parsing or validation fails.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{set_name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Configuration set not found: {path}")

    config = load_config_file(path)

    validation = validate_configuration(config)
    if not validation.is_valid:
        for key, reason in validation.errors:
            _logger.error("config_validation_failed", extra={"key": key, "reason": reason})
        key, reason = validation.errors[0]
        raise ConfigurationError(key, reason)

    _logger.info(
        "TRADEDOC_CONFIG_TRACE",
        extra={
            "trace_type": "TRADEDOC_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "page_size": config.ledger.page_size,
        },
    )
    return config

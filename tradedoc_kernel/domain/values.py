"""
Values -- numeric coercion and rounding for trade documents.

Responsibility:
    Converts the loosely-typed numbers that arrive from data entry (None,
    empty strings, "18%", floats, NaN) into ``Decimal`` at the arithmetic
    boundary, and rounds results to the two places shown on documents.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by entities and every engine.

Invariants enforced:
    - Malformed numeric input coerces to ``Decimal("0")``; it never raises
      and never propagates NaN or Infinity.
    - Floats are converted through ``str()`` so 1.44 stays 1.44.
    - Money rounding is ROUND_HALF_UP to a fixed number of places.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONEY_PLACES = 2


def coerce_decimal(value: Any) -> Decimal:
    """
    Coerce any numeric-ish value to a finite Decimal, defaulting to zero.

    Accepts Decimal, int, float, numeric strings (surrounding whitespace and
    thousands separators ignored).  Returns ``Decimal("0")`` for None, "",
    booleans, non-numeric strings, NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        return Decimal(value)
    elif isinstance(value, (float, str)):
        text = str(value).strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def coerce_optional_decimal(value: Any) -> Decimal | None:
    """Like ``coerce_decimal`` but keeps None/"" as None (value not supplied)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_decimal(value)


def parse_percent(value: Any) -> Decimal:
    """
    Parse a percentage such as ``"18%"``, ``"18"`` or ``18`` into a fraction.

    ``"18%"`` -> ``Decimal("0.18")``.  Malformed input yields zero.
    """
    if isinstance(value, str):
        value = value.replace("%", "")
    return coerce_decimal(value) / HUNDRED


def round_money(amount: Decimal, places: int = MONEY_PLACES) -> Decimal:
    """Round half-up to ``places`` decimal places."""
    quantum = Decimal(1).scaleb(-places)
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


def format_rate_key(rate: Decimal) -> str:
    """
    Canonical text for a rate inside a grouping key.

    ``10``, ``10.0`` and ``10.00`` are the same negotiated rate and must
    produce the same key; ``normalize()`` strips trailing zeros.
    """
    normalized = rate.normalize()
    if normalized == normalized.to_integral():
        return str(normalized.quantize(Decimal(1)))
    return format(normalized, "f")

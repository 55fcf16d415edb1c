"""
tradedoc_services -- Package init and public API.

Responsibility:
    Store-backed services that load an ``EntitySnapshot`` through the
    ``EntityStore`` protocol and run the pure engines over it with the
    active configuration.  This is the only layer that holds a store or
    reads the wall clock.

Architecture position:
    Services -- imperative shell over engines + kernel.

        tradedoc_services/ -> tradedoc_engines/  (allowed)
        tradedoc_services/ -> tradedoc_kernel/   (allowed)
        tradedoc_services/ -> tradedoc_config/   (allowed)
        tradedoc_engines/  -> tradedoc_services/ (FORBIDDEN)
        tradedoc_kernel/   -> tradedoc_services/ (FORBIDDEN)

Invariants enforced:
    - DI transparency: services receive their store and config; none
      constructs its own.

Failure modes:
    - Typed ``TradeDocError`` subclasses for caller mistakes (unknown party
      type, missing party or document); incomplete data never raises.
"""

from tradedoc_services._base import SnapshotService
from tradedoc_services.document_service import DocumentService
from tradedoc_services.gst_service import GstService
from tradedoc_services.ledger_service import (
    ClientLedgerReport,
    LedgerService,
    PartyLedgerReport,
)

__all__ = [
    "ClientLedgerReport",
    "DocumentService",
    "GstService",
    "LedgerService",
    "PartyLedgerReport",
    "SnapshotService",
]

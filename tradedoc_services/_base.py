"""
tradedoc_services._base -- shared wiring for the store-backed services.

Every service receives an ``EntityStore`` and a ``TradeDocConfig`` by
constructor injection and fetches one ``EntitySnapshot`` per operation.
"""

from __future__ import annotations

import time

from tradedoc_config import TradeDocConfig
from tradedoc_kernel.domain.entities import EntitySnapshot, Party, PartyType
from tradedoc_kernel.exceptions import PartyNotFoundError
from tradedoc_kernel.logging_config import get_logger
from tradedoc_kernel.store.base import EntityStore

logger = get_logger("services")


class SnapshotService:
    """Base for services that compute over a fresh snapshot of the store."""

    def __init__(self, store: EntityStore, config: TradeDocConfig):
        self._store = store
        self._config = config

    @property
    def config(self) -> TradeDocConfig:
        return self._config

    def _snapshot(self) -> EntitySnapshot:
        t0 = time.monotonic()
        snapshot = self._store.load_snapshot()
        logger.debug(
            "snapshot_loaded",
            extra={
                "service": type(self).__name__,
                "export_documents": len(snapshot.export_documents),
                "bills": len(snapshot.bills()),
                "transactions": len(snapshot.transactions),
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            },
        )
        return snapshot

    @staticmethod
    def _require_party(snapshot: EntitySnapshot, party_type: PartyType, party_id: str) -> Party:
        """The live party, or ``PartyNotFoundError``."""
        party = snapshot.party(party_type, party_id)
        if party is None or party.is_deleted:
            raise PartyNotFoundError(party_type.value, str(party_id))
        return party

"""GST summary over the store, with the configured threshold and page size."""

from __future__ import annotations

from tradedoc_engines.gst import GstSummary, build_gst_summary
from tradedoc_services._base import SnapshotService


class GstService(SnapshotService):

    def summary(
        self,
        *,
        paid_search: str = "",
        received_search: str = "",
        paid_page: int = 1,
        received_page: int = 1,
    ) -> GstSummary:
        snapshot = self._snapshot()
        return build_gst_summary(
            snapshot.manu_bills,
            snapshot.trans_bills,
            snapshot.supply_bills,
            snapshot.transactions,
            snapshot.parties,
            paid_search=paid_search,
            received_search=received_search,
            paid_page=paid_page,
            received_page=received_page,
            page_size=self._config.ledger.page_size,
            threshold=self._config.gst.paid_noise_threshold,
        )

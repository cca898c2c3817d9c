"""Inventory history store.

Implements ``StockJournal`` for the stores that move stock.  Writing is
best-effort: a failed batch is logged, shown on ``error`` and dropped, and
the caller's sale, reservation or product stands.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from kitstock.application.error_state import ErrorState, describe_error
from kitstock.domain.exceptions import DomainException, ValidationError
from kitstock.domain.model.inventory_log import (
    InventoryEntityType,
    InventoryLogEntry,
    InventoryLogFilters,
)
from kitstock.domain.repository.inventory_log_repository import InventoryLogRepository
from kitstock.domain.service.stock_journal import StockJournal

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class InventoryLogStore(ErrorState, StockJournal):

    entity_name = "inventory log entry"

    def __init__(self, repo: InventoryLogRepository) -> None:
        super().__init__()
        self._repo = repo
        self._entries: list[InventoryLogEntry] = []

    # --- Getters --------------------------------------------------------------

    def list_entries(self) -> list[InventoryLogEntry]:
        return list(self._entries)

    # --- StockJournal ---------------------------------------------------------

    def record(self, entries: list[InventoryLogEntry]) -> list[InventoryLogEntry]:
        if not entries:
            return []
        try:
            written = self._repo.create_many(entries)
        except DomainException as exc:
            self.error = describe_error(exc, "record", self.entity_name)
            logger.warning(
                "Inventory history lost for %s: %s",
                ", ".join(sorted({f"{e.entity_type.value} {e.entity_id}" for e in entries})),
                exc,
            )
            return []
        self.error = None
        self._entries = written + self._entries
        return written

    # --- Actions --------------------------------------------------------------

    def load(self, filters: InventoryLogFilters | None = None) -> None:
        filters = filters or InventoryLogFilters()
        self._entries = self._guard("load", lambda: self._repo.search(filters))

    def history(
        self,
        entity_type: InventoryEntityType,
        entity_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[InventoryLogEntry]:
        """Newest movements of one product, nameset or badge."""
        filters = InventoryLogFilters(entity_type=entity_type, entity_id=entity_id, limit=limit)
        return self._guard("load", lambda: self._repo.search(filters))

    def purge(self, older_than_days: int, now: datetime | None = None) -> int:
        """Delete entries older than ``older_than_days``; return how many went."""

        def action() -> int:
            if older_than_days <= 0:
                raise ValidationError("Days must be > 0")
            cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=older_than_days)
            removed = self._repo.delete_before(cutoff)
            self._entries = [e for e in self._entries if e.created_at >= cutoff]
            return removed

        removed = self._guard("delete", action)
        logger.info("Purged %d inventory history entries", removed)
        return removed

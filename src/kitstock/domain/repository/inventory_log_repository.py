"""Abstract repository for inventory history entries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from kitstock.domain.model.inventory_log import InventoryLogEntry, InventoryLogFilters


class InventoryLogRepository(ABC):

    @abstractmethod
    def create_many(self, entries: list[InventoryLogEntry]) -> list[InventoryLogEntry]:
        """Persist a batch of entries, all or none, returning them with ids."""

    @abstractmethod
    def search(self, filters: InventoryLogFilters) -> list[InventoryLogEntry]:
        """Return matching entries, newest first."""

    @abstractmethod
    def delete_before(self, cutoff: datetime) -> int:
        """Remove entries created before ``cutoff``; return how many went."""

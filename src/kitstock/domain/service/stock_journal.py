"""Where stock movements are written down.

Stores and services collect ``InventoryLogEntry`` values while they move
stock and hand them to a ``StockJournal`` once the record that caused the
movement is known.  Writing history is best-effort: a journal never
raises, so a lost entry can never undo a sale or a reservation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kitstock.domain.model.inventory_log import InventoryLogEntry, InventoryReferenceType


class StockJournal(ABC):

    @abstractmethod
    def record(self, entries: list[InventoryLogEntry]) -> list[InventoryLogEntry]:
        """Persist ``entries``; return what was written, [] on failure."""


def write_history(
    journal: StockJournal | None,
    entries: list[InventoryLogEntry],
    reference_type: InventoryReferenceType | None = None,
    reference_id: str | None = None,
) -> list[InventoryLogEntry]:
    """Stamp ``entries`` with their reference and hand them to ``journal``."""
    if journal is None or not entries:
        return []
    return journal.record([e.referencing(reference_type, reference_id) for e in entries])

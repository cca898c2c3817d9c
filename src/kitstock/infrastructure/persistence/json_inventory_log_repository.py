"""JSON-file-backed implementation of InventoryLogRepository."""

from __future__ import annotations

from datetime import datetime

from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    InventoryEntityType,
    InventoryLogEntry,
    InventoryLogFilters,
    InventoryReferenceType,
)
from kitstock.domain.repository.inventory_log_repository import InventoryLogRepository
from kitstock.infrastructure.persistence.codec import dump_datetime, load_datetime
from kitstock.infrastructure.persistence.json_table import JsonTable


class JsonInventoryLogRepository(JsonTable, InventoryLogRepository):

    entity_name = "inventory log entry"

    def create_many(self, entries: list[InventoryLogEntry]) -> list[InventoryLogEntry]:
        return self._insert_many(entries)

    def search(self, filters: InventoryLogFilters) -> list[InventoryLogEntry]:
        return filters.apply(self._all())

    def delete_before(self, cutoff: datetime) -> int:
        rows = self._load_raw()
        kept = [row for row in rows if load_datetime(row["created_at"]) >= cutoff]
        if len(kept) != len(rows):
            self._persist_raw(kept)
        return len(rows) - len(kept)

    @staticmethod
    def _to_raw(entry: InventoryLogEntry) -> dict:
        return {
            "id": entry.id,
            "entity_type": entry.entity_type.value,
            "entity_id": entry.entity_id,
            "entity_name": entry.entity_name,
            "size": entry.size,
            "change_type": entry.change_type.value,
            "quantity_before": entry.quantity_before,
            "quantity_change": entry.quantity_change,
            "quantity_after": entry.quantity_after,
            "reason": entry.reason,
            "reference_id": entry.reference_id,
            "reference_type": entry.reference_type.value if entry.reference_type else None,
            "created_at": dump_datetime(entry.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryLogEntry:
        reference_type = raw.get("reference_type")
        return InventoryLogEntry(
            id=raw["id"],
            entity_type=InventoryEntityType(raw["entity_type"]),
            entity_id=raw["entity_id"],
            entity_name=raw["entity_name"],
            size=raw.get("size"),
            change_type=InventoryChangeType(raw["change_type"]),
            quantity_before=raw["quantity_before"],
            quantity_change=raw["quantity_change"],
            quantity_after=raw["quantity_after"],
            reason=raw.get("reason"),
            reference_id=raw.get("reference_id"),
            reference_type=InventoryReferenceType(reference_type) if reference_type else None,
            created_at=load_datetime(raw["created_at"]),
        )

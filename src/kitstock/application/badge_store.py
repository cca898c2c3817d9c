"""Badge store."""

from __future__ import annotations

from typing import Any

from kitstock.application.catalog_store import CatalogStore
from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.badge import Badge
from kitstock.domain.repository.asset_repository import BadgeRepository


class BadgeStore(CatalogStore[Badge]):

    entity_name = "badge"

    def __init__(self, repo: BadgeRepository) -> None:
        super().__init__(repo)

    def available(self) -> list[Badge]:
        return [b for b in self.list_active() if b.quantity > 0]

    def sold_out(self) -> list[Badge]:
        return [b for b in self.list_active() if b.quantity == 0]

    def _before_update(self, record_id: str, changes: dict[str, Any]) -> None:
        if changes.get("quantity", 0) < 0:
            raise ValidationError("Badge quantity cannot be negative", {"quantity": "Must be >= 0"})

"""Nameset store."""

from __future__ import annotations

from typing import Any

from kitstock.application.catalog_store import CatalogStore
from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.nameset import Nameset
from kitstock.domain.repository.asset_repository import NamesetRepository


class NamesetStore(CatalogStore[Nameset]):

    entity_name = "nameset"

    def __init__(self, repo: NamesetRepository) -> None:
        super().__init__(repo)

    def available(self) -> list[Nameset]:
        return [n for n in self.list_active() if n.quantity > 0]

    def sold_out(self) -> list[Nameset]:
        return [n for n in self.list_active() if n.quantity == 0]

    def by_player(self, player_name: str) -> list[Nameset]:
        needle = player_name.lower()
        return [n for n in self.list_active() if needle in n.player_name.lower()]

    def _before_update(self, record_id: str, changes: dict[str, Any]) -> None:
        if changes.get("quantity", 0) < 0:
            raise ValidationError("Nameset quantity cannot be negative", {"quantity": "Must be >= 0"})

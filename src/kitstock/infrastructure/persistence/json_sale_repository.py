"""JSON-file-backed implementation of SaleRepository."""

from __future__ import annotations

from typing import Any

from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.sale import Sale, SaleType
from kitstock.domain.repository.sale_repository import SaleRepository
from kitstock.infrastructure.persistence.codec import (
    dump_datetime,
    dump_items,
    load_datetime,
    load_items,
)
from kitstock.infrastructure.persistence.json_table import JsonTable


class JsonSaleRepository(JsonTable, SaleRepository):

    entity_name = "sale"

    # --- SaleRepository interface ---------------------------------------------

    def create(self, sale: Sale) -> Sale:
        return self._insert(sale)

    def get_by_id(self, sale_id: str) -> Sale | None:
        return self._get(sale_id)

    def update(self, sale_id: str, changes: dict[str, Any]) -> Sale:
        return self._apply(sale_id, changes)

    def delete(self, sale_id: str) -> None:
        self._remove(sale_id)

    def search(self, filters: PeriodFilters) -> list[Sale]:
        found = [s for s in self._all() if filters.matches(s.date, s.sale_type)]
        return sorted(found, key=lambda s: s.date, reverse=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(sale: Sale) -> dict:
        return {
            "id": sale.id,
            "items": dump_items(sale.items),
            "customer_name": sale.customer_name,
            "date": dump_datetime(sale.date),
            "sale_type": sale.sale_type.value,
            "created_at": dump_datetime(sale.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Sale:
        return Sale(
            id=raw["id"],
            items=load_items(raw["items"]),
            customer_name=raw["customer_name"],
            date=load_datetime(raw["date"]),
            sale_type=SaleType(raw["sale_type"]),
            created_at=load_datetime(raw["created_at"]),
        )

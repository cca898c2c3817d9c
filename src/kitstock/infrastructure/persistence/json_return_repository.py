"""JSON-file-backed implementation of ReturnRepository."""

from __future__ import annotations

from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.product_return import ProductReturn
from kitstock.domain.model.sale import SaleType
from kitstock.domain.repository.return_repository import ReturnRepository
from kitstock.infrastructure.persistence.codec import (
    dump_datetime,
    dump_items,
    load_datetime,
    load_items,
)
from kitstock.infrastructure.persistence.json_table import JsonTable


class JsonReturnRepository(JsonTable, ReturnRepository):

    entity_name = "return"

    def create(self, record: ProductReturn) -> ProductReturn:
        return self._insert(record)

    def delete(self, return_id: str) -> None:
        self._remove(return_id)

    def search(self, filters: PeriodFilters) -> list[ProductReturn]:
        found = [r for r in self._all() if filters.matches(r.created_at, r.sale_type)]
        return sorted(found, key=lambda r: r.created_at, reverse=True)

    @staticmethod
    def _to_raw(record: ProductReturn) -> dict:
        return {
            "id": record.id,
            "items": dump_items(record.items),
            "customer_name": record.customer_name,
            "date": dump_datetime(record.date),
            "sale_type": record.sale_type.value,
            "original_sale_id": record.original_sale_id,
            "created_at": dump_datetime(record.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> ProductReturn:
        return ProductReturn(
            id=raw["id"],
            items=load_items(raw["items"]),
            customer_name=raw["customer_name"],
            date=load_datetime(raw["date"]),
            sale_type=SaleType(raw["sale_type"]),
            original_sale_id=raw.get("original_sale_id"),
            created_at=load_datetime(raw["created_at"]),
        )

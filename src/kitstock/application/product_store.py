"""Product store.

Besides the catalog actions, the product store is the ``StockLedger`` the
sale and reservation stores are given: every per-size stock movement goes
through ``replace_sizes`` and therefore through ``update``.
"""

from __future__ import annotations

from typing import Any

from kitstock.application.catalog_store import CatalogStore
from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    size_movements,
)
from kitstock.domain.model.product import Product
from kitstock.domain.model.stock import SizeStock, ensure_unique_sizes
from kitstock.domain.repository.product_repository import ProductRepository
from kitstock.domain.service.stock_allocation_service import StockLedger
from kitstock.domain.service.stock_journal import StockJournal, write_history


class ProductStore(CatalogStore[Product], StockLedger):

    entity_name = "product"

    def __init__(self, repo: ProductRepository, journal: StockJournal | None = None) -> None:
        super().__init__(repo)
        self._journal = journal

    # --- StockLedger ----------------------------------------------------------

    def find_product(self, product_id: str) -> Product | None:
        return self.get(product_id)

    def replace_sizes(self, product_id: str, sizes: list[SizeStock]) -> Product:
        return self.update(product_id, {"sizes": list(sizes)})

    def reload(self) -> None:
        self.load()

    # --- Manual stock changes -------------------------------------------------

    def adjust_sizes(
        self, product_id: str, sizes: list[SizeStock], reason: str | None = None
    ) -> Product:
        """Set per-size stock by hand and write the difference to the history."""
        before = self.get(product_id)
        updated = self.replace_sizes(product_id, sizes)
        if before is not None:
            write_history(
                self._journal,
                size_movements(before, updated.sizes, InventoryChangeType.MANUAL_ADJUSTMENT, reason),
            )
        return updated

    # --- Selectors ------------------------------------------------------------

    def available(self) -> list[Product]:
        """Active products with at least one size in stock."""
        return [p for p in self.list_active() if p.is_available]

    def sold_out(self) -> list[Product]:
        return [p for p in self.list_active() if not p.is_available]

    def by_team(self, team_id: str) -> list[Product]:
        return [p for p in self.list_active() if p.team_id == team_id]

    def by_nameset(self, nameset_id: str) -> list[Product]:
        return [p for p in self.list_active() if p.nameset_id == nameset_id]

    # --- Hooks ----------------------------------------------------------------

    def _before_update(self, record_id: str, changes: dict[str, Any]) -> None:
        if "sizes" in changes:
            ensure_unique_sizes(changes["sizes"])
        current = self.get(record_id)
        if current is None:
            return
        is_on_sale = changes.get("is_on_sale", current.is_on_sale)
        sale_price = changes.get("sale_price", current.sale_price)
        price = changes.get("price", current.price)
        if is_on_sale and sale_price is not None and sale_price >= price:
            raise ValidationError(
                f"Sale price {sale_price} must be lower than price {price}",
                {"sale_price": "Must be lower than the regular price"},
            )

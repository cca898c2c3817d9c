"""Return store: log of merchandise returned after a sale.

Returns are history only.  Creating or deleting one never moves stock;
filtering by period and channel is delegated to persistence.
"""

from __future__ import annotations

import logging

from kitstock.application.error_state import ErrorState
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.product_return import ProductReturn
from kitstock.domain.repository.return_repository import ReturnRepository

logger = logging.getLogger(__name__)


class ReturnStore(ErrorState):

    entity_name = "return"

    def __init__(self, repo: ReturnRepository, filters: PeriodFilters | None = None) -> None:
        super().__init__()
        self._repo = repo
        self._returns: dict[str, ProductReturn] = {}
        self.filters = filters or PeriodFilters.current_month()

    # --- Getters --------------------------------------------------------------

    def list_returns(self) -> list[ProductReturn]:
        return list(self._returns.values())

    def get(self, return_id: str) -> ProductReturn | None:
        return self._returns.get(return_id)

    def by_product(self, product_id: str) -> list[ProductReturn]:
        return [r for r in self._returns.values() if any(i.product_id == product_id for i in r.items)]

    def by_customer(self, customer_name: str) -> list[ProductReturn]:
        needle = customer_name.lower()
        return [r for r in self._returns.values() if needle in r.customer_name.lower()]

    # --- Actions --------------------------------------------------------------

    def load(self, filters: PeriodFilters | None = None) -> None:
        filters = filters or self.filters
        found = self._guard("load", lambda: self._repo.search(filters))
        self._returns = {r.id: r for r in found}
        self.filters = filters

    def create(self, record: ProductReturn) -> ProductReturn:
        created = self._guard("create", lambda: self._repo.create(record))
        self._returns[created.id] = created
        logger.info("Recorded return %s for %s", created.id, created.customer_name)
        return created

    def delete(self, return_id: str) -> None:
        self._guard("delete", lambda: self._repo.delete(return_id))
        self._returns.pop(return_id, None)

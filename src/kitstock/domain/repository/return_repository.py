"""Abstract repository for product returns."""

from __future__ import annotations

from abc import ABC, abstractmethod

from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.product_return import ProductReturn


class ReturnRepository(ABC):

    @abstractmethod
    def create(self, record: ProductReturn) -> ProductReturn:
        """Persist a new return and return it with its generated ``id``."""

    @abstractmethod
    def delete(self, return_id: str) -> None:
        """Permanently remove a return."""

    @abstractmethod
    def search(self, filters: PeriodFilters) -> list[ProductReturn]:
        """Return entries whose ``created_at`` falls in the period, newest first."""

"""Abstract repository for the Sale aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.sale import Sale


class SaleRepository(ABC):

    @abstractmethod
    def create(self, sale: Sale) -> Sale:
        """Persist a new sale and return it with its generated ``id``."""

    @abstractmethod
    def get_by_id(self, sale_id: str) -> Sale | None:
        """Return a sale by its ID, or None if not found."""

    @abstractmethod
    def update(self, sale_id: str, changes: dict[str, Any]) -> Sale:
        """Apply a partial update and return the updated sale."""

    @abstractmethod
    def delete(self, sale_id: str) -> None:
        """Permanently remove a sale."""

    @abstractmethod
    def search(self, filters: PeriodFilters) -> list[Sale]:
        """Return sales whose ``date`` falls in the period, newest first."""

"""Abstract repository for the Product aggregate."""

from __future__ import annotations

from kitstock.domain.model.product import Product
from kitstock.domain.repository.catalog_repository import CatalogRepository


class ProductRepository(CatalogRepository[Product]):
    """Persistence for products; ``sizes`` updates carry stock movements."""

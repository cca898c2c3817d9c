"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from kitstock.domain.model.product import Product, ProductType
from kitstock.domain.repository.product_repository import ProductRepository
from kitstock.infrastructure.persistence.codec import (
    dump_datetime,
    dump_money,
    dump_sizes,
    load_datetime,
    load_money,
    load_sizes,
)
from kitstock.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository


class JsonProductRepository(JsonCatalogRepository[Product], ProductRepository):

    entity_name = "product"

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "type": product.type.value,
            "sizes": dump_sizes(product.sizes),
            "price": dump_money(product.price),
            "kit_type_id": product.kit_type_id,
            "nameset_id": product.nameset_id,
            "team_id": product.team_id,
            "badge_id": product.badge_id,
            "is_on_sale": product.is_on_sale,
            "sale_price": dump_money(product.sale_price),
            "location": product.location,
            "created_at": dump_datetime(product.created_at),
            "archived_at": dump_datetime(product.archived_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            type=ProductType(raw["type"]),
            sizes=load_sizes(raw["sizes"]),
            price=load_money(raw["price"]),
            kit_type_id=raw["kit_type_id"],
            nameset_id=raw.get("nameset_id"),
            team_id=raw.get("team_id"),
            badge_id=raw.get("badge_id"),
            is_on_sale=raw.get("is_on_sale", False),
            sale_price=load_money(raw.get("sale_price")),
            location=raw.get("location"),
            created_at=load_datetime(raw["created_at"]),
            archived_at=load_datetime(raw.get("archived_at")),
        )

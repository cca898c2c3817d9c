"""Product aggregate.

A product is a sellable shirt or kit with per-size stock.  Products
reference the nameset, badge, team and kit type they were built from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.stock import SizeStock, ensure_unique_sizes, total_quantity
from kitstock.domain.model.value_objects import Money


class ProductType(Enum):
    SHIRT = "shirt"
    SHORTS = "shorts"
    KID_KIT = "kid kit"
    ADULT_KIT = "adult kit"


ADULT_SIZES = ("S", "M", "L", "XL", "XXL")
KID_SIZES = ("22", "24", "26", "28")


@dataclass
class Product:
    """Aggregate root for catalog products.

    Use ``Product.create()`` for new products, it enforces the catalog
    rules.  ``__init__`` stays permissive so repositories can reconstitute
    persisted rows without re-validating them.

    Invariants:
    - every size quantity is >= 0 (enforced by ``SizeStock``)
    - sizes are unique within a product
    - ``sale_price`` < ``price`` while ``is_on_sale``
    """

    id: str | None
    name: str
    type: ProductType
    sizes: list[SizeStock]
    price: Money
    kit_type_id: str
    nameset_id: str | None = None
    team_id: str | None = None
    badge_id: str | None = None
    is_on_sale: bool = False
    sale_price: Money | None = None
    location: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    archived_at: datetime | None = None

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        name: str,
        type: ProductType,
        sizes: list[SizeStock],
        price: Money,
        kit_type_id: str,
        nameset_id: str | None = None,
        team_id: str | None = None,
        badge_id: str | None = None,
        is_on_sale: bool = False,
        sale_price: Money | None = None,
        location: str | None = None,
    ) -> Product:
        name = (name or "").strip()
        if not name and not team_id:
            raise ValidationError("Product name or team is required", {"name": "Required"})
        if not kit_type_id:
            raise ValidationError("Kit type is required", {"kit_type_id": "Required"})

        ensure_unique_sizes(sizes)

        if is_on_sale:
            if sale_price is None:
                raise ValidationError(
                    "Sale price is required when the product is on sale",
                    {"sale_price": "Required"},
                )
            if sale_price >= price:
                raise ValidationError(
                    f"Sale price {sale_price} must be lower than price {price}",
                    {"sale_price": "Must be lower than the regular price"},
                )

        return Product(
            id=None,
            name=name,
            type=type,
            sizes=list(sizes),
            price=price,
            kit_type_id=kit_type_id,
            nameset_id=nameset_id or None,
            team_id=team_id or None,
            badge_id=badge_id or None,
            is_on_sale=is_on_sale,
            sale_price=sale_price if is_on_sale else None,
            location=location or None,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def total_quantity(self) -> int:
        return total_quantity(self.sizes)

    @property
    def is_available(self) -> bool:
        return any(s.quantity > 0 for s in self.sizes)

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @property
    def effective_price(self) -> Money:
        if self.is_on_sale and self.sale_price is not None:
            return self.sale_price
        return self.price

    def quantity_for(self, size: str) -> int | None:
        """Stock for ``size``, or None when the product does not carry it."""
        for entry in self.sizes:
            if entry.size == size:
                return entry.quantity
        return None

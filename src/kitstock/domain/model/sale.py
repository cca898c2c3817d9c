"""Sale aggregate: a finalized, stock-consuming transaction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.line_item import LineItem, items_total
from kitstock.domain.model.value_objects import Money


class SaleType(Enum):
    OLX = "OLX"
    IN_PERSON = "IN-PERSON"
    VINTED = "VINTED"


WALK_IN_CUSTOMER = "N/A"


@dataclass
class Sale:
    """Aggregate root for sales.

    ``date`` is when the customer bought the items; ``created_at`` is when
    the record was written.  They differ for back-dated entries and for
    sales produced by completing a reservation.
    """

    id: str | None
    items: list[LineItem]
    customer_name: str
    date: datetime
    sale_type: SaleType
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        items: list[LineItem],
        customer_name: str | None,
        sale_type: SaleType,
        date: datetime | None = None,
    ) -> Sale:
        if not items:
            raise ValidationError("Sale must have at least one item")
        return Sale(
            id=None,
            items=list(items),
            customer_name=(customer_name or "").strip() or WALK_IN_CUSTOMER,
            date=date or datetime.now(timezone.utc),
            sale_type=sale_type,
        )

    @property
    def total(self) -> Money:
        return items_total(self.items)

    def touches_product(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)

"""Return: a historical record of merchandise brought back after a sale."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.line_item import LineItem, items_total
from kitstock.domain.model.sale import Sale, SaleType
from kitstock.domain.model.value_objects import Money


@dataclass
class ProductReturn:
    """A return log entry.

    Creating one does not move stock; ``SaleStore.return_sale`` is the
    flow that both restores stock and writes a return.
    """

    id: str | None
    items: list[LineItem]
    customer_name: str
    date: datetime
    sale_type: SaleType
    original_sale_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        items: list[LineItem],
        customer_name: str,
        date: datetime,
        sale_type: SaleType,
        original_sale_id: str | None = None,
    ) -> ProductReturn:
        if not items:
            raise ValidationError("Return must have at least one item")
        return ProductReturn(
            id=None,
            items=list(items),
            customer_name=(customer_name or "").strip(),
            date=date,
            sale_type=sale_type,
            original_sale_id=original_sale_id,
        )

    @staticmethod
    def from_sale(sale: Sale) -> ProductReturn:
        """The return written when a whole sale comes back."""
        return ProductReturn.create(
            items=list(sale.items),
            customer_name=sale.customer_name,
            date=sale.created_at,
            sale_type=sale.sale_type,
            original_sale_id=sale.id,
        )

    @property
    def total(self) -> Money:
        return items_total(self.items)

"""Line items shared by sales, reservations and returns."""

from __future__ import annotations

from dataclasses import dataclass

from kitstock.domain.model.value_objects import Money


@dataclass(frozen=True)
class LineItem:
    """One product/size/quantity entry with the price it was sold at.

    Deliberately unvalidated so persisted records can be reconstituted
    as-is; new items are checked by ``StockAllocationService.validate``.
    """

    product_id: str
    size: str
    quantity: int
    price_sold: Money

    @property
    def line_total(self) -> Money:
        return self.price_sold * self.quantity


def group_by_product(items: list[LineItem]) -> dict[str, dict[str, int]]:
    """Sum item quantities per product and size.

    ``{"7": {"M": 3, "L": 1}}`` means product 7 needs three M and one L.
    Grouping lets each product receive exactly one stock update even when
    several items touch it.
    """
    grouped: dict[str, dict[str, int]] = {}
    for item in items:
        by_size = grouped.setdefault(item.product_id, {})
        by_size[item.size] = by_size.get(item.size, 0) + item.quantity
    return grouped


def items_total(items: list[LineItem]) -> Money:
    if not items:
        return Money.zero()
    result = Money.zero(items[0].price_sold.currency)
    for item in items:
        result = result + item.line_total
    return result

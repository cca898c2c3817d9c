"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from kitstock.domain.model.line_item import LineItem
from kitstock.domain.model.reservation import Reservation
from kitstock.domain.model.sale import Sale
from kitstock.domain.model.value_objects import DEFAULT_CURRENCY, Money

DISPLAY_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one requested line (product, size, quantity, unit price)."""

    product_id: str
    size: str
    quantity: int
    price_sold: str

    def to_line_item(self, currency: str = DEFAULT_CURRENCY) -> LineItem:
        return LineItem(
            product_id=self.product_id.strip(),
            size=self.size.strip(),
            quantity=self.quantity,
            price_sold=Money.of(self.price_sold, currency),
        )


def to_line_items(specs: list[LineItemSpec], currency: str = DEFAULT_CURRENCY) -> list[LineItem]:
    return [spec.to_line_item(currency) for spec in specs]


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    size: str
    quantity: int
    price_sold: str  # formatted, e.g. "120.00 PLN"
    line_total: str


@dataclass(frozen=True)
class SaleDTO:
    id: str
    customer_name: str
    sale_type: str
    date: str
    items: list[LineItemDTO]
    total: str


@dataclass(frozen=True)
class ReservationDTO:
    id: str
    customer_name: str
    status: str
    expired: bool
    expiring_date: str
    items: list[LineItemDTO]
    total: str


def _items_to_dto(items: list[LineItem]) -> list[LineItemDTO]:
    return [
        LineItemDTO(
            product_id=item.product_id,
            size=item.size,
            quantity=item.quantity,
            price_sold=str(item.price_sold),
            line_total=str(item.line_total),
        )
        for item in items
    ]


def sale_to_dto(sale: Sale) -> SaleDTO:
    return SaleDTO(
        id=sale.id,  # type: ignore[arg-type]
        customer_name=sale.customer_name,
        sale_type=sale.sale_type.value,
        date=sale.date.strftime(DISPLAY_FORMAT),
        items=_items_to_dto(sale.items),
        total=str(sale.total),
    )


def reservation_to_dto(reservation: Reservation) -> ReservationDTO:
    return ReservationDTO(
        id=reservation.id,  # type: ignore[arg-type]
        customer_name=reservation.customer_name,
        status=reservation.status.value,
        expired=reservation.is_expired(),
        expiring_date=reservation.expiring_date.strftime(DISPLAY_FORMAT),
        items=_items_to_dto(reservation.items),
        total=str(reservation.total),
    )

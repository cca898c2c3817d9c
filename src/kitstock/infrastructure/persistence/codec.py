"""Field-level conversions between domain values and JSON rows."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from kitstock.domain.model.line_item import LineItem
from kitstock.domain.model.stock import SizeStock
from kitstock.domain.model.value_objects import DEFAULT_CURRENCY, Money


def dump_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def dump_money(value: Money | None) -> dict | None:
    if value is None:
        return None
    return {"amount": str(value.amount), "currency": value.currency}


def load_money(value: dict | None) -> Money | None:
    if value is None:
        return None
    return Money(Decimal(value["amount"]), value.get("currency", DEFAULT_CURRENCY))


def dump_sizes(sizes: list[SizeStock]) -> list[dict]:
    return [{"size": s.size, "quantity": s.quantity} for s in sizes]


def load_sizes(raw: list[dict]) -> list[SizeStock]:
    return [SizeStock(s["size"], s["quantity"]) for s in raw]


def dump_items(items: list[LineItem]) -> list[dict]:
    return [
        {
            "product_id": item.product_id,
            "size": item.size,
            "quantity": item.quantity,
            "price_sold": dump_money(item.price_sold),
        }
        for item in items
    ]


def load_items(raw: list[dict]) -> list[LineItem]:
    return [
        LineItem(
            product_id=i["product_id"],
            size=i["size"],
            quantity=i["quantity"],
            price_sold=load_money(i["price_sold"]),
        )
        for i in raw
    ]

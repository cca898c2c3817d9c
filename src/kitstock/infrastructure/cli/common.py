"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, TypeVar

import click

from kitstock.application.dto import LineItemSpec
from kitstock.application.error_state import ErrorState
from kitstock.domain.exceptions import DomainException
from kitstock.domain.model.sale import SaleType
from kitstock.domain.model.stock import SizeStock

SALE_TYPES = click.Choice([t.value for t in SaleType], case_sensitive=False)

R = TypeVar("R")


def run_action(store: ErrorState, action: Callable[[], R]) -> R:
    """Run a store action, showing the store's error message on failure."""
    try:
        return action()
    except DomainException as exc:
        raise click.ClickException(store.error or str(exc))


def parse_items(raw: str) -> list[LineItemSpec]:
    """Parse '7:M:2:120,7:L:1:120' into LineItemSpec list."""
    specs: list[LineItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":")
        if len(parts) != 4:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Size:Qty:Price'."
            )
        product_id, size, qty_str, price = parts
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(LineItemSpec(product_id, size, qty, price))
    return specs


def parse_sizes(raw: str) -> list[SizeStock]:
    """Parse 'M:3,L:2' into a list of SizeStock."""
    sizes: list[SizeStock] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        size, sep, qty_str = entry.rpartition(":")
        if not sep:
            raise click.BadParameter(f"Invalid size format '{entry}'. Expected 'Size:Qty'.")
        try:
            sizes.append(SizeStock(size.strip(), int(qty_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{qty_str}' for size '{size}'.")
    return sizes


def as_utc(value: datetime | None) -> datetime | None:
    """click.DateTime yields naive datetimes; treat them as UTC."""
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None

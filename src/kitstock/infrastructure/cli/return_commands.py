"""CLI commands for the returns log."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from kitstock.application.dto import to_line_items
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.product_return import ProductReturn
from kitstock.domain.model.sale import SaleType
from kitstock.infrastructure.cli.common import SALE_TYPES, as_date, as_utc, parse_items, run_action


@click.group("return")
def returns() -> None:
    """Log and browse returned merchandise."""


@returns.command("list")
@click.option("--from", "start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="First day.")
@click.option("--to", "end", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Last day.")
@click.option("--type", "sale_type", type=SALE_TYPES, default=None, help="Only this channel.")
@click.option("--product", "product_id", default=None, help="Only returns containing this product.")
@click.pass_obj
def return_list(services, start, end, sale_type, product_id) -> None:
    """List returns (this month unless a range is given)."""
    store = services.returns
    channel = SaleType(sale_type.upper()) if sale_type else None

    def filters() -> PeriodFilters:
        if start is None and end is None:
            base = PeriodFilters.current_month()
            return PeriodFilters(base.start_date, base.end_date, channel)
        return PeriodFilters(as_date(start), as_date(end), channel)

    run_action(store, lambda: store.load(filters()))
    found = store.by_product(product_id) if product_id else store.list_returns()
    if not found:
        click.echo("No returns found.")
        return
    for r in found:
        origin = f"sale #{r.original_sale_id}" if r.original_sale_id else "-"
        click.echo(f"{r.id:<6} {r.customer_name:<20} {r.sale_type.value:<10} {str(r.total):>14}  {origin}")


@returns.command("delete")
@click.argument("return_id")
@click.pass_obj
def return_delete(services, return_id: str) -> None:
    """Delete a return log entry."""
    store = services.returns
    run_action(store, lambda: store.delete(return_id))
    click.echo(f"Return #{return_id} deleted")


@returns.command("add")
@click.option("--items", required=True, help="Returned items as 'ProductId:Size:Qty:Price,...'.")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--type", "sale_type", type=SALE_TYPES, default=SaleType.IN_PERSON.value, help="Sales channel.")
@click.option("--date", "sold_on", type=click.DateTime(), default=None, help="When the items were sold.")
@click.option("--sale", "original_sale_id", default=None, help="ID of the sale the items came from.")
@click.pass_obj
def return_add(services, items: str, customer: str, sale_type: str, sold_on, original_sale_id) -> None:
    """Log a return without moving stock (see 'sale return' for that)."""
    specs = parse_items(items)
    store = services.returns
    created = run_action(
        store,
        lambda: store.create(
            ProductReturn.create(
                to_line_items(specs, services.settings.currency),
                customer,
                as_utc(sold_on) or datetime.now(timezone.utc),
                SaleType(sale_type.upper()),
                original_sale_id,
            )
        ),
    )
    click.echo(f"Return #{created.id} logged for {created.customer_name} ({created.total})")

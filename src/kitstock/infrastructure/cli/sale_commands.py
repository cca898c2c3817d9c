"""CLI commands for sales."""

from __future__ import annotations

import click

from kitstock.application.dto import SaleDTO, sale_to_dto, to_line_items
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.sale import SaleType
from kitstock.infrastructure.cli.common import (
    SALE_TYPES,
    as_date,
    as_utc,
    parse_items,
    run_action,
)


@click.group()
def sale() -> None:
    """Record and manage sales."""


def display_sale(dto: SaleDTO) -> None:
    """Shared formatting for displaying a sale."""
    click.echo(f"Sale #{dto.id}  ({dto.sale_type}, {dto.date})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"  {'Product':<8} {'Size':<6} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<8} {item.size:<6} {item.quantity:>5} "
            f"{item.price_sold:>14} {item.line_total:>14}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Sale Total':<21} {dto.total:>30}")


@sale.command("record")
@click.option("--items", required=True, help="Items as 'ProductId:Size:Qty:Price,...'.")
@click.option("--customer", default=None, help="Customer name (walk-in when omitted).")
@click.option("--type", "sale_type", type=SALE_TYPES, default=SaleType.IN_PERSON.value, help="Sales channel.")
@click.option("--date", "sold_on", type=click.DateTime(), default=None, help="When the sale happened.")
@click.pass_obj
def sale_record(services, items: str, customer, sale_type: str, sold_on) -> None:
    """Record a sale and take its items out of stock."""
    specs = parse_items(items)
    currency = services.settings.currency
    run_action(services.products, services.products.load)

    store = services.sales
    recording = run_action(
        store,
        lambda: store.record(
            to_line_items(specs, currency),
            customer_name=customer,
            sale_type=SaleType(sale_type.upper()),
            date=as_utc(sold_on),
        ),
    )
    display_sale(sale_to_dto(recording.sale))
    for item in recording.failed_items:
        click.echo(f"Warning: stock of product {item.product_id} ({item.size}) not updated", err=True)


@sale.command("list")
@click.option("--from", "start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="First day.")
@click.option("--to", "end", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Last day.")
@click.option("--type", "sale_type", type=SALE_TYPES, default=None, help="Only this channel.")
@click.pass_obj
def sale_list(services, start, end, sale_type) -> None:
    """List sales (this month unless a range is given)."""
    store = services.sales

    def filters() -> PeriodFilters:
        if start is None and end is None:
            base = PeriodFilters.current_month()
            return PeriodFilters(base.start_date, base.end_date, SaleType(sale_type.upper()) if sale_type else None)
        return PeriodFilters(as_date(start), as_date(end), SaleType(sale_type.upper()) if sale_type else None)

    run_action(store, lambda: store.load(filters()))
    sales = store.list_sales()
    if not sales:
        click.echo("No sales found.")
        return
    for s in sales:
        dto = sale_to_dto(s)
        click.echo(f"{dto.id:<6} {dto.date:<22} {dto.sale_type:<10} {dto.customer_name:<20} {dto.total:>14}")
    click.echo(f"Revenue: {store.total_revenue(services.settings.currency)}")


@sale.command("show")
@click.argument("sale_id")
@click.pass_obj
def sale_show(services, sale_id: str) -> None:
    """Show a sale."""
    store = services.sales
    run_action(store, lambda: store.load(PeriodFilters()))
    found = store.get(sale_id)
    if found is None:
        raise click.ClickException(f"Sale {sale_id} not found")
    display_sale(sale_to_dto(found))


@sale.command("delete")
@click.argument("sale_id")
@click.pass_obj
def sale_delete(services, sale_id: str) -> None:
    """Delete a sale record without restoring stock."""
    store = services.sales
    run_action(store, lambda: store.delete(sale_id))
    click.echo(f"Sale #{sale_id} deleted (stock unchanged)")


@sale.command("reverse")
@click.argument("sale_id")
@click.pass_obj
def sale_reverse(services, sale_id: str) -> None:
    """Put a sale's items back in stock and delete the sale."""
    run_action(services.products, services.products.load)
    store = services.sales
    outcome = run_action(store, lambda: store.reverse(sale_id))
    click.echo(f"Sale #{sale_id} reversed")
    for failure in outcome.failures:
        click.echo(f"Warning: {failure.step} not restored ({failure.reason})", err=True)


@sale.command("return")
@click.argument("sale_id")
@click.pass_obj
def sale_return(services, sale_id: str) -> None:
    """Take a whole sale back: restore stock and log a return."""
    run_action(services.products, services.products.load)
    store = services.sales
    created = run_action(store, lambda: store.return_sale(sale_id))
    click.echo(f"Sale #{sale_id} returned as return #{created.id} ({created.total})")

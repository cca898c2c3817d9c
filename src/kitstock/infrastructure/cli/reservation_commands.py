"""CLI commands for reservations."""

from __future__ import annotations

import click

from kitstock.application.dto import ReservationDTO, reservation_to_dto, sale_to_dto, to_line_items
from kitstock.domain.model.sale import SaleType
from kitstock.infrastructure.cli.common import SALE_TYPES, as_utc, parse_items, run_action
from kitstock.infrastructure.cli.sale_commands import display_sale


@click.group()
def reservation() -> None:
    """Hold stock for customers."""


def _display_reservation(dto: ReservationDTO) -> None:
    flag = "  EXPIRED" if dto.expired else ""
    click.echo(f"Reservation #{dto.id}  (status={dto.status}){flag}")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Expires:  {dto.expiring_date}")
    for item in dto.items:
        click.echo(f"  {item.product_id:<8} {item.size:<6} x{item.quantity:<4} {item.line_total:>14}")
    click.echo(f"  Total: {dto.total}")


@reservation.command("create")
@click.option("--items", required=True, help="Items as 'ProductId:Size:Qty:Price,...'.")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--expires", required=True, type=click.DateTime(), help="Expiring date.")
@click.option("--type", "sale_type", type=SALE_TYPES, default=SaleType.IN_PERSON.value, help="Sales channel.")
@click.option("--location", default=None, help="Pickup location.")
@click.pass_obj
def reservation_create(services, items: str, customer: str, expires, sale_type: str, location) -> None:
    """Reserve items for a customer, taking them out of stock."""
    specs = parse_items(items)
    currency = services.settings.currency
    run_action(services.products, services.products.load)

    store = services.reservations
    recording = run_action(
        store,
        lambda: store.create(
            to_line_items(specs, currency),
            customer,
            as_utc(expires),
            sale_type=SaleType(sale_type.upper()),
            location=location,
        ),
    )
    _display_reservation(reservation_to_dto(recording.reservation))
    for item in recording.failed_items:
        click.echo(f"Warning: stock of product {item.product_id} ({item.size}) not held", err=True)


@reservation.command("list")
@click.option("--pending", "only", flag_value="pending", help="Only pending reservations.")
@click.option("--completed", "only", flag_value="completed", help="Only completed reservations.")
@click.option("--expired", "only", flag_value="expired", help="Only pending reservations past expiry.")
@click.pass_obj
def reservation_list(services, only) -> None:
    """List reservations."""
    store = services.reservations
    run_action(store, store.load)
    if only == "pending":
        found = store.pending()
    elif only == "completed":
        found = store.completed()
    elif only == "expired":
        found = store.expired()
    else:
        found = store.list_reservations()

    if not found:
        click.echo("No reservations found.")
        return
    for r in found:
        dto = reservation_to_dto(r)
        flag = " (expired)" if dto.expired else ""
        click.echo(f"{dto.id:<6} {dto.status:<10} {dto.customer_name:<20} {dto.expiring_date}{flag}")


@reservation.command("complete")
@click.argument("reservation_id")
@click.option("--customer", default=None, help="Buyer, if different from the reservation.")
@click.option("--type", "sale_type", type=SALE_TYPES, default=None, help="Sales channel of the sale.")
@click.option("--date", "sold_on", type=click.DateTime(), default=None, help="When the sale happened.")
@click.pass_obj
def reservation_complete(services, reservation_id: str, customer, sale_type, sold_on) -> None:
    """Turn a pending reservation into a sale."""
    store = services.reservations
    run_action(store, store.load)
    created = run_action(
        store,
        lambda: store.complete(
            reservation_id,
            customer_name=customer,
            date=as_utc(sold_on),
            sale_type=SaleType(sale_type.upper()) if sale_type else None,
        ),
    )
    click.echo(f"Reservation #{reservation_id} completed")
    display_sale(sale_to_dto(created))


@reservation.command("delete")
@click.argument("reservation_id")
@click.pass_obj
def reservation_delete(services, reservation_id: str) -> None:
    """Delete a reservation; pending ones give their stock back."""
    run_action(services.products, services.products.load)
    store = services.reservations
    run_action(store, store.load)
    outcome = run_action(store, lambda: store.delete(reservation_id))
    click.echo(f"Reservation #{reservation_id} deleted")
    for failure in outcome.failures:
        click.echo(f"Warning: {failure.step} not restored ({failure.reason})", err=True)


@reservation.command("edit")
@click.argument("reservation_id")
@click.option("--items", default=None, help="New items as 'ProductId:Size:Qty:Price,...'.")
@click.option("--customer", default=None, help="New customer name.")
@click.option("--expires", type=click.DateTime(), default=None, help="New expiring date.")
@click.option("--type", "sale_type", type=SALE_TYPES, default=None, help="New sales channel.")
@click.option("--location", default=None, help="New pickup location.")
@click.pass_obj
def reservation_edit(services, reservation_id: str, items, customer, expires, sale_type, location) -> None:
    """Change a pending reservation.  Stock is not moved."""
    store = services.reservations
    changes: dict = {}
    if items is not None:
        specs = parse_items(items)
        changes["items"] = run_action(store, lambda: to_line_items(specs, services.settings.currency))
    if customer is not None:
        changes["customer_name"] = customer
    if expires is not None:
        changes["expiring_date"] = as_utc(expires)
    if sale_type is not None:
        changes["sale_type"] = SaleType(sale_type.upper())
    if location is not None:
        changes["location"] = location or None
    if not changes:
        raise click.UsageError("Nothing to change.")

    run_action(services.products, services.products.load)
    run_action(store, store.load)
    updated = run_action(store, lambda: store.edit(reservation_id, changes))
    _display_reservation(reservation_to_dto(updated))

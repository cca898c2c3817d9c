"""CLI commands for the inventory history."""

from __future__ import annotations

import click

from kitstock.application.inventory_log_store import DEFAULT_HISTORY_LIMIT
from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    InventoryEntityType,
    InventoryLogFilters,
)
from kitstock.infrastructure.cli.common import as_date, run_action

ENTITY_TYPES = click.Choice([t.value for t in InventoryEntityType], case_sensitive=False)
CHANGE_TYPES = click.Choice([t.value for t in InventoryChangeType], case_sensitive=False)


@click.group()
def history() -> None:
    """Inspect how stock changed over time."""


@history.command("list")
@click.option("--entity", "entity_type", type=ENTITY_TYPES, default=None, help="Only this kind of stock.")
@click.option("--id", "entity_id", default=None, help="Only this product, nameset or badge.")
@click.option("--change", "change_type", type=CHANGE_TYPES, default=None, help="Only this kind of change.")
@click.option("--from", "start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="First day.")
@click.option("--to", "end", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Last day.")
@click.option("--limit", type=int, default=DEFAULT_HISTORY_LIMIT, show_default=True, help="Newest entries to show.")
@click.pass_obj
def history_list(services, entity_type, entity_id, change_type, start, end, limit) -> None:
    """List stock movements, newest first."""
    if entity_id and not entity_type:
        raise click.UsageError("--id needs --entity.")
    store = services.history

    def filters() -> InventoryLogFilters:
        return InventoryLogFilters(
            entity_type=InventoryEntityType(entity_type.lower()) if entity_type else None,
            entity_id=entity_id,
            change_type=InventoryChangeType(change_type.lower()) if change_type else None,
            start_date=as_date(start),
            end_date=as_date(end),
            limit=limit,
        )

    run_action(store, lambda: store.load(filters()))
    entries = store.list_entries()
    if not entries:
        click.echo("No stock movements found.")
        return

    click.echo(
        f"{'When':<17} {'Entity':<28} {'Size':<5} {'Change':<20} "
        f"{'Before':>6} {'Delta':>6} {'After':>6}  Reference"
    )
    click.echo("-" * 110)
    for e in entries:
        entity = f"{e.entity_type.value} #{e.entity_id} {e.entity_name}"[:28]
        reference = f"{e.reference_type.value} #{e.reference_id}" if e.reference_type else "-"
        click.echo(
            f"{e.created_at:%Y-%m-%d %H:%M} {entity:<28} {e.size or '-':<5} {e.change_type.value:<20} "
            f"{e.quantity_before:>6} {e.quantity_change:>+6} {e.quantity_after:>6}  {reference}"
        )
        if e.reason:
            click.echo(f"{'':<17} {e.reason}")


@history.command("purge")
@click.option("--days", type=int, required=True, help="Remove entries older than this many days.")
@click.pass_obj
def history_purge(services, days: int) -> None:
    """Delete old stock movements."""
    store = services.history
    removed = run_action(store, lambda: store.purge(days))
    click.echo(f"Removed {removed} history entr{'y' if removed == 1 else 'ies'}")

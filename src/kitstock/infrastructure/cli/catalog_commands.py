"""CLI commands for the catalog: products, namesets, badges, teams, kit types."""

from __future__ import annotations

import click

from kitstock.domain.model.badge import Badge
from kitstock.domain.model.kit_type import KitType
from kitstock.domain.model.nameset import Nameset
from kitstock.domain.model.product import Product, ProductType
from kitstock.domain.model.team import Team
from kitstock.domain.model.value_objects import Money
from kitstock.infrastructure.cli.common import parse_sizes, run_action


@click.group()
def product() -> None:
    """Manage products."""


@click.group()
def nameset() -> None:
    """Manage namesets."""


@click.group()
def badge() -> None:
    """Manage badges."""


@click.group()
def team() -> None:
    """Manage teams."""


@click.group("kit-type")
def kit_type() -> None:
    """Manage kit types."""


def _register_lifecycle(group: click.Group, attr: str, label: str) -> None:
    """Attach archive, restore and delete commands for one catalog store."""

    @group.command("archive")
    @click.argument("record_id")
    @click.pass_obj
    def archive(services, record_id: str) -> None:
        """Archive a record."""
        store = getattr(services, attr)
        run_action(store, store.load)
        if run_action(store, lambda: store.archive(record_id)) is None:
            raise click.ClickException(f"{label.capitalize()} {record_id} not found")
        click.echo(f"{label.capitalize()} #{record_id} archived")

    @group.command("restore")
    @click.argument("record_id")
    @click.pass_obj
    def restore(services, record_id: str) -> None:
        """Restore an archived record."""
        store = getattr(services, attr)
        run_action(store, store.load)
        if run_action(store, lambda: store.restore(record_id)) is None:
            raise click.ClickException(f"{label.capitalize()} {record_id} not found")
        click.echo(f"{label.capitalize()} #{record_id} restored")

    @group.command("delete")
    @click.argument("record_id")
    @click.pass_obj
    def delete(services, record_id: str) -> None:
        """Delete a record permanently."""
        store = getattr(services, attr)
        run_action(store, store.load)
        if record_id not in store:
            click.echo(f"{label.capitalize()} #{record_id} does not exist; nothing deleted")
            return
        run_action(store, lambda: store.delete(record_id))
        click.echo(f"{label.capitalize()} #{record_id} deleted")


# --- Products -----------------------------------------------------------------


@product.command("add")
@click.option("--name", default="", help="Product name (optional when a team is given).")
@click.option(
    "--type", "product_type", required=True,
    type=click.Choice([t.value for t in ProductType], case_sensitive=False),
    help="Product type.",
)
@click.option("--sizes", required=True, help="Stock per size as 'M:3,L:2'.")
@click.option("--price", required=True, help="Price (e.g. 120.00).")
@click.option("--kit-type", "kit_type_id", default="default-kit-type-none", help="Kit type ID.")
@click.option("--nameset", "nameset_id", default=None, help="Nameset ID printed on the product.")
@click.option("--badge", "badge_id", default=None, help="Badge ID sewn on the product.")
@click.option("--team", "team_id", default=None, help="Team ID.")
@click.option("--sale-price", default=None, help="Discounted price; puts the product on sale.")
@click.option("--location", default=None, help="Storage location.")
@click.option(
    "--skip-deduction", is_flag=True,
    help="Do not take namesets and badges out of stock.",
)
@click.pass_obj
def product_add(
    services, name, product_type, sizes, price, kit_type_id,
    nameset_id, badge_id, team_id, sale_price, location, skip_deduction,
) -> None:
    """Add a product, consuming its nameset and badge."""
    currency = services.settings.currency
    store = services.products
    for s in (services.products, services.namesets, services.badges):
        run_action(s, s.load)

    def build() -> Product:
        return Product.create(
            name=name,
            type=ProductType(product_type.lower()),
            sizes=parse_sizes(sizes),
            price=Money.of(price, currency),
            kit_type_id=kit_type_id,
            nameset_id=nameset_id,
            team_id=team_id,
            badge_id=badge_id,
            is_on_sale=sale_price is not None,
            sale_price=Money.of(sale_price, currency) if sale_price is not None else None,
            location=location,
        )

    draft = run_action(store, build)
    allocation = run_action(
        store, lambda: services.allocator.handle(draft, skip_inventory_deduction=skip_deduction)
    )

    created = allocation.product
    click.echo(f"Product #{created.id} '{created.name}' added at {created.price}")
    click.echo(f"Units: {allocation.requested_quantity}")
    for failure in allocation.outcome.failures:
        click.echo(f"Warning: {failure.step} not updated ({failure.reason})", err=True)


@product.command("list")
@click.option("--archived", is_flag=True, help="List archived products.")
@click.option("--available", is_flag=True, help="Only products with stock left.")
@click.pass_obj
def product_list(services, archived: bool, available: bool) -> None:
    """List products."""
    store = services.products
    run_action(store, store.load)
    if archived:
        products = store.list_archived()
    elif available:
        products = store.available()
    else:
        products = store.list_active()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Type':<10} {'Sizes':<24} {'Price':>12}")
    click.echo("-" * 80)
    for p in products:
        sizes = ",".join(f"{s.size}:{s.quantity}" for s in p.sizes)
        click.echo(f"{p.id:<6} {p.name:<24} {p.type.value:<10} {sizes:<24} {str(p.effective_price):>12}")


@product.command("set-sizes")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--sizes", required=True, help="New stock per size as 'M:3,L:2'.")
@click.option("--reason", default=None, help="Why the stock changed (kept in the history).")
@click.pass_obj
def product_set_sizes(services, product_id: str, sizes: str, reason) -> None:
    """Replace a product's per-size stock."""
    store = services.products
    run_action(store, store.load)
    updated = run_action(store, lambda: store.adjust_sizes(product_id, parse_sizes(sizes), reason))
    click.echo(f"Product #{product_id} now has {updated.total_quantity} unit(s)")


@product.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price.")
@click.option("--sale-price", default=None, help="New sale price; puts the product on sale.")
@click.option("--end-sale", is_flag=True, help="Take the product off sale.")
@click.option("--location", default=None, help="New storage location.")
@click.pass_obj
def product_update(services, product_id, price, sale_price, end_sale, location) -> None:
    """Update a product's price, sale or location."""
    currency = services.settings.currency
    store = services.products
    run_action(store, store.load)

    def changes() -> dict:
        result: dict = {}
        if price is not None:
            result["price"] = Money.of(price, currency)
        if sale_price is not None:
            result["is_on_sale"] = True
            result["sale_price"] = Money.of(sale_price, currency)
        if end_sale:
            result["is_on_sale"] = False
            result["sale_price"] = None
        if location is not None:
            result["location"] = location or None
        return result

    wanted = run_action(store, changes)
    if not wanted:
        raise click.UsageError("Nothing to update.")
    run_action(store, lambda: store.update(product_id, wanted))
    click.echo(f"Product #{product_id} updated")


_register_lifecycle(product, "products", "product")


# --- Namesets -----------------------------------------------------------------


@nameset.command("add")
@click.option("--player", required=True, help="Player name.")
@click.option("--number", required=True, type=int, help="Shirt number.")
@click.option("--season", required=True, help="Season, e.g. 2024/25.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
@click.option("--kit-type", "kit_type_id", default="default-kit-type-none", help="Kit type ID.")
@click.option("--price", default=None, help="Price per nameset.")
@click.option("--location", default=None, help="Storage location.")
@click.pass_obj
def nameset_add(services, player, number, season, quantity, kit_type_id, price, location) -> None:
    """Add a nameset."""
    currency = services.settings.currency
    store = services.namesets
    run_action(store, store.load)
    created = run_action(
        store,
        lambda: store.create(
            Nameset.create(
                player, number, season, quantity, kit_type_id,
                price=Money.of(price, currency) if price is not None else None,
                location=location,
            )
        ),
    )
    click.echo(f"Nameset #{created.id} {created.label} added ({created.quantity} in stock)")


@nameset.command("list")
@click.option("--archived", is_flag=True, help="List archived namesets.")
@click.option("--sold-out", is_flag=True, help="Only namesets with no stock left.")
@click.pass_obj
def nameset_list(services, archived: bool, sold_out: bool) -> None:
    """List namesets."""
    store = services.namesets
    run_action(store, store.load)
    if archived:
        namesets = store.list_archived()
    elif sold_out:
        namesets = store.sold_out()
    else:
        namesets = store.list_active()

    if not namesets:
        click.echo("No namesets found.")
        return
    click.echo(f"{'ID':<6} {'Nameset':<32} {'Qty':>5}")
    click.echo("-" * 45)
    for n in namesets:
        click.echo(f"{n.id:<6} {n.label:<32} {n.quantity:>5}")


_register_lifecycle(nameset, "namesets", "nameset")


# --- Badges -------------------------------------------------------------------


@badge.command("add")
@click.option("--name", required=True, help="Badge name.")
@click.option("--season", required=True, help="Season, e.g. 2024/25.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
@click.option("--price", required=True, help="Price per badge.")
@click.option("--location", default=None, help="Storage location.")
@click.pass_obj
def badge_add(services, name, season, quantity, price, location) -> None:
    """Add a badge."""
    currency = services.settings.currency
    store = services.badges
    run_action(store, store.load)
    created = run_action(
        store,
        lambda: store.create(
            Badge.create(name, season, quantity, Money.of(price, currency), location=location)
        ),
    )
    click.echo(f"Badge #{created.id} '{created.name}' added ({created.quantity} in stock)")


@badge.command("list")
@click.option("--archived", is_flag=True, help="List archived badges.")
@click.option("--sold-out", is_flag=True, help="Only badges with no stock left.")
@click.pass_obj
def badge_list(services, archived: bool, sold_out: bool) -> None:
    """List badges."""
    store = services.badges
    run_action(store, store.load)
    if archived:
        badges = store.list_archived()
    elif sold_out:
        badges = store.sold_out()
    else:
        badges = store.list_active()

    if not badges:
        click.echo("No badges found.")
        return
    click.echo(f"{'ID':<6} {'Name':<24} {'Season':<10} {'Qty':>5}")
    click.echo("-" * 48)
    for b in badges:
        click.echo(f"{b.id:<6} {b.name:<24} {b.season:<10} {b.quantity:>5}")


_register_lifecycle(badge, "badges", "badge")


# --- Teams --------------------------------------------------------------------


@team.command("add")
@click.option("--name", required=True, help="Team name.")
@click.option("--league", "leagues", multiple=True, help="League ID (repeatable).")
@click.pass_obj
def team_add(services, name: str, leagues: tuple[str, ...]) -> None:
    """Add a team."""
    store = services.teams
    run_action(store, store.load)
    created = run_action(store, lambda: store.create(Team.create(name, list(leagues))))
    click.echo(f"Team #{created.id} '{created.name}' added")


@team.command("list")
@click.option("--archived", is_flag=True, help="List archived teams.")
@click.pass_obj
def team_list(services, archived: bool) -> None:
    """List teams."""
    store = services.teams
    run_action(store, store.load)
    teams = store.list_archived() if archived else store.list_active()
    if not teams:
        click.echo("No teams found.")
        return
    for t in teams:
        leagues = ", ".join(t.leagues) or "-"
        click.echo(f"{t.id:<6} {t.name:<24} {leagues}")


_register_lifecycle(team, "teams", "team")


# --- Kit types ----------------------------------------------------------------


@kit_type.command("add")
@click.option("--name", required=True, help="Kit type name.")
@click.pass_obj
def kit_type_add(services, name: str) -> None:
    """Add a kit type."""
    store = services.kit_types
    run_action(store, store.load)
    created = run_action(store, lambda: store.create(KitType.create(name)))
    click.echo(f"Kit type #{created.id} '{created.name}' added")


@kit_type.command("list")
@click.option("--archived", is_flag=True, help="List archived kit types.")
@click.pass_obj
def kit_type_list(services, archived: bool) -> None:
    """List kit types."""
    store = services.kit_types
    run_action(store, store.load)
    kit_types = store.list_archived() if archived else store.list_active()
    if not kit_types:
        click.echo("No kit types found.")
        return
    for k in kit_types:
        marker = " (default)" if k.is_default else ""
        click.echo(f"{k.id:<24} {k.name}{marker}")


_register_lifecycle(kit_type, "kit_types", "kit type")

import logging

import click

from kitstock.domain.exceptions import ConfigurationError
from kitstock.infrastructure.bootstrap import build_services
from kitstock.infrastructure.cli.catalog_commands import badge, kit_type, nameset, product, team
from kitstock.infrastructure.cli.history_commands import history
from kitstock.infrastructure.cli.reservation_commands import reservation
from kitstock.infrastructure.cli.return_commands import returns
from kitstock.infrastructure.cli.sale_commands import sale
from kitstock.infrastructure.config import load_settings

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every stock movement.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """kitstock: football kit inventory, sales and reservations"""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level_number,
        format=LOG_FORMAT,
        force=True,
    )
    ctx.obj = build_services(settings)


# Register subcommand groups
cli.add_command(product)
cli.add_command(nameset)
cli.add_command(badge)
cli.add_command(team)
cli.add_command(kit_type)
cli.add_command(sale)
cli.add_command(reservation)
cli.add_command(returns)
cli.add_command(history)

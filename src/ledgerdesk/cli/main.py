"""Main CLI entry point."""

from decimal import Decimal, InvalidOperation

import click
from ledgerdesk.database.factories import create_sqlite_database, resolve_data_dir
from ledgerdesk.domain.chart import ChartRepository, ChartService
from ledgerdesk.domain.ledger import CURRENCIES, DEFAULT_CURRENCY, LedgerSettings
from ledgerdesk.logging_config import configure_logging

# Import and register all commands at module level
from ledgerdesk.cli.commands import (
    account,
    chart,
    doctype,
    document,
)


def _parse_tolerance(ctx, param, value):
    try:
        tolerance = Decimal(str(value))
    except InvalidOperation:
        raise click.BadParameter(f"'{value}' is not a number")
    if not tolerance.is_finite() or tolerance < 0:
        raise click.BadParameter("must be a non-negative number")
    return tolerance


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERDESK_DB_PATH environment variable)",
    envvar="LEDGERDESK_DB_PATH",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Directory holding the per-account charts of accounts",
    envvar="LEDGERDESK_DATA_DIR",
)
@click.option(
    "--default-currency",
    type=click.Choice(CURRENCIES, case_sensitive=False),
    default=DEFAULT_CURRENCY,
    show_default=True,
    envvar="LEDGERDESK_DEFAULT_CURRENCY",
    help="Reporting currency all amounts are converted to",
)
@click.option(
    "--balance-tolerance",
    default="0",
    show_default=True,
    envvar="LEDGERDESK_BALANCE_TOLERANCE",
    callback=_parse_tolerance,
    help="Largest debit/credit difference still considered balanced",
)
@click.option(
    "--language",
    type=click.Choice(["en", "ar"]),
    default="en",
    show_default=True,
    envvar="LEDGERDESK_LANGUAGE",
    help="Language for charts of accounts and exports",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="LEDGERDESK_LOG_LEVEL",
    help="Logging level (logs go to stderr)",
)
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    data_dir: str | None,
    default_currency: str,
    balance_tolerance: Decimal,
    language: str,
    log_level: str | None,
):
    """Ledgerdesk - Multi-currency bookkeeping documents.

    Manage accounts, their charts of accounts and balanced debit/credit
    documents.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(log_level)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)

        charts = ChartRepository(resolve_data_dir(data_dir))
        ctx.obj["db"] = db
        ctx.obj["charts"] = charts
        ctx.obj["chart_service"] = ChartService(charts)
        ctx.obj["settings"] = LedgerSettings(
            default_currency=default_currency.upper(),
            balance_tolerance=balance_tolerance,
        )
        ctx.obj["language"] = language


# Register all commands
account.register_commands(cli)
chart.register_commands(cli)
doctype.register_commands(cli)
document.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

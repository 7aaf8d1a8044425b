"""CLI error handling helpers."""

import click

from ledgerdesk.domain.errors import BalanceError, DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, BalanceError):
        click.echo("Error: Document cannot be saved:", err=True)
        for message in error.report.messages:
            click.echo(f"  - {message}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)

"""Chart of accounts commands."""

import click
from ledgerdesk.cli.account_resolution import resolve_account_or_exit
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.account import AccountService
from ledgerdesk.domain.errors import DomainError


@click.group()
def chart_group():
    """Browse an account's chart of accounts."""
    pass


def _print_nodes(nodes, depth: int = 0) -> None:
    for node in nodes:
        click.echo(f"{'  ' * depth}{node.id:<6} {node.name}")
        _print_nodes(node.sub_accounts, depth + 1)


@chart_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.option("--language", type=click.Choice(["en", "ar"]), help="Chart language (defaults to --language)")
@click.pass_context
def show_chart(ctx, account: str, language: str | None):
    """Print the chart of accounts of ACCOUNT as a tree."""
    account_id = resolve_account_or_exit(ctx, AccountService(ctx.obj["db"]), account)
    language = language or ctx.obj["language"]

    try:
        charts = ctx.obj["chart_service"].get_chart(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _print_nodes(charts.for_language(language))


@chart_group.command("lookup")
@click.argument("account", metavar="ACCOUNT")
@click.argument("code", metavar="ACCOUNT_NUMBER")
@click.option("--language", type=click.Choice(["en", "ar"]), help="Chart language (defaults to --language)")
@click.pass_context
def lookup_account(ctx, account: str, code: str, language: str | None):
    """Find ACCOUNT_NUMBER in the chart of ACCOUNT."""
    account_id = resolve_account_or_exit(ctx, AccountService(ctx.obj["db"]), account)
    language = language or ctx.obj["language"]

    try:
        node = ctx.obj["chart_service"].lookup(account_id, code, language)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if node is None:
        click.echo(f"Error: Account number '{code}' not found in chart", err=True)
        ctx.exit(1)

    click.echo(f"{node.id} {node.name}")


def register_commands(cli):
    """Register chart commands with main CLI."""
    cli.add_command(chart_group, name="chart")

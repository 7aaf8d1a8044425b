"""Account management commands."""

import click
from ledgerdesk.cli.account_resolution import resolve_account_or_exit
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.account import AccountService
from ledgerdesk.domain.document import DocumentService
from ledgerdesk.domain.errors import DomainError


def _account_service(ctx) -> AccountService:
    db = ctx.obj["db"]
    return AccountService(
        db,
        charts=ctx.obj["charts"],
        documents=DocumentService(db, settings=ctx.obj["settings"]),
    )


@click.group()
def account_group():
    """Manage accounts (companies)."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.pass_context
def create_account(ctx, name: str):
    """Create a new account.

    The account gets its own copy of the English and Arabic chart of
    accounts templates.

    Examples:
        ledgerdesk account create "Cedar Trading SAL"
    """
    service = _account_service(ctx)

    try:
        acc = service.create_account(name=name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{acc.name}' (ID: {acc.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = _account_service(ctx)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:30s} | Created: {acc.created_on}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerdesk account rename "Cedar Trading SAL" "Cedar Trading"
        ledgerdesk account rename 0 "Cedar Trading"
    """
    service = _account_service(ctx)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.rename_account(account_id=account_id, name=new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Renamed account to '{new_name.strip()}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account and unlink its documents.

    ACCOUNT can be an account name or ID. Deleted accounts and their
    documents stay in storage but no longer appear in listings.

    Examples:
        ledgerdesk account delete "Cedar Trading"
        ledgerdesk account delete 0 --yes
    """
    service = _account_service(ctx)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        result = service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted account '{account_obj.name}'")
    if result.success:
        click.echo(f"Unlinked {result.count} document{'s' if result.count != 1 else ''}")
    else:
        click.echo(f"Warning: {result.message}", err=True)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")

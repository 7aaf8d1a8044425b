"""Doc type commands."""

import click
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.doctype import DocTypeService
from ledgerdesk.domain.errors import DomainError


@click.group()
def doctype_group():
    """Manage document types."""
    pass


@doctype_group.command("add")
@click.argument("name_en", metavar="NAME_EN")
@click.argument("name_ar", metavar="NAME_AR")
@click.pass_context
def add_doc_type(ctx, name_en: str, name_ar: str):
    """Add a document type with English and Arabic names.

    Examples:
        ledgerdesk doctype add "Journal Voucher" "قيد يومية"
    """
    service = DocTypeService(ctx.obj["db"])

    try:
        doc_type_id = service.create_doc_type(name_en=name_en, name_ar=name_ar)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created doc type '{name_en.strip()}' (ID: {doc_type_id})")


@doctype_group.command("list")
@click.pass_context
def list_doc_types(ctx):
    """List document types."""
    service = DocTypeService(ctx.obj["db"])

    doc_types = service.list_doc_types()
    if not doc_types:
        click.echo("No doc types found.")
        return

    for dt in doc_types:
        click.echo(f"ID: {dt.id:3d} | {dt.name_en:25s} | {dt.name_ar}")


def register_commands(cli):
    """Register doc type commands with main CLI."""
    cli.add_command(doctype_group, name="doctype")

"""Document commands."""

import json
from dataclasses import replace

import click
from ledgerdesk.cli.account_resolution import resolve_account_or_exit, resolve_doc_type_or_exit
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.account import AccountService
from ledgerdesk.domain.doctype import DocTypeService
from ledgerdesk.domain.document import DocumentService
from ledgerdesk.domain.errors import DomainError, NotFoundError
from ledgerdesk.domain.export import build_export_payload, render_document_html
from ledgerdesk.domain.ledger import BalanceReport, EDITABLE_FIELDS
from ledgerdesk.utils.date_parser import parse_date


def _document_service(ctx) -> DocumentService:
    return DocumentService(ctx.obj["db"], settings=ctx.obj["settings"])


def _parse_assignment(value: str) -> tuple[int, str, str]:
    """Parse ROW:FIELD=VALUE (ROW is 1-based)."""
    target, sep, cell_value = value.partition("=")
    row_text, colon, field_name = target.partition(":")
    if not sep or not colon:
        raise click.BadParameter(f"'{value}' is not in ROW:FIELD=VALUE form", param_hint="--set")
    try:
        row = int(row_text)
    except ValueError:
        raise click.BadParameter(f"row '{row_text}' is not a number", param_hint="--set")
    field_name = field_name.strip().replace("-", "_")
    if field_name not in EDITABLE_FIELDS:
        raise click.BadParameter(
            f"unknown field '{field_name}' (use {', '.join(EDITABLE_FIELDS)})", param_hint="--set"
        )
    return row - 1, field_name, cell_value


def _echo_report(report: BalanceReport, currency: str) -> None:
    click.echo(f"Total debit:  {report.total_debit} {currency}")
    click.echo(f"Total credit: {report.total_credit} {currency}")
    click.echo(f"Balanced: {'yes' if report.is_balanced else 'no'}")
    if report.blank_amount_rows:
        rows = ", ".join(str(i + 1) for i in report.blank_amount_rows)
        click.echo(f"Note: rows {rows} have neither a debit nor a credit")
    for message in report.messages:
        click.echo(f"  - {message}")
    click.echo(f"Save-eligible: {'yes' if report.save_eligible else 'no'}")


@click.group()
def document_group():
    """Create, edit, validate and export documents."""
    pass


@document_group.command("create")
@click.argument("account", metavar="ACCOUNT")
@click.argument("doc_type", metavar="DOC_TYPE")
@click.argument("name", metavar="NAME")
@click.pass_context
def create_document(ctx, account: str, doc_type: str, name: str):
    """Create a document of DOC_TYPE for ACCOUNT.

    The document starts with a single blank row and gets the next number
    for its account and doc type.

    Examples:
        ledgerdesk document create "Cedar Trading" "Journal Voucher" "March payroll"
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    doc_type_id = resolve_doc_type_or_exit(ctx, DocTypeService(db), doc_type)

    try:
        doc = _document_service(ctx).create_document(name=name, doc_type_id=doc_type_id, account_id=account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created document '{doc.name}' (ID: {doc.id}, No. {doc.doc_number})")


@document_group.command("list")
@click.argument("account", metavar="ACCOUNT")
@click.option("--doc-type", help="Doc type name or ID")
@click.option("--since", help="Only documents created on or after this date (DD/MM/YYYY, today, ...)")
@click.pass_context
def list_documents(ctx, account: str, doc_type: str | None, since: str | None):
    """List the documents of ACCOUNT."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    doc_types = {dt.id: dt for dt in DocTypeService(db).list_doc_types()}

    doc_type_id = None
    if doc_type is not None:
        doc_type_id = resolve_doc_type_or_exit(ctx, DocTypeService(db), doc_type)

    since_date = None
    if since:
        try:
            since_date = parse_date(since)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    documents = _document_service(ctx).list_documents(account_id, doc_type_id=doc_type_id, since=since_date)
    if not documents:
        click.echo("No documents found.")
        return

    language = ctx.obj["language"]
    for doc in documents:
        dt = doc_types.get(doc.doc_type)
        type_name = dt.name_for(language) if dt is not None else str(doc.doc_type)
        click.echo(f"ID: {doc.id:3d} | {type_name:20s} No. {doc.doc_number:<4d} | {doc.name:30s} | {doc.created_on}")


@document_group.command("show")
@click.argument("document_id", type=int, metavar="DOCUMENT_ID")
@click.pass_context
def show_document(ctx, document_id: int):
    """Show a document's rows and balance."""
    service = _document_service(ctx)
    try:
        doc = service.get_document(document_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    editor = service.open_editor(doc)
    click.echo(f"{doc.name} (No. {doc.doc_number}, created {doc.created_on})")
    click.echo("-" * 100)
    click.echo(
        f"{'#':>3} {'Account':<8} {'Helper':<8} {'Name':<24} {'Cur':<4} "
        f"{'Debit':>12} {'Credit':>12} {'Rate':>8} {'Equivalent':>14}"
    )
    for i, row in enumerate(editor.rows, start=1):
        equivalent = "" if row.equivalent is None else str(row.equivalent)
        click.echo(
            f"{i:>3} {row.account_number:<8} {row.account_helper:<8} {row.account_name[:24]:<24} "
            f"{row.currency:<4} {row.debit:>12} {row.credit:>12} {row.rate:>8} {equivalent:>14}"
        )
    click.echo("-" * 100)
    _echo_report(editor.report, service.settings.default_currency)


@document_group.command("edit")
@click.argument("document_id", type=int, metavar="DOCUMENT_ID")
@click.option("--add-rows", type=click.IntRange(min=0), default=0, help="Append this many blank rows first")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="ROW:FIELD=VALUE",
    help="Set a cell; ROW starts at 1. Repeat for several cells.",
)
@click.option("--remove-row", "remove_rows", type=int, multiple=True, help="Remove a row (1-based), after edits")
@click.pass_context
def edit_document(ctx, document_id: int, add_rows: int, assignments: tuple[str, ...], remove_rows: tuple[int, ...]):
    """Edit a document's rows and save them.

    Edits are applied in order: new rows, cell assignments, then row
    removals. The document is only saved when it is balanced, has no row
    with both a debit and a credit and has a rate on every foreign-currency
    row.

    Examples:
        ledgerdesk document edit 0 --add-rows 1 --set 1:account_number=512 \\
            --set 1:debit=100 --set 2:account_number=70 --set 2:credit=100
    """
    service = _document_service(ctx)
    parsed = [_parse_assignment(value) for value in assignments]

    try:
        doc = service.get_document(document_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    chart_index = None
    try:
        chart_index = ctx.obj["chart_service"].index_for(doc.company, ctx.obj["language"])
    except NotFoundError as e:
        click.echo(f"Warning: {e}; account names will not be filled in", err=True)

    editor = service.open_editor(doc, chart_index=chart_index)
    try:
        for _ in range(add_rows):
            editor.add_row()
        for index, field_name, value in parsed:
            editor.set_field(index, field_name, value)
        for row_number in sorted(remove_rows, reverse=True):
            editor.remove_row(row_number - 1)
        service.save_rows(document_id, editor.rows)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Saved document '{doc.name}' ({len(editor.rows)} rows)")


@document_group.command("validate")
@click.argument("document_id", type=int, metavar="DOCUMENT_ID")
@click.pass_context
def validate_document(ctx, document_id: int):
    """Check whether a document is balanced.

    Exits with status 1 when the document could not be saved as it is.
    """
    service = _document_service(ctx)
    try:
        doc = service.get_document(document_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    report = service.validate(doc.data)
    _echo_report(report, service.settings.default_currency)
    if not report.save_eligible:
        ctx.exit(1)


@document_group.command("export")
@click.argument("document_id", type=int, metavar="DOCUMENT_ID")
@click.option(
    "--format",
    "export_format",
    type=click.Choice(["html", "json"]),
    default="html",
    show_default=True,
    help="html for printing/PDF, json for the spreadsheet writer",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), help="Output file (default: stdout)")
@click.pass_context
def export_document(ctx, document_id: int, export_format: str, output: str | None):
    """Export a document with totals and highlighted errors."""
    db = ctx.obj["db"]
    service = _document_service(ctx)
    language = ctx.obj["language"]

    try:
        doc = service.get_document(document_id)
        doc_type = DocTypeService(db).get_doc_type(doc.doc_type)
        account = AccountService(db).get_account(doc.company)
    except DomainError as e:
        handle_domain_error(ctx, e)

    editor = service.open_editor(doc)
    normalized = replace(doc, data=editor.rows)
    payload = build_export_payload(normalized, doc_type, editor.report, account=account, language=language)

    if export_format == "json":
        content = json.dumps(payload.to_dict(), ensure_ascii=False, indent=2)
    else:
        content = render_document_html(payload)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(content)
        click.echo(f"Exported document {document_id} to {output}")
    else:
        click.echo(content)


def register_commands(cli):
    """Register document commands with main CLI."""
    cli.add_command(document_group, name="document")

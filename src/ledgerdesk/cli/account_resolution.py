"""CLI helpers for account and doc type resolution."""

from __future__ import annotations

import click
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.account import AccountService
from ledgerdesk.domain.doctype import DocTypeService
from ledgerdesk.domain.errors import DomainError
from ledgerdesk.utils.account_resolver import resolve_account, resolve_doc_type


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_doc_type_or_exit(
    ctx: click.Context, doc_type_service: DocTypeService, doc_type: str | int
) -> int:
    """Resolve doc type name or ID, or exit with a CLI error."""
    try:
        return resolve_doc_type(doc_type_service, doc_type)
    except DomainError as exc:
        handle_domain_error(ctx, exc)

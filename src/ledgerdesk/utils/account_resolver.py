"""Utilities for resolving account and doc type names to IDs."""

from ledgerdesk.domain.account import AccountService
from ledgerdesk.domain.doctype import DocTypeService
from ledgerdesk.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to a linked account's ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If no linked account matches
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        return account_service.get_linked_account(account_id).id

    for acc in account_service.list_accounts():
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")


def resolve_doc_type(doc_type_service: DocTypeService, doc_type: str | int) -> int:
    """Resolve doc type ID, English name or Arabic name to its ID.

    Raises:
        NotFoundError: If no doc type matches
    """
    try:
        doc_type_id = int(doc_type)
    except (ValueError, TypeError):
        doc_type_id = None

    if doc_type_id is not None:
        return doc_type_service.get_doc_type(doc_type_id).id

    for dt in doc_type_service.list_doc_types():
        if doc_type in (dt.name_en, dt.name_ar):
            return dt.id

    raise NotFoundError(f"Doc type '{doc_type}' not found")

"""Mapper functions to convert between domain models and SQLAlchemy models.

Document rows are stored as JSON objects with camelCase keys; the functions
here are the only place that knows that layout.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ledgerdesk.domain import entities as domain
from ledgerdesk.database.models import (
    Account as ORMAccount,
    DocType as ORMDocType,
    Document as ORMDocument,
)

# domain field -> stored JSON key
ROW_KEYS = {
    "account_number": "accountNumber",
    "account_helper": "accountHelper",
    "account_name": "accountName",
    "currency": "currency",
    "debit": "debit",
    "credit": "credit",
    "rate": "rate",
    "description": "description",
}


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        created_on=orm_account.created_on,
        linked=bool(orm_account.linked),
    )


def doc_type_to_domain(orm_doc_type: ORMDocType) -> domain.DocType:
    """Convert SQLAlchemy DocType model to domain DocType entity."""
    return domain.DocType(
        id=orm_doc_type.id,
        name_en=orm_doc_type.name_en,
        name_ar=orm_doc_type.name_ar,
    )


def _equivalent_from_json(value: Any) -> Optional[Decimal]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def row_from_dict(data: dict[str, Any]) -> domain.LedgerRow:
    """Convert a stored JSON row to a LedgerRow.

    Missing keys become empty strings; numbers stored by older versions are
    turned back into text.
    """
    values = {}
    for field_name, key in ROW_KEYS.items():
        value = data.get(key)
        values[field_name] = "" if value is None else str(value)
    return domain.LedgerRow(equivalent=_equivalent_from_json(data.get("equivalent")), **values)


def row_to_dict(row: domain.LedgerRow) -> dict[str, Any]:
    """Convert a LedgerRow to its stored JSON form."""
    data: dict[str, Any] = {key: getattr(row, field_name) for field_name, key in ROW_KEYS.items()}
    data["equivalent"] = "" if row.equivalent is None else str(row.equivalent)
    return data


def document_to_domain(orm_document: ORMDocument) -> domain.Document:
    """Convert SQLAlchemy Document model to domain Document entity."""
    return domain.Document(
        id=orm_document.id,
        name=orm_document.name,
        doc_type=orm_document.doc_type,
        doc_number=orm_document.doc_number,
        company=orm_document.company,
        data=tuple(row_from_dict(row) for row in (orm_document.data or [])),
        created_on=orm_document.created_on,
        linked=bool(orm_document.linked),
    )

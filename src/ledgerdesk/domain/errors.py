"""Shared domain error messages and error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerdesk.domain.ledger import BalanceReport


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    ``code`` is a stable identifier (e.g. ``accountNumberNotNumeric``) that
    callers can map to a field-level message.
    """

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        super().__init__(message or code)


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class BalanceError(DomainError):
    """Save blocked because the document does not pass balance validation."""

    def __init__(self, report: "BalanceReport"):
        self.report = report
        super().__init__("; ".join(report.messages))


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def document_not_found(document_id: int) -> str:
    """Return message for missing document."""
    return f"Document {document_id} not found"


def doc_type_not_found(doc_type_id: int) -> str:
    """Return message for missing doc type."""
    return f"Doc type {doc_type_id} not found"


def chart_not_found(account_id: int, language: str) -> str:
    """Return message for a missing chart of accounts file."""
    return f"Chart of accounts ({language}) for account {account_id} not found"


def format_row_list(indexes) -> str:
    """Render zero-based row indexes as a 1-based, comma separated list."""
    return ", ".join(str(i + 1) for i in indexes)

"""Document domain service."""

import logging
from datetime import date
from typing import Iterable, Optional

from ledgerdesk.database.base import Database
from ledgerdesk.domain.chart import ChartIndex
from ledgerdesk.domain.entities import Document, LedgerRow, StoreResult
from ledgerdesk.domain.errors import (
    BalanceError,
    NotFoundError,
    ValidationError,
    account_not_found,
    doc_type_not_found,
    document_not_found,
)
from ledgerdesk.domain.ledger import (
    BalanceReport,
    DocumentEditor,
    LedgerSettings,
    blank_row,
    normalize_rows,
    validate_rows,
)
from ledgerdesk.utils.date_parser import format_created_on, parse_date

logger = logging.getLogger(__name__)

# Account id meaning "no active account"
NO_ACCOUNT = -2


class DocumentService:
    """Service for creating, validating and saving documents."""

    def __init__(
        self,
        db: Database,
        settings: Optional[LedgerSettings] = None,
        empty_cascade_is_failure: bool = True,
    ):
        """Initialize document service.

        Args:
            db: Database instance
            settings: Ledger rules used for validation
            empty_cascade_is_failure: If True, unlinking the documents of an
                account that has none reports a failure instead of success
                with a zero count
        """
        self.db = db
        self.settings = settings or LedgerSettings()
        self.empty_cascade_is_failure = empty_cascade_is_failure

    def next_doc_number(self, account_id: int, doc_type_id: int) -> int:
        """Number the next document of a doc type for an account would get."""
        return self.db.count_documents(company=account_id, doc_type=doc_type_id) + 1

    def create_document(
        self,
        name: str,
        doc_type_id: int,
        account_id: int,
        rows: Optional[Iterable[LedgerRow]] = None,
    ) -> Document:
        """Create a document with the next number for its account and doc type.

        Args:
            name: Document label
            doc_type_id: Doc type ID
            account_id: Owning account ID
            rows: Initial rows; defaults to a single blank row

        Returns:
            The created document

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the account (or a linked one) or doc type doesn't exist
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("documentNameRequired", "Filename is required")

        rows = list(rows) if rows is not None else [blank_row(self.settings)]
        rows = list(normalize_rows(rows, self.settings).rows)

        # Counting and inserting under one lock keeps numbers unique in-process
        with self.db.write_lock("documents"):
            account = self.db.get_account(account_id)
            if account is None or not account.linked:
                raise NotFoundError(account_not_found(account_id))
            if self.db.get_doc_type(doc_type_id) is None:
                raise NotFoundError(doc_type_not_found(doc_type_id))

            doc_number = self.next_doc_number(account_id, doc_type_id)
            document_id = self.db.create_document(
                name=name,
                doc_type=doc_type_id,
                doc_number=doc_number,
                rows=rows,
                company=account_id,
                created_on=format_created_on(),
            )
            return self.get_document(document_id)

    def get_document(self, document_id: int) -> Document:
        """Get document by ID.

        Raises:
            NotFoundError: If the document does not exist
        """
        document = self.db.get_document(document_id)
        if document is None:
            raise NotFoundError(document_not_found(document_id))
        return document

    def list_documents(
        self,
        account_id: int,
        doc_type_id: Optional[int] = None,
        since: Optional[date] = None,
    ) -> list[Document]:
        """List an account's linked documents.

        Args:
            account_id: Account ID, or NO_ACCOUNT for an empty list
            doc_type_id: Optional doc type filter
            since: Optional earliest creation date
        """
        if account_id == NO_ACCOUNT:
            return []
        documents = self.db.list_documents(company=account_id, doc_type=doc_type_id)
        if since is not None:
            documents = [doc for doc in documents if parse_date(doc.created_on) >= since]
        return documents

    def open_editor(self, document: Document, chart_index: Optional[ChartIndex] = None) -> DocumentEditor:
        """Start an editing session over a document's rows."""
        return DocumentEditor(document.data, settings=self.settings, chart_index=chart_index)

    def validate(self, rows: Iterable[LedgerRow]) -> BalanceReport:
        return validate_rows(list(rows), self.settings)

    def save_rows(self, document_id: int, rows: Iterable[LedgerRow]) -> StoreResult:
        """Validate and store a document's rows.

        Raises:
            NotFoundError: If the document does not exist
            BalanceError: If the rows are unbalanced, have debit/credit
                conflicts or are missing exchange rates; nothing is stored
        """
        self.get_document(document_id)
        normalized = normalize_rows(rows, self.settings)
        report = validate_rows(normalized.rows, self.settings)
        if not report.save_eligible:
            logger.warning("Save of document %s blocked: %s", document_id, "; ".join(report.messages))
            raise BalanceError(report)
        return self.db.update_document_rows(document_id, normalized.rows)

    def unlink_documents_for_account(self, account_id: int) -> StoreResult:
        """Soft-delete every document belonging to an account.

        Returns:
            Success with the number of unlinked documents. When there was
            nothing to unlink and ``empty_cascade_is_failure`` is set, a
            failure result instead.
        """
        result = self.db.soft_delete_documents_by_account(account_id)
        if result.success and result.count == 0 and self.empty_cascade_is_failure:
            return StoreResult.failed(f"No documents linked to account {account_id}")
        return result

"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerdesk.domain.entities import (
    Account,
    DocType,
    Document,
    LedgerRow,
    StoreResult,
)


class Database(ABC):
    """Abstract database interface for ledgerdesk.

    Reads of a single record return None when it does not exist; mutations
    return a StoreResult. Storage failures propagate as exceptions.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def write_lock(self, collection: str) -> AbstractContextManager:
        """Return a re-entrant lock serializing writes to a collection.

        Hold it across a read-then-write (e.g. counting documents and inserting
        the next one) so concurrent callers in this process don't interleave.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, created_on: str) -> Account:
        """Create a new account. Its ID is the current number of accounts."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID, including soft-deleted accounts."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List linked (not soft-deleted) accounts."""
        pass

    @abstractmethod
    def update_account_name(self, account_id: int, name: str) -> StoreResult:
        """Rename an account."""
        pass

    @abstractmethod
    def soft_delete_account(self, account_id: int) -> StoreResult:
        """Mark an account as unlinked."""
        pass

    @abstractmethod
    def restore_account(self, account_id: int) -> StoreResult:
        """Mark an unlinked account as linked again."""
        pass

    # DocType operations
    @abstractmethod
    def create_doc_type(self, name_en: str, name_ar: str) -> int:
        """Create a doc type. Returns doc type ID."""
        pass

    @abstractmethod
    def get_doc_type(self, doc_type_id: int) -> Optional[DocType]:
        """Get doc type by ID."""
        pass

    @abstractmethod
    def list_doc_types(self) -> list[DocType]:
        """List all doc types."""
        pass

    # Document operations
    @abstractmethod
    def create_document(
        self,
        name: str,
        doc_type: int,
        doc_number: int,
        rows: Sequence[LedgerRow],
        company: int,
        created_on: str,
    ) -> int:
        """Create a document. Its ID is the current number of documents."""
        pass

    @abstractmethod
    def get_document(self, document_id: int) -> Optional[Document]:
        """Get document by ID, including soft-deleted documents."""
        pass

    @abstractmethod
    def list_documents(
        self,
        company: Optional[int] = None,
        doc_type: Optional[int] = None,
        include_unlinked: bool = False,
    ) -> list[Document]:
        """List documents with optional filters.

        Args:
            company: Optional account ID filter
            doc_type: Optional doc type ID filter
            include_unlinked: If True, also return soft-deleted documents
        """
        pass

    @abstractmethod
    def count_documents(self, company: int, doc_type: int) -> int:
        """Count linked documents of a doc type for an account."""
        pass

    @abstractmethod
    def update_document_rows(self, document_id: int, rows: Sequence[LedgerRow]) -> StoreResult:
        """Replace a document's rows."""
        pass

    @abstractmethod
    def soft_delete_documents_by_account(self, company: int) -> StoreResult:
        """Unlink every linked document of an account.

        The result's count is the number of documents unlinked (possibly 0).
        """
        pass

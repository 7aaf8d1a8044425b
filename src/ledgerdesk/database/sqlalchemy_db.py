"""Generic SQLAlchemy database implementation."""

import logging
import threading
from typing import Optional, Sequence
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.database.base import Database
from ledgerdesk.database.models import (
    Account,
    DocType,
    Document,
    create_session_factory,
)
from ledgerdesk.database.mappers import (
    account_to_domain,
    doc_type_to_domain,
    document_to_domain,
    row_to_dict,
)
from ledgerdesk.domain.entities import (
    Account as DomainAccount,
    DocType as DomainDocType,
    Document as DomainDocument,
    LedgerRow,
    StoreResult,
)
from ledgerdesk.domain.errors import account_not_found, document_not_found

logger = logging.getLogger(__name__)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def write_lock(self, collection: str) -> threading.RLock:
        """Return the in-process lock for a collection."""
        with self._locks_guard:
            if collection not in self._locks:
                self._locks[collection] = threading.RLock()
            return self._locks[collection]

    def _next_id(self, model) -> int:
        # Records are never physically deleted, so the count is a fresh id
        return self._get_session().query(func.count(model.id)).scalar() or 0

    # Account operations
    def create_account(self, name: str, created_on: str) -> DomainAccount:
        """Create a new account. Its ID is the current number of accounts."""
        with self.write_lock("accounts"):
            session = self._get_session()
            account = Account(id=self._next_id(Account), name=name, created_on=created_on, linked=True)
            session.add(account)
            session.commit()
            logger.info("Created account %s (%s)", account.id, name)
            return account_to_domain(account)

    def get_account(self, account_id: int) -> Optional[DomainAccount]:
        """Get account by ID."""
        session = self._get_session()
        account = session.query(Account).filter(Account.id == account_id).first()
        if account is None:
            return None
        return account_to_domain(account)

    def list_accounts(self) -> list[DomainAccount]:
        """List linked accounts."""
        session = self._get_session()
        accounts = session.query(Account).filter(Account.linked.is_(True)).order_by(Account.id).all()
        return [account_to_domain(acc) for acc in accounts]

    def update_account_name(self, account_id: int, name: str) -> StoreResult:
        """Rename an account."""
        with self.write_lock("accounts"):
            session = self._get_session()
            account = session.query(Account).filter(Account.id == account_id).first()
            if account is None:
                return StoreResult.failed(account_not_found(account_id))
            account.name = name
            session.commit()
            logger.info("Renamed account %s to %s", account_id, name)
            return StoreResult.ok()

    def soft_delete_account(self, account_id: int) -> StoreResult:
        """Mark an account as unlinked."""
        with self.write_lock("accounts"):
            session = self._get_session()
            account = session.query(Account).filter(Account.id == account_id).first()
            if account is None:
                return StoreResult.failed(account_not_found(account_id))
            account.linked = False
            session.commit()
            logger.info("Unlinked account %s", account_id)
            return StoreResult.ok()

    def restore_account(self, account_id: int) -> StoreResult:
        """Mark an unlinked account as linked again."""
        with self.write_lock("accounts"):
            session = self._get_session()
            account = session.query(Account).filter(Account.id == account_id).first()
            if account is None:
                return StoreResult.failed(account_not_found(account_id))
            account.linked = True
            session.commit()
            logger.info("Relinked account %s", account_id)
            return StoreResult.ok()

    # DocType operations
    def create_doc_type(self, name_en: str, name_ar: str) -> int:
        """Create a doc type. Returns doc type ID."""
        with self.write_lock("doc_types"):
            session = self._get_session()
            doc_type_id = self._next_id(DocType)
            session.add(DocType(id=doc_type_id, name_en=name_en, name_ar=name_ar))
            session.commit()
            logger.info("Created doc type %s (%s)", doc_type_id, name_en)
            return doc_type_id

    def get_doc_type(self, doc_type_id: int) -> Optional[DomainDocType]:
        """Get doc type by ID."""
        session = self._get_session()
        doc_type = session.query(DocType).filter(DocType.id == doc_type_id).first()
        if doc_type is None:
            return None
        return doc_type_to_domain(doc_type)

    def list_doc_types(self) -> list[DomainDocType]:
        """List all doc types."""
        session = self._get_session()
        return [doc_type_to_domain(dt) for dt in session.query(DocType).order_by(DocType.id).all()]

    # Document operations
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
        with self.write_lock("documents"):
            session = self._get_session()
            document_id = self._next_id(Document)
            session.add(
                Document(
                    id=document_id,
                    name=name,
                    doc_type=doc_type,
                    doc_number=doc_number,
                    company=company,
                    data=[row_to_dict(row) for row in rows],
                    created_on=created_on,
                    linked=True,
                )
            )
            session.commit()
            logger.info(
                "Created document %s (%s #%s) for account %s", document_id, name, doc_number, company
            )
            return document_id

    def get_document(self, document_id: int) -> Optional[DomainDocument]:
        """Get document by ID."""
        session = self._get_session()
        document = session.query(Document).filter(Document.id == document_id).first()
        if document is None:
            return None
        return document_to_domain(document)

    def list_documents(
        self,
        company: Optional[int] = None,
        doc_type: Optional[int] = None,
        include_unlinked: bool = False,
    ) -> list[DomainDocument]:
        """List documents with optional filters."""
        session = self._get_session()
        query = session.query(Document)
        if company is not None:
            query = query.filter(Document.company == company)
        if doc_type is not None:
            query = query.filter(Document.doc_type == doc_type)
        if not include_unlinked:
            query = query.filter(Document.linked.is_(True))
        return [document_to_domain(doc) for doc in query.order_by(Document.id).all()]

    def count_documents(self, company: int, doc_type: int) -> int:
        """Count linked documents of a doc type for an account."""
        session = self._get_session()
        return (
            session.query(Document)
            .filter(
                Document.company == company,
                Document.doc_type == doc_type,
                Document.linked.is_(True),
            )
            .count()
        )

    def update_document_rows(self, document_id: int, rows: Sequence[LedgerRow]) -> StoreResult:
        """Replace a document's rows."""
        with self.write_lock("documents"):
            session = self._get_session()
            document = session.query(Document).filter(Document.id == document_id).first()
            if document is None:
                return StoreResult.failed(document_not_found(document_id))
            # Assign a new list so the JSON column is flagged as modified
            document.data = [row_to_dict(row) for row in rows]
            session.commit()
            logger.info("Saved %d rows of document %s", len(rows), document_id)
            return StoreResult.ok()

    def soft_delete_documents_by_account(self, company: int) -> StoreResult:
        """Unlink every linked document of an account."""
        with self.write_lock("documents"):
            session = self._get_session()
            documents = (
                session.query(Document)
                .filter(Document.company == company, Document.linked.is_(True))
                .all()
            )
            for document in documents:
                document.linked = False
            try:
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise
            logger.info("Unlinked %d documents of account %s", len(documents), company)
            return StoreResult.ok(count=len(documents))

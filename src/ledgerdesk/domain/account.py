"""Account domain service."""

import logging
from typing import Optional

from ledgerdesk.database.base import Database
from ledgerdesk.domain.chart import ChartRepository
from ledgerdesk.domain.document import DocumentService
from ledgerdesk.domain.entities import Account as AccountEntity, StoreResult
from ledgerdesk.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
)
from ledgerdesk.utils.date_parser import format_created_on

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(
        self,
        db: Database,
        charts: Optional[ChartRepository] = None,
        documents: Optional[DocumentService] = None,
    ):
        """Initialize account service.

        Args:
            db: Database instance
            charts: Chart repository used to seed new accounts' charts
            documents: Document service used for the delete cascade
        """
        self.db = db
        self.charts = charts
        self.documents = documents or DocumentService(db)

    def create_account(self, name: str) -> AccountEntity:
        """Create a new account and seed its chart of accounts.

        Args:
            name: Account name

        Returns:
            The created account

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a linked account already uses the name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("accountNameRequired", "Account name is required")

        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        account = self.db.create_account(name=name, created_on=format_created_on())
        if self.charts is not None:
            self.charts.seed_for_account(account.id)
        return account

    def get_account(self, account_id: int) -> AccountEntity:
        """Get account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_linked_account(self, account_id: int) -> AccountEntity:
        """Get an account that has not been deleted.

        Raises:
            NotFoundError: If the account does not exist or was deleted
        """
        account = self.get_account(account_id)
        if not account.linked:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List accounts that have not been deleted."""
        return self.db.list_accounts()

    def rename_account(self, account_id: int, name: str) -> StoreResult:
        """Rename an account.

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the account does not exist or was deleted
            ConflictError: If another linked account already uses the name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("accountNameRequired", "Account name is required")
        self.get_linked_account(account_id)

        for acc in self.db.list_accounts():
            if acc.id != account_id and acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.update_account_name(account_id=account_id, name=name)

    def delete_account(self, account_id: int) -> StoreResult:
        """Soft-delete an account and unlink its documents.

        Returns:
            The result of unlinking the account's documents. With the default
            settings this is a failure when the account had no documents.

        Raises:
            NotFoundError: If the account does not exist or was already deleted

        If unlinking the documents fails, the account is linked again and the
        error is re-raised, so the delete can be retried.
        """
        self.get_linked_account(account_id)
        self.db.soft_delete_account(account_id)
        try:
            return self.documents.unlink_documents_for_account(account_id)
        except Exception:
            logger.error("Unlinking documents of account %s failed; relinking the account", account_id)
            self.db.restore_account(account_id)
            raise

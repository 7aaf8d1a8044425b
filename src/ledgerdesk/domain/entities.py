"""Domain model entities for ledgerdesk.

These are pure data classes representing business concepts, independent of
the database schema. Storage details (table layout, JSON row keys) are handled
by the mappers in the database layer.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Account:
    """Company/ledger owner domain entity."""

    id: int
    name: str
    created_on: str
    linked: bool = True


@dataclass(frozen=True)
class DocType:
    """Document template descriptor."""

    id: int
    name_en: str
    name_ar: str

    def name_for(self, language: str) -> str:
        """Return the display name for a language code ('en' or 'ar')."""
        return self.name_ar if language == "ar" else self.name_en


@dataclass(frozen=True)
class DocTypeNames:
    """Localized names of a doc type."""

    name_en: str
    name_ar: str


@dataclass(frozen=True)
class LedgerRow:
    """One line of a document.

    Amount fields keep the text the user entered; ``equivalent`` is derived
    by the row normalizer and is never edited directly.
    """

    account_number: str = ""
    account_helper: str = ""
    account_name: str = ""
    currency: str = ""
    debit: str = ""
    credit: str = ""
    rate: str = ""
    equivalent: Optional[Decimal] = None
    description: str = ""


@dataclass(frozen=True)
class Document:
    """Accounting form for one account and doc type."""

    id: int
    name: str
    doc_type: int
    doc_number: int
    company: int
    data: tuple[LedgerRow, ...]
    created_on: str
    linked: bool = True


@dataclass(frozen=True)
class ChartOfAccountNode:
    """One entry in a hierarchical chart of accounts."""

    id: str
    name: str
    sub_accounts: tuple["ChartOfAccountNode", ...] = field(default_factory=tuple)

    @property
    def is_leaf(self) -> bool:
        return not self.sub_accounts


@dataclass(frozen=True)
class StoreResult:
    """Tagged outcome of a store mutation.

    ``count`` is the number of records affected; ``message`` explains a
    failure.
    """

    success: bool
    count: int = 0
    message: Optional[str] = None

    @classmethod
    def ok(cls, count: int = 1) -> "StoreResult":
        return cls(success=True, count=count)

    @classmethod
    def failed(cls, message: str, count: int = 0) -> "StoreResult":
        return cls(success=False, count=count, message=message)

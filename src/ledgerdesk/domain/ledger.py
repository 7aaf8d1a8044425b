"""Ledger row normalization and document balance validation.

Every edit to a document's rows goes through :func:`apply_edit`, after which
the whole row set is recomputed with :func:`normalize_rows` and
:func:`validate_rows`. Both are pure functions of the rows and the settings,
so calling them repeatedly on unchanged rows gives identical results.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ledgerdesk.domain.chart import ChartIndex
from ledgerdesk.domain.entities import LedgerRow
from ledgerdesk.domain.errors import ValidationError, format_row_list
from ledgerdesk.utils.amount_parser import is_blank, is_numeric, parse_number

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "LBP"
CURRENCIES = ("LBP", "USD", "EUR")

# Fields a user may edit, in table column order
EDITABLE_FIELDS = (
    "account_number",
    "account_helper",
    "account_name",
    "currency",
    "debit",
    "credit",
    "rate",
    "description",
)
# Account codes are plain digit strings
ACCOUNT_CODE_PATTERN = re.compile(r"\d+")
ACCOUNT_CODE_FIELDS = {
    "account_number": "accountNumberNotNumeric",
    "account_helper": "accountHelperNotNumeric",
}
NUMERIC_FIELDS = {
    "debit": "debitNotNumeric",
    "credit": "creditNotNumeric",
    "rate": "rateNotNumeric",
}
TOTAL_FIELDS = ("debit", "credit")


@dataclass(frozen=True)
class LedgerSettings:
    """Rules shared by the normalizer and the validator.

    ``balance_tolerance`` of zero means debit and credit totals must match
    exactly.
    """

    default_currency: str = DEFAULT_CURRENCY
    currencies: tuple[str, ...] = CURRENCIES
    balance_tolerance: Decimal = Decimal("0")

    def __post_init__(self):
        if self.default_currency not in self.currencies:
            raise ValueError(
                f"Default currency {self.default_currency} is not one of {', '.join(self.currencies)}"
            )
        if self.balance_tolerance < 0:
            raise ValueError("Balance tolerance cannot be negative")


def blank_row(settings: Optional[LedgerSettings] = None) -> LedgerRow:
    """Return an empty row in the default currency."""
    settings = settings or LedgerSettings()
    return LedgerRow(currency=settings.default_currency)


def row_currency(row: LedgerRow, settings: LedgerSettings) -> str:
    """Currency of a row; rows without one are in the default currency."""
    currency = (row.currency or "").strip().upper()
    return currency or settings.default_currency


def is_foreign(row: LedgerRow, settings: LedgerSettings) -> bool:
    return row_currency(row, settings) != settings.default_currency


def has_conflict(row: LedgerRow) -> bool:
    """Both debit and credit are filled in."""
    return not is_blank(row.debit) and not is_blank(row.credit)


def is_missing_rate(row: LedgerRow, settings: LedgerSettings) -> bool:
    """Foreign currency row without an exchange rate."""
    return is_foreign(row, settings) and is_blank(row.rate)


def apply_edit(
    row: LedgerRow,
    field_name: str,
    value: str,
    chart_index: Optional[ChartIndex] = None,
    settings: Optional[LedgerSettings] = None,
) -> LedgerRow:
    """Apply a single field edit to a row.

    Rejected edits raise and leave the row untouched.

    Args:
        row: Row being edited
        field_name: One of EDITABLE_FIELDS
        value: New text value
        chart_index: Chart used to fill in the account name
        settings: Ledger settings (currency set)

    Returns:
        The edited row (``equivalent`` is not recomputed here)

    Raises:
        ValidationError: If the field is unknown or read-only, or the value is invalid
    """
    settings = settings or LedgerSettings()
    value = "" if value is None else str(value)

    if field_name == "equivalent":
        raise ValidationError("equivalentReadOnly", "The equivalent is computed and cannot be edited")
    if field_name not in EDITABLE_FIELDS:
        raise ValidationError("unknownField", f"Unknown row field '{field_name}'")

    if field_name in ACCOUNT_CODE_FIELDS:
        value = value.strip()
        if value and not ACCOUNT_CODE_PATTERN.fullmatch(value):
            code = ACCOUNT_CODE_FIELDS[field_name]
            logger.debug("Rejected %s=%r (%s)", field_name, value, code)
            raise ValidationError(code, f"{field_name.replace('_', ' ').capitalize()} must be numeric, got '{value}'")

    if field_name in NUMERIC_FIELDS and not is_numeric(value):
        code = NUMERIC_FIELDS[field_name]
        logger.debug("Rejected %s=%r (%s)", field_name, value, code)
        raise ValidationError(code, f"{field_name.replace('_', ' ').capitalize()} must be numeric, got '{value}'")

    if field_name == "currency":
        value = value.strip().upper()
        if value not in settings.currencies:
            raise ValidationError(
                "currencyNotSupported",
                f"Currency '{value}' is not supported (use {', '.join(settings.currencies)})",
            )

    row = replace(row, **{field_name: value})

    if field_name == "account_number" and is_blank(row.account_helper):
        node = chart_index.find(value) if chart_index is not None and not is_blank(value) else None
        row = replace(row, account_name=node.name if node is not None else "")
    elif field_name == "account_helper" and not is_blank(value):
        row = replace(row, account_name="")

    return row


def _one_sided(row: LedgerRow) -> Optional[str]:
    """Return the single filled amount, or None if both or neither are filled."""
    debit_set = not is_blank(row.debit)
    credit_set = not is_blank(row.credit)
    if debit_set and not credit_set:
        return row.debit
    if credit_set and not debit_set:
        return row.credit
    return None


def compute_equivalent(row: LedgerRow, settings: Optional[LedgerSettings] = None) -> Optional[Decimal]:
    """Compute a row's value in the default currency.

    Returns None (empty) when both or neither of debit/credit are set, when a
    foreign currency row has no rate, or when a value does not parse.
    """
    settings = settings or LedgerSettings()
    amount_text = _one_sided(row)
    if amount_text is None:
        return None
    amount = parse_number(amount_text)
    if amount is None:
        return None

    if not is_foreign(row, settings):
        return amount
    if is_blank(row.rate):
        return None
    rate = parse_number(row.rate)
    if rate is None:
        return None
    return amount * rate


@dataclass(frozen=True)
class NormalizedRows:
    """Rows with recomputed equivalents plus the derived row-index sets."""

    rows: tuple[LedgerRow, ...]
    conflict_rows: tuple[int, ...]
    missing_rate_rows: tuple[int, ...]
    blank_amount_rows: tuple[int, ...]


def normalize_rows(rows: Iterable[LedgerRow], settings: Optional[LedgerSettings] = None) -> NormalizedRows:
    """Recompute every row's equivalent and the conflict/missing-rate sets."""
    settings = settings or LedgerSettings()
    normalized = []
    conflicts = []
    missing_rates = []
    blanks = []
    for i, row in enumerate(rows):
        if has_conflict(row):
            conflicts.append(i)
        elif is_blank(row.debit) and is_blank(row.credit):
            blanks.append(i)
        if is_missing_rate(row, settings):
            missing_rates.append(i)
        normalized.append(replace(row, equivalent=compute_equivalent(row, settings)))
    return NormalizedRows(
        rows=tuple(normalized),
        conflict_rows=tuple(conflicts),
        missing_rate_rows=tuple(missing_rates),
        blank_amount_rows=tuple(blanks),
    )


def calculate_total(
    rows: Iterable[LedgerRow], field_name: str, settings: Optional[LedgerSettings] = None
) -> Decimal:
    """Sum a column converted to the default currency.

    Each row contributes ``value * rate``; the rate counts as 1 for default
    currency rows and for rates that do not parse. Values that do not parse
    contribute 0.

    Raises:
        ValueError: If field_name is not 'debit' or 'credit'
    """
    if field_name not in TOTAL_FIELDS:
        raise ValueError(f"Cannot total field '{field_name}'")
    settings = settings or LedgerSettings()

    total = Decimal("0")
    for row in rows:
        value = parse_number(getattr(row, field_name))
        if value is None:
            continue
        rate = parse_number(row.rate) if is_foreign(row, settings) else None
        total += value * (rate if rate is not None else Decimal("1"))
    return total


@dataclass(frozen=True)
class BalanceReport:
    """Aggregate validation state of a document."""

    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool
    conflict_rows: tuple[int, ...] = ()
    missing_rate_rows: tuple[int, ...] = ()
    blank_amount_rows: tuple[int, ...] = ()
    messages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def save_eligible(self) -> bool:
        return self.is_balanced and not self.conflict_rows and not self.missing_rate_rows


def validate_rows(rows: Sequence[LedgerRow], settings: Optional[LedgerSettings] = None) -> BalanceReport:
    """Compute totals, conflicts and missing rates for a row set."""
    settings = settings or LedgerSettings()
    normalized = normalize_rows(rows, settings)
    total_debit = calculate_total(normalized.rows, "debit", settings)
    total_credit = calculate_total(normalized.rows, "credit", settings)
    balanced = abs(total_debit - total_credit) <= settings.balance_tolerance

    messages = []
    if not balanced:
        messages.append(
            f"Document is not balanced: total debit {total_debit} {settings.default_currency} "
            f"!= total credit {total_credit} {settings.default_currency}"
        )
    if normalized.conflict_rows:
        messages.append(
            f"Rows {format_row_list(normalized.conflict_rows)} have both a debit and a credit"
        )
    if normalized.missing_rate_rows:
        messages.append(
            f"Rows {format_row_list(normalized.missing_rate_rows)} use a foreign currency without a rate"
        )

    return BalanceReport(
        total_debit=total_debit,
        total_credit=total_credit,
        is_balanced=balanced,
        conflict_rows=normalized.conflict_rows,
        missing_rate_rows=normalized.missing_rate_rows,
        blank_amount_rows=normalized.blank_amount_rows,
        messages=tuple(messages),
    )


class DocumentEditor:
    """In-memory editing session over a document's rows.

    Every change recomputes all equivalents and the balance report.
    """

    def __init__(
        self,
        rows: Iterable[LedgerRow] = (),
        settings: Optional[LedgerSettings] = None,
        chart_index: Optional[ChartIndex] = None,
    ):
        self.settings = settings or LedgerSettings()
        self.chart_index = chart_index
        self._rows: list[LedgerRow] = list(rows)
        self._recompute()

    def _recompute(self) -> None:
        normalized = normalize_rows(self._rows, self.settings)
        self._rows = list(normalized.rows)
        self._report = validate_rows(self._rows, self.settings)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._rows):
            raise ValidationError("rowOutOfRange", f"Row {index + 1} does not exist")

    @property
    def rows(self) -> tuple[LedgerRow, ...]:
        return tuple(self._rows)

    @property
    def report(self) -> BalanceReport:
        return self._report

    def set_field(self, index: int, field_name: str, value: str) -> LedgerRow:
        """Edit one cell; rejected edits leave the document unchanged."""
        self._check_index(index)
        self._rows[index] = apply_edit(
            self._rows[index], field_name, value, chart_index=self.chart_index, settings=self.settings
        )
        self._recompute()
        return self._rows[index]

    def add_row(self) -> int:
        """Append a blank row and return its index."""
        self._rows.append(blank_row(self.settings))
        self._recompute()
        return len(self._rows) - 1

    def remove_row(self, index: int) -> None:
        self._check_index(index)
        del self._rows[index]
        self._recompute()

"""Export payloads for the print/PDF renderer and the spreadsheet writer.

The renderer receives finished HTML; the spreadsheet writer receives the
structured :class:`ExportPayload`. Neither rasterizes nor writes files here.
"""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Optional

from jinja2 import Environment, select_autoescape

from ledgerdesk.domain.entities import Account, DocType, Document
from ledgerdesk.domain.ledger import BalanceReport

COLUMNS = (
    "account_number",
    "account_helper",
    "account_name",
    "currency",
    "debit",
    "credit",
    "rate",
    "equivalent",
    "description",
)

LABELS = {
    "en": {
        "account_number": "Account No.",
        "account_helper": "Helper",
        "account_name": "Account Name",
        "currency": "Currency",
        "debit": "Debit",
        "credit": "Credit",
        "rate": "Rate",
        "equivalent": "Equivalent",
        "description": "Description",
        "total": "Total",
        "balanced": "Balanced",
        "unbalanced": "Not balanced",
        "document": "Document",
        "number": "No.",
        "date": "Date",
        "account": "Account",
    },
    "ar": {
        "account_number": "رقم الحساب",
        "account_helper": "الحساب المساعد",
        "account_name": "اسم الحساب",
        "currency": "العملة",
        "debit": "مدين",
        "credit": "دائن",
        "rate": "سعر الصرف",
        "equivalent": "المعادل",
        "description": "البيان",
        "total": "المجموع",
        "balanced": "متوازن",
        "unbalanced": "غير متوازن",
        "document": "المستند",
        "number": "رقم",
        "date": "التاريخ",
        "account": "الحساب",
    },
}


@dataclass(frozen=True)
class CellError:
    """An error annotation on one cell."""

    row: int
    column: str
    reason: str


@dataclass
class ExportPayload:
    """Everything the spreadsheet writer and HTML renderer need."""

    language: str
    rtl: bool
    headers: list[str]
    columns: list[str]
    rows: list[list[str]]
    totals: dict[str, Any]
    metadata: dict[str, Any]
    labels: dict[str, str]
    errors: list[CellError] = field(default_factory=list)

    def has_error(self, row: int, column: str) -> bool:
        return any(e.row == row and e.column == column for e in self.errors)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def collect_cell_errors(report: BalanceReport) -> list[CellError]:
    """Annotate the cells responsible for each validation problem."""
    errors = []
    for i in report.conflict_rows:
        errors.append(CellError(row=i, column="debit", reason="conflict"))
        errors.append(CellError(row=i, column="credit", reason="conflict"))
    for i in report.missing_rate_rows:
        errors.append(CellError(row=i, column="rate", reason="missingRate"))
    return errors


def build_export_payload(
    document: Document,
    doc_type: DocType,
    report: BalanceReport,
    account: Optional[Account] = None,
    language: str = "en",
) -> ExportPayload:
    """Assemble the export payload for a document.

    Args:
        document: Document being exported (rows should be normalized)
        doc_type: The document's doc type
        report: Balance report computed for the document's rows
        account: Owning account, for the metadata block
        language: 'en' or 'ar'; Arabic exports are right-to-left
    """
    labels = LABELS["ar" if language == "ar" else "en"]
    rows = [[_cell(getattr(row, column)) for column in COLUMNS] for row in document.data]
    return ExportPayload(
        language=language,
        rtl=language == "ar",
        headers=[labels[column] for column in COLUMNS],
        columns=list(COLUMNS),
        rows=rows,
        totals={
            "debit": _cell(report.total_debit),
            "credit": _cell(report.total_credit),
            "difference": _cell(report.difference),
            "balanced": report.is_balanced,
        },
        metadata={
            "name": document.name,
            "doc_number": document.doc_number,
            "doc_type": doc_type.name_for(language),
            "account": account.name if account is not None else "",
            "created_on": document.created_on,
            "messages": list(report.messages),
        },
        labels=labels,
        errors=collect_cell_errors(report),
    )


DOCUMENT_TEMPLATE = """\
<div class="ledger-document" dir="{{ 'rtl' if payload.rtl else 'ltr' }}" lang="{{ payload.language }}">
  <style>
    .ledger-document table { border-collapse: collapse; width: 100%; }
    .ledger-document th, .ledger-document td { border: 1px solid #999; padding: 4px 6px; }
    .ledger-document .cell-error { background: #fde2e2; color: #b91c1c; }
    .ledger-document .unbalanced { color: #b91c1c; }
  </style>
  <h2>{{ payload.metadata.doc_type }} {{ payload.labels.number }} {{ payload.metadata.doc_number }}: {{ payload.metadata.name }}</h2>
  <p>
    {% if payload.metadata.account %}{{ payload.labels.account }}: {{ payload.metadata.account }} &middot; {% endif %}
    {{ payload.labels.date }}: {{ payload.metadata.created_on }}
  </p>
  <table>
    <thead>
      <tr>{% for header in payload.headers %}<th>{{ header }}</th>{% endfor %}</tr>
    </thead>
    <tbody>
      {% for row in payload.rows %}{% set row_index = loop.index0 %}
      <tr>{% for value in row %}{% set column = payload.columns[loop.index0] %}<td{% if payload.has_error(row_index, column) %} class="cell-error"{% endif %}>{{ value }}</td>{% endfor %}</tr>
      {% endfor %}
    </tbody>
    <tfoot>
      <tr>
        <th colspan="4">{{ payload.labels.total }}</th>
        <th>{{ payload.totals.debit }}</th>
        <th>{{ payload.totals.credit }}</th>
        <th colspan="3" class="{{ '' if payload.totals.balanced else 'unbalanced' }}">
          {{ payload.labels.balanced if payload.totals.balanced else payload.labels.unbalanced }}
        </th>
      </tr>
    </tfoot>
  </table>
  {% if payload.metadata.messages %}
  <ul class="unbalanced">{% for message in payload.metadata.messages %}<li>{{ message }}</li>{% endfor %}</ul>
  {% endif %}
</div>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))


def render_document_html(payload: ExportPayload) -> str:
    """Render the printable HTML table for a document."""
    return _env.from_string(DOCUMENT_TEMPLATE).render(payload=payload)

"""Chart of accounts: tree loading, seeding and account lookup."""

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union

from ledgerdesk.domain.entities import ChartOfAccountNode
from ledgerdesk.domain.errors import NotFoundError, ValidationError, chart_not_found

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "data"
LANGUAGES = ("en", "ar")

ChartTree = tuple[ChartOfAccountNode, ...]


def iter_nodes(tree: Iterable[ChartOfAccountNode]) -> Iterator[ChartOfAccountNode]:
    """Yield nodes in pre-order: each node before its children, siblings in order."""
    for node in tree:
        yield node
        yield from iter_nodes(node.sub_accounts)


def find_account_by_id(
    tree: Iterable[ChartOfAccountNode], account_id: Union[str, int, None]
) -> Optional[ChartOfAccountNode]:
    """Find the first node whose id matches ``account_id``.

    Ids are compared as strings. The search is depth-first pre-order, so if an
    id appears more than once the node met first wins; a parent is met
    before its own children, and an earlier subtree before a later root.

    Args:
        tree: Root nodes of the chart
        account_id: Account number to look up

    Returns:
        Matching node or None if not found
    """
    if account_id is None:
        return None
    key = str(account_id).strip()
    for node in iter_nodes(tree):
        if node.id == key:
            return node
    return None


class ChartIndex:
    """Constant-time lookup over a chart tree.

    Built once per tree; lookups agree with :func:`find_account_by_id`.
    """

    def __init__(self, tree: Iterable[ChartOfAccountNode]):
        self.tree: ChartTree = tuple(tree)
        self._by_id: dict[str, ChartOfAccountNode] = {}
        for node in iter_nodes(self.tree):
            self._by_id.setdefault(node.id, node)

    def find(self, account_id: Union[str, int, None]) -> Optional[ChartOfAccountNode]:
        if account_id is None:
            return None
        return self._by_id.get(str(account_id).strip())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, account_id: object) -> bool:
        return str(account_id).strip() in self._by_id


def node_from_dict(data: Any) -> ChartOfAccountNode:
    """Build a node (and its children) from a JSON object.

    Ids are normalized to strings here so comparisons downstream never rely on
    type coercion.

    Raises:
        ValidationError: If the object is not a valid chart node
    """
    if not isinstance(data, dict):
        raise ValidationError("chartNodeInvalid", f"Chart node must be an object, got {type(data).__name__}")

    raw_id = data.get("id")
    if raw_id is None or str(raw_id).strip() == "":
        raise ValidationError("chartNodeMissingId", f"Chart node without id: {data!r}")

    children = data.get("subAccounts") or []
    if not isinstance(children, list):
        raise ValidationError("chartNodeInvalid", f"subAccounts of node {raw_id} must be a list")

    return ChartOfAccountNode(
        id=str(raw_id).strip(),
        name=str(data.get("name", "")),
        sub_accounts=tuple(node_from_dict(child) for child in children),
    )


def node_to_dict(node: ChartOfAccountNode) -> dict[str, Any]:
    """Convert a node back to its JSON representation."""
    result: dict[str, Any] = {"id": node.id, "name": node.name}
    if node.sub_accounts:
        result["subAccounts"] = [node_to_dict(child) for child in node.sub_accounts]
    return result


def load_chart(path: Path) -> ChartTree:
    """Load and validate a chart tree from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError("chartInvalidJson", f"Invalid chart file {path}: {e}") from e

    if not isinstance(data, list):
        raise ValidationError("chartNodeInvalid", f"Chart file {path} must contain a list of nodes")
    return tuple(node_from_dict(item) for item in data)


@dataclass(frozen=True)
class ChartSet:
    """English and Arabic variants of one account's chart."""

    en: ChartTree
    ar: ChartTree

    def for_language(self, language: str) -> ChartTree:
        return self.ar if language == "ar" else self.en


class ChartRepository:
    """File-backed source of per-account charts of accounts.

    Each account owns two files in ``data_dir``: ``coaen_<id>.json`` and
    ``coaar_<id>.json``, copied from the bundled templates when the account is
    created.
    """

    def __init__(self, data_dir: Union[str, Path], template_dir: Union[str, Path] = TEMPLATE_DIR):
        self.data_dir = Path(data_dir)
        self.template_dir = Path(template_dir)

    def chart_path(self, account_id: int, language: str) -> Path:
        return self.data_dir / f"coa{language}_{account_id}.json"

    def template_path(self, language: str) -> Path:
        return self.template_dir / f"coa_template_{language}.json"

    def seed_for_account(self, account_id: int) -> None:
        """Copy the template charts for a new account.

        Existing chart files are left untouched.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for language in LANGUAGES:
            target = self.chart_path(account_id, language)
            if target.exists():
                continue
            shutil.copyfile(self.template_path(language), target)
            logger.info("Seeded %s chart of accounts for account %s", language, account_id)

    def has_chart(self, account_id: int) -> bool:
        return all(self.chart_path(account_id, lang).exists() for lang in LANGUAGES)

    def get_chart_for_account(self, account_id: int) -> ChartSet:
        """Load both chart variants for an account.

        Raises:
            NotFoundError: If a chart file is missing
            ValidationError: If a chart file is malformed
        """
        trees = {}
        for language in LANGUAGES:
            path = self.chart_path(account_id, language)
            if not path.exists():
                raise NotFoundError(chart_not_found(account_id, language))
            trees[language] = load_chart(path)
        return ChartSet(en=trees["en"], ar=trees["ar"])


class ChartService:
    """Chart lookups for the active account.

    Only the most recently requested account's charts are cached; switching
    accounts reloads from the repository.
    """

    def __init__(self, repository: ChartRepository):
        self.repository = repository
        self._account_id: Optional[int] = None
        self._charts: Optional[ChartSet] = None
        self._indexes: dict[str, ChartIndex] = {}

    def get_chart(self, account_id: int) -> ChartSet:
        if self._account_id != account_id or self._charts is None:
            charts = self.repository.get_chart_for_account(account_id)
            self._account_id = account_id
            self._charts = charts
            self._indexes = {}
        return self._charts

    def index_for(self, account_id: int, language: str = "en") -> ChartIndex:
        charts = self.get_chart(account_id)
        if language not in self._indexes:
            self._indexes[language] = ChartIndex(charts.for_language(language))
        return self._indexes[language]

    def lookup(self, account_id: int, code: str, language: str = "en") -> Optional[ChartOfAccountNode]:
        """Resolve an account code in the given account's chart."""
        return self.index_for(account_id, language).find(code)

    def invalidate(self) -> None:
        self._account_id = None
        self._charts = None
        self._indexes = {}

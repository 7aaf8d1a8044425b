"""Shared pytest fixtures for ledgerdesk tests."""

import tempfile
import os
import pytest

from ledgerdesk.database.factories import create_sqlite_database
from ledgerdesk.domain.account import AccountService
from ledgerdesk.domain.chart import ChartRepository, ChartService
from ledgerdesk.domain.doctype import DocTypeService
from ledgerdesk.domain.document import DocumentService
from ledgerdesk.domain.entities import ChartOfAccountNode
from ledgerdesk.domain.ledger import LedgerSettings


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def chart_dir(tmp_path):
    """Directory for per-account chart files."""
    return tmp_path / "charts"


@pytest.fixture
def chart_repository(chart_dir):
    return ChartRepository(chart_dir)


@pytest.fixture
def chart_service(chart_repository):
    return ChartService(chart_repository)


@pytest.fixture
def settings():
    return LedgerSettings()


@pytest.fixture
def document_service(temp_db, settings):
    """Create a DocumentService with a temporary database."""
    return DocumentService(temp_db, settings=settings)


@pytest.fixture
def account_service(temp_db, chart_repository, document_service):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, charts=chart_repository, documents=document_service)


@pytest.fixture
def doc_type_service(temp_db):
    """Create a DocTypeService with a temporary database."""
    return DocTypeService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    return account_service.create_account(name="Cedar Trading")


@pytest.fixture
def sample_doc_type(doc_type_service):
    """Create a sample doc type and return it."""
    doc_type_id = doc_type_service.create_doc_type(name_en="Journal Voucher", name_ar="قيد يومية")
    return doc_type_service.get_doc_type(doc_type_id)


@pytest.fixture
def sample_document(document_service, sample_account, sample_doc_type):
    """Create a document with one blank row."""
    return document_service.create_document(
        name="Opening entry", doc_type_id=sample_doc_type.id, account_id=sample_account.id
    )


@pytest.fixture
def small_tree():
    """A hand-built chart with a duplicated id at two depths."""
    return (
        ChartOfAccountNode(
            id="4",
            name="Third Party",
            sub_accounts=(
                ChartOfAccountNode(
                    id="40",
                    name="Suppliers",
                    sub_accounts=(ChartOfAccountNode(id="401", name="Local Suppliers"),),
                ),
                ChartOfAccountNode(id="41", name="Customers"),
            ),
        ),
        ChartOfAccountNode(
            id="5",
            name="Financial",
            sub_accounts=(
                ChartOfAccountNode(id="53", name="Cash"),
                ChartOfAccountNode(id="401", name="Shadowed Duplicate"),
            ),
        ),
        ChartOfAccountNode(id="53", name="Cash at Root"),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(temp_db, chart_dir):
    """Global CLI options pointing at the temporary database and chart dir."""
    return ["--db-path", temp_db.database_path, "--data-dir", str(chart_dir)]

"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerdesk.database.sqlalchemy_db import SQLAlchemyDatabase

APP_DIR_NAME = ".ledgerdesk"


def default_app_dir() -> Path:
    """Return ~/.ledgerdesk, creating it if needed."""
    app_dir = Path.home() / APP_DIR_NAME
    app_dir.mkdir(exist_ok=True)
    return app_dir


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERDESK_DB_PATH
            environment variable, then defaults to ~/.ledgerdesk/ledgerdesk.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("LEDGERDESK_DB_PATH")

    if database_path is None:
        database_path = str(default_app_dir() / "ledgerdesk.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def resolve_data_dir(data_dir: Optional[str] = None) -> Path:
    """Resolve the chart-of-accounts directory.

    Args:
        data_dir: Explicit directory. If None, checks LEDGERDESK_DATA_DIR,
            then defaults to ~/.ledgerdesk/charts
    """
    if data_dir is None:
        data_dir = os.environ.get("LEDGERDESK_DATA_DIR")

    if data_dir is None:
        return default_app_dir() / "charts"
    return Path(data_dir)

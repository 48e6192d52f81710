"""SQLite database helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from courtplan.settings import DB_FILENAME, Settings, get_app_data_dir

from .schema import initialize_schema


def get_default_database_path() -> Path:
    """Return the default database path inside the per-user data directory."""
    return get_app_data_dir() / DB_FILENAME


def _casefold(value: object | None) -> str | None:
    if value is None:
        return None
    return str(value).casefold()


def _configure_connection(connection: sqlite3.Connection) -> None:
    connection.row_factory = sqlite3.Row
    # SQLite's LOWER() only folds ASCII; location/division filters need Unicode folding.
    connection.create_function("casefold", 1, _casefold, deterministic=True)


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Create a SQLite connection and ensure schema exists."""
    if db_path is None:
        db_path = get_default_database_path()

    connection = sqlite3.connect(str(db_path))
    _configure_connection(connection)
    initialize_schema(connection)
    return connection


def connect_from_settings(settings: Settings) -> sqlite3.Connection:
    settings.database_path.parent.mkdir(parents=True, exist_ok=True)
    return get_connection(settings.database_path)

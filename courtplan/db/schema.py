"""Database schema definitions."""

from __future__ import annotations

import sqlite3

TOURNAMENT_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS tournaments (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    start_date TEXT,
    end_date TEXT,
    location TEXT,
    division TEXT,
    status TEXT NOT NULL,
    blob_file_name TEXT,
    created_date TEXT NOT NULL,
    document TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

TOURNAMENT_INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_tournaments_start_date ON tournaments (start_date);",
    "CREATE INDEX IF NOT EXISTS idx_tournaments_status ON tournaments (status);",
]


SCHEMA_SQL = [
    TOURNAMENT_TABLE_SQL,
    *TOURNAMENT_INDEXES_SQL,
]


def initialize_schema(connection: sqlite3.Connection) -> None:
    """Initialize database schema if needed."""
    with connection:
        for statement in SCHEMA_SQL:
            connection.execute(statement)

"""SQLite document store for tournaments."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Any

from courtplan.domain.models import Tournament, TournamentStatus, format_datetime

# Tournaments without a start date sort after every dated tournament.
ORDER_BY_SQL = "ORDER BY start_date IS NULL, start_date DESC, name"


def _row_to_tournament(row: sqlite3.Row | None) -> Tournament | None:
    if row is None:
        return None
    return Tournament.from_document(json.loads(row["document"]))


def _column_values(tournament: Tournament) -> tuple[Any, ...]:
    return (
        tournament.name,
        format_datetime(tournament.start_date),
        format_datetime(tournament.end_date),
        tournament.location,
        tournament.division,
        tournament.status.value,
        tournament.blob_file_name,
        format_datetime(tournament.created_date),
        json.dumps(tournament.to_document(), ensure_ascii=False),
    )


class TournamentRepository:
    """Repository for tournament documents keyed by tournament id."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def create(self, tournament: Tournament) -> str:
        self._connection.execute(
            """
            INSERT INTO tournaments (
                id,
                name,
                start_date,
                end_date,
                location,
                division,
                status,
                blob_file_name,
                created_date,
                document
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (tournament.id, *_column_values(tournament)),
        )
        self._connection.commit()
        return tournament.id

    def get(self, tournament_id: str) -> Tournament | None:
        row = self._connection.execute(
            "SELECT document FROM tournaments WHERE id = ?", (tournament_id,)
        ).fetchone()
        return _row_to_tournament(row)

    def replace(self, tournament: Tournament) -> None:
        cursor = self._connection.execute(
            """
            UPDATE tournaments
            SET name = ?,
                start_date = ?,
                end_date = ?,
                location = ?,
                division = ?,
                status = ?,
                blob_file_name = ?,
                created_date = ?,
                document = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
            """,
            (*_column_values(tournament), tournament.id),
        )
        self._connection.commit()
        if cursor.rowcount == 0:
            raise LookupError(f"Tournament {tournament.id} not found")

    def delete(self, tournament_id: str) -> None:
        self._connection.execute(
            "DELETE FROM tournaments WHERE id = ?", (tournament_id,)
        )
        self._connection.commit()

    def list(self) -> list[Tournament]:
        rows = self._connection.execute(
            f"SELECT document FROM tournaments {ORDER_BY_SQL}"
        ).fetchall()
        return [Tournament.from_document(json.loads(row["document"])) for row in rows]

    def search(
        self,
        *,
        start_date_from: datetime | None = None,
        start_date_to: datetime | None = None,
        location: str | None = None,
        division: str | None = None,
        status: TournamentStatus | None = None,
        limit: int,
    ) -> list[Tournament]:
        clauses: list[str] = []
        params: list[Any] = []
        if start_date_from is not None:
            clauses.append("start_date >= ?")
            params.append(format_datetime(start_date_from))
        if start_date_to is not None:
            clauses.append("start_date <= ?")
            params.append(format_datetime(start_date_to))
        if location:
            clauses.append("instr(casefold(location), ?) > 0")
            params.append(location.casefold())
        if division:
            clauses.append("instr(casefold(division), ?) > 0")
            params.append(division.casefold())
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)

        where_sql = ""
        if clauses:
            where_sql = "WHERE " + " AND ".join(clauses)

        rows = self._connection.execute(
            f"SELECT document FROM tournaments {where_sql} {ORDER_BY_SQL} LIMIT ?",
            (*params, limit),
        ).fetchall()
        return [Tournament.from_document(json.loads(row["document"])) for row in rows]

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from courtplan.db.repositories import TournamentRepository
from courtplan.domain.models import Tournament
from courtplan.services.schedule_parser import ScheduleParser

logger = logging.getLogger(__name__)


def import_tournament_stream(
    stream: BinaryIO | bytes,
    file_name: str,
    *,
    parser: ScheduleParser,
    repository: TournamentRepository,
) -> Tournament:
    tournament = parser.parse_tournament(stream, file_name)
    repository.create(tournament)
    logger.info(
        "Tournament %s saved with %s games",
        tournament.id,
        len(tournament.games),
    )
    return tournament


def import_tournament_file(
    path: str | Path,
    *,
    parser: ScheduleParser,
    repository: TournamentRepository,
) -> Tournament:
    file_path = Path(path)
    with file_path.open("rb") as stream:
        return import_tournament_stream(
            stream,
            file_path.name,
            parser=parser,
            repository=repository,
        )


def import_batch_from_folder(
    folder: str | Path,
    *,
    parser: ScheduleParser,
    repository: TournamentRepository,
    recursive: bool = False,
) -> dict[str, object]:
    base_path = Path(folder)
    pattern = "**/*.xlsx" if recursive else "*.xlsx"
    files = sorted(base_path.glob(pattern)) if base_path.exists() else []

    items: list[dict[str, object]] = []
    success = 0
    error = 0

    for file_path in files:
        try:
            tournament = import_tournament_file(file_path, parser=parser, repository=repository)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Import of %s failed", file_path, exc_info=True)
            items.append(
                {
                    "path": str(file_path),
                    "status": "error",
                    "message": str(exc),
                    "tournament_id": None,
                    "games": 0,
                }
            )
            error += 1
            continue

        items.append(
            {
                "path": str(file_path),
                "status": "ok",
                "message": "OK",
                "tournament_id": tournament.id,
                "games": len(tournament.games),
            }
        )
        success += 1

    return {
        "success": success,
        "error": error,
        "items": items,
    }

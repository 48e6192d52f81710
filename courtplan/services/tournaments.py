from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime

from courtplan.db.repositories import TournamentRepository
from courtplan.domain.models import Tournament, TournamentStatus
from courtplan.settings import DEFAULT_MAX_RESULTS, MAX_RESULTS_CAP, Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TournamentListItem:
    id: str
    name: str
    start_date: datetime | None
    end_date: datetime | None
    location: str
    division: str
    description: str
    status: str
    game_count: int
    created_date: datetime


def summarize_tournament(tournament: Tournament) -> TournamentListItem:
    return TournamentListItem(
        id=tournament.id,
        name=tournament.name,
        start_date=tournament.start_date,
        end_date=tournament.end_date,
        location=tournament.location or "",
        division=tournament.division or "",
        description=tournament.description or "",
        status=tournament.status.value,
        game_count=len(tournament.games or []),
        created_date=tournament.created_date,
    )


def parse_status(value: str | None) -> TournamentStatus | None:
    if value is None:
        return None
    text = value.strip().casefold()
    for status in TournamentStatus:
        if text in (status.value.casefold(), status.name.casefold()):
            return status
    return None


def clamp_max_results(
    requested: object | None,
    cap: int = MAX_RESULTS_CAP,
    default: int = DEFAULT_MAX_RESULTS,
) -> int:
    """Turn a caller-supplied result limit into one the query service accepts."""
    if requested is None:
        return default
    try:
        value = int(str(requested).strip())
    except ValueError:
        return default
    return min(value, cap)


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


class TournamentQueryService:
    def __init__(self, repository: TournamentRepository, settings: Settings) -> None:
        self._repository = repository
        self._settings = settings

    def clamp_max_results(self, requested: object | None) -> int:
        """Clamp a caller-supplied limit with this service's configured default and cap."""
        return clamp_max_results(
            requested,
            cap=self._settings.max_results_cap,
            default=self._settings.default_max_results,
        )

    def query_tournaments(
        self,
        start_date_from: datetime | None = None,
        start_date_to: datetime | None = None,
        location: str | None = None,
        division: str | None = None,
        status: TournamentStatus | None = None,
        max_results: int | None = None,
    ) -> list[Tournament]:
        """Return tournaments matching every given filter, newest start date first.

        Location and division match case-insensitively anywhere in the stored
        value. Date bounds are inclusive. Tournaments without a start date come
        last. ``max_results`` is applied as given.
        """
        limit = self._settings.default_max_results if max_results is None else max_results
        location = _blank_to_none(location)
        division = _blank_to_none(division)
        logger.info(
            "Querying tournaments: start_date_from=%s, start_date_to=%s, location=%s, division=%s, status=%s",
            start_date_from,
            start_date_to,
            location,
            division,
            status.value if status is not None else None,
        )
        if limit < 1:
            return []

        try:
            tournaments = self._repository.search(
                start_date_from=start_date_from,
                start_date_to=start_date_to,
                location=location,
                division=division,
                status=status,
                limit=limit,
            )
        except sqlite3.Error:
            logger.error("Error retrieving tournaments", exc_info=True)
            raise

        logger.info("Retrieved %s tournaments", len(tournaments))
        return tournaments

    def tournament_by_id(self, tournament_id: str) -> Tournament | None:
        try:
            tournament = self._repository.get(tournament_id)
        except sqlite3.Error:
            logger.error("Error retrieving tournament %s", tournament_id, exc_info=True)
            raise
        if tournament is None:
            logger.warning("Tournament %s not found", tournament_id)
        return tournament

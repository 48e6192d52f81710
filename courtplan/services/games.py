from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from courtplan.domain.models import Game, Tournament


@dataclass(frozen=True)
class GameSummary:
    id: str
    tournament_id: str
    round: int
    court_number: int
    status: str
    scheduled_time: datetime | None
    pair1: str
    pair2: str
    is_our_game: bool


def _involves(game: Game, pair_id: str) -> bool:
    return game.pair1.id == pair_id or game.pair2.id == pair_id


def games_for_pair(tournaments: Iterable[Tournament] | None, pair_id: str | None) -> list[GameSummary]:
    """Return the games a pair plays in, ordered by round then court.

    ``is_our_game`` is true only when the pair plays on side 1.
    """
    if not tournaments or not pair_id:
        return []

    matches = [
        game
        for tournament in tournaments
        if tournament.games is not None
        for game in tournament.games
        if _involves(game, pair_id)
    ]
    matches.sort(key=lambda game: (game.round, game.court_number))

    return [
        GameSummary(
            id=game.id,
            tournament_id=game.tournament_id,
            round=game.round,
            court_number=game.court_number,
            status=game.status.value,
            scheduled_time=game.scheduled_time,
            pair1=game.pair1.display_name,
            pair2=game.pair2.display_name,
            is_our_game=game.pair1.id == pair_id,
        )
        for game in matches
    ]

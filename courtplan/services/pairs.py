from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from courtplan.domain.models import Pair, Tournament


@dataclass(frozen=True)
class PairSummary:
    id: str
    display_name: str
    player1_full_name: str
    player2_full_name: str


def _pair_occurrences(tournaments: Iterable[Tournament]) -> Iterable[Pair]:
    for tournament in tournaments:
        if tournament.games is None:
            continue
        for game in tournament.games:
            yield game.pair1
            yield game.pair2


def unique_pairs(tournaments: Iterable[Tournament] | None) -> list[PairSummary]:
    """Return one summary per distinct pair id, ordered by display name.

    Pairs are only considered equal when they share an id; two textually
    identical pairs parsed from different rows or files stay separate.
    """
    if not tournaments:
        return []

    seen: dict[str, Pair] = {}
    for pair in _pair_occurrences(tournaments):
        if pair is None or pair.id in seen:
            continue
        seen[pair.id] = pair

    ordered = sorted(seen.values(), key=lambda pair: pair.display_name)
    return [
        PairSummary(
            id=pair.id,
            display_name=pair.display_name,
            player1_full_name=pair.player1.full_name,
            player2_full_name=pair.player2.full_name,
        )
        for pair in ordered
    ]

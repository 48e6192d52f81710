from __future__ import annotations

from courtplan.domain.models import Game, Pair, Player, Tournament
from courtplan.services.games import games_for_pair
from courtplan.services.pairs import PairSummary, unique_pairs
from courtplan.services.schedule_parser import parse_tournament
from tests.helpers.xlsx_factory import SIMPLE_SCHEDULE, make_schedule_bytes


def _pair(pair_id: str, first: str, second: str) -> Pair:
    return Pair(id=pair_id, player1=Player(first), player2=Player(second))


def _tournament_with(*games: tuple[int, int, Pair, Pair]) -> Tournament:
    tournament = Tournament(name="Cup")
    for round_number, court_number, pair1, pair2 in games:
        tournament.add_game(
            Game(
                tournament_id=tournament.id,
                round=round_number,
                court_number=court_number,
                pair1=pair1,
                pair2=pair2,
            )
        )
    return tournament


def test_unique_pairs_handles_missing_input() -> None:
    assert unique_pairs(None) == []
    assert unique_pairs([]) == []
    assert unique_pairs([Tournament(name="Empty")]) == []


def test_unique_pairs_collapses_shared_ids_and_sorts() -> None:
    zed = _pair("p-z", "Zoe", "Yann")
    amy = _pair("p-a", "Amy", "Ben")
    tournament = _tournament_with((1, 1, zed, amy), (2, 1, amy, zed))

    pairs = unique_pairs([tournament])

    assert pairs == [
        PairSummary(id="p-a", display_name="Amy & Ben", player1_full_name="Amy", player2_full_name="Ben"),
        PairSummary(id="p-z", display_name="Zoe & Yann", player1_full_name="Zoe", player2_full_name="Yann"),
    ]


def test_unique_pairs_keeps_first_occurrence_per_id() -> None:
    original = _pair("same", "Amy", "Ben")
    renamed = _pair("same", "Zed", "Xavier")
    other = _pair("other", "Carl", "Dora")
    first = _tournament_with((1, 1, original, other))
    second = _tournament_with((1, 1, renamed, other))

    pairs = unique_pairs([first, second])

    assert [pair.display_name for pair in pairs] == ["Amy & Ben", "Carl & Dora"]


def test_unique_pairs_sorts_ordinally() -> None:
    lower = _pair("1", "alice", "bob")
    upper = _pair("2", "Zack", "Yves")

    pairs = unique_pairs([_tournament_with((1, 1, lower, upper))])

    assert [pair.id for pair in pairs] == ["2", "1"]


def test_parsed_pairs_are_not_merged_across_rows() -> None:
    tournament = parse_tournament(make_schedule_bytes(SIMPLE_SCHEDULE), "test.xlsx")

    pairs = unique_pairs([tournament])

    assert len(pairs) == 8
    assert sum(pair.display_name == "John Doe & Jane Smith" for pair in pairs) == 1


def test_games_for_pair_handles_missing_input() -> None:
    tournament = _tournament_with((1, 1, _pair("p1", "A", "B"), _pair("p2", "C", "D")))

    assert games_for_pair(None, "p1") == []
    assert games_for_pair([], "p1") == []
    assert games_for_pair([tournament], None) == []
    assert games_for_pair([tournament], "") == []
    assert games_for_pair([tournament], "missing") == []


def test_games_for_pair_orders_by_round_then_court() -> None:
    ours = _pair("p1", "Amy", "Ben")
    rival = _pair("p2", "Carl", "Dora")
    bystander = _pair("p3", "Eve", "Finn")
    tournament = _tournament_with(
        (2, 2, ours, rival),
        (1, 1, rival, ours),
        (2, 1, ours, bystander),
        (1, 2, bystander, ours),
        (1, 3, rival, bystander),
    )

    games = games_for_pair([tournament], "p1")

    assert [(game.round, game.court_number) for game in games] == [(1, 1), (1, 2), (2, 1), (2, 2)]
    assert [game.is_our_game for game in games] == [False, False, True, True]
    assert games[0].pair1 == "Carl & Dora"
    assert games[0].pair2 == "Amy & Ben"
    assert games[0].status == "Scheduled"
    assert games[0].tournament_id == tournament.id


def test_games_for_pair_spans_tournaments() -> None:
    ours = _pair("p1", "Amy", "Ben")
    first = _tournament_with((3, 1, ours, _pair("x", "C", "D")))
    second = _tournament_with((1, 4, _pair("y", "E", "F"), ours))

    games = games_for_pair([first, second], "p1")

    assert [(game.round, game.court_number) for game in games] == [(1, 4), (3, 1)]


def test_games_for_parsed_pair() -> None:
    tournament = parse_tournament(make_schedule_bytes(SIMPLE_SCHEDULE), "test.xlsx")
    pair = tournament.games[1].pair2

    games = games_for_pair([tournament], pair.id)

    assert len(games) == 1
    assert games[0].is_our_game is False
    assert games[0].pair2 == "Frank Green & Grace Harris"

"""Tournament schedule domain records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4


def new_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_datetime(value: datetime | None) -> str | None:
    """Render a datetime as fixed-width ISO text so stored values sort lexically."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="microseconds")


def parse_datetime(value: object | None) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class GameStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class TournamentStatus(str, Enum):
    UPCOMING = "Upcoming"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class Player:
    name: str
    surname: str | None = None

    @property
    def full_name(self) -> str:
        if not self.surname or not self.surname.strip():
            return self.name
        return f"{self.name} {self.surname}"

    def __str__(self) -> str:
        return self.full_name

    def to_document(self) -> dict[str, Any]:
        return {"name": self.name, "surname": self.surname}

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Player:
        return cls(name=str(data.get("name") or ""), surname=data.get("surname"))


@dataclass(frozen=True)
class Pair:
    player1: Player
    player2: Player
    id: str = field(default_factory=new_id)

    @property
    def display_name(self) -> str:
        return f"{self.player1.full_name} & {self.player2.full_name}"

    def __str__(self) -> str:
        return self.display_name

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "player1": self.player1.to_document(),
            "player2": self.player2.to_document(),
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Pair:
        return cls(
            id=str(data["id"]),
            player1=Player.from_document(data.get("player1") or {}),
            player2=Player.from_document(data.get("player2") or {}),
        )


@dataclass(frozen=True)
class Game:
    tournament_id: str
    round: int
    court_number: int
    pair1: Pair
    pair2: Pair
    scheduled_time: datetime | None = None
    status: GameStatus = GameStatus.SCHEDULED
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.round < 1:
            raise ValueError(f"Round must be positive, got {self.round}")
        if self.court_number < 1:
            raise ValueError(f"Court number must be positive, got {self.court_number}")

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "tournament_id": self.tournament_id,
            "round": self.round,
            "court_number": self.court_number,
            "pair1": self.pair1.to_document(),
            "pair2": self.pair2.to_document(),
            "scheduled_time": format_datetime(self.scheduled_time),
            "status": self.status.value,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Game:
        return cls(
            id=str(data["id"]),
            tournament_id=str(data["tournament_id"]),
            round=int(data["round"]),
            court_number=int(data["court_number"]),
            pair1=Pair.from_document(data["pair1"]),
            pair2=Pair.from_document(data["pair2"]),
            scheduled_time=parse_datetime(data.get("scheduled_time")),
            status=GameStatus(data.get("status") or GameStatus.SCHEDULED.value),
        )


@dataclass
class Tournament:
    """A tournament and its ordered schedule of games.

    Games are owned by exactly one tournament: every ``game.tournament_id``
    must equal ``self.id``. Callers change the schedule through
    :meth:`add_game` and :meth:`remove_game` and then persist the whole
    tournament again.
    """

    name: str
    blob_file_name: str = ""
    id: str = field(default_factory=new_id)
    created_date: datetime = field(default_factory=utc_now)
    start_date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = None
    division: str | None = None
    description: str | None = None
    status: TournamentStatus = TournamentStatus.UPCOMING
    games: list[Game] = field(default_factory=list)

    def __post_init__(self) -> None:
        for game in self.games:
            self._check_owner(game)

    def _check_owner(self, game: Game) -> None:
        if game.tournament_id != self.id:
            raise ValueError(
                f"Game {game.id} belongs to tournament {game.tournament_id}, not {self.id}"
            )

    def add_game(self, game: Game) -> None:
        self._check_owner(game)
        self.games.append(game)

    def remove_game(self, game_id: str) -> bool:
        remaining = [game for game in self.games if game.id != game_id]
        removed = len(remaining) != len(self.games)
        self.games = remaining
        return removed

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_date": format_datetime(self.created_date),
            "blob_file_name": self.blob_file_name,
            "start_date": format_datetime(self.start_date),
            "end_date": format_datetime(self.end_date),
            "location": self.location,
            "division": self.division,
            "description": self.description,
            "status": self.status.value,
            "games": [game.to_document() for game in self.games],
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Tournament:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            created_date=parse_datetime(data.get("created_date")) or utc_now(),
            blob_file_name=str(data.get("blob_file_name") or ""),
            start_date=parse_datetime(data.get("start_date")),
            end_date=parse_datetime(data.get("end_date")),
            location=data.get("location"),
            division=data.get("division"),
            description=data.get("description"),
            status=TournamentStatus(data.get("status") or TournamentStatus.UPCOMING.value),
            games=[Game.from_document(item) for item in data.get("games") or []],
        )

from __future__ import annotations

import io
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import PurePath
from typing import BinaryIO, Callable, Iterable

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from courtplan.domain.models import (
    Game,
    GameStatus,
    Pair,
    Player,
    Tournament,
    TournamentStatus,
    new_id,
    utc_now,
)

logger = logging.getLogger(__name__)

UNKNOWN_PLAYER_NAME = "Unknown"
METADATA_SCAN_ROWS = 5
FIRST_GAME_ROW = 2

# 0-based positions within a schedule row.
ROUND_COLUMN = 0
COURT_COLUMN = 1
SIDE_A_COLUMNS = (2, 3)
SIDE_B_COLUMNS = (6, 7)
LAST_COLUMN = 8

ROUND_PREFIXES = ("round", "runde")

DATE_FORMATS = ("%d.%m.%Y", "%d/%m/%Y", "%m/%d/%Y", "%d.%m.%y", "%Y/%m/%d")

_WHITESPACE = re.compile(r"\s+")


class ParseError(ValueError):
    """Raised when a file cannot be turned into a tournament at all."""


@dataclass(frozen=True)
class RowOutcome:
    round: int
    game: Game | None


def _cell_text(value: object | None) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    return str(value).strip()


def _normalize_text(value: object | None) -> str:
    return _WHITESPACE.sub(" ", _cell_text(value)).strip()


def parse_int(value: object | None) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = _normalize_text(value)
    if not text:
        return None
    try:
        decimal_value = Decimal(text)
    except InvalidOperation:
        return None
    if not decimal_value.is_finite() or decimal_value != decimal_value.to_integral_value():
        return None
    return int(decimal_value)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date(value: object | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = _normalize_text(value)
    if not text:
        return None
    try:
        return _naive_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_player(value: object | None) -> Player:
    text = _normalize_text(value)
    if not text:
        return Player(name=UNKNOWN_PLAYER_NAME)
    first, _, rest = text.partition(" ")
    return Player(name=first, surname=rest or None)


def build_pair(first: object | None, second: object | None) -> Pair | None:
    if not _normalize_text(first) and not _normalize_text(second):
        return None
    return Pair(player1=parse_player(first), player2=parse_player(second))


def is_blank_row(values: Iterable[object | None]) -> bool:
    return all(_normalize_text(value) == "" for value in list(values)[:4])


def round_for_row(values: list[object | None], current_round: int) -> int:
    """Return the round in effect for ``values`` given the round so far."""
    label = _normalize_text(values[ROUND_COLUMN])
    if not label.lower().startswith(ROUND_PREFIXES):
        return current_round
    for token in label.split(" ")[1:]:
        number = parse_int(token)
        if number is not None:
            return number if number > 0 else current_round
    return current_round


def parse_game_row(
    values: list[object | None],
    *,
    row_number: int,
    round_number: int,
    tournament_id: str,
) -> Game | None:
    court_number = parse_int(values[COURT_COLUMN])
    if court_number is None or court_number < 1:
        return None

    side_a = [values[idx] for idx in SIDE_A_COLUMNS]
    side_b = [values[idx] for idx in SIDE_B_COLUMNS]
    pair1 = build_pair(*side_a)
    pair2 = build_pair(*side_b)
    if pair1 is None or pair2 is None:
        logger.warning(
            "Could not parse pairs in row %s: pair1 (%s, %s), pair2 (%s, %s)",
            row_number,
            *(_normalize_text(value) for value in side_a),
            *(_normalize_text(value) for value in side_b),
        )
        return None

    return Game(
        tournament_id=tournament_id,
        round=round_number,
        court_number=court_number,
        pair1=pair1,
        pair2=pair2,
        status=GameStatus.SCHEDULED,
    )


def parse_schedule_row(
    values: list[object | None],
    *,
    row_number: int,
    current_round: int,
    tournament_id: str,
) -> RowOutcome:
    """Parse one data row, threading the round in effect through to the next row."""
    if is_blank_row(values):
        return RowOutcome(round=current_round, game=None)

    round_number = round_for_row(values, current_round)
    try:
        game = parse_game_row(
            values,
            row_number=row_number,
            round_number=round_number,
            tournament_id=tournament_id,
        )
    except Exception:  # noqa: BLE001
        logger.warning("Error parsing row %s, skipping", row_number, exc_info=True)
        game = None
    return RowOutcome(round=round_number, game=game)


def _pad(row: Iterable[object | None]) -> list[object | None]:
    values = list(row)[:LAST_COLUMN]
    values.extend([None] * (LAST_COLUMN - len(values)))
    return values


def parse_games(rows: Iterable[Iterable[object | None]], tournament_id: str) -> list[Game]:
    """Parse data rows (row 2 onward) into games."""
    games: list[Game] = []
    current_round = 1
    for row_number, row in enumerate(rows, start=FIRST_GAME_ROW):
        outcome = parse_schedule_row(
            _pad(row),
            row_number=row_number,
            current_round=current_round,
            tournament_id=tournament_id,
        )
        current_round = outcome.round
        if outcome.game is not None:
            games.append(outcome.game)
            logger.debug(
                "Parsed game: court %s, round %s, %s vs %s",
                outcome.game.court_number,
                outcome.game.round,
                outcome.game.pair1.display_name,
                outcome.game.pair2.display_name,
            )
    return games


def metadata_from_file_name(file_name: str) -> dict[str, object]:
    """Read ``Name_YYYY-MM-DD_Location_Division.ext`` style metadata.

    Returns only the fields that were found; fewer than two segments yields
    an empty mapping.
    """
    metadata: dict[str, object] = {}
    try:
        parts = [part for part in PurePath(file_name).stem.split("_") if part]
        if len(parts) < 2:
            return metadata
        metadata["name"] = parts[0]
        start_date = parse_date(parts[1])
        if start_date is not None:
            metadata["start_date"] = start_date
        if len(parts) >= 3:
            metadata["location"] = parts[2]
        if len(parts) >= 4:
            metadata["division"] = parts[3]
    except Exception:  # noqa: BLE001
        logger.warning("Could not extract metadata from file name %s", file_name, exc_info=True)
    return metadata


def _metadata_field(label: str) -> str | None:
    lowered = label.lower()
    if "tournament" in lowered or "name" in lowered:
        return "name"
    if "location" in lowered:
        return "location"
    if "date" in lowered or "start" in lowered:
        return "start_date"
    if "division" in lowered or "category" in lowered:
        return "division"
    if "description" in lowered:
        return "description"
    return None


def metadata_from_rows(rows: Iterable[Iterable[object | None]]) -> dict[str, object]:
    """Read label/value metadata from the first rows of a sheet.

    Only the first five rows are considered; column 1 holds the label and
    column 2 the value.
    """
    metadata: dict[str, object] = {}
    try:
        for index, row in enumerate(rows):
            if index >= METADATA_SCAN_ROWS:
                break
            values = _pad(row)
            label = _normalize_text(values[0])
            if not label:
                continue
            field_name = _metadata_field(label)
            if field_name is None:
                continue
            raw_value = values[1]
            if field_name == "start_date":
                parsed = parse_date(raw_value)
                if parsed is not None:
                    metadata[field_name] = parsed
                continue
            text = _normalize_text(raw_value)
            if text:
                metadata[field_name] = text
    except Exception:  # noqa: BLE001
        logger.warning("Could not extract metadata from sheet content", exc_info=True)
    return metadata


def determine_status(
    start_date: datetime | None,
    end_date: datetime | None,
    now: datetime,
) -> TournamentStatus:
    if start_date is None:
        return TournamentStatus.UPCOMING
    if now < start_date:
        return TournamentStatus.UPCOMING
    if now > (end_date or start_date):
        return TournamentStatus.COMPLETED
    return TournamentStatus.IN_PROGRESS


def _read_bytes(stream: BinaryIO | bytes | bytearray) -> bytes:
    if isinstance(stream, (bytes, bytearray)):
        return bytes(stream)
    return stream.read()


class ScheduleParser:
    """Turns a schedule workbook into a :class:`Tournament`.

    Expected layout of the first worksheet: row 1 is a header, then one game
    per row with an optional round label in column A, the court number in
    column B, side A players in C and D and side B players in G and H.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or utc_now

    def parse_tournament(self, stream: BinaryIO | bytes | bytearray, file_name: str) -> Tournament:
        try:
            tournament = self._parse(_read_bytes(stream), file_name)
        except Exception:
            logger.error("Error parsing workbook %s", file_name, exc_info=True)
            raise
        logger.info(
            "Parsed %s games from tournament %s",
            len(tournament.games),
            tournament.name,
        )
        return tournament

    def _parse(self, payload: bytes, file_name: str) -> Tournament:
        try:
            workbook = load_workbook(io.BytesIO(payload), data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
            raise ParseError(f"{file_name} is not a readable workbook") from exc

        if not workbook.worksheets:
            raise ParseError("No worksheet found in workbook")
        sheet = workbook.worksheets[0]

        fields: dict[str, object] = {"name": PurePath(file_name).stem}
        fields.update(metadata_from_file_name(file_name))
        fields.update(
            metadata_from_rows(
                sheet.iter_rows(
                    min_row=1,
                    max_row=min(METADATA_SCAN_ROWS, sheet.max_row),
                    max_col=2,
                    values_only=True,
                )
            )
        )

        tournament_id = new_id()
        games = parse_games(
            sheet.iter_rows(min_row=FIRST_GAME_ROW, max_col=LAST_COLUMN, values_only=True),
            tournament_id,
        )
        start_date = fields.get("start_date")
        return Tournament(
            id=tournament_id,
            name=str(fields["name"]),
            blob_file_name=file_name,
            start_date=start_date,
            location=fields.get("location"),
            division=fields.get("division"),
            description=fields.get("description"),
            status=determine_status(start_date, None, self._clock()),
            games=games,
        )


def parse_tournament(stream: BinaryIO | bytes | bytearray, file_name: str) -> Tournament:
    return ScheduleParser().parse_tournament(stream, file_name)

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

from courtplan.db.database import connect_from_settings
from courtplan.db.repositories import TournamentRepository
from courtplan.logging_setup import configure_logging
from courtplan.services.ingest import import_batch_from_folder
from courtplan.services.schedule_parser import ScheduleParser, parse_date
from courtplan.services.tournaments import (
    TournamentQueryService,
    parse_status,
    summarize_tournament,
)
from courtplan.settings import load_settings


def _date_argument(value: str):
    parsed = parse_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}'")
    return parsed


def _status_argument(value: str):
    status = parse_status(value)
    if status is None:
        raise argparse.ArgumentTypeError(f"Unknown tournament status '{value}'")
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="courtplan",
        description="Import tournament schedules from xlsx files and query stored tournaments.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    import_command = commands.add_parser("import", help="Import every .xlsx schedule in a folder")
    import_command.add_argument("folder", help="Folder containing schedule workbooks")
    import_command.add_argument(
        "--recursive", action="store_true", help="Also import workbooks from subfolders"
    )

    query_command = commands.add_parser("query", help="List stored tournaments")
    query_command.add_argument("--from", dest="start_date_from", type=_date_argument)
    query_command.add_argument("--to", dest="start_date_to", type=_date_argument)
    query_command.add_argument("--location")
    query_command.add_argument("--division")
    query_command.add_argument("--status", type=_status_argument)
    query_command.add_argument("--max-results", dest="max_results")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_settings()
    configure_logging(settings)
    connection = connect_from_settings(settings)
    try:
        repository = TournamentRepository(connection)
        if args.command == "import":
            report = import_batch_from_folder(
                args.folder,
                parser=ScheduleParser(),
                repository=repository,
                recursive=args.recursive,
            )
            json.dump(report, sys.stdout, indent=2)
            sys.stdout.write("\n")
            return 1 if report["error"] else 0

        service = TournamentQueryService(repository, settings)
        tournaments = service.query_tournaments(
            start_date_from=args.start_date_from,
            start_date_to=args.start_date_to,
            location=args.location,
            division=args.division,
            status=args.status,
            max_results=service.clamp_max_results(args.max_results),
        )
        items = [asdict(summarize_tournament(tournament)) for tournament in tournaments]
        json.dump(items, sys.stdout, indent=2, default=str)
        sys.stdout.write("\n")
        return 0
    finally:
        connection.close()


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import json
import logging

import pytest

from courtplan.__main__ import main
from tests.helpers.xlsx_factory import SIMPLE_SCHEDULE, make_schedule_xlsx


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "data"))
    monkeypatch.setenv("COURTPLAN_DB_PATH", str(tmp_path / "cli.db"))
    monkeypatch.delenv("COURTPLAN_LOG_LEVEL", raising=False)
    monkeypatch.delenv("COURTPLAN_MAX_RESULTS_CAP", raising=False)
    package_logger = logging.getLogger("courtplan")
    previous = package_logger.level
    yield tmp_path
    package_logger.setLevel(previous)


def test_import_then_query(cli_env, capsys) -> None:
    folder = cli_env / "schedules"
    folder.mkdir()
    make_schedule_xlsx(folder, SIMPLE_SCHEDULE, file_name="Cup_2025-03-01_York_Open.xlsx")
    make_schedule_xlsx(folder, SIMPLE_SCHEDULE, file_name="Shield_2025-05-01_Leeds.xlsx")

    assert main(["import", str(folder)]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["success"] == 2
    assert report["error"] == 0

    assert main(["query", "--location", "york"]) == 0
    items = json.loads(capsys.readouterr().out)
    assert [item["name"] for item in items] == ["Cup"]
    assert items[0]["game_count"] == 4
    assert items[0]["start_date"].startswith("2025-03-01")

    assert main(["query", "--max-results", "1"]) == 0
    items = json.loads(capsys.readouterr().out)
    assert [item["name"] for item in items] == ["Shield"]


def test_import_reports_broken_files(cli_env, capsys) -> None:
    folder = cli_env / "schedules"
    folder.mkdir()
    (folder / "broken.xlsx").write_bytes(b"not a workbook")

    assert main(["import", str(folder)]) == 1
    report = json.loads(capsys.readouterr().out)
    assert report["error"] == 1
    assert report["items"][0]["status"] == "error"


def test_query_rejects_unknown_status(cli_env) -> None:
    with pytest.raises(SystemExit):
        main(["query", "--status", "finished"])

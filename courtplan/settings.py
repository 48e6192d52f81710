from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

APP_DIR_NAME = "Courtplan"
DB_FILENAME = "courtplan.db"
DEFAULT_MAX_RESULTS = 100
MAX_RESULTS_CAP = 500


@dataclass(frozen=True)
class Settings:
    database_path: Path
    default_max_results: int = DEFAULT_MAX_RESULTS
    max_results_cap: int = MAX_RESULTS_CAP
    log_level: str = "INFO"


def get_app_data_dir() -> Path:
    """Return the per-user application data directory, creating it if needed."""
    if os.name == "nt":
        base_dir = os.environ.get("APPDATA") or os.environ.get("LOCALAPPDATA")
        root = Path(base_dir) if base_dir else Path.home() / "AppData" / "Roaming"
    else:
        root = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    app_dir = root / APP_DIR_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def _get_app_settings_path() -> Path:
    return get_app_data_dir() / "settings.json"


def _read_settings() -> dict[str, object]:
    path = _get_app_settings_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def _write_settings(data: dict[str, object]) -> None:
    path = _get_app_settings_path()
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def _int_setting(raw: object, fallback: int) -> int:
    try:
        value = int(str(raw))
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def load_settings() -> Settings:
    stored = _read_settings()

    db_path = os.environ.get("COURTPLAN_DB_PATH") or stored.get("database_path")
    database_path = Path(str(db_path)) if db_path else get_app_data_dir() / DB_FILENAME

    log_level = os.environ.get("COURTPLAN_LOG_LEVEL") or stored.get("log_level") or "INFO"

    cap_raw = os.environ.get("COURTPLAN_MAX_RESULTS_CAP") or stored.get("max_results_cap")
    max_results_cap = _int_setting(cap_raw, MAX_RESULTS_CAP) if cap_raw is not None else MAX_RESULTS_CAP

    return Settings(
        database_path=database_path,
        default_max_results=_int_setting(stored.get("default_max_results"), DEFAULT_MAX_RESULTS),
        max_results_cap=max_results_cap,
        log_level=str(log_level).upper(),
    )


def set_database_path(path: str | Path) -> None:
    settings = _read_settings()
    settings["database_path"] = str(path)
    _write_settings(settings)

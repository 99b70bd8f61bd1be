from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from .models import DailyLog, DogProfile, UserProgress, WeatherCondition, coerce_enum

logger = logging.getLogger(__name__)

PROFILE_KEY = "pawpal_profile"
LOGS_KEY = "pawpal_logs"
PROGRESS_KEY = "pawpal_progress"


class StoreError(RuntimeError):
    """A persisted record could not be decoded."""


def connect_db(db_path: str | Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )
    conn.commit()


def get_json(conn: sqlite3.Connection, key: str) -> Any | None:
    row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
    if row is None:
        return None
    try:
        return json.loads(row["value"])
    except json.JSONDecodeError as exc:
        raise StoreError(f"stored value for {key!r} is not valid JSON") from exc


def set_json(conn: sqlite3.Connection, key: str, value: Any) -> None:
    conn.execute(
        """
        INSERT INTO kv(key, value) VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value
        """,
        (key, json.dumps(value, ensure_ascii=False)),
    )
    conn.commit()


def _decode(key: str, data: Any, decoder):
    try:
        return decoder(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise StoreError(f"stored value for {key!r} has an unexpected shape: {exc}") from exc


def load_profile(conn: sqlite3.Connection) -> DogProfile | None:
    data = get_json(conn, PROFILE_KEY)
    if data is None:
        return None
    return _decode(PROFILE_KEY, data, DogProfile.from_dict)


def save_profile(conn: sqlite3.Connection, profile: DogProfile) -> None:
    set_json(conn, PROFILE_KEY, profile.to_dict())


def load_logs(conn: sqlite3.Connection) -> list[DailyLog]:
    data = get_json(conn, LOGS_KEY)
    if data is None:
        return []
    return _decode(LOGS_KEY, data, lambda items: [DailyLog.from_dict(item) for item in items])


def save_logs(conn: sqlite3.Connection, logs: list[DailyLog]) -> None:
    set_json(conn, LOGS_KEY, [log.to_dict() for log in logs])


def load_progress(conn: sqlite3.Connection) -> UserProgress:
    data = get_json(conn, PROGRESS_KEY)
    if data is None:
        return UserProgress()
    return _decode(PROGRESS_KEY, data, UserProgress.from_dict)


def save_progress(conn: sqlite3.Connection, progress: UserProgress) -> None:
    set_json(conn, PROGRESS_KEY, progress.to_dict())


def find_log(conn: sqlite3.Connection, date: str) -> DailyLog | None:
    for log in load_logs(conn):
        if log.date == date:
            return log
    return None


def upsert_log(conn: sqlite3.Connection, log: DailyLog) -> None:
    """Replace the log for ``log.date`` or append it, keeping date order of insertion."""
    logs = load_logs(conn)
    for idx, existing in enumerate(logs):
        if existing.date == log.date:
            logs[idx] = log
            break
    else:
        logs.append(log)
    save_logs(conn, logs)


def open_day(
    conn: sqlite3.Connection,
    profile: DogProfile,
    date: str,
    weather: WeatherCondition | str,
) -> DailyLog:
    """Save the profile and return the log for ``date``, creating it if needed."""
    save_profile(conn, profile)
    existing = find_log(conn, date)
    if existing is not None:
        return existing

    log = DailyLog(
        date=date,
        weather=coerce_enum(WeatherCondition, weather, "weather"),
        profile_snapshot=profile,
    )
    upsert_log(conn, log)
    logger.info("Opened new daily log for %s", date)
    return log

from dataclasses import replace
from pathlib import Path

import pytest

from pawpal.activity import log_activity
from pawpal.models import DailyLog, DogProfile, MealRecord, NutrientProfile, UserProgress, WeatherCondition
from pawpal.progress import award_xp
from pawpal.store import (
    LOGS_KEY,
    StoreError,
    connect_db,
    find_log,
    init_db,
    load_logs,
    load_profile,
    load_progress,
    open_day,
    save_progress,
    set_json,
    upsert_log,
)


def test_empty_store_defaults(tmp_path: Path) -> None:
    conn = connect_db(tmp_path / "pawpal.db")
    init_db(conn)
    assert load_profile(conn) is None
    assert load_logs(conn) == []
    assert load_progress(conn) == UserProgress(xp=0, level=1, badges=())
    conn.close()


def test_open_day_creates_once(tmp_path: Path, profile: DogProfile) -> None:
    db_path = tmp_path / "pawpal.db"
    with connect_db(db_path) as conn:
        init_db(conn)
        first = open_day(conn, profile, "2024-05-01", "Sunny")
        second = open_day(conn, profile, "2024-05-01", WeatherCondition.RAINY)

        assert first == second
        assert second.weather is WeatherCondition.SUNNY
        assert len(load_logs(conn)) == 1
        assert load_profile(conn) == profile


def test_logs_survive_reconnect(tmp_path: Path, profile: DogProfile) -> None:
    db_path = tmp_path / "pawpal.db"
    conn = connect_db(db_path)
    init_db(conn)
    log = open_day(conn, profile, "2024-05-01", WeatherCondition.HOT)
    meal = MealRecord(meal_type="SNACK", description="jerky", nutrients=NutrientProfile(calories=80, omega3=0.12))
    log = log.with_meal(meal).with_activity(log_activity(profile.weight_kg, "Intense Run", 30, time_of_day="DAY"))
    upsert_log(conn, log)
    upsert_log(conn, DailyLog(date="2024-05-02", weather=WeatherCondition.COOL, profile_snapshot=profile))
    conn.close()

    conn = connect_db(db_path)
    logs = load_logs(conn)
    conn.close()

    assert [l.date for l in logs] == ["2024-05-01", "2024-05-02"]
    assert logs[0] == log
    assert logs[0].activities[0].calories_burned == 42


def test_upsert_log_replaces_by_date(tmp_path: Path, day_log: DailyLog) -> None:
    with connect_db(tmp_path / "pawpal.db") as conn:
        init_db(conn)
        upsert_log(conn, day_log)
        upsert_log(conn, replace(day_log, ai_advice="Nice walk today!"))

        stored = find_log(conn, day_log.date)
        assert stored is not None
        assert stored.ai_advice == "Nice walk today!"
        assert len(load_logs(conn)) == 1


def test_find_log_missing_day(tmp_path: Path, day_log: DailyLog) -> None:
    with connect_db(tmp_path / "pawpal.db") as conn:
        init_db(conn)
        assert find_log(conn, day_log.date) is None
        upsert_log(conn, day_log)
        assert find_log(conn, "2024-05-02") is None


def test_progress_round_trip(tmp_path: Path) -> None:
    with connect_db(tmp_path / "pawpal.db") as conn:
        init_db(conn)
        progress = award_xp(UserProgress(), 60, log_count=3)
        save_progress(conn, progress)
        assert load_progress(conn) == progress


def test_corrupt_value_raises_store_error(tmp_path: Path) -> None:
    with connect_db(tmp_path / "pawpal.db") as conn:
        init_db(conn)
        conn.execute("INSERT INTO kv(key, value) VALUES (?, ?)", (LOGS_KEY, "{not json"))
        with pytest.raises(StoreError, match=LOGS_KEY):
            load_logs(conn)


def test_wrong_shape_raises_store_error(tmp_path: Path) -> None:
    with connect_db(tmp_path / "pawpal.db") as conn:
        init_db(conn)
        set_json(conn, LOGS_KEY, [{"weather": "Sunny"}])
        with pytest.raises(StoreError):
            load_logs(conn)

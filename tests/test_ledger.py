from datetime import datetime

import pytest

from pawpal.ledger import (
    IMAGE_ONLY_DESCRIPTION,
    history_rows,
    log_meal,
    progress_rows,
    progress_status,
    split_activities,
    sum_nutrients,
    summarize_day,
    target_progress,
)
from pawpal.models import ActivityCategory, ActivityRecord, DailyLog, MealRecord, NutrientProfile


def _meal(calories: float, **nutrients: float) -> MealRecord:
    return MealRecord(meal_type="DINNER", description="chicken and rice", nutrients=NutrientProfile(calories=calories, **nutrients))


def _activity(burned: int, minutes: float = 20, **kwargs) -> ActivityRecord:
    return ActivityRecord(ActivityCategory.LIGHT_WALK, minutes, calories_burned=burned, **kwargs)


def _epoch_ms(hour: int) -> int:
    return int(datetime(2024, 5, 1, hour, 30).timestamp() * 1000)


def test_log_meal_stamps_id_and_time() -> None:
    first = log_meal("BREAKFAST", "  kibble ", NutrientProfile(calories=300), timestamp=1_700_000_000_000)
    second = log_meal("BREAKFAST", "kibble", NutrientProfile(calories=300))

    assert first.description == "kibble"
    assert first.timestamp == 1_700_000_000_000
    assert first.id and second.id and first.id != second.id
    assert second.timestamp > 1_700_000_000_000


def test_log_meal_photo_only() -> None:
    meal = log_meal("SNACK", "", NutrientProfile(calories=40), image_url="data:image/png;base64,AAAA", time_of_day="NIGHT")

    assert meal.description == IMAGE_ONLY_DESCRIPTION
    assert meal.image_url == "data:image/png;base64,AAAA"
    assert meal.to_dict()["imageUrl"] == "data:image/png;base64,AAAA"
    assert meal.time_of_day == "NIGHT"


def test_sum_nutrients_empty() -> None:
    assert sum_nutrients([]) == NutrientProfile()


def test_sum_nutrients_adds_every_field() -> None:
    total = sum_nutrients([_meal(300, protein=20, sodium=80), _meal(150, protein=5, water=120)])
    assert total.calories == 450
    assert total.protein == 25
    assert total.sodium == 80
    assert total.water == 120


def test_summarize_day(day_log: DailyLog) -> None:
    log = day_log.with_meal(_meal(400, water=200)).with_meal(_meal(250))
    log = log.with_activity(_activity(16, 30)).with_activity(_activity(42, 30))

    stats = summarize_day(log)
    assert stats.consumed.calories == 650
    assert stats.burned == 58
    assert stats.net_calories == 592
    assert stats.activity_minutes == 60
    assert stats.water_intake == 200


def test_split_activities_prefers_explicit_time_of_day() -> None:
    morning_but_night = _activity(10, time_of_day="NIGHT", timestamp=_epoch_ms(8))
    evening = _activity(10, timestamp=_epoch_ms(19))
    afternoon = _activity(10, timestamp=_epoch_ms(17))

    day, night = split_activities([morning_but_night, evening, afternoon])
    assert day == [afternoon]
    assert night == [morning_but_night, evening]


@pytest.mark.parametrize(
    ("actual", "target", "expected"),
    [
        (79, 100, "LOW"),
        (80, 100, "OK"),
        (120, 100, "OK"),
        (121, 100, "HIGH"),
        (5, 0, "OK"),
    ],
)
def test_progress_status(actual: float, target: float, expected: str) -> None:
    assert progress_status(actual, target) == expected


def test_target_progress_caps_percent() -> None:
    assert target_progress(50, 200) == (25.0, "LOW")
    assert target_progress(300, 200) == (100.0, "HIGH")
    assert target_progress(10, 0) == (0.0, "OK")


def test_progress_rows_against_target(day_log: DailyLog) -> None:
    target = day_log.profile_snapshot.target_nutrients
    consumed = NutrientProfile(protein=target.protein, water=target.water * 2)

    rows = {row.nutrient: row for row in progress_rows(consumed, target)}
    assert set(rows) == {"protein", "fat", "carbs", "sodium", "water"}
    assert rows["protein"].status == "OK"
    assert rows["protein"].percent == 100.0
    assert rows["water"].status == "HIGH"
    assert rows["fat"].status == "LOW"
    assert rows["sodium"].unit == "mg"


def test_history_rows(day_log: DailyLog) -> None:
    first = day_log.with_meal(_meal(500, sodium=100, protein=30)).with_activity(_activity(40))
    second = DailyLog(date="2024-05-02", weather=first.weather, profile_snapshot=first.profile_snapshot)

    rows = history_rows([first, second])
    assert [r.date for r in rows] == ["2024-05-01", "2024-05-02"]
    assert rows[0].net_calories == 460
    assert rows[0].sodium == 100
    assert rows[0].protein == 30
    assert rows[1].consumed_calories == 0

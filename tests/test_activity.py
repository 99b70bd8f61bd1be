import pytest

from pawpal.activity import MET_BY_CATEGORY, calculate_burned_calories, log_activity
from pawpal.models import ActivityCategory, InvalidInput


def test_intense_run_burn() -> None:
    assert calculate_burned_calories(10.0, ActivityCategory.INTENSE_RUN, 30) == 42


def test_rest_burn_rounds_half_up() -> None:
    assert calculate_burned_calories(10.0, ActivityCategory.REST, 60) == 11


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        (ActivityCategory.REST, 5),
        (ActivityCategory.LIGHT_WALK, 16),
        (ActivityCategory.MODERATE_WALK, 21),
        (ActivityCategory.PLAY, 26),
        (ActivityCategory.INTENSE_RUN, 42),
        (ActivityCategory.OTHER, 16),
    ],
)
def test_burn_by_category(category: ActivityCategory, expected: int) -> None:
    assert calculate_burned_calories(10.0, category, 30) == expected


def test_every_category_has_a_met() -> None:
    assert set(MET_BY_CATEGORY) == set(ActivityCategory)


def test_zero_minutes_burns_nothing() -> None:
    assert calculate_burned_calories(25.0, ActivityCategory.PLAY, 0) == 0


def test_burn_accepts_category_value() -> None:
    assert calculate_burned_calories(10.0, "Intense Run", 30) == 42


@pytest.mark.parametrize(
    ("weight_kg", "category", "minutes"),
    [
        (-1.0, ActivityCategory.REST, 10),
        (0.0, ActivityCategory.REST, 10),
        (10.0, ActivityCategory.REST, -5),
        (float("inf"), ActivityCategory.REST, 10),
        (float("nan"), ActivityCategory.REST, 10),
        (10.0, ActivityCategory.REST, float("inf")),
        (10.0, ActivityCategory.REST, float("nan")),
        (10.0, "Swimming", 10),
    ],
)
def test_burn_rejects_invalid_input(weight_kg: float, category, minutes: float) -> None:
    with pytest.raises(InvalidInput):
        calculate_burned_calories(weight_kg, category, minutes)


def test_log_activity_snapshots_burn() -> None:
    record = log_activity(10.0, "Play", 45, time_of_day="NIGHT", timestamp=1_700_000_000_000)

    assert record.category is ActivityCategory.PLAY
    assert record.calories_burned == calculate_burned_calories(10.0, ActivityCategory.PLAY, 45)
    assert record.time_of_day == "NIGHT"
    assert record.timestamp == 1_700_000_000_000
    assert record.id

import pytest

from pawpal.energy import calculate_target_nutrients
from pawpal.models import ActivityCategory, DailyLog, DogProfile, WeatherCondition


@pytest.fixture
def profile() -> DogProfile:
    habits = frozenset({ActivityCategory.MODERATE_WALK})
    return DogProfile(
        name="Mochi",
        breed="Shiba Inu",
        age=3,
        weight_kg=10.0,
        habits=habits,
        target_nutrients=calculate_target_nutrients(10.0, 3, WeatherCondition.SUNNY, habits),
    )


@pytest.fixture
def day_log(profile: DogProfile) -> DailyLog:
    return DailyLog(date="2024-05-01", weather=WeatherCondition.SUNNY, profile_snapshot=profile)

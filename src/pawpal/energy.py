from __future__ import annotations

import math
from collections.abc import Iterable

from .models import ActivityCategory, InvalidInput, NutrientProfile, WeatherCondition, coerce_enum
from .rounding import round_half_away, round_int

BASELINE_ACTIVITY_FACTOR = 1.6

# Habit overrides, highest priority first. Only the first habit present in
# the profile's habit set changes the factor.
ACTIVITY_FACTOR_RULES: tuple[tuple[ActivityCategory, float], ...] = (
    (ActivityCategory.INTENSE_RUN, 2.0),
    (ActivityCategory.LIGHT_WALK, 1.4),
    (ActivityCategory.REST, 1.2),
)

SENIOR_AGE_YEARS = 7
SENIOR_ADJUSTMENT = -0.2
YOUNG_AGE_YEARS = 2
YOUNG_ADJUSTMENT = 0.5

WATER_ML_PER_KG = 60
WEATHER_WATER_MULTIPLIERS: dict[WeatherCondition, float] = {
    WeatherCondition.HOT: 1.2,
    WeatherCondition.SUNNY: 1.1,
}
INTENSE_RUN_WATER_MULTIPLIER = 1.1

# Reference amount per 1000 kcal and the number of decimals kept.
TARGET_PER_1000KCAL: dict[str, tuple[float, int]] = {
    "protein": (45.0, 0),
    "fat": (15.0, 0),
    "omega3": (1.5, 2),
    "carbs": (100.0, 0),
    "fiber": (5.0, 1),
    "sodium": (200.0, 0),
    "calcium": (1250.0, 0),
    "phosphorus": (1000.0, 0),
    "vitamin_d": (125.0, 0),
}


def _check_weight(weight_kg: float) -> None:
    if not math.isfinite(weight_kg) or weight_kg <= 0:
        raise InvalidInput("weight_kg must be a finite number greater than 0")


def _coerce_habits(habits: Iterable[ActivityCategory | str]) -> frozenset[ActivityCategory]:
    return frozenset(coerce_enum(ActivityCategory, h, "habit") for h in habits)


def calculate_rer(weight_kg: float) -> float:
    """Calculate Resting Energy Requirement (RER)."""
    _check_weight(weight_kg)
    return 70 * (weight_kg**0.75)


def activity_factor(age_years: int, habits: Iterable[ActivityCategory | str]) -> float:
    """Energy multiplier from habits (first matching rule) plus the age adjustment."""
    if age_years < 0:
        raise InvalidInput("age must be >= 0")
    habit_set = _coerce_habits(habits)

    factor = BASELINE_ACTIVITY_FACTOR
    for category, override in ACTIVITY_FACTOR_RULES:
        if category in habit_set:
            factor = override
            break

    if age_years > SENIOR_AGE_YEARS:
        factor += SENIOR_ADJUSTMENT
    if age_years < YOUNG_AGE_YEARS:
        factor += YOUNG_ADJUSTMENT
    return factor


def calculate_daily_calories(weight_kg: float, age_years: int, habits: Iterable[ActivityCategory | str]) -> int:
    """Calculate Daily Energy Requirement (DER), rounded to whole kcal."""
    return round_int(calculate_rer(weight_kg) * activity_factor(age_years, habits))


def calculate_water_target(
    weight_kg: float,
    weather: WeatherCondition | str,
    habits: Iterable[ActivityCategory | str],
) -> int:
    _check_weight(weight_kg)
    weather = coerce_enum(WeatherCondition, weather, "weather")

    water = weight_kg * WATER_ML_PER_KG
    if weather in WEATHER_WATER_MULTIPLIERS:
        water *= WEATHER_WATER_MULTIPLIERS[weather]
    if ActivityCategory.INTENSE_RUN in _coerce_habits(habits):
        water *= INTENSE_RUN_WATER_MULTIPLIER
    return round_int(water)


def calculate_target_nutrients(
    weight_kg: float,
    age_years: int,
    weather: WeatherCondition | str,
    habits: Iterable[ActivityCategory | str],
) -> NutrientProfile:
    """Daily target profile for a dog, scaled from per-1000-kcal references."""
    habit_set = _coerce_habits(habits)
    daily_calories = calculate_daily_calories(weight_kg, age_years, habit_set)
    water = calculate_water_target(weight_kg, weather, habit_set)

    scale = daily_calories / 1000
    scaled = {key: round_half_away(ref * scale, places) for key, (ref, places) in TARGET_PER_1000KCAL.items()}
    return NutrientProfile(
        calories=daily_calories,
        water=water,
        protein=int(scaled["protein"]),
        fat=int(scaled["fat"]),
        omega3=scaled["omega3"],
        carbs=int(scaled["carbs"]),
        fiber=scaled["fiber"],
        sodium=int(scaled["sodium"]),
        calcium=int(scaled["calcium"]),
        phosphorus=int(scaled["phosphorus"]),
        vitamin_d=int(scaled["vitamin_d"]),
    )

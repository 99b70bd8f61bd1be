from __future__ import annotations

import time
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from .models import ActivityRecord, DailyLog, MealRecord, MealType, NutrientProfile, TimeOfDay

NIGHT_STARTS_AT_HOUR = 18
IMAGE_ONLY_DESCRIPTION = "Food Image"
LOW_PERCENT = 80.0
HIGH_PERCENT = 120.0

# Nutrients shown against the target on the daily summary, with units.
SUMMARY_NUTRIENTS: tuple[tuple[str, str], ...] = (
    ("protein", "g"),
    ("fat", "g"),
    ("carbs", "g"),
    ("sodium", "mg"),
    ("water", "ml"),
)


@dataclass(frozen=True)
class DailyStats:
    consumed: NutrientProfile
    burned: int
    net_calories: float
    activity_minutes: float

    @property
    def water_intake(self) -> float:
        return self.consumed.water


@dataclass(frozen=True)
class ProgressRow:
    nutrient: str
    actual: float
    target: float
    unit: str
    percent: float
    status: str


@dataclass(frozen=True)
class HistoryRow:
    date: str
    consumed_calories: float
    burned: int
    net_calories: float
    sodium: float
    water: float
    protein: float


def log_meal(
    meal_type: MealType,
    description: str,
    nutrients: NutrientProfile,
    *,
    image_url: str | None = None,
    time_of_day: TimeOfDay | None = None,
    timestamp: int | None = None,
) -> MealRecord:
    """Build a MealRecord stamped with a fresh id and the logging time."""
    return MealRecord(
        meal_type=meal_type,
        description=description.strip() or IMAGE_ONLY_DESCRIPTION,
        nutrients=nutrients,
        id=uuid.uuid4().hex,
        timestamp=int(time.time() * 1000) if timestamp is None else timestamp,
        image_url=image_url,
        time_of_day=time_of_day,
    )


def sum_nutrients(meals: Iterable[MealRecord]) -> NutrientProfile:
    total = NutrientProfile()
    for meal in meals:
        total = total + meal.nutrients
    return total


def summarize_day(log: DailyLog) -> DailyStats:
    consumed = sum_nutrients(log.meals)
    burned = sum(a.calories_burned for a in log.activities)
    return DailyStats(
        consumed=consumed,
        burned=burned,
        net_calories=consumed.calories - burned,
        activity_minutes=sum(a.duration_minutes for a in log.activities),
    )


def is_night(activity: ActivityRecord) -> bool:
    if activity.time_of_day is not None:
        return activity.time_of_day == "NIGHT"
    hour = datetime.fromtimestamp(activity.timestamp / 1000).hour
    return hour >= NIGHT_STARTS_AT_HOUR


def split_activities(activities: Iterable[ActivityRecord]) -> tuple[list[ActivityRecord], list[ActivityRecord]]:
    """Return (day, night) activities, preserving logging order."""
    day: list[ActivityRecord] = []
    night: list[ActivityRecord] = []
    for activity in activities:
        (night if is_night(activity) else day).append(activity)
    return day, night


def progress_status(actual: float, target: float) -> str:
    if target <= 0:
        return "OK"
    ratio = actual * 100 / target
    if ratio < LOW_PERCENT:
        return "LOW"
    if ratio > HIGH_PERCENT:
        return "HIGH"
    return "OK"


def target_progress(actual: float, target: float) -> tuple[float, str]:
    """Percent of target reached (capped at 100) and its LOW/OK/HIGH status."""
    if target <= 0:
        return 0.0, progress_status(actual, target)
    percent = min(100.0, max(0.0, actual * 100 / target))
    return percent, progress_status(actual, target)


def progress_rows(consumed: NutrientProfile, target: NutrientProfile) -> list[ProgressRow]:
    rows: list[ProgressRow] = []
    for nutrient, unit in SUMMARY_NUTRIENTS:
        actual = getattr(consumed, nutrient)
        goal = getattr(target, nutrient)
        percent, status = target_progress(actual, goal)
        rows.append(ProgressRow(nutrient, actual, goal, unit, percent, status))
    return rows


def history_rows(logs: Sequence[DailyLog]) -> list[HistoryRow]:
    rows: list[HistoryRow] = []
    for log in logs:
        stats = summarize_day(log)
        rows.append(
            HistoryRow(
                date=log.date,
                consumed_calories=stats.consumed.calories,
                burned=stats.burned,
                net_calories=stats.net_calories,
                sodium=stats.consumed.sodium,
                water=stats.consumed.water,
                protein=stats.consumed.protein,
            )
        )
    return rows

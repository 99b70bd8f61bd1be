from __future__ import annotations

import math
import time
import uuid

from .models import ActivityCategory, ActivityRecord, InvalidInput, TimeOfDay, coerce_enum
from .rounding import round_int

# Metabolic equivalents per activity, approximated for dogs.
MET_BY_CATEGORY: dict[ActivityCategory, float] = {
    ActivityCategory.REST: 1,
    ActivityCategory.LIGHT_WALK: 3,
    ActivityCategory.MODERATE_WALK: 4,
    ActivityCategory.PLAY: 5,
    ActivityCategory.INTENSE_RUN: 8,
    ActivityCategory.OTHER: 3,
}


def calculate_burned_calories(weight_kg: float, category: ActivityCategory | str, duration_minutes: float) -> int:
    """Estimate kcal burned: MET * 3.5 * kg / 200 per minute."""
    if not math.isfinite(weight_kg) or weight_kg <= 0:
        raise InvalidInput("weight_kg must be a finite number greater than 0")
    if not math.isfinite(duration_minutes) or duration_minutes < 0:
        raise InvalidInput("duration_minutes must be a finite number >= 0")
    met = MET_BY_CATEGORY[coerce_enum(ActivityCategory, category, "activity category")]

    kcal_per_minute = met * 3.5 * weight_kg / 200
    return round_int(kcal_per_minute * duration_minutes)


def log_activity(
    weight_kg: float,
    category: ActivityCategory | str,
    duration_minutes: float,
    *,
    time_of_day: TimeOfDay | None = None,
    timestamp: int | None = None,
) -> ActivityRecord:
    """Build an ActivityRecord with its burn computed once, at logging time."""
    category = coerce_enum(ActivityCategory, category, "activity category")
    return ActivityRecord(
        category=category,
        duration_minutes=duration_minutes,
        calories_burned=calculate_burned_calories(weight_kg, category, duration_minutes),
        id=uuid.uuid4().hex,
        timestamp=int(time.time() * 1000) if timestamp is None else timestamp,
        time_of_day=time_of_day,
    )

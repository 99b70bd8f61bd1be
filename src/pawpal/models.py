from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Literal, TypeVar

TimeOfDay = Literal["DAY", "NIGHT"]
MealType = Literal["BREAKFAST", "DINNER", "SNACK"]
QuizType = Literal["STATUS", "REMINDER", "HIGHLIGHT", "TOMORROW"]

MEAL_TYPES: tuple[str, ...] = ("BREAKFAST", "DINNER", "SNACK")
QUIZ_TYPES: tuple[str, ...] = ("STATUS", "REMINDER", "HIGHLIGHT", "TOMORROW")
TIMES_OF_DAY: tuple[str, ...] = ("DAY", "NIGHT")


class InvalidInput(ValueError):
    """A precondition on a calculation or record was violated."""


class ActivityCategory(str, Enum):
    REST = "Rest"
    LIGHT_WALK = "Light Walk"
    MODERATE_WALK = "Moderate Walk"
    INTENSE_RUN = "Intense Run"
    PLAY = "Play"
    OTHER = "Other"


class WeatherCondition(str, Enum):
    SUNNY = "Sunny"
    CLOUDY = "Cloudy"
    RAINY = "Rainy"
    COOL = "Cool"
    HOT = "Hot"


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: type[E], value: Any, label: str) -> E:
    """Return ``value`` as a member of ``enum_cls`` or raise InvalidInput."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInput(f"{label} must be one of: {allowed} (got {value!r})") from None


# Persisted/LLM key for each NutrientProfile attribute.
_NUTRIENT_JSON_KEYS: dict[str, str] = {
    "protein": "protein",
    "fat": "fat",
    "omega3": "omega3",
    "carbs": "carbs",
    "fiber": "fiber",
    "calories": "calories",
    "sodium": "sodium",
    "calcium": "calcium",
    "phosphorus": "phosphorus",
    "vitamin_d": "vitaminD",
    "water": "water",
}


@dataclass(frozen=True)
class NutrientProfile:
    """Daily target or consumed amount.

    Units: protein/fat/omega3/carbs/fiber in g, calories in kcal,
    sodium/calcium/phosphorus in mg, vitamin_d in IU, water in ml.
    """

    protein: float = 0
    fat: float = 0
    omega3: float = 0
    carbs: float = 0
    fiber: float = 0
    calories: float = 0
    sodium: float = 0
    calcium: float = 0
    phosphorus: float = 0
    vitamin_d: float = 0
    water: float = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise InvalidInput(f"{f.name} must be >= 0")

    def __add__(self, other: NutrientProfile) -> NutrientProfile:
        if not isinstance(other, NutrientProfile):
            return NotImplemented
        return NutrientProfile(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})

    def to_dict(self) -> dict[str, float]:
        return {json_key: getattr(self, attr) for attr, json_key in _NUTRIENT_JSON_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NutrientProfile:
        values: dict[str, float] = {}
        for attr, json_key in _NUTRIENT_JSON_KEYS.items():
            raw = data.get(json_key, data.get(attr, 0))
            try:
                values[attr] = float(raw or 0)
            except (TypeError, ValueError):
                raise InvalidInput(f"{json_key} must be a number (got {raw!r})") from None
        return cls(**values)


@dataclass(frozen=True)
class DogProfile:
    name: str
    breed: str
    age: int
    weight_kg: float
    habits: frozenset[ActivityCategory]
    target_nutrients: NutrientProfile

    def __post_init__(self) -> None:
        if not math.isfinite(self.weight_kg) or self.weight_kg <= 0:
            raise InvalidInput("weight_kg must be a finite number greater than 0")
        if self.age < 0:
            raise InvalidInput("age must be >= 0")
        for habit in self.habits:
            if not isinstance(habit, ActivityCategory):
                raise InvalidInput(f"unknown habit: {habit!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "breed": self.breed,
            "age": self.age,
            "weight": self.weight_kg,
            # Stable order keeps persisted JSON diff-friendly.
            "habits": [h.value for h in ActivityCategory if h in self.habits],
            "targetNutrients": self.target_nutrients.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DogProfile:
        return cls(
            name=str(data.get("name", "")),
            breed=str(data.get("breed", "")),
            age=int(data.get("age", 0)),
            weight_kg=float(data.get("weight", 0)),
            habits=frozenset(coerce_enum(ActivityCategory, h, "habit") for h in data.get("habits", [])),
            target_nutrients=NutrientProfile.from_dict(data.get("targetNutrients", {})),
        )


@dataclass(frozen=True)
class ActivityRecord:
    """A logged activity; ``calories_burned`` is fixed at logging time."""

    category: ActivityCategory
    duration_minutes: float
    calories_burned: int = 0
    id: str = ""
    timestamp: int = 0
    time_of_day: TimeOfDay | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.category, ActivityCategory):
            raise InvalidInput(f"unknown activity category: {self.category!r}")
        if not math.isfinite(self.duration_minutes) or self.duration_minutes < 0:
            raise InvalidInput("duration_minutes must be a finite number >= 0")
        if self.calories_burned < 0:
            raise InvalidInput("calories_burned must be >= 0")
        if self.time_of_day is not None and self.time_of_day not in TIMES_OF_DAY:
            raise InvalidInput("time_of_day must be DAY or NIGHT")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.category.value,
            "durationMinutes": self.duration_minutes,
            "caloriesBurned": self.calories_burned,
            "timestamp": self.timestamp,
        }
        if self.time_of_day is not None:
            data["timeOfDay"] = self.time_of_day
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActivityRecord:
        return cls(
            category=coerce_enum(ActivityCategory, data.get("type"), "activity category"),
            duration_minutes=float(data.get("durationMinutes", 0)),
            calories_burned=int(data.get("caloriesBurned", 0)),
            id=str(data.get("id", "")),
            timestamp=int(data.get("timestamp", 0)),
            time_of_day=data.get("timeOfDay"),
        )


@dataclass(frozen=True)
class MealRecord:
    meal_type: MealType
    description: str
    nutrients: NutrientProfile
    id: str = ""
    timestamp: int = 0
    image_url: str | None = None
    time_of_day: TimeOfDay | None = None

    def __post_init__(self) -> None:
        if self.meal_type not in MEAL_TYPES:
            raise InvalidInput(f"meal_type must be one of: {', '.join(MEAL_TYPES)}")
        if self.time_of_day is not None and self.time_of_day not in TIMES_OF_DAY:
            raise InvalidInput("time_of_day must be DAY or NIGHT")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.meal_type,
            "description": self.description,
            "nutrients": self.nutrients.to_dict(),
            "timestamp": self.timestamp,
        }
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        if self.time_of_day is not None:
            data["timeOfDay"] = self.time_of_day
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MealRecord:
        return cls(
            meal_type=data.get("type", "SNACK"),
            description=str(data.get("description", "")),
            nutrients=NutrientProfile.from_dict(data.get("nutrients", {})),
            id=str(data.get("id", "")),
            timestamp=int(data.get("timestamp", 0)),
            image_url=data.get("imageUrl"),
            time_of_day=data.get("timeOfDay"),
        )


@dataclass(frozen=True)
class DailyLog:
    date: str
    weather: WeatherCondition
    profile_snapshot: DogProfile
    meals: tuple[MealRecord, ...] = ()
    activities: tuple[ActivityRecord, ...] = ()
    ai_advice: str | None = None
    quiz_completed: bool = False

    def with_meal(self, meal: MealRecord) -> DailyLog:
        return replace(self, meals=(*self.meals, meal))

    def with_activity(self, activity: ActivityRecord) -> DailyLog:
        return replace(self, activities=(*self.activities, activity))

    def with_advice(self, advice: str) -> DailyLog:
        return replace(self, ai_advice=advice)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "date": self.date,
            "weather": self.weather.value,
            "profileSnapshot": self.profile_snapshot.to_dict(),
            "meals": [m.to_dict() for m in self.meals],
            "activities": [a.to_dict() for a in self.activities],
            "quizCompleted": self.quiz_completed,
        }
        if self.ai_advice is not None:
            data["aiAdvice"] = self.ai_advice
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyLog:
        return cls(
            date=str(data["date"]),
            weather=coerce_enum(WeatherCondition, data.get("weather"), "weather"),
            profile_snapshot=DogProfile.from_dict(data["profileSnapshot"]),
            meals=tuple(MealRecord.from_dict(m) for m in data.get("meals", [])),
            activities=tuple(ActivityRecord.from_dict(a) for a in data.get("activities", [])),
            ai_advice=data.get("aiAdvice"),
            quiz_completed=bool(data.get("quizCompleted", False)),
        )


@dataclass(frozen=True)
class QuizOption:
    id: str
    text: str
    is_correct: bool


@dataclass(frozen=True)
class QuizQuestion:
    type: QuizType
    question: str
    options: tuple[QuizOption, ...]
    correct_message: str
    wrong_message: str

    def __post_init__(self) -> None:
        if self.type not in QUIZ_TYPES:
            raise InvalidInput(f"quiz type must be one of: {', '.join(QUIZ_TYPES)}")
        if len(self.options) < 2:
            raise InvalidInput("a quiz needs at least two options")
        if sum(1 for o in self.options if o.is_correct) != 1:
            raise InvalidInput("a quiz needs exactly one correct option")

    def option(self, option_id: str) -> QuizOption:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        raise InvalidInput(f"unknown quiz option: {option_id!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuizQuestion:
        return cls(
            type=data.get("type"),
            question=str(data.get("question", "")),
            options=tuple(
                QuizOption(id=str(o["id"]), text=str(o["text"]), is_correct=bool(o["isCorrect"]))
                for o in data.get("options", [])
            ),
            correct_message=str(data.get("correctMessage", "")),
            wrong_message=str(data.get("wrongMessage", "")),
        )


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    icon: str
    description: str
    date_earned: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "description": self.description,
            "dateEarned": self.date_earned,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Badge:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            icon=str(data.get("icon", "")),
            description=str(data.get("description", "")),
            date_earned=str(data.get("dateEarned", "")),
        )


@dataclass(frozen=True)
class UserProgress:
    xp: int = 0
    level: int = 1
    badges: tuple[Badge, ...] = field(default_factory=tuple)

    def has_badge(self, badge_id: str) -> bool:
        return any(b.id == badge_id for b in self.badges)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["badges"] = [b.to_dict() for b in self.badges]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProgress:
        return cls(
            xp=int(data.get("xp", 0)),
            level=int(data.get("level", 1)),
            badges=tuple(Badge.from_dict(b) for b in data.get("badges", [])),
        )

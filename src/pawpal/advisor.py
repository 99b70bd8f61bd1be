"""Gemini-backed commentary: food estimates, daily/long-term advice, quizzes.

Every public call returns a fixed fallback when the model is unavailable or
answers with something unusable, so callers never handle remote failures.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from io import BytesIO
from typing import Any

import google.generativeai as genai
import PIL.Image

from .ledger import summarize_day
from .models import DailyLog, NutrientProfile, QuizOption, QuizQuestion
from .settings import DEFAULT_MODEL, Settings

logger = logging.getLogger(__name__)

FALLBACK_FOOD_NUTRIENTS = NutrientProfile(
    protein=5,
    fat=3,
    omega3=0.1,
    carbs=10,
    fiber=1,
    calories=100,
    sodium=20,
    calcium=50,
    phosphorus=40,
    vitamin_d=10,
    water=0,
)
DAILY_ADVICE_EMPTY = "Great job today! 今天過得很棒喔！"
DAILY_ADVICE_FALLBACK = "Have a happy day! 今天也要開開心心喔！🐶"
LONG_TERM_ADVICE_EMPTY = "Keep watching the long-term trends! 持續觀察寶貝的長期趨勢！"
LONG_TERM_ADVICE_FALLBACK = "Consistency is key to health! 長期保持均衡飲食，是健康的關鍵喔！"
FALLBACK_QUIZ = QuizQuestion(
    type="HIGHLIGHT",
    question="What is the best part of today? 今天最值得鼓勵的地方是哪一個？",
    options=(
        QuizOption(id="1", text="Logged carefully 用心記錄生活", is_correct=True),
        QuizOption(id="2", text="Balanced Diet 飲食均衡", is_correct=False),
        QuizOption(id="3", text="Good Activity 活動充足", is_correct=False),
    ),
    correct_message="Well done, clearly grasped today's status. 做得很好，清楚掌握今天的狀態。",
    wrong_message="Close, but good direction. 差一點點，但方向很好，明天一起調整。",
)

LONG_TERM_WINDOW_DAYS = 7

NUTRIENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "protein": {"type": "number", "description": "Protein in grams"},
        "fat": {"type": "number", "description": "Total fat in grams"},
        "omega3": {"type": "number", "description": "Omega-3 fatty acids in grams"},
        "carbs": {"type": "number", "description": "Carbohydrates in grams"},
        "fiber": {"type": "number", "description": "Dietary fiber in grams"},
        "calories": {"type": "number", "description": "Energy in kcal"},
        "sodium": {"type": "number", "description": "Sodium in mg"},
        "calcium": {"type": "number", "description": "Calcium in mg"},
        "phosphorus": {"type": "number", "description": "Phosphorus in mg"},
        "vitaminD": {"type": "number", "description": "Vitamin D in IU"},
    },
    "required": [
        "protein", "fat", "omega3", "carbs", "fiber", "calories",
        "sodium", "calcium", "phosphorus", "vitaminD",
    ],
}

QUIZ_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": ["STATUS", "REMINDER", "HIGHLIGHT", "TOMORROW"]},
        "question": {"type": "string"},
        "options": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "text": {"type": "string"},
                    "isCorrect": {"type": "boolean"},
                },
                "required": ["id", "text", "isCorrect"],
            },
        },
        "correctMessage": {"type": "string"},
        "wrongMessage": {"type": "string"},
    },
    "required": ["type", "question", "options", "correctMessage", "wrongMessage"],
}

FOOD_SYSTEM_INSTRUCTION = (
    "You are a veterinary nutritionist AI. Analyze food images or text descriptions for dogs. "
    "Return estimated nutritional values based on standard dog food composition data. "
    "If specific amounts aren't given, estimate a reasonable single serving for a medium dog "
    "(e.g., 1 cup dry food or 1 can wet food)."
)
FOOD_PROMPT = (
    "Analyze this dog food. Provide estimated nutritional values for a typical serving size "
    "if not specified. Strict JSON output."
)

DAILY_ADVICE_PROMPT = """
Analyze today's dog stats:
Target Calories: {target_calories}
Net Calories (Eaten - Burned): {net_calories}
Protein Eaten: {protein}g (Target: {target_protein}g)
Sodium Eaten: {sodium}mg (Target: {target_sodium}mg)
Water Calculated Need: {target_water}ml

Provide a cute, supportive, one-sentence health summary.
OUTPUT FORMAT: Bilingual - English first, followed by Traditional Chinese translation.
Tone: Mature, Relaxed, Comforting.
Examples:
- "Eating well today! Keep it up. (今天吃得很好！繼續保持。)"
- "Protein is a bit low, maybe some meat tomorrow? (蛋白質稍微低了點，明天加一點肉會更棒。)"
"""

LONG_TERM_ADVICE_PROMPT = """
Analyze the last 7 days of dog health data: {summary}.
Provide a gentle, long-term health advice based on trends.
OUTPUT FORMAT: Bilingual - English first, followed by Traditional Chinese translation.
Tone: Mature, Relaxed.
Example: "Calorie intake is slightly high lately, maybe add a bit more walking. (最近熱量稍高，可以增加一點散步時間，體態會更棒。)"
"""

QUIZ_PROMPT = """
Based on this data:
Target Cals: {target_calories}, Net: {net_calories}
Target Water: {target_water}, Actual: {water}
Target Sodium: {target_sodium}, Actual: {sodium}
Activity Minutes: {activity_minutes}

Generate 1 Daily Quiz Question in JSON.
Select ONE of these 4 types that fits today best:

1. STATUS (Understanding Today): Ask about a metric (High/Low/Just Right).
   Tone: Neutral, straightforward.
   Ex: "Is today's water intake high, low, or just right? (今天的水分攝取，落在什麼狀態？)"

2. REMINDER (Gentle Hint): Identify what needs attention.
   Tone: Gentle teacher, light reminder.
   Ex: "Which area needs a small adjustment? (今天的營養素裡，哪一項比較接近需要微調？)"

3. HIGHLIGHT (Encouragement): Identify what went well.
   Tone: Stable, encouraging.
   Ex: "What is the best part of today? (今天最值得鼓勵的地方是哪一個？)"

4. TOMORROW (Future Focus): Goal for tomorrow.
   Tone: Mature, life-oriented.
   Ex: "What should we focus on tomorrow? (根據今天的情況，明天最值得留意的是？)"

STRICT GUIDELINES:
- Language: Bilingual (English + Traditional Chinese).
- Tone: "Mature Cute", Relaxed, "Just right". NOT childish, NOT scolding.
- Exactly one option has isCorrect = true.
- Correct Message: "Well done, clearly grasped today's status. (做得很好，清楚掌握今天的狀態。)"
- Wrong Message: "Close, but good direction. (差一點點，但方向很好，明天一起調整。)"
"""

ModelFactory = Callable[[str | None], Any]


class AdvisorUnavailable(RuntimeError):
    pass


def build_daily_advice_prompt(log: DailyLog, target: NutrientProfile) -> str:
    stats = summarize_day(log)
    return DAILY_ADVICE_PROMPT.format(
        target_calories=target.calories,
        net_calories=stats.net_calories,
        protein=stats.consumed.protein,
        target_protein=target.protein,
        sodium=stats.consumed.sodium,
        target_sodium=target.sodium,
        target_water=target.water,
    )


def build_long_term_prompt(logs: Sequence[DailyLog]) -> str:
    summary = []
    for log in logs[-LONG_TERM_WINDOW_DAYS:]:
        stats = summarize_day(log)
        summary.append({"date": log.date, "net": stats.net_calories, "sodium": stats.consumed.sodium})
    return LONG_TERM_ADVICE_PROMPT.format(summary=json.dumps(summary, ensure_ascii=False))


def build_quiz_prompt(log: DailyLog, target: NutrientProfile) -> str:
    stats = summarize_day(log)
    return QUIZ_PROMPT.format(
        target_calories=target.calories,
        net_calories=stats.net_calories,
        target_water=target.water,
        water=stats.water_intake,
        target_sodium=target.sodium,
        sodium=stats.consumed.sodium,
        activity_minutes=stats.activity_minutes,
    )


class Advisor:
    """Thin wrapper over a Gemini model with per-call fallbacks.

    ``model_factory`` receives an optional system instruction and returns an
    object exposing ``generate_content``; it defaults to a configured
    ``genai.GenerativeModel``.
    """

    def __init__(
        self,
        api_key: str = "",
        model_name: str = DEFAULT_MODEL,
        model_factory: ModelFactory | None = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._model_factory = model_factory or self._gemini_model

    @classmethod
    def from_settings(cls, settings: Settings) -> Advisor:
        return cls(api_key=settings.api_key, model_name=settings.model_name)

    def _gemini_model(self, system_instruction: str | None) -> Any:
        if not self.api_key:
            raise AdvisorUnavailable("no Gemini API key configured")
        genai.configure(api_key=self.api_key)
        return genai.GenerativeModel(self.model_name, system_instruction=system_instruction)

    def _generate(self, contents: Any, schema: dict[str, Any] | None = None, system_instruction: str | None = None) -> str:
        model = self._model_factory(system_instruction)
        if schema is None:
            response = model.generate_content(contents)
        else:
            config = genai.GenerationConfig(response_mime_type="application/json", response_schema=schema)
            response = model.generate_content(contents, generation_config=config)
        return response.text or ""

    def analyze_food(self, description: str, image_bytes: bytes | None = None) -> NutrientProfile:
        """Estimate nutrients for one serving; water is always 0 for food."""
        contents: list[Any] = [FOOD_PROMPT]
        if description:
            contents.append(f"Description: {description}")
        try:
            if image_bytes:
                contents.append(PIL.Image.open(BytesIO(image_bytes)))
            text = self._generate(contents, NUTRIENT_SCHEMA, FOOD_SYSTEM_INSTRUCTION)
            if not text:
                raise AdvisorUnavailable("no data returned")
            data = json.loads(text)
            data["water"] = 0
            return NutrientProfile.from_dict(data)
        except Exception as exc:
            logger.warning("Food analysis failed: %s", exc)
            return FALLBACK_FOOD_NUTRIENTS

    def daily_advice(self, log: DailyLog, target: NutrientProfile) -> str:
        try:
            text = self._generate(build_daily_advice_prompt(log, target))
        except Exception as exc:
            logger.warning("Daily advice failed: %s", exc)
            return DAILY_ADVICE_FALLBACK
        return text.strip() or DAILY_ADVICE_EMPTY

    def long_term_advice(self, logs: Sequence[DailyLog]) -> str:
        try:
            text = self._generate(build_long_term_prompt(logs))
        except Exception as exc:
            logger.warning("Long-term advice failed: %s", exc)
            return LONG_TERM_ADVICE_FALLBACK
        return text.strip() or LONG_TERM_ADVICE_EMPTY

    def daily_quiz(self, log: DailyLog, target: NutrientProfile) -> QuizQuestion:
        try:
            text = self._generate(build_quiz_prompt(log, target), QUIZ_SCHEMA)
            if not text:
                raise AdvisorUnavailable("failed to generate quiz")
            return QuizQuestion.from_dict(json.loads(text))
        except Exception as exc:
            logger.warning("Quiz generation failed: %s", exc)
            return FALLBACK_QUIZ

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from .models import Badge, DailyLog, InvalidInput, QuizQuestion, UserProgress

XP_PER_LEVEL = 100
QUIZ_CORRECT_XP = 50
QUIZ_PARTICIPATION_XP = 10

# (logged days required, badge id, name, icon, description)
STREAK_BADGES: tuple[tuple[int, str, str, str, str], ...] = (
    (3, "streak3", "3 Days", "🌱", "3 days consistency"),
    (7, "streak7", "1 Week", "🌿", "1 week consistency"),
    (30, "streak30", "1 Month", "🌳", "1 month consistency"),
)


def level_for_xp(xp: int) -> int:
    return xp // XP_PER_LEVEL + 1


def award_xp(progress: UserProgress, amount: int, log_count: int, now: datetime | None = None) -> UserProgress:
    """Add XP, recompute the level and grant any streak badge now reached."""
    if amount < 0:
        raise InvalidInput("xp amount must be >= 0")
    earned_at = (now or datetime.now(timezone.utc)).isoformat()

    badges = list(progress.badges)
    for days, badge_id, name, icon, description in STREAK_BADGES:
        if log_count >= days and not progress.has_badge(badge_id):
            badges.append(Badge(badge_id, name, icon, description, earned_at))

    xp = progress.xp + amount
    return UserProgress(xp=xp, level=level_for_xp(xp), badges=tuple(badges))


def answer_quiz(log: DailyLog, quiz: QuizQuestion, option_id: str) -> tuple[DailyLog, int, str]:
    """Mark the day's quiz done; return the log, XP earned and feedback message."""
    chosen = quiz.option(option_id)
    completed = replace(log, quiz_completed=True)
    if chosen.is_correct:
        return completed, QUIZ_CORRECT_XP, quiz.correct_message
    return completed, QUIZ_PARTICIPATION_XP, quiz.wrong_message

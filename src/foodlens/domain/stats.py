"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Stats:
    """Summary totals over a set of meal logs."""

    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    total_xp: int = 0
    meal_count: int = 0
    average_health_score: float = 0.0
    distinct_active_days: int = 0


@dataclass(frozen=True)
class DailyTotals:
    """Calories and XP logged on a single day."""

    day: date
    calories: float
    xp: int

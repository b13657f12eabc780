"""Domain models for the FoodLens tracker."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from foodlens.domain.bmi import BMICategory, classify, compute_bmi
from foodlens.domain.progression import BadgeId, level_for_xp


@dataclass(frozen=True)
class Profile:
    """The single user profile with progression state and measurements."""

    username: str = ""
    email: str = ""
    daily_calories: int = 2200
    activity_level: str | None = None
    age: int | None = None
    total_xp: int = 0
    badges: tuple[BadgeId, ...] = ()
    streak_length: int = 0
    last_qualifying_date: date | None = None
    weight: float | None = None
    weight_unit: str = "kg"
    height: float | None = None
    height_unit: str = "cm"

    @property
    def current_level(self) -> int:
        """Level derived from total XP."""
        return level_for_xp(self.total_xp)

    @property
    def bmi(self) -> float | None:
        """BMI for the current measurements, or None when incomplete."""
        if not self.weight or not self.height:
            return None
        return compute_bmi(self.weight, self.height, self.weight_unit, self.height_unit)

    @property
    def bmi_category(self) -> BMICategory | None:
        """BMI category, present exactly when ``bmi`` is."""
        bmi = self.bmi
        return classify(bmi) if bmi is not None else None


@dataclass(frozen=True)
class CandidateFood:
    """A food selected for logging, from the catalog, AI or manual entry."""

    dish_name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    health_score: int


@dataclass(frozen=True)
class LogRecord:
    """An immutable meal log entry."""

    id: UUID
    timestamp: datetime
    dish_name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    health_score: int
    xp_awarded: int

"""Profile lifecycle and measurement updates."""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date

from foodlens.domain.bmi import HEIGHT_UNITS, WEIGHT_UNITS
from foodlens.domain.errors import InvalidMeasurement
from foodlens.domain.models import Profile
from foodlens.domain.streaks import StreakState, effective_streak
from foodlens.domain.units import feet_inches_to_cm
from foodlens.services.tracking import LogRepository, ProfileRepository

_logger = logging.getLogger(__name__)


@dataclass
class ProfileService:
    """Application service for the user profile."""

    repository: ProfileRepository
    log_repository: LogRepository
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get_profile(self) -> Profile:
        """Return the stored profile or a fresh default."""
        return self.repository.get_profile() or Profile()

    def onboard(  # noqa: PLR0913
        self,
        *,
        username: str = "",
        email: str = "",
        daily_calories: int = 2200,
        activity_level: str | None = None,
        age: int | None = None,
        weight: float | None = None,
        weight_unit: str = "kg",
        height: float | None = None,
        height_unit: str = "cm",
        feet: int | None = None,
        inches: int | None = None,
    ) -> Profile:
        """Create a fresh profile from onboarding answers."""
        profile = Profile(
            username=username,
            email=email,
            daily_calories=daily_calories,
            activity_level=activity_level,
            age=age,
        )
        if weight is not None or height is not None or feet is not None:
            profile = _with_measurements(
                profile, weight, weight_unit, height, height_unit, feet, inches
            )
        with self.lock:
            self.repository.save_profile(profile)
        _logger.info("Profile created for %s", username or "anonymous user")
        return profile

    def update_details(self, **changes: object) -> Profile:
        """Update editable profile details."""
        allowed = {"username", "email", "daily_calories", "activity_level", "age"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unsupported profile fields: {sorted(unknown)}")
        with self.lock:
            profile = replace(self.get_profile(), **changes)
            self.repository.save_profile(profile)
        return profile

    def update_measurements(  # noqa: PLR0913
        self,
        weight: float | None,
        weight_unit: str = "kg",
        height: float | None = None,
        height_unit: str = "cm",
        feet: int | None = None,
        inches: int | None = None,
    ) -> Profile:
        """Replace weight and height; BMI follows from the new values."""
        with self.lock:
            profile = _with_measurements(
                self.get_profile(),
                weight,
                weight_unit,
                height,
                height_unit,
                feet,
                inches,
            )
            self.repository.save_profile(profile)
        return profile

    def reset_progress(self) -> Profile:
        """Clear XP, badges and streak, keeping details and measurements."""
        with self.lock:
            profile = replace(
                self.get_profile(),
                total_xp=0,
                badges=(),
                streak_length=0,
                last_qualifying_date=None,
            )
            self.repository.save_profile(profile)
        _logger.info("Progress reset")
        return profile

    def reset_all(self) -> None:
        """Delete the profile and every meal log."""
        with self.lock:
            self.log_repository.clear_logs()
            self.repository.delete_profile()
        _logger.info("All data reset")

    def current_streak(self, today: date) -> int:
        """Streak as displayed on ``today``."""
        profile = self.get_profile()
        return effective_streak(
            StreakState(profile.streak_length, profile.last_qualifying_date), today
        )


def _with_measurements(  # noqa: PLR0913
    profile: Profile,
    weight: float | None,
    weight_unit: str,
    height: float | None,
    height_unit: str,
    feet: int | None,
    inches: int | None,
) -> Profile:
    if weight_unit not in WEIGHT_UNITS:
        raise InvalidMeasurement(f"Unsupported weight unit: {weight_unit}")
    if height_unit not in HEIGHT_UNITS:
        raise InvalidMeasurement(f"Unsupported height unit: {height_unit}")
    if height_unit == "ft" and feet is not None:
        height = feet_inches_to_cm(feet, inches or 0)
    if weight is None or weight <= 0:
        raise InvalidMeasurement("Weight must be a positive number")
    if height is None or height <= 0:
        raise InvalidMeasurement("Height must be a positive number")
    return replace(
        profile,
        weight=weight,
        weight_unit=weight_unit,
        height=height,
        height_unit=height_unit,
    )

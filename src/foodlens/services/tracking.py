"""Meal logging and progression tracking."""

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Protocol
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from foodlens.domain.errors import InvalidFoodData, StoreUnavailable
from foodlens.domain.models import CandidateFood, LogRecord, Profile
from foodlens.domain.progression import (
    BadgeId,
    evaluate_badges,
    xp_for_health_score,
)
from foodlens.domain.streaks import StreakState, day_qualifies, transition
from foodlens.services.stats import filter_logs

_logger = logging.getLogger(__name__)

MAX_HEALTH_SCORE = 100


class ProfileRepository(Protocol):
    """Persistence interface for the single user profile."""

    def get_profile(self) -> Profile | None:
        """Return the stored profile, if any."""

    def save_profile(self, profile: Profile) -> None:
        """Replace the stored profile."""

    def delete_profile(self) -> None:
        """Remove the stored profile."""


class LogRepository(Protocol):
    """Persistence interface for meal log records."""

    def list_logs(self) -> list[LogRecord]:
        """Return all log records in insertion order."""

    def append_log(self, record: LogRecord) -> None:
        """Append a log record."""

    def get_log(self, log_id: UUID) -> LogRecord | None:
        """Return a log record by id."""

    def delete_log(self, log_id: UUID) -> bool:
        """Delete a log record by id and report whether it existed."""

    def clear_logs(self) -> None:
        """Remove every log record."""


@dataclass(frozen=True)
class MealLogResult:
    """Outcome of logging a meal."""

    profile: Profile
    record: LogRecord
    newly_unlocked: tuple[BadgeId, ...]


def validate_food(food: CandidateFood) -> None:
    """Raise InvalidFoodData when the candidate cannot be logged."""
    if not 0 <= food.health_score <= MAX_HEALTH_SCORE:
        raise InvalidFoodData(
            f"Health score must be between 0 and 100, got {food.health_score}"
        )
    macros = {
        "calories": food.calories,
        "protein": food.protein,
        "carbs": food.carbs,
        "fat": food.fat,
    }
    for name, value in macros.items():
        if value < 0:
            raise InvalidFoodData(f"{name} must not be negative, got {value}")


def log_meal(
    profile: Profile,
    food: CandidateFood,
    *,
    today: date,
    now: datetime,
    day_logs: Sequence[LogRecord] = (),
) -> MealLogResult:
    """Apply a meal to the profile without touching any store.

    ``day_logs`` are the records already logged on ``today``; the new record
    is counted with them when deciding whether the day qualifies.
    """
    validate_food(food)
    xp = xp_for_health_score(food.health_score)
    record = LogRecord(
        id=uuid4(),
        timestamp=now,
        dish_name=food.dish_name,
        calories=food.calories,
        protein=food.protein,
        carbs=food.carbs,
        fat=food.fat,
        health_score=food.health_score,
        xp_awarded=xp,
    )
    qualifies = day_qualifies(
        [log.health_score for log in day_logs] + [record.health_score]
    )
    streak = transition(
        StreakState(profile.streak_length, profile.last_qualifying_date),
        today,
        qualifies,
    )
    new_total_xp = profile.total_xp + xp
    evaluation = evaluate_badges(profile.badges, new_total_xp, streak.length)
    updated = replace(
        profile,
        total_xp=new_total_xp,
        badges=evaluation.badges,
        streak_length=streak.length,
        last_qualifying_date=streak.last_qualifying_date,
    )
    return MealLogResult(
        profile=updated, record=record, newly_unlocked=evaluation.newly_unlocked
    )


@dataclass
class TrackingService:
    """Service that logs meals against the stored profile."""

    profile_repository: ProfileRepository
    log_repository: LogRepository
    timezone_name: str = "UTC"
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def log_meal(self, food: CandidateFood, now: datetime) -> MealLogResult:
        """Log a meal, persist the record and updated profile, and return both."""
        validate_food(food)
        tz = ZoneInfo(self.timezone_name)
        today = now.astimezone(tz).date()
        with self.lock:
            profile = self.profile_repository.get_profile() or Profile()
            day_logs = [
                log
                for log in self.log_repository.list_logs()
                if log.timestamp.astimezone(tz).date() == today
            ]
            result = log_meal(profile, food, today=today, now=now, day_logs=day_logs)
            self.log_repository.append_log(result.record)
            try:
                self.profile_repository.save_profile(result.profile)
            except StoreUnavailable:
                _logger.exception(
                    "Profile save failed, removing log %s", result.record.id
                )
                self.log_repository.delete_log(result.record.id)
                raise

        _logger.info(
            "Meal logged: dish=%s xp=%s total_xp=%s streak=%s unlocked=%s",
            food.dish_name,
            result.record.xp_awarded,
            result.profile.total_xp,
            result.profile.streak_length,
            [badge.value for badge in result.newly_unlocked],
        )
        return result

    def list_logs(
        self, start: date | None = None, end: date | None = None
    ) -> list[LogRecord]:
        """Return logs inside an optional inclusive date range."""
        logs = self.log_repository.list_logs()
        if start is None and end is None:
            return logs
        return filter_logs(logs, start, end, ZoneInfo(self.timezone_name))

    def get_log(self, log_id: UUID) -> LogRecord | None:
        """Return a single log record, if it exists."""
        return self.log_repository.get_log(log_id)

    def delete_log(self, log_id: UUID) -> bool:
        """Delete a log record.

        XP, badges and streak earned by the record are kept.
        """
        with self.lock:
            return self.log_repository.delete_log(log_id)

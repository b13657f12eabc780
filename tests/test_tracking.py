"""Tests for meal logging and the tracking service."""

from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

from foodlens.adapters.document_repositories import (
    DocumentLogRepository,
    DocumentProfileRepository,
)
from foodlens.domain.errors import InvalidFoodData, StoreUnavailable
from foodlens.domain.models import CandidateFood, LogRecord, Profile
from foodlens.domain.progression import BadgeId
from foodlens.services.tracking import TrackingService, log_meal
from tests.conftest import InMemoryDocumentStore

NOW = datetime(2024, 3, 10, 12, 30, tzinfo=UTC)
TODAY = NOW.date()
YESTERDAY = TODAY - timedelta(days=1)

SALAD = CandidateFood(
    dish_name="Greek Salad",
    calories=210,
    protein=6,
    carbs=10,
    fat=17,
    health_score=82,
)
FRIES = CandidateFood(
    dish_name="French Fries",
    calories=365,
    protein=4,
    carbs=48,
    fat=17,
    health_score=18,
)


def _record(health_score: int, timestamp: datetime = NOW) -> LogRecord:
    return LogRecord(
        id=uuid4(),
        timestamp=timestamp,
        dish_name="Earlier meal",
        calories=100,
        protein=1,
        carbs=1,
        fat=1,
        health_score=health_score,
        xp_awarded=0,
    )


def test_log_meal_awards_xp_and_first_badge() -> None:
    result = log_meal(Profile(total_xp=20), SALAD, today=TODAY, now=NOW)

    assert result.record.xp_awarded == 41
    assert result.record.timestamp == NOW
    assert result.profile.total_xp == 61
    assert result.profile.current_level == 1
    assert result.newly_unlocked == (BadgeId.FIRST_50,)
    assert result.profile.badges == (BadgeId.FIRST_50,)


def test_log_meal_levels_up_with_total_xp() -> None:
    result = log_meal(Profile(total_xp=90), SALAD, today=TODAY, now=NOW)

    assert result.profile.current_level == 2


def test_log_meal_extends_streak_and_unlocks_streak_badge() -> None:
    profile = Profile(streak_length=6, last_qualifying_date=YESTERDAY)

    result = log_meal(profile, SALAD, today=TODAY, now=NOW)

    assert result.profile.streak_length == 7
    assert result.profile.last_qualifying_date == TODAY
    assert BadgeId.STREAK_7 in result.newly_unlocked


def test_unhealthy_meal_counts_with_earlier_healthy_meal_of_the_day() -> None:
    profile = Profile(streak_length=2, last_qualifying_date=YESTERDAY)

    result = log_meal(
        profile, FRIES, today=TODAY, now=NOW, day_logs=[_record(health_score=75)]
    )

    assert result.profile.streak_length == 3
    assert result.profile.last_qualifying_date == TODAY


def test_unhealthy_meal_breaks_old_streak() -> None:
    profile = Profile(streak_length=5, last_qualifying_date=TODAY - timedelta(days=3))

    result = log_meal(profile, FRIES, today=TODAY, now=NOW)

    assert result.profile.streak_length == 0
    assert result.profile.last_qualifying_date == TODAY - timedelta(days=3)


def test_log_meal_does_not_mutate_input_profile() -> None:
    profile = Profile(total_xp=10)

    log_meal(profile, SALAD, today=TODAY, now=NOW)

    assert profile.total_xp == 10
    assert profile.badges == ()


@pytest.mark.parametrize(
    "food",
    [
        replace(SALAD, health_score=101),
        replace(SALAD, health_score=-1),
        replace(SALAD, calories=-1),
        replace(SALAD, protein=-0.5),
        replace(SALAD, carbs=-2),
        replace(SALAD, fat=-3),
    ],
)
def test_log_meal_rejects_invalid_food(food: CandidateFood) -> None:
    with pytest.raises(InvalidFoodData):
        log_meal(Profile(), food, today=TODAY, now=NOW)


def test_tracking_service_persists_record_and_profile(
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
) -> None:
    service = TrackingService(profile_repository, log_repository)

    result = service.log_meal(SALAD, now=NOW)

    assert log_repository.list_logs() == [result.record]
    assert profile_repository.get_profile() == result.profile


def test_tracking_service_same_day_meals_do_not_double_count_streak(
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
) -> None:
    profile_repository.save_profile(
        Profile(streak_length=3, last_qualifying_date=YESTERDAY)
    )
    service = TrackingService(profile_repository, log_repository)

    service.log_meal(SALAD, now=NOW)
    result = service.log_meal(SALAD, now=NOW + timedelta(hours=2))

    assert result.profile.streak_length == 4
    assert result.profile.total_xp == 82


def test_tracking_service_uses_configured_timezone_for_today(
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
) -> None:
    # 02:00 UTC on March 10 is still March 9 in Los Angeles.
    service = TrackingService(
        profile_repository, log_repository, timezone_name="America/Los_Angeles"
    )

    result = service.log_meal(SALAD, now=datetime(2024, 3, 10, 2, 0, tzinfo=UTC))

    assert result.profile.last_qualifying_date == date(2024, 3, 9)


def test_tracking_service_invalid_food_changes_nothing(
    store: InMemoryDocumentStore,
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
) -> None:
    service = TrackingService(profile_repository, log_repository)

    with pytest.raises(InvalidFoodData):
        service.log_meal(replace(SALAD, health_score=120), now=NOW)

    assert store.writes == []


def test_tracking_service_rolls_back_log_when_profile_save_fails(
    store: InMemoryDocumentStore,
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
) -> None:
    store.failing_keys.add(profile_repository.key)
    service = TrackingService(profile_repository, log_repository)

    with pytest.raises(StoreUnavailable):
        service.log_meal(SALAD, now=NOW)

    assert log_repository.list_logs() == []


def test_delete_log_keeps_progression(
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
) -> None:
    service = TrackingService(profile_repository, log_repository)
    result = service.log_meal(SALAD, now=NOW)

    assert service.delete_log(result.record.id) is True
    assert service.delete_log(result.record.id) is False
    assert log_repository.list_logs() == []
    assert profile_repository.get_profile() == result.profile


def test_list_logs_filters_by_date(
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
) -> None:
    service = TrackingService(profile_repository, log_repository)
    older = service.log_meal(SALAD, now=NOW - timedelta(days=3)).record
    recent = service.log_meal(SALAD, now=NOW).record

    assert service.list_logs() == [older, recent]
    assert service.list_logs(start=TODAY, end=TODAY) == [recent]

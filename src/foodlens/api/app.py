"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from foodlens.api.models import (
    CatalogMealRequest,
    ImageRequest,
    LogMealRequest,
    MeasurementsRequest,
    OnboardingRequest,
    ProfileUpdateRequest,
    TextRequest,
)
from foodlens.app_logging import configure_logging
from foodlens.config import parse_timezone
from foodlens.containers import AppContainer
from foodlens.domain.catalog import CatalogFood
from foodlens.domain.errors import (
    InvalidFoodData,
    InvalidMeasurement,
    StoreUnavailable,
    VisionUnavailable,
)
from foodlens.domain.models import CandidateFood, LogRecord, Profile
from foodlens.domain.nutrition import health_score_label
from foodlens.domain.progression import BadgeId, badge_rule, level_progress
from foodlens.domain.stats import DailyTotals, Stats
from foodlens.domain.streaks import StreakState, effective_streak
from foodlens.domain.units import (
    cm_to_feet_inches,
    feet_inches_to_cm,
    kg_to_lb,
    lb_to_kg,
)
from foodlens.domain.vision import FoodSuggestion
from foodlens.services.stats import calorie_goal_percent, macro_split
from foodlens.services.tracking import MealLogResult
from foodlens.services.vision import VisionService

MAX_CHART_DAYS = 366
MAX_SEARCH_RESULTS = 50


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    tz = parse_timezone(container.settings.timezone)

    def _now() -> datetime:
        return datetime.now(tz=UTC)

    def _today() -> date:
        return _now().astimezone(tz).date()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidFoodData)
    @app.exception_handler(InvalidMeasurement)
    async def invalid_input_handler(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(
        _: Request, exc: StoreUnavailable
    ) -> JSONResponse:
        logger.error("Store unavailable: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage is unavailable; nothing was saved."},
        )

    @app.exception_handler(VisionUnavailable)
    async def vision_unavailable_handler(
        request: Request, exc: VisionUnavailable
    ) -> JSONResponse:
        logger.error("Food classification failed", exc_info=exc)
        state_container: AppContainer = request.app.state.container
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": _format_vision_error(
                    state_container,
                    exc,
                    "Sorry, I couldn't identify that food. Please try again.",
                )
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    def get_profile(request: Request) -> dict[str, object]:
        """Return the profile with derived progression and BMI fields."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile()
        return _profile_payload(profile, _today())

    @app.post("/profile/onboarding", status_code=status.HTTP_201_CREATED)
    def onboard(payload: OnboardingRequest, request: Request) -> dict[str, object]:
        """Create a fresh profile from onboarding answers."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.onboard(**payload.model_dump())
        return _profile_payload(profile, _today())

    @app.patch("/profile")
    def update_profile(
        payload: ProfileUpdateRequest, request: Request
    ) -> dict[str, object]:
        """Update profile details."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.update_details(
            **payload.model_dump(exclude_unset=True)
        )
        return _profile_payload(profile, _today())

    @app.put("/profile/measurements")
    def update_measurements(
        payload: MeasurementsRequest, request: Request
    ) -> dict[str, object]:
        """Replace weight and height and recompute BMI."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.update_measurements(
            **payload.model_dump()
        )
        return _profile_payload(profile, _today())

    @app.post("/profile/reset-progress")
    def reset_progress(request: Request) -> dict[str, object]:
        """Clear XP, badges and streak."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.reset_progress()
        return _profile_payload(profile, _today())

    @app.delete("/data", status_code=status.HTTP_204_NO_CONTENT)
    def reset_all(request: Request) -> None:
        """Delete the profile and all meal logs."""
        state_container: AppContainer = request.app.state.container
        state_container.profile_service.reset_all()

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    def log_meal(payload: LogMealRequest, request: Request) -> dict[str, object]:
        """Log a meal and return the updated profile and new badges."""
        state_container: AppContainer = request.app.state.container
        now = _now()
        result = state_container.tracking_service.log_meal(
            CandidateFood(**payload.model_dump()), now=now
        )
        return _meal_result_payload(result, now.astimezone(tz).date())

    @app.post("/meals/catalog", status_code=status.HTTP_201_CREATED)
    def log_catalog_meal(
        payload: CatalogMealRequest, request: Request
    ) -> dict[str, object]:
        """Log a catalog dish by name with its stored nutrition."""
        state_container: AppContainer = request.app.state.container
        food = state_container.catalog_service.get_by_name(payload.dish_name)
        if food is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{payload.dish_name} is not in the catalog",
            )
        now = _now()
        result = state_container.tracking_service.log_meal(
            state_container.catalog_service.to_candidate(food), now=now
        )
        return _meal_result_payload(result, now.astimezone(tz).date())

    @app.get("/meals")
    def list_meals(
        request: Request, start: date | None = None, end: date | None = None
    ) -> dict[str, object]:
        """Return meal logs, optionally inside an inclusive date range."""
        state_container: AppContainer = request.app.state.container
        logs = state_container.tracking_service.list_logs(start, end)
        return {"logs": [_log_payload(log) for log in logs]}

    @app.get("/meals/{log_id}")
    def get_meal(log_id: UUID, request: Request) -> dict[str, object]:
        """Return a single meal log."""
        state_container: AppContainer = request.app.state.container
        log = state_container.tracking_service.get_log(log_id)
        if log is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _log_payload(log)

    @app.delete("/meals/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_meal(log_id: UUID, request: Request) -> None:
        """Delete a meal log; progression already earned is kept."""
        state_container: AppContainer = request.app.state.container
        if not state_container.tracking_service.delete_log(log_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    @app.get("/stats/today")
    def stats_today(request: Request) -> dict[str, object]:
        """Return today's totals."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile()
        stats = state_container.stats_service.get_today(_today())
        return _stats_payload(stats, profile.daily_calories)

    @app.get("/stats/week")
    def stats_week(request: Request) -> dict[str, object]:
        """Return totals for the last seven days."""
        state_container: AppContainer = request.app.state.container
        stats = state_container.stats_service.get_week(_today())
        return _stats_payload(stats, None)

    @app.get("/stats/daily")
    def stats_daily(
        request: Request, days: int = Query(default=7, ge=1, le=MAX_CHART_DAYS)
    ) -> dict[str, object]:
        """Return per-day calories and XP for charts."""
        state_container: AppContainer = request.app.state.container
        rows = state_container.stats_service.get_daily(_today(), days)
        return {"days": [_daily_payload(row) for row in rows]}

    @app.get("/stats")
    def stats_range(
        request: Request, start: date | None = None, end: date | None = None
    ) -> dict[str, object]:
        """Return totals for an inclusive date range."""
        state_container: AppContainer = request.app.state.container
        stats = state_container.stats_service.get_range(start, end)
        return _stats_payload(stats, None)

    @app.get("/foods/search")
    def search_foods(
        request: Request,
        q: str = "",
        limit: int = Query(default=10, ge=1, le=MAX_SEARCH_RESULTS),
    ) -> dict[str, object]:
        """Search the catalog, offering a custom entry when nothing matches."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.catalog_service.search(q, limit=limit)
        custom = None
        if not foods and q.strip():
            custom = _candidate_payload(state_container.catalog_service.custom_food(q))
        return {"foods": [_catalog_payload(food) for food in foods], "custom": custom}

    @app.post("/foods/detect")
    async def detect_food(
        payload: ImageRequest, request: Request
    ) -> dict[str, object]:
        """Suggest dishes for a photo."""
        state_container: AppContainer = request.app.state.container
        try:
            image_bytes = base64.b64decode(payload.image_base64, validate=True)
        except binascii.Error as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="image_base64 is not valid base64",
            ) from exc
        suggestions = await state_container.vision_service.suggest_from_image(
            image_bytes
        )
        return {"suggestions": [_suggestion_payload(item) for item in suggestions]}

    @app.post("/foods/classify")
    async def classify_text(
        payload: TextRequest, request: Request
    ) -> dict[str, object]:
        """Suggest dishes for a text description."""
        state_container: AppContainer = request.app.state.container
        suggestions = await state_container.vision_service.suggest_from_text(
            payload.query
        )
        return {"suggestions": [_suggestion_payload(item) for item in suggestions]}

    @app.get("/units/weight")
    async def convert_weight(value: float, unit: str = "kg") -> dict[str, object]:
        """Convert a weight to the other unit for the picker."""
        if unit == "kg":
            return {"value": kg_to_lb(value), "unit": "lb"}
        if unit == "lb":
            return {"value": lb_to_kg(value), "unit": "kg"}
        raise InvalidMeasurement(f"Unsupported weight unit: {unit}")

    @app.get("/units/height")
    async def convert_height(
        cm: float | None = None, feet: int | None = None, inches: int = 0
    ) -> dict[str, object]:
        """Convert a height between centimeters and feet/inches."""
        if cm is not None:
            whole_feet, rest_inches = cm_to_feet_inches(cm)
            return {"feet": whole_feet, "inches": rest_inches}
        if feet is not None:
            return {"cm": feet_inches_to_cm(feet, inches)}
        raise InvalidMeasurement("Provide cm or feet")

    return app


def _format_vision_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        cause = exc.__cause__ or exc
        detail = f"{type(cause).__name__}: {cause}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _profile_payload(profile: Profile, today: date) -> dict[str, object]:
    xp_in_level, xp_per_level = level_progress(profile.total_xp)
    bmi = profile.bmi
    feet_inches = cm_to_feet_inches(profile.height) if profile.height else None
    return {
        "username": profile.username,
        "email": profile.email,
        "daily_calories": profile.daily_calories,
        "activity_level": profile.activity_level,
        "age": profile.age,
        "total_xp": profile.total_xp,
        "current_level": profile.current_level,
        "xp_in_level": xp_in_level,
        "xp_per_level": xp_per_level,
        "badges": [_badge_payload(badge) for badge in profile.badges],
        "streak": effective_streak(
            StreakState(profile.streak_length, profile.last_qualifying_date), today
        ),
        "last_qualifying_date": profile.last_qualifying_date.isoformat()
        if profile.last_qualifying_date
        else None,
        "weight": profile.weight,
        "weight_unit": profile.weight_unit,
        "height": profile.height,
        "height_unit": profile.height_unit,
        "feet": feet_inches[0] if feet_inches else None,
        "inches": feet_inches[1] if feet_inches else None,
        "bmi": bmi,
        "bmi_category": profile.bmi_category.value if bmi is not None else None,
    }


def _meal_result_payload(result: MealLogResult, today: date) -> dict[str, object]:
    return {
        "profile": _profile_payload(result.profile, today),
        "log": _log_payload(result.record),
        "newly_unlocked": [_badge_payload(badge) for badge in result.newly_unlocked],
    }


def _badge_payload(badge: BadgeId) -> dict[str, str]:
    rule = badge_rule(badge)
    return {"id": badge.value, "title": rule.title, "icon": rule.icon}


def _log_payload(log: LogRecord) -> dict[str, object]:
    return {
        "id": str(log.id),
        "timestamp": log.timestamp.isoformat(),
        "dish_name": log.dish_name,
        "calories": log.calories,
        "protein": log.protein,
        "carbs": log.carbs,
        "fat": log.fat,
        "health_score": log.health_score,
        "health_label": health_score_label(log.health_score),
        "xp_awarded": log.xp_awarded,
    }


def _stats_payload(stats: Stats, daily_calories: int | None) -> dict[str, object]:
    split = macro_split(stats)
    payload: dict[str, object] = {
        "total_calories": stats.total_calories,
        "total_protein": stats.total_protein,
        "total_carbs": stats.total_carbs,
        "total_fat": stats.total_fat,
        "total_xp": stats.total_xp,
        "meal_count": stats.meal_count,
        "average_health_score": stats.average_health_score,
        "distinct_active_days": stats.distinct_active_days,
        "macro_split": {
            "protein_pct": split.protein_pct,
            "carbs_pct": split.carbs_pct,
            "fat_pct": split.fat_pct,
        },
    }
    if daily_calories is not None:
        payload["calorie_goal_percent"] = calorie_goal_percent(stats, daily_calories)
    return payload


def _daily_payload(row: DailyTotals) -> dict[str, object]:
    return {
        "day": row.day.isoformat(),
        "weekday": row.day.strftime("%a"),
        "calories": row.calories,
        "xp": row.xp,
    }


def _catalog_payload(food: CatalogFood) -> dict[str, object]:
    return {
        "dish_name": food.name,
        "calories": food.calories,
        "protein": food.protein,
        "carbs": food.carbs,
        "fat": food.fat,
        "health_score": food.health_score,
        "health_label": health_score_label(food.health_score),
    }


def _candidate_payload(food: CandidateFood) -> dict[str, object]:
    return {
        "dish_name": food.dish_name,
        "calories": food.calories,
        "protein": food.protein,
        "carbs": food.carbs,
        "fat": food.fat,
        "health_score": food.health_score,
        "health_label": health_score_label(food.health_score),
    }


def _suggestion_payload(suggestion: FoodSuggestion) -> dict[str, object]:
    candidate = VisionService.to_candidate(suggestion)
    return {
        **_candidate_payload(candidate),
        "confidence": suggestion.confidence,
    }


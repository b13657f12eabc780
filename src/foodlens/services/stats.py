"""Statistics over meal logs."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from foodlens.domain.models import LogRecord
from foodlens.domain.nutrition import MacroProfile, MacroSplit, macro_energy_split
from foodlens.domain.stats import DailyTotals, Stats

if TYPE_CHECKING:
    from foodlens.services.tracking import LogRepository

WEEK_DAYS = 7


def aggregate(
    logs: Sequence[LogRecord],
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    tz: tzinfo = UTC,
) -> Stats:
    """Fold logs into summary totals.

    The optional range is inclusive on both ends. Plain dates compare against
    the calendar day of each log in ``tz``; datetimes compare instants.
    """
    selected = filter_logs(logs, start, end, tz)
    if not selected:
        return Stats()
    return Stats(
        total_calories=sum(log.calories for log in selected),
        total_protein=sum(log.protein for log in selected),
        total_carbs=sum(log.carbs for log in selected),
        total_fat=sum(log.fat for log in selected),
        total_xp=sum(log.xp_awarded for log in selected),
        meal_count=len(selected),
        average_health_score=sum(log.health_score for log in selected) / len(selected),
        distinct_active_days=len({_log_day(log, tz) for log in selected}),
    )


def filter_logs(
    logs: Sequence[LogRecord],
    start: date | datetime | None,
    end: date | datetime | None,
    tz: tzinfo = UTC,
) -> list[LogRecord]:
    """Return logs inside the inclusive range."""
    return [log for log in logs if _after(log, start, tz) and _before(log, end, tz)]


def daily_totals(
    logs: Sequence[LogRecord], last_day: date, days: int, tz: tzinfo = UTC
) -> list[DailyTotals]:
    """Return per-day calories and XP for ``days`` days ending on ``last_day``."""
    first_day = last_day - timedelta(days=days - 1)
    buckets = {
        first_day + timedelta(days=offset): DailyTotals(
            day=first_day + timedelta(days=offset), calories=0.0, xp=0
        )
        for offset in range(days)
    }
    for log in logs:
        day = _log_day(log, tz)
        current = buckets.get(day)
        if current is None:
            continue
        buckets[day] = DailyTotals(
            day=day,
            calories=current.calories + log.calories,
            xp=current.xp + log.xp_awarded,
        )
    return list(buckets.values())


def macro_split(stats: Stats) -> MacroSplit:
    """Percentage of calories from protein, carbs and fat."""
    return macro_energy_split(
        MacroProfile(
            calories=stats.total_calories,
            protein_g=stats.total_protein,
            carbs_g=stats.total_carbs,
            fat_g=stats.total_fat,
        )
    )


def calorie_goal_percent(stats: Stats, daily_calories: int) -> float:
    """Share of the daily calorie goal consumed, in percent."""
    if daily_calories <= 0:
        return 0.0
    return stats.total_calories / daily_calories * 100


@dataclass
class StatsService:
    """Service for computing stats in the configured timezone."""

    repository: "LogRepository"
    timezone_name: str = "UTC"

    def get_today(self, today: date) -> Stats:
        """Return totals for ``today``."""
        return self.get_range(today, today)

    def get_week(self, today: date) -> Stats:
        """Return totals for the seven calendar days ending ``today``."""
        return self.get_range(today - timedelta(days=WEEK_DAYS - 1), today)

    def get_range(self, start: date | None, end: date | None) -> Stats:
        """Return totals for an inclusive date range."""
        return aggregate(self.repository.list_logs(), start, end, self._tz)

    def get_daily(self, today: date, days: int = WEEK_DAYS) -> list[DailyTotals]:
        """Return per-day chart rows ending ``today``."""
        return daily_totals(self.repository.list_logs(), today, days, self._tz)

    @property
    def _tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)


def _log_day(log: LogRecord, tz: tzinfo) -> date:
    return log.timestamp.astimezone(tz).date()


def _after(log: LogRecord, start: date | datetime | None, tz: tzinfo) -> bool:
    if start is None:
        return True
    if isinstance(start, datetime):
        return log.timestamp >= start
    return _log_day(log, tz) >= start


def _before(log: LogRecord, end: date | datetime | None, tz: tzinfo) -> bool:
    if end is None:
        return True
    if isinstance(end, datetime):
        return log.timestamp <= end
    return _log_day(log, tz) <= end

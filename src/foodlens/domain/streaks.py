"""Day-based healthy streak tracking."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

QUALIFYING_HEALTH_SCORE = 60


@dataclass(frozen=True)
class StreakState:
    """Streak length and the last day that counted toward it."""

    length: int = 0
    last_qualifying_date: date | None = None


def day_qualifies(health_scores: Iterable[int]) -> bool:
    """Return True when at least one meal of the day is healthy enough."""
    return any(score >= QUALIFYING_HEALTH_SCORE for score in health_scores)


def transition(state: StreakState, today: date, today_qualifies: bool) -> StreakState:
    """Advance the streak for ``today``.

    A qualifying day extends a streak that counted yesterday, is a no-op when
    today already counted, and restarts at 1 otherwise. A non-qualifying day
    keeps a streak that counted yesterday (one day of grace) and breaks any
    older one.
    """
    yesterday = today - timedelta(days=1)
    last = state.last_qualifying_date

    if today_qualifies:
        if last == yesterday:
            length = state.length + 1
        elif last == today:
            length = state.length
        else:
            length = 1
        return StreakState(length=length, last_qualifying_date=today)

    if last is not None and last < yesterday:
        return StreakState(length=0, last_qualifying_date=last)
    return state


def effective_streak(state: StreakState, today: date) -> int:
    """Streak length as it stands today, without recording anything."""
    return transition(state, today, today_qualifies=False).length

"""XP, level and badge rules."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

XP_PER_LEVEL = 100


class BadgeId(StrEnum):
    """Identifiers of unlockable badges."""

    FIRST_50 = "first_50"
    XP_200 = "xp_200"
    XP_500 = "xp_500"
    STREAK_7 = "streak_7"


@dataclass(frozen=True)
class BadgeRule:
    """Threshold that unlocks a badge."""

    badge: BadgeId
    title: str
    icon: str
    metric: str
    threshold: int


BADGE_RULES: tuple[BadgeRule, ...] = (
    BadgeRule(BadgeId.FIRST_50, "First Steps", "🥉", "xp", 50),
    BadgeRule(BadgeId.XP_200, "XP Master", "🥈", "xp", 200),
    BadgeRule(BadgeId.XP_500, "XP Legend", "🥇", "xp", 500),
    BadgeRule(BadgeId.STREAK_7, "Streak King", "🔥", "streak", 7),
)

_RULES_BY_BADGE = {rule.badge: rule for rule in BADGE_RULES}


@dataclass(frozen=True)
class BadgeEvaluation:
    """Result of evaluating badge thresholds."""

    badges: tuple[BadgeId, ...]
    newly_unlocked: tuple[BadgeId, ...]


def xp_for_health_score(score: int) -> int:
    """XP earned by a meal: half the health score, rounded half up."""
    return math.floor(score / 2 + 0.5)


def level_for_xp(total_xp: int) -> int:
    """Level for a cumulative XP total, starting at 1."""
    return total_xp // XP_PER_LEVEL + 1


def level_progress(total_xp: int) -> tuple[int, int]:
    """Return XP earned inside the current level and XP needed per level."""
    return total_xp % XP_PER_LEVEL, XP_PER_LEVEL


def evaluate_badges(
    current_badges: Iterable[BadgeId], new_total_xp: int, current_streak: int
) -> BadgeEvaluation:
    """Unlock every badge whose threshold is met, in table order.

    Badges already held are kept in their original order and never reported
    again.
    """
    badges = list(dict.fromkeys(current_badges))
    held = set(badges)
    newly_unlocked: list[BadgeId] = []
    for rule in BADGE_RULES:
        if rule.badge in held:
            continue
        value = new_total_xp if rule.metric == "xp" else current_streak
        if value >= rule.threshold:
            badges.append(rule.badge)
            newly_unlocked.append(rule.badge)
    return BadgeEvaluation(badges=tuple(badges), newly_unlocked=tuple(newly_unlocked))


def badge_rule(badge: BadgeId) -> BadgeRule:
    """Return display metadata for a badge."""
    return _RULES_BY_BADGE[badge]

"""Nutrition domain helpers."""

from dataclasses import dataclass

from foodlens.domain.units import round_half_up

PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

DEFAULT_HEALTH_SCORE = 50

_HEALTH_LABELS = (
    (80, "Very Healthy"),
    (60, "Healthy"),
    (40, "Moderate"),
)


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient profile for a food item."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class MacroSplit:
    """Share of calories from each macronutrient, in percent."""

    protein_pct: float
    carbs_pct: float
    fat_pct: float


def macro_energy_split(macros: MacroProfile) -> MacroSplit:
    """Return the percentage of calories contributed by each macro."""
    if macros.calories <= 0:
        return MacroSplit(0.0, 0.0, 0.0)
    return MacroSplit(
        protein_pct=macros.protein_g * PROTEIN_KCAL_PER_G / macros.calories * 100,
        carbs_pct=macros.carbs_g * CARBS_KCAL_PER_G / macros.calories * 100,
        fat_pct=macros.fat_g * FAT_KCAL_PER_G / macros.calories * 100,
    )


def estimate_health_score(macros: MacroProfile | None) -> int:
    """Derive a 0-100 health score from estimated macros.

    Protein-dense dishes score higher; fat above a third of calories and large
    portions score lower. Without an estimate the neutral default is used.
    """
    if macros is None or macros.calories <= 0:
        return DEFAULT_HEALTH_SCORE
    split = macro_energy_split(macros)
    score = 50.0
    score += min(split.protein_pct, 40.0)
    score -= max(split.fat_pct - 35.0, 0.0)
    score -= max(macros.calories - 600.0, 0.0) / 20
    return int(min(max(round_half_up(score, 0), 0), 100))


def health_score_label(score: int) -> str:
    """Human-readable band for a health score."""
    for threshold, label in _HEALTH_LABELS:
        if score >= threshold:
            return label
    return "Less Healthy"
